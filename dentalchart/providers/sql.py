import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import CodeNotFoundError, ProcedureStoreError
from ..models.dental_code import DentalCode
from ..models.procedure import BridgeRole, DentalProcedure, ProcedureStatus
from .base import CodeCatalogBase, DentalCodeRef, Procedure, ProcedureDraft, ProcedureStoreBase

logger = logging.getLogger(__name__)


def code_ref(row: DentalCode) -> DentalCodeRef:
    return DentalCodeRef(
        id=row.id,
        code=row.code,
        description=row.description,
        category=row.category,
        points=row.points,
        rate=row.rate,
    )


def to_procedure(row: DentalProcedure) -> Procedure:
    return Procedure(
        id=row.id,
        patient_id=row.patient_id,
        code=row.code.code if row.code else "",
        code_id=row.code_id,
        tooth_number=row.tooth_number,
        sub_surfaces=row.sub_surfaces,
        notes=row.notes,
        filling_material=row.filling_material,
        status=ProcedureStatus(row.status),
        date=row.date,
        bridge_id=row.bridge_id,
        bridge_role=BridgeRole(row.bridge_role) if row.bridge_role else None,
        idempotency_key=row.idempotency_key,
        created_at=row.created_at,
    )


class SqlProcedureStore(ProcedureStoreBase):
    def __init__(self, db: Session):
        self.db = db

    def _find_code(self, draft: ProcedureDraft) -> DentalCode:
        query = self.db.query(DentalCode)
        if draft.code_id:
            row = query.filter(DentalCode.id == draft.code_id).first()
        else:
            row = query.filter(DentalCode.code == draft.code).first()
        if not row:
            raise CodeNotFoundError(draft.code)
        return row

    def create(self, draft: ProcedureDraft) -> Procedure:
        if draft.idempotency_key:
            existing = self.db.query(DentalProcedure).filter(
                DentalProcedure.idempotency_key == draft.idempotency_key
            ).first()
            if existing:
                logger.info(f"Returning existing procedure for idempotency_key={draft.idempotency_key}")
                return to_procedure(existing)

        code = self._find_code(draft)

        row = DentalProcedure(
            patient_id=draft.patient_id,
            code_id=code.id,
            tooth_number=draft.tooth_number,
            notes=draft.notes,
            status=ProcedureStatus(draft.status).value,
            date=draft.date,
            filling_material=draft.filling_material,
            bridge_id=draft.bridge_id,
            bridge_role=BridgeRole(draft.bridge_role).value if draft.bridge_role else None,
            idempotency_key=draft.idempotency_key,
        )
        row.sub_surfaces = draft.sub_surfaces

        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ProcedureStoreError(f"Failed to store {draft.code} on tooth {draft.tooth_number}: {e}")

        self.db.refresh(row)
        return to_procedure(row)

    def list(self, patient_id: str) -> List[Procedure]:
        rows = self.db.query(DentalProcedure).filter(
            DentalProcedure.patient_id == patient_id
        ).order_by(DentalProcedure.date, DentalProcedure.created_at).all()
        return [to_procedure(r) for r in rows]

    def get(self, procedure_id: str) -> Optional[Procedure]:
        row = self.db.query(DentalProcedure).filter(DentalProcedure.id == procedure_id).first()
        return to_procedure(row) if row else None

    def delete(self, procedure_id: str) -> bool:
        row = self.db.query(DentalProcedure).filter(DentalProcedure.id == procedure_id).first()
        if not row:
            return False
        try:
            self.db.delete(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ProcedureStoreError(f"Failed to delete procedure {procedure_id}: {e}")
        return True


class SqlCodeCatalog(CodeCatalogBase):
    def __init__(self, db: Session):
        self.db = db

    def exact(self, code: str) -> Optional[DentalCodeRef]:
        if not code:
            return None
        row = self.db.query(DentalCode).filter(DentalCode.code == code.strip().upper()).first()
        return code_ref(row) if row else None

    def search(self, query: str, limit: int = 50) -> List[DentalCodeRef]:
        q = self.db.query(DentalCode)
        needle = (query or "").strip()
        if needle:
            pattern = f"%{needle}%"
            q = q.filter(or_(DentalCode.code.ilike(pattern), DentalCode.description.ilike(pattern)))
        rows = q.order_by(DentalCode.code).limit(limit).all()
        refs = [code_ref(r) for r in rows]
        refs.sort(key=lambda c: c.code.lower() != needle.lower())
        return refs


def seed_catalog(db: Session, entries) -> int:
    """Insert catalog entries whose code is not present yet. Returns the number added."""
    existing = {c for (c,) in db.query(DentalCode.code).all()}
    added = 0
    for entry in entries:
        if entry["code"] in existing:
            continue
        db.add(DentalCode(
            code=entry["code"],
            description=entry["description"],
            category=entry.get("category"),
            points=entry.get("points"),
            rate=entry.get("rate"),
        ))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} dental codes")
    return added
