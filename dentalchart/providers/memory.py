import logging
import uuid
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from ..catalog_data import CATALOG_CODES
from ..errors import ProcedureStoreError
from .base import CodeCatalogBase, DentalCodeRef, Procedure, ProcedureDraft, ProcedureStoreBase

logger = logging.getLogger(__name__)


class InMemoryProcedureStore(ProcedureStoreBase):
    """Dict-backed store for tests and local runs.

    ``fail_after`` makes every create after that many successful ones raise
    ``ProcedureStoreError``, to exercise batch rollback.
    """

    def __init__(self, fail_after: Optional[int] = None):
        self.fail_after = fail_after
        self._procedures: Dict[str, Procedure] = {}
        self._by_key: Dict[str, str] = {}
        self._created = 0
        self._last_created_at: Optional[datetime] = None

    def create(self, draft: ProcedureDraft) -> Procedure:
        if draft.idempotency_key and draft.idempotency_key in self._by_key:
            logger.info(f"Returning existing procedure for idempotency_key={draft.idempotency_key}")
            return self._procedures[self._by_key[draft.idempotency_key]]

        if self.fail_after is not None and self._created >= self.fail_after:
            raise ProcedureStoreError(f"Simulated store failure creating {draft.code} on tooth {draft.tooth_number}")

        procedure = Procedure(
            id=str(uuid.uuid4()),
            patient_id=draft.patient_id,
            code=draft.code,
            code_id=draft.code_id or draft.code,
            tooth_number=draft.tooth_number,
            sub_surfaces=list(draft.sub_surfaces),
            notes=draft.notes,
            filling_material=draft.filling_material,
            status=draft.status,
            date=draft.date,
            bridge_id=draft.bridge_id,
            bridge_role=draft.bridge_role,
            idempotency_key=draft.idempotency_key,
            created_at=self._next_created_at(),
        )
        self._procedures[procedure.id] = procedure
        if procedure.idempotency_key:
            self._by_key[procedure.idempotency_key] = procedure.id
        self._created += 1
        return procedure

    def _next_created_at(self) -> datetime:
        # Strictly increasing so same-day writes keep their order
        now = datetime.utcnow()
        if self._last_created_at is not None and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    def list(self, patient_id: str) -> List[Procedure]:
        return [p for p in self._procedures.values() if p.patient_id == patient_id]

    def get(self, procedure_id: str) -> Optional[Procedure]:
        return self._procedures.get(procedure_id)

    def delete(self, procedure_id: str) -> bool:
        procedure = self._procedures.pop(procedure_id, None)
        if procedure is None:
            return False
        if procedure.idempotency_key:
            self._by_key.pop(procedure.idempotency_key, None)
        return True

class InMemoryCodeCatalog(CodeCatalogBase):
    def __init__(self, codes: Iterable[DentalCodeRef]):
        self._codes: Dict[str, DentalCodeRef] = {c.code.upper(): c for c in codes}

    @classmethod
    def seeded(cls) -> "InMemoryCodeCatalog":
        return cls(
            DentalCodeRef(
                id=entry["code"],
                code=entry["code"],
                description=entry["description"],
                category=entry.get("category"),
                points=entry.get("points"),
                rate=entry.get("rate"),
            )
            for entry in CATALOG_CODES
        )

    def exact(self, code: str) -> Optional[DentalCodeRef]:
        if not code:
            return None
        return self._codes.get(code.strip().upper())

    def search(self, query: str, limit: int = 50) -> List[DentalCodeRef]:
        needle = (query or "").strip().lower()
        results = [
            c for c in self._codes.values()
            if not needle or needle in c.code.lower() or needle in c.description.lower()
        ]
        # Exact code hits first, then by code
        results.sort(key=lambda c: (c.code.lower() != needle, c.code))
        return results[:limit]

    def without(self, *codes: str) -> "InMemoryCodeCatalog":
        dropped = {c.upper() for c in codes}
        return InMemoryCodeCatalog(c for key, c in self._codes.items() if key not in dropped)
