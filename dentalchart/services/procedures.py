"""Turns tool interactions and notation into procedure records.

Every planner call first builds the full batch of drafts, resolving each code
through the catalog, and only then writes. A missing code therefore raises
``CodeNotFoundError`` before anything reaches the store, and a store failure
part-way through a batch removes what that batch created.
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from ..codes import (
    ANESTHESIA_CODE,
    CROWN_CODES,
    DISABLED_CODE,
    FIRST_SEALING_CODE,
    FIVE_OR_MORE_ABUTMENTS_CODE,
    NEXT_SEALING_CODE,
    PONTIC_CODES,
    RETENTION_CODE,
    RUBBER_DAM_CODE,
    SCALING_CODES,
    SEALING_CODES,
    STANDARD_SCALING_CODE,
    SUTURING_CODE,
    SUTURING_MATERIAL_CODE,
    CrownMaterial,
    ExtractionType,
    FillingMaterial,
    resolve_crown_code,
    resolve_extraction_code,
    resolve_filling_code,
    resolve_pontic_code,
)
from ..errors import (
    CodeNotFoundError,
    DuplicateOperationError,
    InvalidNotationError,
    ProcedureStoreError,
    UnknownZoneError,
)
from ..models.procedure import BridgeRole, ProcedureStatus
from ..notation import FillingNotation, NotationKind, parse_notation
from ..providers.base import CodeCatalogBase, Procedure, ProcedureDraft, ProcedureStoreBase
from ..surfaces import MainSurface, format_surfaces
from ..teeth import classify
from ..zones import all_zones, expand_all, main_surfaces_for_zones, occlusal_zones
from .bridges import BridgeSpan, analyze_bridge
from .idempotency import PendingOperations, make_idempotency_key

logger = logging.getLogger(__name__)


class Tool(str, Enum):
    FILLING = "filling"
    CROWN = "crown"
    BRIDGE = "bridge"
    EXTRACTION = "extraction"
    SEALING = "sealing"
    SCALING = "scaling"
    DISABLED = "disabled"


@dataclass(frozen=True)
class FillingOptions:
    material: FillingMaterial = FillingMaterial.COMPOSITE
    anesthesia: bool = False
    c022: bool = False


@dataclass(frozen=True)
class CrownBridgeOptions:
    material: CrownMaterial = CrownMaterial.PORCELAIN
    retention: bool = False
    anesthesia: bool = False
    c022: bool = False


@dataclass(frozen=True)
class ExtractionOptions:
    type: ExtractionType = ExtractionType.SIMPLE
    suturing: bool = False
    anesthesia: bool = False
    c022: bool = False


@dataclass(frozen=True)
class ScalingOptions:
    code: str = STANDARD_SCALING_CODE
    anesthesia_count: int = 0


class ProcedurePlanner:
    def __init__(
        self,
        store: ProcedureStoreBase,
        catalog: CodeCatalogBase,
        pending: Optional[PendingOperations] = None,
        status: ProcedureStatus = ProcedureStatus.PENDING,
        today: Optional[date] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.pending = pending or PendingOperations()
        self.status = ProcedureStatus(status)
        self.today = today

    @property
    def day(self) -> date:
        return self.today or date.today()

    def _draft(
        self,
        patient_id: str,
        tool: str,
        code: Optional[str],
        tooth: Optional[int],
        zones: Sequence[str] = (),
        notes: Optional[str] = None,
        material: Optional[str] = None,
        bridge_id: Optional[str] = None,
        bridge_role: Optional[BridgeRole] = None,
        missing: Optional[str] = None,
    ) -> ProcedureDraft:
        if code is None:
            raise CodeNotFoundError(missing or tool)
        ref = self.catalog.exact(code)
        if ref is None:
            raise CodeNotFoundError(code)

        return ProcedureDraft(
            patient_id=patient_id,
            code=ref.code,
            code_id=ref.id,
            tooth_number=tooth,
            sub_surfaces=list(zones),
            notes=notes,
            filling_material=material,
            status=self.status,
            date=self.day,
            bridge_id=bridge_id,
            bridge_role=bridge_role,
            idempotency_key=make_idempotency_key(
                patient_id, tool, tooth, zones, material, ref.code, self.day
            ),
        )

    def _add_ons(self, patient_id: str, tool: str, tooth: int, anesthesia: bool, c022: bool) -> List[ProcedureDraft]:
        drafts = []
        if anesthesia:
            drafts.append(self._draft(patient_id, f"{tool}-anesthesia", ANESTHESIA_CODE, tooth, notes="Local anesthesia"))
        if c022:
            drafts.append(self._draft(patient_id, f"{tool}-c022", RUBBER_DAM_CODE, tooth, notes=RUBBER_DAM_CODE))
        return drafts

    def commit(self, drafts: List[ProcedureDraft]) -> List[Procedure]:
        """Write a batch. Drafts whose key is already in flight or written are skipped."""
        if not drafts:
            return []

        patient_ids = {d.patient_id for d in drafts}
        existing_ids = {p.id for pid in patient_ids for p in self.store.list(pid)}

        reserved: List[str] = []
        written: List[Procedure] = []
        try:
            for draft in drafts:
                if draft.idempotency_key:
                    try:
                        self.pending.reserve(draft.idempotency_key)
                    except DuplicateOperationError:
                        logger.warning(
                            f"Skipping duplicate {draft.code} on tooth {draft.tooth_number} "
                            f"for patient {draft.patient_id}"
                        )
                        continue
                    reserved.append(draft.idempotency_key)
                written.append(self.store.create(draft))
        except ProcedureStoreError as e:
            logger.error(f"Store failure, rolling back batch of {len(drafts)}: {e.message}")
            for procedure in written:
                if procedure.id not in existing_ids:
                    self.store.delete(procedure.id)
            for key in reserved:
                self.pending.release(key)
            raise

        for key in reserved:
            self.pending.commit(key)
        for procedure in written:
            logger.info(
                f"Created procedure {procedure.id}: {procedure.code} on tooth {procedure.tooth_number} "
                f"for patient {procedure.patient_id}"
            )
        return written

    def delete(self, procedure_id: str) -> List[str]:
        """Delete a procedure and return the ids removed.

        Bridge members go together: deleting any abutment or pontic removes
        every procedure that shares its bridge id.
        """
        procedure = self.store.get(procedure_id)
        if procedure is None:
            return []

        targets = [procedure]
        if procedure.bridge_id:
            targets = [
                p for p in self.store.list(procedure.patient_id)
                if p.bridge_id == procedure.bridge_id
            ]

        deleted: List[str] = []
        for target in targets:
            if not self.store.delete(target.id):
                continue
            if target.idempotency_key:
                self.pending.release(target.idempotency_key)
            deleted.append(target.id)
            logger.info(f"Deleted procedure {target.id} ({target.code} on tooth {target.tooth_number})")

        if procedure.bridge_id:
            logger.info(f"Deleted {procedure.bridge_id} with {len(deleted)} procedures")
        return deleted

    # Fillings

    def plan_filling(
        self,
        patient_id: str,
        tooth: int,
        surfaces: Sequence[MainSurface],
        zones: Sequence[str],
        options: FillingOptions,
    ) -> List[ProcedureDraft]:
        material = FillingMaterial(options.material)
        code = resolve_filling_code(len(surfaces), material)
        drafts = [
            self._draft(
                patient_id,
                Tool.FILLING.value,
                code,
                tooth,
                zones=zones,
                notes=format_surfaces(tooth, surfaces),
                material=material.value,
                missing=f"{material.value} filling with {len(surfaces)} surfaces",
            )
        ]
        drafts.extend(self._add_ons(patient_id, Tool.FILLING.value, tooth, options.anesthesia, options.c022))
        return drafts

    def plan_notation_filling(self, patient_id: str, notation: FillingNotation, options: FillingOptions) -> List[ProcedureDraft]:
        zones = expand_all(notation.surfaces, notation.tooth)
        return self.plan_filling(patient_id, notation.tooth, notation.surfaces, zones, options)

    def plan_zone_filling(self, patient_id: str, tooth: int, zones: Iterable[str], options: FillingOptions) -> List[ProcedureDraft]:
        known = set(all_zones(tooth))
        unique: List[str] = []
        for zone in zones:
            if zone not in unique:
                unique.append(zone)
        unknown = [z for z in unique if z not in known]
        if unknown:
            raise UnknownZoneError(tooth, unknown)
        surfaces = main_surfaces_for_zones(unique, tooth)
        return self.plan_filling(patient_id, tooth, surfaces, unique, options)

    def notation(self, patient_id: str, text: str, options: FillingOptions) -> List[Procedure]:
        intent = parse_notation(text)
        if intent.kind != NotationKind.FILLING:
            raise InvalidNotationError(text)

        drafts: List[ProcedureDraft] = []
        for filling in intent.fillings:
            drafts.extend(self.plan_notation_filling(patient_id, filling, options))
        return self.commit(drafts)

    def fill_zones(self, patient_id: str, tooth: int, zones: Iterable[str], options: FillingOptions) -> List[Procedure]:
        return self.commit(self.plan_zone_filling(patient_id, tooth, zones, options))

    def fill_gesture(self, patient_id: str, batch: Dict[int, List[str]], options: FillingOptions) -> List[Procedure]:
        """One filling per tooth touched during a drag, written together or not at all."""
        drafts: List[ProcedureDraft] = []
        for tooth, zones in batch.items():
            if zones:
                drafts.extend(self.plan_zone_filling(patient_id, tooth, zones, options))
        return self.commit(drafts)

    # Whole-tooth tools

    def crown(self, patient_id: str, tooth: int, options: CrownBridgeOptions) -> List[Procedure]:
        classify(tooth)
        material = CrownMaterial(options.material)
        drafts = [
            self._draft(
                patient_id,
                Tool.CROWN.value,
                resolve_crown_code(material),
                tooth,
                notes=f"{material.value} crown",
                material=material.value,
            )
        ]
        if options.retention:
            drafts.append(self._draft(patient_id, "crown-retention", RETENTION_CODE, tooth, notes="Retention"))
        drafts.extend(self._add_ons(patient_id, Tool.CROWN.value, tooth, options.anesthesia, options.c022))
        return self.commit(drafts)

    def extraction(self, patient_id: str, tooth: int, options: ExtractionOptions) -> List[Procedure]:
        classify(tooth)
        extraction_type = ExtractionType(options.type)
        code = resolve_extraction_code(extraction_type)
        ref = self.catalog.exact(code) if code else None
        description = ref.description if ref else extraction_type.value

        drafts = [
            self._draft(
                patient_id,
                Tool.EXTRACTION.value,
                code,
                tooth,
                zones=all_zones(tooth),
                notes=f"{description} - tooth {tooth}",
            )
        ]
        if options.suturing and extraction_type != ExtractionType.SIMPLE:
            drafts.append(self._draft(patient_id, "extraction-suturing", SUTURING_MATERIAL_CODE, tooth, notes="Kosten hechtmateriaal"))
            drafts.append(self._draft(patient_id, "extraction-suturing", SUTURING_CODE, tooth, notes="Hechten weke delen"))
        drafts.extend(self._add_ons(patient_id, Tool.EXTRACTION.value, tooth, options.anesthesia, options.c022))
        return self.commit(drafts)

    def scaling(self, patient_id: str, tooth: int, options: ScalingOptions) -> List[Procedure]:
        classify(tooth)
        code = (options.code or "").upper()
        if code not in SCALING_CODES:
            raise CodeNotFoundError(options.code)

        drafts = [self._draft(patient_id, Tool.SCALING.value, code, tooth, notes=f"{code} scaling")]
        for i in range(max(0, options.anesthesia_count)):
            drafts.append(self._draft(patient_id, f"scaling-anesthesia-{i}", ANESTHESIA_CODE, tooth, notes="Local anesthesia"))
        return self.commit(drafts)

    def sealing(self, patient_id: str, teeth: Iterable[int]) -> List[Procedure]:
        """Seal each tooth once. The first sealing of the day is V30, every later one V35."""
        existing = self.store.list(patient_id)
        has_first_today = any(
            p.code == FIRST_SEALING_CODE and p.date == self.day for p in existing
        )
        sealed = {p.tooth_number for p in existing if p.code in SEALING_CODES}

        drafts = []
        for tooth in sorted(set(teeth)):
            classify(tooth)
            if tooth in sealed:
                logger.warning(f"Tooth {tooth} already has a sealing for patient {patient_id}, skipping")
                continue
            code = NEXT_SEALING_CODE if has_first_today else FIRST_SEALING_CODE
            drafts.append(
                self._draft(
                    patient_id,
                    Tool.SEALING.value,
                    code,
                    tooth,
                    zones=occlusal_zones(tooth),
                    notes="Fissuurlak volgende element" if has_first_today else "Fissuurlak eerste element",
                )
            )
            has_first_today = True
        return self.commit(drafts)

    def toggle_disabled(self, patient_id: str, tooth: int) -> List[Procedure]:
        """Mark a tooth as missing, or clear every DISABLED record it has."""
        classify(tooth)
        existing = [
            p for p in self.store.list(patient_id)
            if p.code == DISABLED_CODE and p.tooth_number == tooth
        ]
        if existing:
            for procedure in existing:
                self.delete(procedure.id)
            return []
        return self.commit([
            self._draft(patient_id, Tool.DISABLED.value, DISABLED_CODE, tooth, notes="Element niet aanwezig")
        ])

    # Bridges

    def bridge(self, patient_id: str, span: BridgeSpan, options: CrownBridgeOptions) -> List[Procedure]:
        material = CrownMaterial(options.material)
        analysis = analyze_bridge(span)

        crowned = {
            p.tooth_number for p in self.store.list(patient_id)
            if p.code in CROWN_CODES.values() or p.code in PONTIC_CODES.values()
        }
        abutments = [t for t in span.abutments if t not in crowned]
        pontics = [t for t in span.pontics if t not in crowned]
        if not abutments and not pontics:
            logger.info(f"All teeth of {span.bridge_id} already carry a crown or pontic, nothing to create")
            return []

        def includes(codes: List[str]) -> str:
            return f" | Includes: {', '.join(codes)}" if codes else ""

        extras = []
        if options.retention:
            extras.append(RETENTION_CODE)
        if options.anesthesia:
            extras.append(ANESTHESIA_CODE)
        if options.c022:
            extras.append(RUBBER_DAM_CODE)

        crown_code = resolve_crown_code(material)
        pontic_code = resolve_pontic_code(material)
        drafts = []

        for i, tooth in enumerate(abutments):
            if i == 0:
                main_extras = extras + ([FIVE_OR_MORE_ABUTMENTS_CODE] if analysis.needs_five_or_more_code else [])
                notes = (
                    f"MAIN: {analysis.bridge_type} {span.bridge_id} - {material.value} crown abutment (first) "
                    f"for {analysis.total_units} units [{analysis.complexity}]{includes(main_extras)}"
                )
            else:
                position = "last" if i == len(abutments) - 1 else "middle"
                notes = (
                    f"BRIDGE-{span.bridge_id}: {material.value} crown abutment ({position}) "
                    f"for {analysis.bridge_type} on tooth {tooth} [{analysis.complexity}]{includes(extras)}"
                )
            drafts.append(self._draft(
                patient_id, Tool.BRIDGE.value, crown_code, tooth,
                notes=notes, material=material.value,
                bridge_id=span.bridge_id, bridge_role=BridgeRole.ABUTMENT,
            ))

        pontic_extras = [c for c in extras if c != RETENTION_CODE]
        for tooth in pontics:
            notes = (
                f"BRIDGE-{span.bridge_id}: {material.value} pontic for {analysis.bridge_type} "
                f"replacing tooth {tooth} [{analysis.complexity}]{includes(pontic_extras)}"
            )
            drafts.append(self._draft(
                patient_id, Tool.BRIDGE.value, pontic_code, tooth,
                notes=notes, material=material.value,
                bridge_id=span.bridge_id, bridge_role=BridgeRole.PONTIC,
            ))

        created = self.commit(drafts)
        logger.info(f"Committed {span.bridge_id} ({analysis.bridge_type}) with {len(created)} procedures")
        return created
