"""Fold a patient's procedure list into per-tooth chart state.

``reconcile`` is pure: the same procedures always produce the same state,
whatever order the store returned them in. The result is rebuilt from the
authoritative list after every mutation rather than patched in place.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from ..codes import (
    CROWN_CODES,
    PONTIC_CODES,
    SAVED_DENTAL_CHART_CODE,
    CrownMaterial,
    ProcedureKind,
    classify_code,
)
from ..models.procedure import BridgeRole, ProcedureStatus
from ..providers.base import Procedure
from ..teeth import is_valid_tooth
from ..zones import all_zones, occlusal_zones

logger = logging.getLogger(__name__)


class Lifecycle(str, Enum):
    PENDING = "pending"
    CURRENT = "current"
    HISTORY = "history"


LIFECYCLE_BY_STATUS = {
    ProcedureStatus.PENDING: Lifecycle.PENDING,
    ProcedureStatus.IN_PROGRESS: Lifecycle.CURRENT,
    ProcedureStatus.COMPLETED: Lifecycle.HISTORY,
}


class TagKind(str, Enum):
    FILLING = "filling"
    SEALING = "sealing"
    SCALING = "scaling"
    EXTRACTION = "extraction"
    DISABLED = "disabled"
    OTHER = "other"


@dataclass(frozen=True)
class ProcedureTag:
    kind: TagKind
    lifecycle: Optional[Lifecycle] = None
    material: Optional[str] = None
    code: Optional[str] = None


class WholeToothKind(str, Enum):
    CROWN = "crown"
    EXTRACTION = "extraction"


@dataclass(frozen=True)
class WholeTooth:
    kind: WholeToothKind
    lifecycle: Optional[Lifecycle] = None
    material: Optional[str] = None
    code: Optional[str] = None
    bridge_id: Optional[str] = None
    role: Optional[BridgeRole] = None
    is_main_bridge: bool = False


@dataclass
class ToothState:
    tooth: int
    zones: Dict[str, ProcedureTag] = field(default_factory=dict)
    whole_tooth: Optional[WholeTooth] = None
    is_disabled: bool = False
    procedures: List[Procedure] = field(default_factory=list)
    from_snapshot: bool = False

    @property
    def is_extracted(self) -> bool:
        return self.whole_tooth is not None and self.whole_tooth.kind == WholeToothKind.EXTRACTION

    @property
    def is_missing(self) -> bool:
        return self.is_disabled or self.is_extracted

    def holds_filling(self, zone: str) -> bool:
        tag = self.zones.get(zone)
        return tag is not None and tag.kind == TagKind.FILLING


@dataclass
class ChartState:
    teeth: Dict[int, ToothState] = field(default_factory=dict)
    has_snapshot: bool = False

    def get(self, tooth: int) -> Optional[ToothState]:
        return self.teeth.get(tooth)

    def is_missing(self, tooth: int) -> bool:
        state = self.teeth.get(tooth)
        return state is not None and state.is_missing


def lifecycle_for(status) -> Lifecycle:
    try:
        return LIFECYCLE_BY_STATUS[ProcedureStatus(status)]
    except ValueError:
        return Lifecycle.PENDING


# Serialization boundary: zone tags travel as strings such as
# "filling-pending-composite", "sealing-current" or "scaling-history-T021".

def format_tag(tag: ProcedureTag) -> str:
    lifecycle = tag.lifecycle.value if tag.lifecycle else None
    if tag.kind == TagKind.FILLING:
        return f"filling-{lifecycle}-{tag.material or 'composite'}"
    if tag.kind == TagKind.SEALING:
        return f"sealing-{lifecycle}"
    if tag.kind == TagKind.SCALING:
        return f"scaling-{lifecycle}-{tag.code}"
    if tag.kind == TagKind.EXTRACTION:
        return f"extraction-{lifecycle}" if lifecycle else "extraction"
    if tag.kind == TagKind.DISABLED:
        return "disabled"
    return f"{tag.code}-{lifecycle}"


def _lifecycle(value: str) -> Optional[Lifecycle]:
    try:
        return Lifecycle(value)
    except ValueError:
        return None


def parse_tag(text: str) -> Optional[ProcedureTag]:
    if not isinstance(text, str) or not text:
        return None
    if text == "disabled":
        return ProcedureTag(TagKind.DISABLED)
    if text == "extraction":
        return ProcedureTag(TagKind.EXTRACTION)

    parts = text.split("-")
    head = parts[0]

    if head == "filling" and len(parts) == 3 and _lifecycle(parts[1]):
        return ProcedureTag(TagKind.FILLING, _lifecycle(parts[1]), material=parts[2])
    if head == "sealing" and len(parts) == 2 and _lifecycle(parts[1]):
        return ProcedureTag(TagKind.SEALING, _lifecycle(parts[1]))
    if head == "scaling" and len(parts) == 3 and _lifecycle(parts[1]):
        return ProcedureTag(TagKind.SCALING, _lifecycle(parts[1]), code=parts[2])
    if head == "extraction" and len(parts) == 2 and _lifecycle(parts[1]):
        return ProcedureTag(TagKind.EXTRACTION, _lifecycle(parts[1]))

    code, _, lifecycle = text.rpartition("-")
    if code and _lifecycle(lifecycle):
        return ProcedureTag(TagKind.OTHER, _lifecycle(lifecycle), code=code)
    return None


BRIDGE_NOTE_PATTERN = re.compile(r"bridge[- ]([^:\s]+)", re.IGNORECASE)

CROWN_MATERIAL_BY_CODE = {code: material.value for material, code in CROWN_CODES.items()}
CROWN_MATERIAL_BY_CODE.update({code: material.value for material, code in PONTIC_CODES.items()})


def _crown_state(procedure: Procedure, kind: ProcedureKind) -> WholeTooth:
    notes = procedure.notes or ""
    bridge_id = procedure.bridge_id
    if not bridge_id:
        match = BRIDGE_NOTE_PATTERN.search(notes)
        bridge_id = match.group(1) if match else None

    role = procedure.bridge_role
    if role is None and bridge_id:
        if kind == ProcedureKind.PONTIC or "pontic" in notes.lower():
            role = BridgeRole.PONTIC
        else:
            role = BridgeRole.ABUTMENT
    elif role is None and kind == ProcedureKind.PONTIC:
        role = BridgeRole.PONTIC

    return WholeTooth(
        kind=WholeToothKind.CROWN,
        lifecycle=lifecycle_for(procedure.status),
        material=CROWN_MATERIAL_BY_CODE.get(procedure.code.upper(), CrownMaterial.PORCELAIN.value),
        code=procedure.code.upper(),
        bridge_id=bridge_id,
        role=BridgeRole(role) if role else None,
        is_main_bridge=notes.startswith("MAIN:"),
    )


def _paint(state: ToothState, zones: Iterable[str], tag: ProcedureTag) -> None:
    for zone in zones:
        if not state.holds_filling(zone):
            state.zones[zone] = tag


def _fold(state: ToothState, procedure: Procedure, kind: ProcedureKind) -> None:
    tooth = state.tooth
    lifecycle = lifecycle_for(procedure.status)
    code = procedure.code.upper()

    if kind in (ProcedureKind.CROWN, ProcedureKind.PONTIC):
        state.whole_tooth = _crown_state(procedure, kind)
    elif kind == ProcedureKind.FILLING:
        tag = ProcedureTag(TagKind.FILLING, lifecycle, material=procedure.filling_material or "composite")
        for zone in procedure.sub_surfaces:
            state.zones[zone] = tag
    elif kind == ProcedureKind.EXTRACTION:
        state.whole_tooth = WholeTooth(kind=WholeToothKind.EXTRACTION, lifecycle=lifecycle, code=code)
        _paint(state, procedure.sub_surfaces or all_zones(tooth), ProcedureTag(TagKind.EXTRACTION, lifecycle))
    elif kind == ProcedureKind.SEALING:
        _paint(state, procedure.sub_surfaces or occlusal_zones(tooth), ProcedureTag(TagKind.SEALING, lifecycle))
    elif kind == ProcedureKind.SCALING:
        _paint(state, all_zones(tooth), ProcedureTag(TagKind.SCALING, lifecycle, code=code))
    elif procedure.sub_surfaces:
        _paint(state, procedure.sub_surfaces, ProcedureTag(TagKind.OTHER, lifecycle, code=code))


def parse_saved_chart(notes: Optional[str]) -> Optional[Dict[str, Any]]:
    """Read the legacy chart JSON kept in a SAVED_DENTAL_CHART procedure's notes.

    Anything that is not a JSON object is treated as absent.
    """
    if not notes:
        return None
    try:
        data = json.loads(notes)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable saved dental chart")
        return None
    if not isinstance(data, dict):
        return None
    return data


def _snapshot_whole_tooth(value) -> Optional[WholeTooth]:
    if value == "extraction":
        return WholeTooth(kind=WholeToothKind.EXTRACTION)
    if not isinstance(value, dict):
        return None
    try:
        kind = WholeToothKind(value.get("type"))
    except ValueError:
        return None
    role = value.get("role")
    return WholeTooth(
        kind=kind,
        lifecycle=_lifecycle(value.get("creationStatus") or ""),
        material=value.get("material"),
        bridge_id=value.get("bridgeId"),
        role=BridgeRole(role) if role in (BridgeRole.ABUTMENT.value, BridgeRole.PONTIC.value) else None,
    )


def _snapshot_teeth(snapshot: Dict[str, Any]) -> Dict[int, ToothState]:
    teeth = snapshot.get("teeth")
    if not isinstance(teeth, dict):
        teeth = snapshot

    result: Dict[int, ToothState] = {}
    for key, data in teeth.items():
        try:
            tooth = int(key)
        except (TypeError, ValueError):
            continue
        if not is_valid_tooth(tooth) or not isinstance(data, dict):
            continue

        zones = {}
        raw_zones = data.get("zones") or {}
        if isinstance(raw_zones, dict):
            for zone, raw in raw_zones.items():
                tag = parse_tag(raw)
                if tag is not None:
                    zones[zone] = tag

        result[tooth] = ToothState(
            tooth=tooth,
            zones=zones,
            whole_tooth=_snapshot_whole_tooth(data.get("wholeTooth")),
            is_disabled=bool(data.get("isDisabled")),
            from_snapshot=True,
        )
    return result


def _canonical_order(procedures: Iterable[Procedure]) -> List[Procedure]:
    # Later writes on the same day win; id only breaks ties
    return sorted(procedures, key=lambda p: (p.date, p.created_at or datetime.min, p.id))


def reconcile(
    procedures: Iterable[Procedure],
    legacy_snapshot: Union[str, Dict[str, Any], None] = None,
) -> ChartState:
    ordered = _canonical_order(procedures)

    if legacy_snapshot is None:
        saved = [p for p in ordered if p.code.upper() == SAVED_DENTAL_CHART_CODE]
        if saved:
            legacy_snapshot = saved[-1].notes
    if isinstance(legacy_snapshot, str):
        legacy_snapshot = parse_saved_chart(legacy_snapshot)

    chart = ChartState(has_snapshot=bool(legacy_snapshot))
    disabled: List[Procedure] = []

    for procedure in ordered:
        kind = classify_code(procedure.code)
        if kind == ProcedureKind.SAVED_CHART:
            continue
        if not is_valid_tooth(procedure.tooth_number):
            continue
        if kind == ProcedureKind.DISABLED:
            disabled.append(procedure)
            continue

        state = chart.teeth.setdefault(procedure.tooth_number, ToothState(tooth=procedure.tooth_number))
        state.procedures.append(procedure)
        _fold(state, procedure, kind)

    for procedure in disabled:
        tooth = procedure.tooth_number
        state = chart.teeth.get(tooth)
        if state is not None and state.whole_tooth and state.whole_tooth.role == BridgeRole.PONTIC:
            continue
        if state is not None and state.is_disabled:
            continue
        if state is None:
            state = chart.teeth[tooth] = ToothState(tooth=tooth)
        state.is_disabled = True
        state.procedures.append(procedure)
        tag = ProcedureTag(TagKind.DISABLED)
        for zone in all_zones(tooth):
            state.zones[zone] = tag

    if legacy_snapshot:
        for tooth, state in _snapshot_teeth(legacy_snapshot).items():
            if tooth not in chart.teeth:
                chart.teeth[tooth] = state

    return chart
