"""Bridge spans: assembly from a drag, analysis and reconstruction from stored procedures."""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.procedure import BridgeRole
from ..state_machine import GestureEvent, GestureState, next_state
from ..teeth import classify
from .reconciler import ChartState

logger = logging.getLogger(__name__)

MIN_BRIDGE_TEETH = 2
PONTIC_SEARCH_OFFSETS = (-1, 1, -2, 2)


@dataclass(frozen=True)
class BridgeSpan:
    bridge_id: str
    teeth: Tuple[int, ...]
    roles: Tuple[BridgeRole, ...]

    def role_of(self, tooth: int) -> Optional[BridgeRole]:
        for t, role in zip(self.teeth, self.roles):
            if t == tooth:
                return role
        return None

    @property
    def abutments(self) -> List[int]:
        return [t for t, role in zip(self.teeth, self.roles) if role == BridgeRole.ABUTMENT]

    @property
    def pontics(self) -> List[int]:
        return [t for t, role in zip(self.teeth, self.roles) if role == BridgeRole.PONTIC]

    @property
    def reference_abutment(self) -> Optional[int]:
        abutments = self.abutments
        return abutments[0] if abutments else None

    @property
    def is_cantilever(self) -> bool:
        return len(self.abutments) == 1 and len(self.pontics) == 1


@dataclass(frozen=True)
class BridgeAnalysis:
    abutments: Tuple[int, ...]
    pontics: Tuple[int, ...]
    total_units: int
    bridge_type: str
    complexity: str
    needs_five_or_more_code: bool


def new_bridge_id() -> str:
    return f"bridge-{uuid.uuid4().hex[:12]}"


def role_for(tooth: int, prior_state: Optional[ChartState]) -> BridgeRole:
    """Teeth already missing when the drag starts become pontics."""
    if prior_state is not None and prior_state.is_missing(tooth):
        return BridgeRole.PONTIC
    return BridgeRole.ABUTMENT


def assemble_bridge(
    ordered_teeth: Iterable[int],
    prior_state: Optional[ChartState] = None,
    bridge_id: Optional[str] = None,
) -> Optional[BridgeSpan]:
    teeth: List[int] = []
    for tooth in ordered_teeth:
        classify(tooth)
        if tooth not in teeth:
            teeth.append(tooth)

    if len(teeth) < MIN_BRIDGE_TEETH:
        return None

    return BridgeSpan(
        bridge_id=bridge_id or new_bridge_id(),
        teeth=tuple(teeth),
        roles=tuple(role_for(t, prior_state) for t in teeth),
    )


def analyze_bridge(span: BridgeSpan) -> BridgeAnalysis:
    abutments = sorted(span.abutments)
    pontics = sorted(span.pontics)
    total = len(abutments) + len(pontics)

    if total == 3 and len(abutments) == 2 and len(pontics) == 1:
        bridge_type = "3-unit bridge"
    elif total == 4 and len(abutments) == 2 and len(pontics) == 2:
        bridge_type = "4-unit bridge"
    elif total >= 5:
        bridge_type = f"{total}-unit extended bridge"
    else:
        bridge_type = f"{total}-unit bridge"

    if total >= 5 or len(abutments) >= 4:
        complexity = "complex"
    elif total == 4 or len(pontics) >= 2:
        complexity = "moderate"
    else:
        complexity = "simple"

    return BridgeAnalysis(
        abutments=tuple(abutments),
        pontics=tuple(pontics),
        total_units=total,
        bridge_type=bridge_type,
        complexity=complexity,
        needs_five_or_more_code=len(abutments) >= 5,
    )


class BridgeGesture:
    """Drag across teeth with the bridge tool.

    Roles are fixed when a tooth is first touched, from the chart state the
    drag started with.
    """

    def __init__(self, prior_state: Optional[ChartState] = None):
        self.prior_state = prior_state
        self.state = GestureState.IDLE
        self.bridge_id: Optional[str] = None
        self._teeth: List[int] = []
        self._roles: Dict[int, BridgeRole] = {}

    @property
    def teeth(self) -> List[int]:
        return list(self._teeth)

    def role_of(self, tooth: int) -> Optional[BridgeRole]:
        return self._roles.get(tooth)

    def begin(self, tooth: int) -> None:
        self.state = next_state(self.state, GestureEvent.BEGIN)
        self.bridge_id = new_bridge_id()
        self._teeth = []
        self._roles = {}
        self._add(tooth)

    def touch(self, tooth: int) -> bool:
        self.state = next_state(self.state, GestureEvent.TOUCH)
        if tooth in self._roles:
            return False
        self._add(tooth)
        return True

    def _add(self, tooth: int) -> None:
        classify(tooth)
        self._teeth.append(tooth)
        self._roles[tooth] = role_for(tooth, self.prior_state)

    def end(self) -> Optional[BridgeSpan]:
        self.state = next_state(self.state, GestureEvent.END)
        span = None
        if len(self._teeth) >= MIN_BRIDGE_TEETH:
            span = BridgeSpan(
                bridge_id=self.bridge_id,
                teeth=tuple(self._teeth),
                roles=tuple(self._roles[t] for t in self._teeth),
            )
        else:
            logger.info("Bridge gesture ended with fewer than two teeth, nothing to create")
        self._reset()
        return span

    def cancel(self) -> None:
        self.state = next_state(self.state, GestureEvent.CANCEL)
        self._reset()

    def _reset(self) -> None:
        self.bridge_id = None
        self._teeth = []
        self._roles = {}


def reconstruct_bridges(chart: ChartState) -> List[BridgeSpan]:
    """Regroup stored crown/pontic state into spans.

    Pontics stored without a bridge id join the bridge of the nearest
    abutment found at -1, +1, -2, +2.
    """
    groups: Dict[str, List[int]] = {}
    main_teeth = set()

    for tooth in sorted(chart.teeth):
        whole = chart.teeth[tooth].whole_tooth
        if whole is None or not whole.bridge_id:
            continue
        groups.setdefault(whole.bridge_id, []).append(tooth)
        if whole.is_main_bridge:
            main_teeth.add(tooth)

    for tooth in sorted(chart.teeth):
        whole = chart.teeth[tooth].whole_tooth
        if whole is None or whole.role != BridgeRole.PONTIC or whole.bridge_id:
            continue
        for offset in PONTIC_SEARCH_OFFSETS:
            neighbour = chart.get(tooth + offset)
            if neighbour is None or neighbour.whole_tooth is None:
                continue
            if neighbour.whole_tooth.bridge_id and neighbour.whole_tooth.role == BridgeRole.ABUTMENT:
                members = groups[neighbour.whole_tooth.bridge_id]
                if tooth not in members:
                    members.append(tooth)
                break

    spans = []
    for bridge_id, teeth in groups.items():
        if len(teeth) < MIN_BRIDGE_TEETH:
            continue
        ordered = sorted(teeth, key=lambda t: (t not in main_teeth, t))
        roles = tuple(chart.teeth[t].whole_tooth.role or BridgeRole.ABUTMENT for t in ordered)
        spans.append(BridgeSpan(bridge_id=bridge_id, teeth=tuple(ordered), roles=roles))
    return spans
