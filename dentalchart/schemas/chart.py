from typing import Dict, List, Optional
from pydantic import BaseModel

from ..models.procedure import BridgeRole


class ToothResponse(BaseModel):
    tooth: int
    quadrant: int
    type: str
    is_primary: bool
    is_molar: bool
    zones: List[str]


class WholeToothResponse(BaseModel):
    kind: str
    lifecycle: Optional[str]
    material: Optional[str]
    code: Optional[str]
    bridge_id: Optional[str]
    role: Optional[BridgeRole]
    is_main_bridge: bool


class ToothStateResponse(BaseModel):
    tooth: int
    zones: Dict[str, str]
    whole_tooth: Optional[WholeToothResponse]
    is_disabled: bool
    from_snapshot: bool
    procedure_ids: List[str]


class BridgeSpanResponse(BaseModel):
    bridge_id: str
    teeth: List[int]
    roles: List[BridgeRole]
    bridge_type: str
    complexity: str


class ChartResponse(BaseModel):
    patient_id: str
    has_snapshot: bool
    teeth: List[ToothStateResponse]
    bridges: List[BridgeSpanResponse]
