from datetime import date
from typing import List, Optional
from pydantic import BaseModel, field_validator

from ..codes import CrownMaterial, ExtractionType, FillingMaterial
from ..models.procedure import BridgeRole, ProcedureStatus
from ..services.procedures import Tool


class ProcedureResponse(BaseModel):
    id: str
    patient_id: str
    code: str
    code_id: str
    tooth_number: Optional[int]
    sub_surfaces: List[str]
    notes: Optional[str]
    filling_material: Optional[str]
    status: ProcedureStatus
    date: date
    bridge_id: Optional[str]
    bridge_role: Optional[BridgeRole]

    class Config:
        from_attributes = True


class NotationProcedureRequest(BaseModel):
    notation: str
    material: Optional[FillingMaterial] = None
    anesthesia: bool = False
    c022: bool = False
    status: Optional[ProcedureStatus] = None

    @field_validator("notation")
    @classmethod
    def notation_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("notation cannot be empty")
        return v.strip()


class ToolRequest(BaseModel):
    tool: Tool
    tooth: Optional[int] = None
    teeth: Optional[List[int]] = None
    zones: Optional[List[str]] = None
    filling_material: Optional[FillingMaterial] = None
    crown_material: Optional[CrownMaterial] = None
    extraction_type: ExtractionType = ExtractionType.SIMPLE
    suturing: bool = False
    retention: bool = False
    anesthesia: bool = False
    c022: bool = False
    scaling_code: Optional[str] = None
    anesthesia_count: int = 0
    status: Optional[ProcedureStatus] = None

    @field_validator("anesthesia_count")
    @classmethod
    def count_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("anesthesia_count cannot be negative")
        return v


class BridgeRequest(BaseModel):
    teeth: List[int]
    material: Optional[CrownMaterial] = None
    retention: bool = False
    anesthesia: bool = False
    c022: bool = False
    status: Optional[ProcedureStatus] = None


class ProcedureBatchResponse(BaseModel):
    procedures: List[ProcedureResponse]


class BridgeCreateResponse(BaseModel):
    bridge_id: Optional[str]
    bridge_type: Optional[str] = None
    complexity: Optional[str] = None
    procedures: List[ProcedureResponse]
