import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..codes import CrownMaterial, FillingMaterial
from ..config import get_settings
from ..database import get_db
from ..errors import (
    CodeNotFoundError,
    InvalidNotationError,
    InvalidToothError,
    ProcedureStoreError,
    UnknownZoneError,
)
from ..models.procedure import ProcedureStatus
from ..providers.sql import SqlCodeCatalog, SqlProcedureStore
from ..schemas.procedure import (
    BridgeCreateResponse,
    BridgeRequest,
    NotationProcedureRequest,
    ProcedureBatchResponse,
    ProcedureResponse,
    ToolRequest,
)
from ..services.bridges import analyze_bridge, assemble_bridge
from ..services.procedures import (
    CrownBridgeOptions,
    ExtractionOptions,
    FillingOptions,
    ProcedurePlanner,
    ScalingOptions,
    Tool,
)
from ..services.reconciler import reconcile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patients", tags=["procedures"])


def _planner(db: Session, status: Optional[ProcedureStatus]) -> ProcedurePlanner:
    settings = get_settings()
    return ProcedurePlanner(
        SqlProcedureStore(db),
        SqlCodeCatalog(db),
        status=status or ProcedureStatus(settings.default_procedure_status),
    )


def _filling_material(value: Optional[FillingMaterial]) -> FillingMaterial:
    return value or FillingMaterial(get_settings().default_filling_material)


def _crown_material(value: Optional[CrownMaterial]) -> CrownMaterial:
    return value or CrownMaterial(get_settings().default_crown_material)


def _responses(procedures) -> List[ProcedureResponse]:
    return [ProcedureResponse.model_validate(p, from_attributes=True) for p in procedures]


def _raise_http(e: Exception):
    if isinstance(e, (InvalidToothError, UnknownZoneError)):
        raise HTTPException(status_code=400, detail=e.message)
    if isinstance(e, CodeNotFoundError):
        raise HTTPException(status_code=404, detail=e.message)
    if isinstance(e, InvalidNotationError):
        raise HTTPException(status_code=422, detail=e.message)
    if isinstance(e, ProcedureStoreError):
        raise HTTPException(status_code=500, detail=e.message)
    raise e


@router.get("/{patient_id}/procedures", response_model=List[ProcedureResponse])
def list_procedures(patient_id: str, db: Session = Depends(get_db)):
    procedures = SqlProcedureStore(db).list(patient_id)
    return _responses(procedures)


@router.post("/{patient_id}/procedures/notation", response_model=ProcedureBatchResponse, status_code=201)
def create_from_notation(patient_id: str, request: NotationProcedureRequest, db: Session = Depends(get_db)):
    planner = _planner(db, request.status)
    options = FillingOptions(
        material=_filling_material(request.material),
        anesthesia=request.anesthesia,
        c022=request.c022,
    )
    try:
        created = planner.notation(patient_id, request.notation, options)
    except (InvalidNotationError, CodeNotFoundError, ProcedureStoreError) as e:
        _raise_http(e)
    return ProcedureBatchResponse(procedures=_responses(created))


@router.post("/{patient_id}/procedures/tool", response_model=ProcedureBatchResponse, status_code=201)
def apply_tool(patient_id: str, request: ToolRequest, db: Session = Depends(get_db)):
    planner = _planner(db, request.status)

    if request.tool == Tool.SEALING:
        teeth = request.teeth or ([request.tooth] if request.tooth is not None else [])
        if not teeth:
            raise HTTPException(status_code=400, detail="Sealing needs at least one tooth")
    elif request.tool == Tool.BRIDGE:
        raise HTTPException(status_code=400, detail=f"Use /api/patients/{patient_id}/bridges for bridges")
    elif request.tooth is None:
        raise HTTPException(status_code=400, detail=f"Tool '{request.tool.value}' needs a tooth")

    try:
        if request.tool == Tool.FILLING:
            if not request.zones:
                raise HTTPException(status_code=400, detail="Filling needs at least one zone")
            options = FillingOptions(
                material=_filling_material(request.filling_material),
                anesthesia=request.anesthesia,
                c022=request.c022,
            )
            created = planner.fill_zones(patient_id, request.tooth, request.zones, options)
        elif request.tool == Tool.CROWN:
            options = CrownBridgeOptions(
                material=_crown_material(request.crown_material),
                retention=request.retention,
                anesthesia=request.anesthesia,
                c022=request.c022,
            )
            created = planner.crown(patient_id, request.tooth, options)
        elif request.tool == Tool.EXTRACTION:
            options = ExtractionOptions(
                type=request.extraction_type,
                suturing=request.suturing,
                anesthesia=request.anesthesia,
                c022=request.c022,
            )
            created = planner.extraction(patient_id, request.tooth, options)
        elif request.tool == Tool.SEALING:
            created = planner.sealing(patient_id, teeth)
        elif request.tool == Tool.SCALING:
            options = ScalingOptions(anesthesia_count=request.anesthesia_count)
            if request.scaling_code:
                options = ScalingOptions(code=request.scaling_code, anesthesia_count=request.anesthesia_count)
            created = planner.scaling(patient_id, request.tooth, options)
        else:
            created = planner.toggle_disabled(patient_id, request.tooth)
    except (InvalidToothError, UnknownZoneError, CodeNotFoundError, ProcedureStoreError) as e:
        _raise_http(e)

    return ProcedureBatchResponse(procedures=_responses(created))


@router.post("/{patient_id}/bridges", response_model=BridgeCreateResponse, status_code=201)
def create_bridge(patient_id: str, request: BridgeRequest, db: Session = Depends(get_db)):
    planner = _planner(db, request.status)
    options = CrownBridgeOptions(
        material=_crown_material(request.material),
        retention=request.retention,
        anesthesia=request.anesthesia,
        c022=request.c022,
    )
    try:
        chart = reconcile(planner.store.list(patient_id))
        span = assemble_bridge(request.teeth, chart)
        if span is None:
            return BridgeCreateResponse(bridge_id=None, procedures=[])
        created = planner.bridge(patient_id, span, options)
    except (InvalidToothError, CodeNotFoundError, ProcedureStoreError) as e:
        _raise_http(e)

    analysis = analyze_bridge(span)
    return BridgeCreateResponse(
        bridge_id=span.bridge_id,
        bridge_type=analysis.bridge_type,
        complexity=analysis.complexity,
        procedures=_responses(created),
    )


@router.delete("/{patient_id}/procedures/{procedure_id}")
def delete_procedure(patient_id: str, procedure_id: str, db: Session = Depends(get_db)):
    planner = _planner(db, None)
    procedure = planner.store.get(procedure_id)
    if procedure is None or procedure.patient_id != patient_id:
        raise HTTPException(status_code=404, detail="Procedure not found")
    try:
        deleted_ids = planner.delete(procedure_id)
    except ProcedureStoreError as e:
        _raise_http(e)
    return {"deleted": True, "id": procedure_id, "deleted_ids": deleted_ids}
