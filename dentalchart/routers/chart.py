from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..providers.sql import SqlProcedureStore
from ..schemas.chart import BridgeSpanResponse, ChartResponse, ToothStateResponse, WholeToothResponse
from ..services.bridges import analyze_bridge, reconstruct_bridges
from ..services.reconciler import ToothState, format_tag, reconcile

router = APIRouter(prefix="/api/patients", tags=["chart"])


def _tooth_response(state: ToothState) -> ToothStateResponse:
    whole = state.whole_tooth
    return ToothStateResponse(
        tooth=state.tooth,
        zones={zone: format_tag(tag) for zone, tag in sorted(state.zones.items())},
        whole_tooth=WholeToothResponse(
            kind=whole.kind.value,
            lifecycle=whole.lifecycle.value if whole.lifecycle else None,
            material=whole.material,
            code=whole.code,
            bridge_id=whole.bridge_id,
            role=whole.role,
            is_main_bridge=whole.is_main_bridge,
        ) if whole else None,
        is_disabled=state.is_disabled,
        from_snapshot=state.from_snapshot,
        procedure_ids=[p.id for p in state.procedures],
    )


@router.get("/{patient_id}/chart", response_model=ChartResponse)
def get_chart(patient_id: str, db: Session = Depends(get_db)):
    chart = reconcile(SqlProcedureStore(db).list(patient_id))

    bridges = []
    for span in reconstruct_bridges(chart):
        analysis = analyze_bridge(span)
        bridges.append(BridgeSpanResponse(
            bridge_id=span.bridge_id,
            teeth=list(span.teeth),
            roles=list(span.roles),
            bridge_type=analysis.bridge_type,
            complexity=analysis.complexity,
        ))

    return ChartResponse(
        patient_id=patient_id,
        has_snapshot=chart.has_snapshot,
        teeth=[_tooth_response(chart.teeth[t]) for t in sorted(chart.teeth)],
        bridges=bridges,
    )
