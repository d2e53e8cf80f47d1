from fastapi import APIRouter, HTTPException

from ..errors import InvalidToothError
from ..notation import parse_notation
from ..schemas.chart import ToothResponse
from ..schemas.notation import FillingNotationResponse, NotationParseRequest, NotationParseResponse
from ..surfaces import format_surfaces
from ..teeth import classify, parse_tooth
from ..zones import all_zones, expand_all

router = APIRouter(prefix="/api", tags=["teeth"])


@router.get("/teeth/{tooth}", response_model=ToothResponse)
def get_tooth(tooth: str):
    try:
        number = parse_tooth(tooth)
        tooth_class = classify(number)
    except InvalidToothError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return ToothResponse(
        tooth=tooth_class.tooth,
        quadrant=tooth_class.quadrant,
        type=tooth_class.type.value,
        is_primary=tooth_class.is_primary,
        is_molar=tooth_class.is_molar,
        zones=all_zones(number),
    )


@router.post("/notation/parse", response_model=NotationParseResponse)
def parse(request: NotationParseRequest):
    intent = parse_notation(request.text)

    response = NotationParseResponse(kind=intent.kind.value, text=intent.text, code=intent.code)
    response.fillings = [
        FillingNotationResponse(
            tooth=f.tooth,
            surfaces=[s.value for s in f.surfaces],
            surface_count=f.surface_count,
            zones=expand_all(f.surfaces, f.tooth),
            note=format_surfaces(f.tooth, f.surfaces),
        )
        for f in intent.fillings
    ]
    if intent.tooth_material:
        response.tooth = intent.tooth_material.tooth
        response.material = intent.tooth_material.material.value
        response.surface_count = intent.tooth_material.surface_count
    elif intent.material:
        response.material = intent.material.material.value
        response.surface_count = intent.material.surface_count
    return response
