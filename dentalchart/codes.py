from enum import Enum
from typing import Dict, Optional


class FillingMaterial(str, Enum):
    COMPOSITE = "composite"
    GLASIONOMEER = "glasionomeer"
    AMALGAM = "amalgam"


class CrownMaterial(str, Enum):
    PORCELAIN = "porcelain"
    GOLD = "gold"


class ExtractionType(str, Enum):
    SIMPLE = "simple"
    SURGICAL = "surgical"
    HEMISECTION = "hemisection"
    IMPACTED = "impacted"


class ProcedureKind(str, Enum):
    FILLING = "filling"
    SEALING = "sealing"
    CROWN = "crown"
    PONTIC = "pontic"
    EXTRACTION = "extraction"
    SCALING = "scaling"
    DISABLED = "disabled"
    SAVED_CHART = "saved_chart"
    ANESTHESIA = "anesthesia"
    OTHER = "other"


ANESTHESIA_CODE = "A10"
RUBBER_DAM_CODE = "C022"
RETENTION_CODE = "R14"
FIVE_OR_MORE_ABUTMENTS_CODE = "R49"
FIRST_SEALING_CODE = "V30"
NEXT_SEALING_CODE = "V35"
COMPLEX_SCALING_CODE = "T021"
STANDARD_SCALING_CODE = "T022"
SUTURING_MATERIAL_CODE = "H21"
SUTURING_CODE = "H26"
DISABLED_CODE = "DISABLED"
SAVED_DENTAL_CHART_CODE = "SAVED_DENTAL_CHART"

SCALING_CODES = frozenset({COMPLEX_SCALING_CODE, STANDARD_SCALING_CODE})
SEALING_CODES = frozenset({FIRST_SEALING_CODE, NEXT_SEALING_CODE})

MATERIAL_DIGITS: Dict[str, FillingMaterial] = {
    "9": FillingMaterial.COMPOSITE,
    "8": FillingMaterial.GLASIONOMEER,
    "7": FillingMaterial.AMALGAM,
}

FILLING_CODES: Dict[int, Dict[FillingMaterial, str]] = {
    1: {FillingMaterial.AMALGAM: "V71", FillingMaterial.GLASIONOMEER: "V81", FillingMaterial.COMPOSITE: "V91"},
    2: {FillingMaterial.AMALGAM: "V72", FillingMaterial.GLASIONOMEER: "V82", FillingMaterial.COMPOSITE: "V92"},
    3: {FillingMaterial.AMALGAM: "V73", FillingMaterial.GLASIONOMEER: "V83", FillingMaterial.COMPOSITE: "V93"},
    4: {FillingMaterial.AMALGAM: "V74", FillingMaterial.GLASIONOMEER: "V84", FillingMaterial.COMPOSITE: "V94"},
}
MAX_FILLING_SURFACES = 4

FILLING_MATERIAL_BY_CODE: Dict[str, FillingMaterial] = {
    code: material
    for row in FILLING_CODES.values()
    for material, code in row.items()
}

CROWN_CODES: Dict[CrownMaterial, str] = {
    CrownMaterial.PORCELAIN: "R24",
    CrownMaterial.GOLD: "R34",
}
PONTIC_CODES: Dict[CrownMaterial, str] = {
    CrownMaterial.PORCELAIN: "R40",
    CrownMaterial.GOLD: "R45",
}

EXTRACTION_CODES: Dict[ExtractionType, str] = {
    ExtractionType.SIMPLE: "H11",
    ExtractionType.SURGICAL: "H35",
    ExtractionType.HEMISECTION: "H33",
    ExtractionType.IMPACTED: "H34",
}


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def resolve_filling_code(surface_count: int, material) -> Optional[str]:
    material = _coerce(FillingMaterial, material)
    if material is None or surface_count < 1:
        return None
    row = FILLING_CODES.get(min(surface_count, MAX_FILLING_SURFACES))
    if not row:
        return None
    return row.get(material)


def resolve_crown_code(material) -> Optional[str]:
    material = _coerce(CrownMaterial, material)
    if material is None:
        return None
    return CROWN_CODES[material]


def resolve_pontic_code(material) -> Optional[str]:
    material = _coerce(CrownMaterial, material)
    if material is None:
        return None
    return PONTIC_CODES[material]


def resolve_extraction_code(extraction_type) -> Optional[str]:
    extraction_type = _coerce(ExtractionType, extraction_type)
    if extraction_type is None:
        return None
    return EXTRACTION_CODES[extraction_type]


def material_from_digit(digit: str) -> Optional[FillingMaterial]:
    return MATERIAL_DIGITS.get(digit)


def classify_code(code: str) -> ProcedureKind:
    if not code:
        return ProcedureKind.OTHER
    c = code.strip().upper()
    if c == DISABLED_CODE:
        return ProcedureKind.DISABLED
    if c == SAVED_DENTAL_CHART_CODE:
        return ProcedureKind.SAVED_CHART
    if c in CROWN_CODES.values():
        return ProcedureKind.CROWN
    if c in PONTIC_CODES.values():
        return ProcedureKind.PONTIC
    if c in SEALING_CODES:
        return ProcedureKind.SEALING
    if c in SCALING_CODES:
        return ProcedureKind.SCALING
    if c == ANESTHESIA_CODE:
        return ProcedureKind.ANESTHESIA
    if c in FILLING_MATERIAL_BY_CODE:
        return ProcedureKind.FILLING
    if c in EXTRACTION_CODES.values():
        return ProcedureKind.EXTRACTION
    return ProcedureKind.OTHER
