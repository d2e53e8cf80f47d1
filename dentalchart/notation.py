"""Compact chart notation.

``17dob``  filling on tooth 17, distal + occlusal + buccal
``18v9``   composite on tooth 18, surfaces chosen later
``v93``    material (and optional surface count) without a tooth
``V93``    also a direct code entry when no other grammar matches first

Parsers return ``None`` on a mismatch so callers can fall through to the next
interpretation.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .codes import FillingMaterial, material_from_digit
from .errors import UnknownSurfaceError
from .surfaces import MainSurface, normalize_all
from .teeth import is_valid_tooth

FILLING_PATTERN = re.compile(r"^(\d{1,2})([dobmlipfc]+)$", re.IGNORECASE)
TOOTH_MATERIAL_PATTERN = re.compile(r"^(\d{1,2})v([987])([1-4])?$", re.IGNORECASE)
MATERIAL_PATTERN = re.compile(r"^v([987])([1-4])?$", re.IGNORECASE)
DIRECT_CODE_PATTERN = re.compile(r"^[a-zA-Z]\d+$")
TOKEN_SEPARATORS = re.compile(r"[,\s]+")


class NotationKind(str, Enum):
    FILLING = "filling"
    TOOTH_MATERIAL = "tooth_material"
    MATERIAL = "material"
    DIRECT_CODE = "direct_code"
    SEARCH = "search"


@dataclass(frozen=True)
class FillingNotation:
    tooth: int
    surfaces: Tuple[MainSurface, ...]
    raw_letters: str

    @property
    def surface_count(self) -> int:
        return len(self.surfaces)


@dataclass(frozen=True)
class ToothMaterialNotation:
    tooth: int
    material: FillingMaterial
    surface_count: Optional[int] = None


@dataclass(frozen=True)
class MaterialNotation:
    material: FillingMaterial
    surface_count: Optional[int] = None


@dataclass(frozen=True)
class NotationIntent:
    kind: NotationKind
    text: str
    filling: Optional[FillingNotation] = None
    tooth_material: Optional[ToothMaterialNotation] = None
    material: Optional[MaterialNotation] = None
    code: Optional[str] = None
    fillings: List[FillingNotation] = field(default_factory=list)


def parse_filling_notation(text: str) -> Optional[FillingNotation]:
    if not text:
        return None
    match = FILLING_PATTERN.match(text.strip())
    if not match:
        return None

    tooth = int(match.group(1))
    if not is_valid_tooth(tooth):
        return None

    letters = match.group(2).lower()
    # Letters naming the same surface ("io") collapse, so surface_count counts distinct surfaces
    try:
        surfaces = normalize_all(letters, tooth)
    except UnknownSurfaceError:
        return None
    if not surfaces:
        return None

    return FillingNotation(tooth=tooth, surfaces=tuple(surfaces), raw_letters=letters)


def check_tooth_specific_pattern(text: str) -> Optional[ToothMaterialNotation]:
    if not text:
        return None
    match = TOOTH_MATERIAL_PATTERN.match(text.strip())
    if not match:
        return None

    tooth = int(match.group(1))
    if not is_valid_tooth(tooth):
        return None

    material = material_from_digit(match.group(2))
    if material is None:
        return None

    count = int(match.group(3)) if match.group(3) else None
    return ToothMaterialNotation(tooth=tooth, material=material, surface_count=count)


def check_material_pattern(text: str) -> Optional[MaterialNotation]:
    if not text:
        return None
    match = MATERIAL_PATTERN.match(text.strip())
    if not match:
        return None
    material = material_from_digit(match.group(1))
    if material is None:
        return None
    count = int(match.group(2)) if match.group(2) else None
    return MaterialNotation(material=material, surface_count=count)


def check_direct_code(text: str) -> Optional[str]:
    if not text:
        return None
    candidate = text.strip()
    if not DIRECT_CODE_PATTERN.match(candidate):
        return None
    return candidate.upper()


def parse_all_fillings(text: str) -> List[FillingNotation]:
    if not text:
        return []
    fillings = []
    for token in TOKEN_SEPARATORS.split(text):
        token = token.strip()
        if not token:
            continue
        parsed = parse_filling_notation(token)
        if parsed:
            fillings.append(parsed)
    return fillings


def parse_notation(text: str) -> NotationIntent:
    text = (text or "").strip()

    filling = parse_filling_notation(text)
    if filling:
        return NotationIntent(kind=NotationKind.FILLING, text=text, filling=filling, fillings=[filling])

    tooth_material = check_tooth_specific_pattern(text)
    if tooth_material:
        return NotationIntent(kind=NotationKind.TOOTH_MATERIAL, text=text, tooth_material=tooth_material)

    # A bare "v93" is both material shorthand and a code; material wins
    material = check_material_pattern(text)
    if material:
        return NotationIntent(kind=NotationKind.MATERIAL, text=text, material=material)

    code = check_direct_code(text)
    if code:
        return NotationIntent(kind=NotationKind.DIRECT_CODE, text=text, code=code)

    fillings = parse_all_fillings(text)
    if fillings:
        return NotationIntent(kind=NotationKind.FILLING, text=text, fillings=fillings)

    return NotationIntent(kind=NotationKind.SEARCH, text=text)
