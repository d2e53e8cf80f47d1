"""Canonical surface naming.

``lingual`` is the only internal name for the tongue/palate side; ``palatal``
exists for display in the upper jaw and is never fed back into logic.
Raw single-letter tokens are mirrored for molars in quadrants 2 and 3.
"""
from enum import Enum
from typing import Dict, Iterable, List, Union

from .errors import UnknownSurfaceError
from .teeth import ToothClass, classify


class MainSurface(str, Enum):
    OCCLUSAL = "occlusal"
    MESIAL = "mesial"
    DISTAL = "distal"
    BUCCAL = "buccal"
    LINGUAL = "lingual"


PALATAL = "palatal"

SURFACE_ALIASES: Dict[str, MainSurface] = {
    "o": MainSurface.OCCLUSAL,
    "d": MainSurface.DISTAL,
    "m": MainSurface.MESIAL,
    "b": MainSurface.BUCCAL,
    "l": MainSurface.LINGUAL,
    "f": MainSurface.BUCCAL,
    "p": MainSurface.LINGUAL,
    "i": MainSurface.OCCLUSAL,
    "c": MainSurface.OCCLUSAL,
}

# Names that are already canonical, or a presentation of a canonical name
CANONICAL_NAMES: Dict[str, MainSurface] = {s.value: s for s in MainSurface}
CANONICAL_NAMES[PALATAL] = MainSurface.LINGUAL

Q2_MOLAR_SWAP = {
    MainSurface.BUCCAL: MainSurface.LINGUAL,
    MainSurface.LINGUAL: MainSurface.BUCCAL,
    MainSurface.MESIAL: MainSurface.DISTAL,
    MainSurface.DISTAL: MainSurface.MESIAL,
}
Q3_MOLAR_SWAP = {
    MainSurface.MESIAL: MainSurface.DISTAL,
    MainSurface.DISTAL: MainSurface.MESIAL,
}

SURFACE_LETTERS = {
    MainSurface.OCCLUSAL: "o",
    MainSurface.DISTAL: "d",
    MainSurface.MESIAL: "m",
    MainSurface.BUCCAL: "b",
    MainSurface.LINGUAL: "l",
}


def mirror(surface: MainSurface, tooth_class: ToothClass) -> MainSurface:
    """Apply the molar quadrant swap. The swap is its own inverse."""
    if not tooth_class.is_molar:
        return surface
    if tooth_class.quadrant == 2:
        return Q2_MOLAR_SWAP.get(surface, surface)
    if tooth_class.quadrant == 3:
        return Q3_MOLAR_SWAP.get(surface, surface)
    return surface


def normalize(raw: Union[str, MainSurface], tooth: int) -> MainSurface:
    tooth_class = classify(tooth)

    if isinstance(raw, MainSurface):
        return raw

    token = str(raw).strip().lower()
    if token in CANONICAL_NAMES:
        return CANONICAL_NAMES[token]

    base = SURFACE_ALIASES.get(token)
    if base is None:
        raise UnknownSurfaceError(raw)
    return mirror(base, tooth_class)


def normalize_all(raw_surfaces: Iterable[Union[str, MainSurface]], tooth: int) -> List[MainSurface]:
    """Normalize and de-duplicate, keeping first-seen order."""
    result: List[MainSurface] = []
    for raw in raw_surfaces:
        surface = normalize(raw, tooth)
        if surface not in result:
            result.append(surface)
    return result


def display_surface(surface: Union[str, MainSurface], tooth: int) -> str:
    canonical = normalize(surface, tooth)
    if canonical == MainSurface.LINGUAL and classify(tooth).is_upper:
        return PALATAL
    return canonical.value


def format_surfaces(tooth: int, surfaces: Iterable[Union[str, MainSurface]]) -> str:
    """Render compact notation such as ``17dob`` for a tooth and its surfaces."""
    tooth_class = classify(tooth)
    letters = []
    for surface in normalize_all(surfaces, tooth):
        raw = mirror(surface, tooth_class)
        if raw == MainSurface.LINGUAL and tooth_class.is_upper:
            letters.append("p")
        else:
            letters.append(SURFACE_LETTERS[raw])
    return f"{tooth}{''.join(letters)}"
