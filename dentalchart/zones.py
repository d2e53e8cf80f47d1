"""Main surface <-> zone tables.

Molars split each surface into numbered zones; premolars and anteriors keep a
single zone per surface. Triangle zones always belong to the same surface
whatever the quadrant.
"""
from typing import Dict, FrozenSet, Iterable, List, Tuple, Union

from .errors import ZoneTableError
from .surfaces import MainSurface
from .teeth import ALL_TEETH, ToothType, classify

Zone = str

MOLAR_ZONES: Dict[MainSurface, Tuple[Zone, ...]] = {
    MainSurface.BUCCAL: ("buccal-1", "buccal-2", "cervical-buccal-1", "cervical-buccal-2", "triangle-3", "triangle-4"),
    MainSurface.LINGUAL: ("lingual-1", "lingual-2", "cervical-lingual-1", "cervical-lingual-2", "triangle-1", "triangle-2"),
    MainSurface.OCCLUSAL: ("occlusal-1", "occlusal-2", "occlusal-3", "occlusal-4"),
    MainSurface.MESIAL: ("interdental-mesial",),
    MainSurface.DISTAL: ("interdental-distal",),
}

SINGLE_ZONES: Dict[MainSurface, Tuple[Zone, ...]] = {
    MainSurface.BUCCAL: ("buccal", "cervical-buccal", "triangle-3", "triangle-4"),
    MainSurface.LINGUAL: ("lingual", "cervical-lingual", "triangle-1", "triangle-2"),
    MainSurface.OCCLUSAL: ("occlusal",),
    MainSurface.MESIAL: ("interdental-mesial",),
    MainSurface.DISTAL: ("interdental-distal",),
}

ZONE_TABLES: Dict[ToothType, Dict[MainSurface, Tuple[Zone, ...]]] = {
    ToothType.MOLAR: MOLAR_ZONES,
    ToothType.PREMOLAR: SINGLE_ZONES,
    ToothType.ANTERIOR: SINGLE_ZONES,
}

TRIANGLE_SURFACES: Dict[Zone, MainSurface] = {
    "triangle-1": MainSurface.LINGUAL,
    "triangle-2": MainSurface.LINGUAL,
    "triangle-3": MainSurface.BUCCAL,
    "triangle-4": MainSurface.BUCCAL,
}

# Checked in order; longer prefixes first so cervical-* is not read as buccal/lingual
PREFIX_SURFACES: Tuple[Tuple[str, MainSurface], ...] = (
    ("cervical-buccal", MainSurface.BUCCAL),
    ("cervical-lingual", MainSurface.LINGUAL),
    ("interdental-mesial", MainSurface.MESIAL),
    ("interdental-distal", MainSurface.DISTAL),
    ("occlusal", MainSurface.OCCLUSAL),
    ("buccal", MainSurface.BUCCAL),
    ("lingual", MainSurface.LINGUAL),
    ("mesial", MainSurface.MESIAL),
    ("distal", MainSurface.DISTAL),
)

# Whole-tooth paint order used by extraction, disabled, scaling and bridge states
WHOLE_TOOTH_ORDER = (
    MainSurface.BUCCAL,
    MainSurface.LINGUAL,
    MainSurface.OCCLUSAL,
    MainSurface.MESIAL,
    MainSurface.DISTAL,
)


def _table(tooth: int) -> Dict[MainSurface, Tuple[Zone, ...]]:
    return ZONE_TABLES[classify(tooth).type]


def expand(main_surface: Union[str, MainSurface], tooth: int) -> FrozenSet[Zone]:
    table = _table(tooth)
    try:
        surface = MainSurface(main_surface)
    except ValueError:
        return frozenset({str(main_surface)})
    return frozenset(table[surface])


def collapse(zone: Zone, tooth: int) -> Union[MainSurface, str]:
    table = _table(tooth)

    if zone in TRIANGLE_SURFACES:
        return TRIANGLE_SURFACES[zone]

    for surface, zones in table.items():
        if zone in zones:
            return surface

    for prefix, surface in PREFIX_SURFACES:
        if zone.startswith(prefix):
            return surface

    return zone


def all_zones(tooth: int) -> List[Zone]:
    table = _table(tooth)
    zones: List[Zone] = []
    for surface in WHOLE_TOOTH_ORDER:
        zones.extend(table[surface])
    return zones


def occlusal_zones(tooth: int) -> List[Zone]:
    return list(_table(tooth)[MainSurface.OCCLUSAL])


def expand_all(surfaces: Iterable[Union[str, MainSurface]], tooth: int) -> List[Zone]:
    """Union of the expansions, in surface order, without duplicates."""
    zones: List[Zone] = []
    for surface in surfaces:
        for zone in sorted(expand(surface, tooth)):
            if zone not in zones:
                zones.append(zone)
    return zones


def main_surfaces_for_zones(zones: Iterable[Zone], tooth: int) -> List[MainSurface]:
    surfaces: List[MainSurface] = []
    for zone in zones:
        surface = collapse(zone, tooth)
        if isinstance(surface, MainSurface) and surface not in surfaces:
            surfaces.append(surface)
    return surfaces


def check_zone_tables() -> None:
    """Verify that every zone's declared main surface expands back to it."""
    for tooth in sorted(ALL_TEETH):
        for zone in all_zones(tooth):
            surface = collapse(zone, tooth)
            if not isinstance(surface, MainSurface):
                raise ZoneTableError(f"Zone {zone} of tooth {tooth} has no main surface")
            if zone not in expand(surface, tooth):
                raise ZoneTableError(
                    f"Zone {zone} of tooth {tooth} collapses to {surface.value} "
                    f"but is missing from its expansion"
                )
