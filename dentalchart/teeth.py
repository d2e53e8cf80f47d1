"""FDI tooth classification.

Every other module asks this one for quadrant and tooth type instead of
re-deriving them from the tooth number.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple

from .errors import InvalidToothError


class ToothType(str, Enum):
    ANTERIOR = "anterior"
    PREMOLAR = "premolar"
    MOLAR = "molar"


PERMANENT_TEETH: Tuple[int, ...] = tuple(
    quadrant * 10 + position for quadrant in (1, 2, 3, 4) for position in range(1, 9)
)
PRIMARY_TEETH: Tuple[int, ...] = tuple(
    quadrant * 10 + position for quadrant in (5, 6, 7, 8) for position in range(1, 6)
)
ALL_TEETH: FrozenSet[int] = frozenset(PERMANENT_TEETH + PRIMARY_TEETH)

# Position within a permanent quadrant -> type
POSITION_TYPES = {
    1: ToothType.ANTERIOR,
    2: ToothType.ANTERIOR,
    3: ToothType.ANTERIOR,
    4: ToothType.PREMOLAR,
    5: ToothType.PREMOLAR,
    6: ToothType.MOLAR,
    7: ToothType.MOLAR,
    8: ToothType.MOLAR,
}

PRIMARY_OFFSET = 40


@dataclass(frozen=True)
class ToothClass:
    tooth: int
    quadrant: int
    type: ToothType
    is_primary: bool

    @property
    def is_molar(self) -> bool:
        return self.type == ToothType.MOLAR

    @property
    def is_upper(self) -> bool:
        return self.quadrant in (1, 2)


def is_valid_tooth(tooth) -> bool:
    if isinstance(tooth, bool) or not isinstance(tooth, int):
        return False
    return tooth in ALL_TEETH


def classify(tooth: int) -> ToothClass:
    if not is_valid_tooth(tooth):
        raise InvalidToothError(tooth)

    is_primary = tooth > 50
    # Primary teeth reuse the permanent table: 54 -> 14, 75 -> 35
    equivalent = tooth - PRIMARY_OFFSET if is_primary else tooth
    quadrant, position = divmod(equivalent, 10)

    return ToothClass(
        tooth=tooth,
        quadrant=quadrant,
        type=POSITION_TYPES[position],
        is_primary=is_primary,
    )


def get_quadrant(tooth: int) -> int:
    return classify(tooth).quadrant


def get_tooth_type(tooth: int) -> ToothType:
    return classify(tooth).type


def parse_tooth(value) -> int:
    """Coerce a user-supplied tooth number ("17", 17) and validate it."""
    try:
        tooth = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidToothError(value)
    if tooth not in ALL_TEETH:
        raise InvalidToothError(value)
    return tooth
