"""Unit normalization for inventory and consumption quantities.

Every quantity is converted to one of three base units before any arithmetic:
grams for mass, milliliters for volume and pieces for counts. Display units are
only applied again at presentation time via ``from_base`` and
``format_quantity``.
"""

from dataclasses import dataclass
from enum import Enum

from pantry_insights.domain.errors import UnknownUnitError


class UnitType(str, Enum):
    """Physical dimension of a unit."""

    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"


BASE_UNITS: dict[UnitType, str] = {
    UnitType.MASS: "g",
    UnitType.VOLUME: "ml",
    UnitType.COUNT: "pieces",
}


@dataclass(frozen=True)
class UnitConversion:
    """Linear factor from a unit to its base unit."""

    factor: float
    unit_type: UnitType


UNIT_CONVERSIONS: dict[str, UnitConversion] = {
    "kg": UnitConversion(1000.0, UnitType.MASS),
    "g": UnitConversion(1.0, UnitType.MASS),
    "lb": UnitConversion(453.592, UnitType.MASS),
    "oz": UnitConversion(28.3495, UnitType.MASS),
    "l": UnitConversion(1000.0, UnitType.VOLUME),
    "ml": UnitConversion(1.0, UnitType.VOLUME),
    "gal": UnitConversion(3785.41, UnitType.VOLUME),
    "qt": UnitConversion(946.353, UnitType.VOLUME),
    "pt": UnitConversion(473.176, UnitType.VOLUME),
    "cup": UnitConversion(236.588, UnitType.VOLUME),
    "fl oz": UnitConversion(29.5735, UnitType.VOLUME),
    "pieces": UnitConversion(1.0, UnitType.COUNT),
    "items": UnitConversion(1.0, UnitType.COUNT),
    "servings": UnitConversion(1.0, UnitType.COUNT),
    "units": UnitConversion(1.0, UnitType.COUNT),
    "dozen": UnitConversion(12.0, UnitType.COUNT),
    "pair": UnitConversion(2.0, UnitType.COUNT),
    "pack": UnitConversion(1.0, UnitType.COUNT),
    "box": UnitConversion(1.0, UnitType.COUNT),
    "bottle": UnitConversion(1.0, UnitType.COUNT),
    "jar": UnitConversion(1.0, UnitType.COUNT),
    "can": UnitConversion(1.0, UnitType.COUNT),
}

_TWO_DECIMAL_UNITS = {"kg", "lb", "cup", "fl oz"}
_ONE_DECIMAL_UNITS = {"g", "oz", "ml", "l"}


def normalize_unit(unit: str) -> str:
    """Lowercase a unit name and collapse whitespace."""
    return " ".join(unit.strip().lower().split())


def _lookup(unit: str) -> UnitConversion:
    conversion = UNIT_CONVERSIONS.get(normalize_unit(unit))
    if conversion is None:
        raise UnknownUnitError(unit)
    return conversion


def is_known_unit(unit: str) -> bool:
    """Return True when the unit has a conversion entry."""
    return normalize_unit(unit) in UNIT_CONVERSIONS


def unit_type(unit: str) -> UnitType:
    """Return the dimension of a unit."""
    return _lookup(unit).unit_type


def base_unit_for(unit: str) -> str:
    """Return the base unit name (g, ml or pieces) for a unit."""
    return BASE_UNITS[_lookup(unit).unit_type]


def to_base(quantity: float, unit: str) -> tuple[float, UnitType]:
    """Convert a quantity to its base unit and return it with the unit type."""
    conversion = _lookup(unit)
    return quantity * conversion.factor, conversion.unit_type


def from_base(base_quantity: float, unit: str) -> float:
    """Convert a base-unit quantity back into the given display unit."""
    conversion = _lookup(unit)
    return base_quantity / conversion.factor


def are_compatible(unit_a: str, unit_b: str) -> bool:
    """Return True when both units are known and share a dimension."""
    if not is_known_unit(unit_a) or not is_known_unit(unit_b):
        return False
    return unit_type(unit_a) == unit_type(unit_b)


def format_quantity(quantity: float, unit: str) -> str:
    """Format a display quantity with unit-appropriate precision."""
    normalized = normalize_unit(unit)
    decimals = 0
    if normalized in _TWO_DECIMAL_UNITS:
        decimals = 2
    elif normalized in _ONE_DECIMAL_UNITS:
        decimals = 1
    return f"{quantity:.{decimals}f} {normalized}"
