"""Mass and length unit conversions.

Conversion is applied only when the source unit differs from the unit being
requested, so same-unit values pass through without a floating-point
round-trip.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

LBS_TO_KG = 0.453592
KG_TO_LBS = 2.20462
INCH_TO_CM = 2.54


class WeightUnit(Enum):
    """Unit a weight value is expressed in."""
    POUND = "lbs"
    KILOGRAM = "kg"


_UNIT_ALIASES = {
    "lb": WeightUnit.POUND,
    "lbs": WeightUnit.POUND,
    "pound": WeightUnit.POUND,
    "pounds": WeightUnit.POUND,
    "kg": WeightUnit.KILOGRAM,
    "kgs": WeightUnit.KILOGRAM,
    "kilogram": WeightUnit.KILOGRAM,
    "kilograms": WeightUnit.KILOGRAM,
}


def normalize_unit(value: Union[WeightUnit, str, None]) -> Optional[WeightUnit]:
    """Map a unit enum or alias string to a WeightUnit.

    Returns None for anything unrecognised.
    """
    if isinstance(value, WeightUnit):
        return value
    if isinstance(value, str):
        return _UNIT_ALIASES.get(value.strip().lower())
    return None


def pounds_to_kilograms(pounds: float) -> float:
    return pounds * LBS_TO_KG


def kilograms_to_pounds(kilograms: float) -> float:
    return kilograms * KG_TO_LBS


def inches_to_centimeters(inches: float) -> float:
    return inches * INCH_TO_CM


def convert_weight(
    value: float,
    from_unit: Union[WeightUnit, str],
    to_unit: Union[WeightUnit, str],
) -> float:
    """Convert a weight between units.

    Args:
        value: Weight to convert
        from_unit: Unit the value is expressed in
        to_unit: Unit requested

    Returns:
        The converted weight, or ``value`` unchanged if the units match or
        either unit is unrecognised.
    """
    source = normalize_unit(from_unit)
    target = normalize_unit(to_unit)
    if source is None or target is None or source == target:
        return value
    if source == WeightUnit.POUND:
        return pounds_to_kilograms(value)
    return kilograms_to_pounds(value)
