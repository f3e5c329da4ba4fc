"""Data models for measurements, profiles and projections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from bodyforecast.profiles.body_calc import (
    ActivityLevel,
    Sex,
    WeightGoalType,
    calculate_fat_mass,
    calculate_lean_mass,
    parse_activity_level,
    parse_goal_type,
    parse_sex,
)
from bodyforecast.units import WeightUnit, normalize_unit


def _check_enum(value, parser, name: str, valid: tuple[str, ...]):
    if value is None:
        return None
    parsed = parser(value)
    if parsed is None:
        raise ValueError(f"{name} must be one of {valid}, got '{value}'")
    return parsed


def _check_unit(value: Union[WeightUnit, str]) -> WeightUnit:
    unit = normalize_unit(value)
    if unit is None:
        raise ValueError(f"weight_unit must be 'lbs' or 'kg', got '{value}'")
    return unit


@dataclass
class MeasurementRecord:
    """A single dated weight/body-fat measurement."""

    measured_at: date
    weight: float
    body_fat_percent: Optional[float] = None
    weight_unit: WeightUnit = WeightUnit.POUND

    def __post_init__(self) -> None:
        self.weight_unit = _check_unit(self.weight_unit)

    @property
    def has_body_fat(self) -> bool:
        bf = self.body_fat_percent
        return (
            isinstance(bf, (int, float))
            and not isinstance(bf, bool)
            and math.isfinite(bf)
            and 0 <= bf <= 100
        )

    @property
    def fat_mass(self) -> Optional[float]:
        """Fat mass in the record's own unit."""
        if not self.has_body_fat:
            return None
        return calculate_fat_mass(self.weight, self.body_fat_percent)  # type: ignore[arg-type]

    @property
    def lean_mass(self) -> Optional[float]:
        """Lean mass in the record's own unit."""
        if not self.has_body_fat:
            return None
        return calculate_lean_mass(self.weight, self.body_fat_percent)  # type: ignore[arg-type]


@dataclass
class UserProfile:
    """Biometric and goal attributes for projections.

    Fields may be None for an incomplete profile; projections that need them
    return empty results instead of failing.
    """

    sex: Optional[Sex] = None
    date_of_birth: Optional[date] = None
    height_inches: Optional[float] = None
    activity_level: Optional[ActivityLevel] = None
    weight_goal_type: WeightGoalType = WeightGoalType.MAINTAIN
    target_weight: Optional[float] = None
    target_rate: Optional[float] = None  # mass per week, in weight_unit
    weight_unit: WeightUnit = WeightUnit.POUND

    def __post_init__(self) -> None:
        self.sex = _check_enum(self.sex, parse_sex, "sex", ("male", "female"))
        self.activity_level = _check_enum(
            self.activity_level,
            parse_activity_level,
            "activity_level",
            tuple(level.value for level in ActivityLevel),
        )
        self.weight_goal_type = _check_enum(
            self.weight_goal_type,
            parse_goal_type,
            "weight_goal_type",
            ("maintain", "lose", "gain"),
        ) or WeightGoalType.MAINTAIN
        self.weight_unit = _check_unit(self.weight_unit)


@dataclass
class ProjectedPoint:
    """One day of a projection."""

    measured_at: date
    weight: float
    body_fat_percent: Optional[float] = None


@dataclass
class Milestone:
    """First crossing of a body-fat checkpoint or the target weight."""

    measured_at: date
    weight: float
    body_fat_percent: Optional[float]
    label: str


@dataclass
class TrendPoint:
    """Endpoint of a fitted trend segment."""

    measured_at: Union[date, float]
    weight: float
