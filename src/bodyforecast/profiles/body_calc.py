"""Body composition math for energy expenditure and intake targets.

Calculates age, BMR (Basal Metabolic Rate), TDEE (Total Daily Energy
Expenditure) and the daily caloric intake that matches a weekly rate of
weight change.

Uses Mifflin-St Jeor equation for BMR as it's widely validated for
calculating resting metabolic rate.

Every function here is total: invalid input yields NaN instead of raising,
so callers check results with ``math.isnan`` before using them.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Union

from bodyforecast.units import (
    WeightUnit,
    convert_weight,
    inches_to_centimeters,
    normalize_unit,
)

if TYPE_CHECKING:
    from bodyforecast.tracking.models import MeasurementRecord, UserProfile

logger = logging.getLogger(__name__)


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"                  # Little or no exercise
    LIGHTLY_ACTIVE = "lightly_active"        # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"  # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"              # Hard exercise 6-7 days/week
    SUPER_ACTIVE = "super_active"            # Very hard exercise, physical job


class WeightGoalType(Enum):
    """Direction of the user's weight goal."""
    MAINTAIN = "maintain"
    LOSE = "lose"
    GAIN = "gain"


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.SUPER_ACTIVE: 1.9,
}

# 3500 kcal ~ 1 lb of adipose tissue
KCAL_PER_POUND = 3500


@dataclass
class EnergyTargets:
    """BMR, TDEE and intake derived from the latest measurement."""

    age: float
    bmr: float
    tdee: float
    target_intake: float

    @property
    def is_valid(self) -> bool:
        return not math.isnan(self.target_intake)


def _coerce_enum(enum_cls: type[Enum], value: Any) -> Optional[Enum]:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value.strip().lower())
        except ValueError:
            return None
    return None


def parse_sex(value: Union[Sex, str, None]) -> Optional[Sex]:
    return _coerce_enum(Sex, value)  # type: ignore[return-value]


def parse_activity_level(value: Union[ActivityLevel, str, None]) -> Optional[ActivityLevel]:
    return _coerce_enum(ActivityLevel, value)  # type: ignore[return-value]


def parse_goal_type(value: Union[WeightGoalType, str, None]) -> Optional[WeightGoalType]:
    return _coerce_enum(WeightGoalType, value)  # type: ignore[return-value]


def is_positive_number(value: Any) -> bool:
    """True for finite numbers greater than zero (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def calculate_age(date_of_birth: Optional[date], today: Optional[date] = None) -> float:
    """Calculate age in whole years.

    Args:
        date_of_birth: The user's date of birth
        today: Reference date, defaults to ``date.today()``

    Returns:
        Age in years, one less if this year's birthday has not happened yet,
        or NaN if ``date_of_birth`` is not a date.
    """
    if not isinstance(date_of_birth, date):
        logger.warning("calculate_age: invalid date of birth %r", date_of_birth)
        return math.nan
    if today is None:
        today = date.today()

    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def calculate_bmr(
    sex: Union[Sex, str, None],
    weight_kg: Any,
    height_cm: Any,
    age: Any,
) -> float:
    """Calculate Basal Metabolic Rate using Mifflin-St Jeor equation.

    Args:
        sex: Biological sex ("male"/"female" or Sex)
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years

    Returns:
        BMR in calories per day, or NaN for invalid inputs
    """
    sex_enum = parse_sex(sex)
    if sex_enum is None or not all(
        is_positive_number(v) for v in (weight_kg, height_cm, age)
    ):
        logger.warning(
            "calculate_bmr: invalid inputs sex=%r weight=%r height=%r age=%r",
            sex, weight_kg, height_cm, age,
        )
        return math.nan

    # Mifflin-St Jeor equation
    if sex_enum == Sex.MALE:
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) + 5
    else:
        bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age) - 161

    return bmr


def calculate_tdee(
    bmr: float,
    activity_level: Union[ActivityLevel, str, None],
) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level

    Returns:
        TDEE in calories per day, or NaN if BMR or level is invalid
    """
    if not is_positive_number(bmr):
        logger.warning("calculate_tdee: invalid BMR %r", bmr)
        return math.nan
    level = parse_activity_level(activity_level)
    if level is None:
        logger.warning("calculate_tdee: unknown activity level %r", activity_level)
        return math.nan

    multiplier = ACTIVITY_MULTIPLIERS[level]
    return bmr * multiplier


def activity_factor(activity_level: Union[ActivityLevel, str, None]) -> float:
    """Return the TDEE multiplier for a level, or NaN if unknown."""
    level = parse_activity_level(activity_level)
    if level is None:
        return math.nan
    return ACTIVITY_MULTIPLIERS[level]


def calculate_fat_mass(weight: float, body_fat_percent: float) -> float:
    """Fat mass in whatever unit ``weight`` is given in."""
    return weight * (body_fat_percent / 100)


def calculate_lean_mass(weight: float, body_fat_percent: float) -> float:
    """Lean mass (weight minus fat mass) in the unit of ``weight``."""
    return weight - calculate_fat_mass(weight, body_fat_percent)


def calculate_target_intake(
    tdee: float,
    goal_type: Union[WeightGoalType, str, None],
    target_rate: Optional[float] = None,
    rate_unit: Union[WeightUnit, str] = WeightUnit.POUND,
) -> float:
    """Calculate the daily caloric intake for a weight goal.

    The daily adjustment is (rate in lbs/week * 3500) / 7, subtracted from
    TDEE for loss and added for gain.

    Args:
        tdee: Total Daily Energy Expenditure
        goal_type: "maintain", "lose" or "gain"
        target_rate: Mass per week, required unless maintaining
        rate_unit: Unit ``target_rate`` is expressed in

    Returns:
        Intake in kcal/day clamped to >= 0, or NaN for invalid inputs
    """
    if not is_positive_number(tdee):
        return math.nan
    goal = parse_goal_type(goal_type)
    if goal is None:
        logger.warning("calculate_target_intake: unknown goal type %r", goal_type)
        return math.nan
    if goal == WeightGoalType.MAINTAIN:
        return tdee
    if not is_positive_number(target_rate):
        logger.warning("calculate_target_intake: invalid target rate %r", target_rate)
        return math.nan

    rate_lbs_per_week = convert_weight(target_rate, rate_unit, WeightUnit.POUND)
    daily_adjustment = (rate_lbs_per_week * KCAL_PER_POUND) / 7

    if goal == WeightGoalType.LOSE:
        intake = tdee - daily_adjustment
    else:
        intake = tdee + daily_adjustment

    return max(0.0, intake)


def calculate_energy_targets(
    record: Optional[MeasurementRecord],
    profile: Optional[UserProfile],
    today: Optional[date] = None,
) -> EnergyTargets:
    """Derive age, BMR, TDEE and target intake from the latest record.

    Args:
        record: Most recent measurement
        profile: User profile with biometrics and goal
        today: Reference date for age

    Returns:
        EnergyTargets; fields that could not be computed are NaN
    """
    nan_targets = EnergyTargets(math.nan, math.nan, math.nan, math.nan)
    if record is None or profile is None:
        return nan_targets
    if not is_positive_number(record.weight) or not is_positive_number(profile.height_inches):
        logger.warning("calculate_energy_targets: invalid weight or height")
        return nan_targets

    age = calculate_age(profile.date_of_birth, today)
    weight_kg = convert_weight(record.weight, record.weight_unit, WeightUnit.KILOGRAM)
    height_cm = inches_to_centimeters(profile.height_inches)

    bmr = calculate_bmr(profile.sex, weight_kg, height_cm, age)
    tdee = calculate_tdee(bmr, profile.activity_level)
    intake = calculate_target_intake(
        tdee,
        profile.weight_goal_type,
        profile.target_rate,
        normalize_unit(profile.weight_unit) or WeightUnit.POUND,
    )
    return EnergyTargets(age=age, bmr=bmr, tdee=tdee, target_intake=intake)
