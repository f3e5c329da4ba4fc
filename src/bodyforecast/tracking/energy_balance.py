"""Energy-balance weight projection.

Daily weight change follows a first-order linear recurrence:

    W(t+1) = r × W(t) + b

where
    r = 1 - m × (10 × 0.453592) / 3500
    b = (I - m × c) / 3500
    c = 6.25 × H_cm - 5 × A + 5     (male; -161 instead of +5 for female)

m is the activity factor, I the fixed daily intake and c the part of
Mifflin-St Jeor that does not depend on weight. TDEE is m × (10 × W_kg + c),
so each day the energy surplus I - TDEE moves weight by surplus/3500 pounds.
r is unit-free; b is in pounds/day and is converted to kilograms because the
state is carried in kilograms.

The recurrence has the closed-form solution

    W(t) = W∞ + (W0 - W∞) × r^t,    W∞ = b / (1 - r)

so the whole horizon is evaluated at once rather than stepped.

Body fat is projected by holding the latest lean mass constant: any weight
above it is fat. The result is clamped to [5, 40] % because the simplified
model extrapolates poorly at the extremes.
"""

from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Any, Optional

import numpy as np

from bodyforecast.profiles.body_calc import (
    KCAL_PER_POUND,
    Sex,
    WeightGoalType,
    activity_factor,
    calculate_age,
    calculate_bmr,
    calculate_lean_mass,
    calculate_target_intake,
    calculate_tdee,
    is_positive_number,
    parse_goal_type,
    parse_sex,
)
from bodyforecast.tracking.models import MeasurementRecord, ProjectedPoint, UserProfile
from bodyforecast.units import (
    LBS_TO_KG,
    WeightUnit,
    convert_weight,
    inches_to_centimeters,
)

logger = logging.getLogger(__name__)

MIN_PROJECTED_BODY_FAT = 5.0
MAX_PROJECTED_BODY_FAT = 40.0


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def recurrence_constants(
    sex: Sex,
    height_cm: float,
    age: float,
    factor: float,
    intake: float,
) -> tuple[float, float]:
    """
    Calculate (r, b) for the daily weight recurrence.

    Args:
        sex: Biological sex
        height_cm: Height in centimeters
        age: Age in years
        factor: Activity multiplier
        intake: Daily caloric intake (kcal)

    Returns:
        Tuple of (r, b) with b in pounds/day
    """
    c = (6.25 * height_cm) - (5 * age)
    c += 5 if sex == Sex.MALE else -161

    r = 1 - (factor * (10 * LBS_TO_KG) / KCAL_PER_POUND)
    b = (intake - (factor * c)) / KCAL_PER_POUND
    return r, b


def equilibrium_weight(r: float, b: float) -> float:
    """Fixed point b / (1 - r) of the recurrence, NaN when r == 1."""
    if 1 - r == 0:
        return math.nan
    return b / (1 - r)


def closed_form_weights(w0: float, r: float, b: float, days: int) -> np.ndarray:
    """
    Evaluate W(t) = W∞ + (W0 - W∞) × r^t for t = 0..days inclusive.

    Args:
        w0: Starting weight
        r: Recurrence multiplier
        b: Daily constant term, in the same unit as ``w0``
        days: Horizon in days

    Returns:
        Array of days + 1 weights (all NaN if r == 1)
    """
    w_inf = equilibrium_weight(r, b)
    t = np.arange(days + 1)
    return w_inf + (w0 - w_inf) * np.power(r, t)


def project_body_fat(weight_kg: float, lean_mass_kg: float) -> float:
    """Body fat % at ``weight_kg`` if lean mass stays at ``lean_mass_kg``."""
    fat_mass_kg = max(0.0, weight_kg - lean_mass_kg)
    body_fat = (fat_mass_kg / weight_kg) * 100
    return max(MIN_PROJECTED_BODY_FAT, min(MAX_PROJECTED_BODY_FAT, body_fat))


def _profile_is_complete(profile: Optional[UserProfile]) -> bool:
    return (
        profile is not None
        and parse_sex(profile.sex) is not None
        and isinstance(profile.date_of_birth, date)
        and is_positive_number(profile.height_inches)
        and not math.isnan(activity_factor(profile.activity_level))
    )


def _goal_is_complete(profile: UserProfile) -> bool:
    goal = parse_goal_type(profile.weight_goal_type)
    if goal is None:
        return False
    if goal == WeightGoalType.MAINTAIN:
        return True
    return is_positive_number(profile.target_weight) and is_positive_number(
        profile.target_rate
    )


def project_weight(
    last_record: Optional[MeasurementRecord],
    profile: Optional[UserProfile],
    target_intake: float,
    prediction_days: int,
    today: Optional[date] = None,
) -> list[ProjectedPoint]:
    """
    Project daily weight and body fat from a fixed caloric intake.

    The first point repeats ``last_record`` so the projection joins the
    historical series; points 1..prediction_days follow one day apart.

    Args:
        last_record: Most recent measurement (anchor of the projection)
        profile: User profile (sex, date of birth, height, activity level)
        target_intake: Daily intake in kcal
        prediction_days: Horizon in days, positive integer
        today: Reference date for age

    Returns:
        List of ProjectedPoint in the unit of ``last_record``, or [] if any
        required input is missing or invalid
    """
    if (
        last_record is None
        or not isinstance(last_record.measured_at, date)
        or not is_positive_number(last_record.weight)
    ):
        logger.warning("project_weight: invalid last entry %r", last_record)
        return []
    if profile is None or not _profile_is_complete(profile):
        logger.warning("project_weight: incomplete user profile")
        return []
    if not _goal_is_complete(profile):
        logger.warning("project_weight: target weight and rate required for goal")
        return []
    if (
        isinstance(prediction_days, bool)
        or not isinstance(prediction_days, int)
        or prediction_days <= 0
    ):
        logger.warning("project_weight: invalid prediction days %r", prediction_days)
        return []
    if not _is_number(target_intake):
        logger.warning("project_weight: invalid target intake %r", target_intake)
        return []
    if target_intake < 0:
        logger.warning("project_weight: negative target intake %.0f", target_intake)

    age = calculate_age(profile.date_of_birth, today)
    if not is_positive_number(age):
        logger.warning("project_weight: invalid age %r", age)
        return []

    sex = parse_sex(profile.sex)
    factor = activity_factor(profile.activity_level)
    height_cm = inches_to_centimeters(profile.height_inches)  # type: ignore[arg-type]
    r, b_lbs = recurrence_constants(sex, height_cm, age, factor, target_intake)  # type: ignore[arg-type]
    if 1 - r == 0:
        logger.warning("project_weight: degenerate recurrence (r == 1)")
        return []

    unit = last_record.weight_unit
    w0_kg = convert_weight(last_record.weight, unit, WeightUnit.KILOGRAM)
    b_kg = b_lbs * LBS_TO_KG
    logger.debug(
        "project_weight: r=%.6f b=%.6f kg/day equilibrium=%.2f kg",
        r, b_kg, equilibrium_weight(r, b_kg),
    )

    lean_mass_kg: Optional[float] = None
    if last_record.has_body_fat:
        lean_mass_kg = calculate_lean_mass(w0_kg, last_record.body_fat_percent)  # type: ignore[arg-type]

    weights_kg = closed_form_weights(w0_kg, r, b_kg, prediction_days)

    points = [
        ProjectedPoint(
            measured_at=last_record.measured_at,
            weight=last_record.weight,
            body_fat_percent=last_record.body_fat_percent if lean_mass_kg is not None else None,
        )
    ]
    for t in range(1, prediction_days + 1):
        wt_kg = float(weights_kg[t])
        if not math.isfinite(wt_kg):
            continue
        body_fat = None
        if lean_mass_kg is not None and wt_kg > 0:
            body_fat = project_body_fat(wt_kg, lean_mass_kg)
        points.append(
            ProjectedPoint(
                measured_at=last_record.measured_at + timedelta(days=t),
                weight=convert_weight(wt_kg, WeightUnit.KILOGRAM, unit),
                body_fat_percent=body_fat,
            )
        )

    return points


def maintenance_intake(
    last_record: MeasurementRecord,
    profile: UserProfile,
    today: Optional[date] = None,
) -> float:
    """TDEE at the latest weight, the intake that keeps weight unchanged."""
    age = calculate_age(profile.date_of_birth, today)
    weight_kg = convert_weight(last_record.weight, last_record.weight_unit, WeightUnit.KILOGRAM)
    height_cm = (
        inches_to_centimeters(profile.height_inches)
        if is_positive_number(profile.height_inches)
        else math.nan
    )
    bmr = calculate_bmr(profile.sex, weight_kg, height_cm, age)
    return calculate_tdee(bmr, profile.activity_level)


def project_from_profile(
    last_record: Optional[MeasurementRecord],
    profile: Optional[UserProfile],
    prediction_days: int,
    today: Optional[date] = None,
) -> list[ProjectedPoint]:
    """
    Derive the goal intake from the profile, then project.

    Args:
        last_record: Most recent measurement
        profile: User profile including goal type and weekly rate
        prediction_days: Horizon in days
        today: Reference date for age

    Returns:
        Projection as for ``project_weight``
    """
    if last_record is None or profile is None:
        return []
    if not is_positive_number(last_record.weight):
        return []
    tdee = maintenance_intake(last_record, profile, today)
    intake = calculate_target_intake(
        tdee, profile.weight_goal_type, profile.target_rate, profile.weight_unit
    )
    return project_weight(last_record, profile, intake, prediction_days, today)
