"""Compose the forecasting engine for one user.

Takes the record history and profile as plain values, plus an explicit
ForecastConfig, and returns everything a presentation layer needs in one
ForecastResult. Units are resolved at the edges: history, trend and the Holt
forecast use the display unit, the energy-balance projection stays in the
unit of the latest record, and the target weight is converted into whichever
unit it is compared against.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from bodyforecast.config.settings import ForecastConfig
from bodyforecast.profiles.body_calc import (
    EnergyTargets,
    calculate_energy_targets,
    is_positive_number,
)
from bodyforecast.tracking.energy_balance import project_weight
from bodyforecast.tracking.holt import project_holt
from bodyforecast.tracking.milestones import find_milestones
from bodyforecast.tracking.models import (
    MeasurementRecord,
    Milestone,
    ProjectedPoint,
    TrendPoint,
    UserProfile,
)
from bodyforecast.tracking.regression import weight_trend
from bodyforecast.units import WeightUnit, convert_weight, normalize_unit

logger = logging.getLogger(__name__)


@dataclass
class CompositionPoint:
    """A historical record expressed in the display unit."""

    measured_at: date
    weight: float
    body_fat_percent: Optional[float]
    fat_mass: Optional[float]
    lean_mass: Optional[float]


@dataclass
class ForecastResult:
    """Everything computed for one forecasting run."""

    display_unit: WeightUnit
    targets: EnergyTargets
    history: list[CompositionPoint] = field(default_factory=list)
    trend: list[TrendPoint] = field(default_factory=list)
    projection: list[ProjectedPoint] = field(default_factory=list)
    projection_unit: Optional[WeightUnit] = None
    smoothing: list[ProjectedPoint] = field(default_factory=list)
    milestones: list[Milestone] = field(default_factory=list)

    @property
    def has_projection(self) -> bool:
        return bool(self.projection)


def composition_series(
    records: Sequence[MeasurementRecord],
    display_unit: Union[WeightUnit, str] = WeightUnit.POUND,
) -> list[CompositionPoint]:
    """Weight, fat mass and lean mass of each record in ``display_unit``.

    Records with a non-positive or non-numeric weight are skipped.
    """
    series = []
    for record in records:
        if not is_positive_number(record.weight):
            continue

        def to_display(value: Optional[float]) -> Optional[float]:
            if value is None:
                return None
            return convert_weight(value, record.weight_unit, display_unit)

        series.append(
            CompositionPoint(
                measured_at=record.measured_at,
                weight=to_display(record.weight),  # type: ignore[arg-type]
                body_fat_percent=record.body_fat_percent if record.has_body_fat else None,
                fat_mass=to_display(record.fat_mass),
                lean_mass=to_display(record.lean_mass),
            )
        )
    return series


def build_forecast(
    records: Sequence[MeasurementRecord],
    profile: Optional[UserProfile],
    config: Optional[ForecastConfig] = None,
    display_unit: Union[WeightUnit, str] = WeightUnit.POUND,
    today: Optional[date] = None,
) -> ForecastResult:
    """
    Run every forecasting component over a user's history.

    Args:
        records: Measurements ordered by date ascending
        profile: User profile, None if the user has not set one up
        config: Smoothing weights, horizon and body fat checkpoints
        display_unit: Unit for history, trend and the Holt forecast
        today: Reference date for age

    Returns:
        ForecastResult; components that lack inputs are left empty/NaN
    """
    if config is None:
        config = ForecastConfig()
    unit = normalize_unit(display_unit) or WeightUnit.POUND

    latest = records[-1] if records else None
    targets = calculate_energy_targets(latest, profile, today)
    history = composition_series(records, unit)
    result = ForecastResult(
        display_unit=unit,
        targets=targets,
        history=history,
        trend=weight_trend(records, unit),
    )

    if profile is None or latest is None:
        return result

    target_display: Optional[float] = None
    if is_positive_number(profile.target_weight):
        target_display = convert_weight(profile.target_weight, profile.weight_unit, unit)  # type: ignore[arg-type]

    series = sorted(((p.measured_at, p.weight) for p in history), key=lambda p: p[0])
    result.smoothing = project_holt(series, config.alpha, config.beta, target_display)

    if not targets.is_valid:
        logger.warning("build_forecast: skipping projection, energy targets unavailable")
        return result

    result.projection = project_weight(
        latest, profile, targets.target_intake, config.prediction_days, today
    )
    result.projection_unit = latest.weight_unit
    result.milestones = find_milestones(
        result.projection,
        profile.weight_goal_type,
        profile.target_weight,
        profile.weight_unit,
        latest.weight_unit,
        config.body_fat_thresholds,
    )
    return result
