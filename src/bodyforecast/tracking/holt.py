"""Holt's linear (level + trend) exponential smoothing for weight forecasts.

Two smoothed components are tracked across the history:
    L_i = α × y_i + (1 - α) × (L_{i-1} + T_{i-1} × Δdays)
    T_i = β × (L_i - L_{i-1}) + (1 - β) × T_{i-1}

with L_0 = y_0 and T_0 the per-day slope between the first two points. The
level prediction scales the trend by the days elapsed between measurements;
the trend update uses the raw level change.

The forecast L + T × k is stepped one day at a time until it reaches the
target weight or the five-year cap, whichever comes first.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Sequence
from datetime import date, timedelta
from typing import Optional

from bodyforecast.tracking.models import ProjectedPoint

logger = logging.getLogger(__name__)

DEFAULT_ALPHA = 0.5
DEFAULT_BETA = 0.3

# Hard stop for the dynamic horizon (5 years)
MAX_FORECAST_DAYS = 1825


def _valid_weight(alpha: float) -> bool:
    return isinstance(alpha, (int, float)) and not isinstance(alpha, bool) and 0 <= alpha <= 1


def smooth_series(
    series: Sequence[tuple[date, float]],
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> Optional[tuple[float, float]]:
    """
    Run Holt's smoothing over a chronological series.

    Args:
        series: (date, weight) tuples sorted by date, at least two
        alpha: Level smoothing weight in [0, 1]
        beta: Trend smoothing weight in [0, 1]

    Returns:
        Final (level, trend per day), or None for too few points or
        out-of-range weights
    """
    if len(series) < 2:
        return None
    if not _valid_weight(alpha) or not _valid_weight(beta):
        logger.warning("smooth_series: alpha/beta must be in [0, 1], got %r/%r", alpha, beta)
        return None

    (d0, y0), (d1, y1) = series[0], series[1]
    first_gap = (d1 - d0).days
    level = y0
    trend = (y1 - y0) / first_gap if first_gap != 0 else 0.0

    for i in range(1, len(series)):
        prev_date, _ = series[i - 1]
        curr_date, weight = series[i]
        days_elapsed = (curr_date - prev_date).days

        prev_level = level
        level = alpha * weight + (1 - alpha) * (prev_level + trend * days_elapsed)
        trend = beta * (level - prev_level) + (1 - beta) * trend

    return level, trend


def _reached(forecast: float, target: float, descending: bool) -> bool:
    return forecast <= target if descending else forecast >= target


def iter_holt_forecast(
    series: Sequence[tuple[date, float]],
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    target_weight: Optional[float] = None,
    max_days: int = MAX_FORECAST_DAYS,
) -> Iterator[ProjectedPoint]:
    """
    Lazily yield a Holt forecast that stops at the target weight.

    The first point repeats the last historical measurement so the forecast
    joins the history when drawn. Each following point is one day later:
        forecast(k) = max(0, L + T × k)

    The step that reaches the target is included and ends the forecast.
    "Reaching" means falling to the target when it is at or below the last
    measured weight and climbing to it otherwise. Without a target, or if
    the trend never gets there, the forecast ends after ``max_days`` steps.

    Args:
        series: (date, weight) tuples sorted by date, at least two
        alpha: Level smoothing weight in [0, 1]
        beta: Trend smoothing weight in [0, 1]
        target_weight: Weight at which to stop, same unit as the series
        max_days: Step cap, never more than MAX_FORECAST_DAYS

    Yields:
        ProjectedPoint without body fat
    """
    state = smooth_series(series, alpha, beta)
    if state is None:
        return
    level, trend = state

    last_date, last_weight = series[-1]
    yield ProjectedPoint(measured_at=last_date, weight=last_weight)

    has_target = (
        isinstance(target_weight, (int, float))
        and not isinstance(target_weight, bool)
        and math.isfinite(target_weight)
    )
    descending = has_target and target_weight <= last_weight  # type: ignore[operator]
    cap = min(max_days, MAX_FORECAST_DAYS)

    for k in range(1, cap + 1):
        forecast = max(0.0, level + trend * k)
        yield ProjectedPoint(measured_at=last_date + timedelta(days=k), weight=forecast)
        if has_target and _reached(forecast, target_weight, descending):  # type: ignore[arg-type]
            return


def project_holt(
    series: Sequence[tuple[date, float]],
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
    target_weight: Optional[float] = None,
) -> list[ProjectedPoint]:
    """
    Materialise the Holt forecast.

    The forecast stops at the first step at or below ``target_weight`` when
    the target is at or below the last measured weight, and at the first
    step at or above it otherwise, so gain targets are reached from below.

    Returns:
        Seed point plus forecast steps, or [] if fewer than two points were
        given or alpha/beta are out of range

    Example:
        >>> from datetime import date
        >>> points = project_holt([(date(2025, 1, 1), 200.0), (date(2025, 1, 2), 198.0)],
        ...                       target_weight=190.0)
        >>> points[-1].weight <= 190.0
        True
    """
    return list(iter_holt_forecast(series, alpha, beta, target_weight))
