"""Least-squares linear trend of weight over time.

The fitted line is returned as a two-point segment spanning the earliest and
latest valid timestamps, which is all a chart needs to draw it.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Optional, Union

import numpy as np

from bodyforecast.tracking.models import MeasurementRecord, TrendPoint
from bodyforecast.units import WeightUnit, convert_weight

Timestamp = Union[date, float]


def _to_x(timestamp: Any) -> Optional[float]:
    """Map a timestamp to a regression abscissa (ordinal days for dates)."""
    if isinstance(timestamp, date):
        return float(timestamp.toordinal())
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    if not math.isfinite(timestamp):
        return None
    return float(timestamp)


def _valid_pairs(
    pairs: Iterable[tuple[Any, Any]],
) -> list[tuple[Timestamp, float, float]]:
    """Keep pairs with finite x and y as (timestamp, x, y)."""
    valid = []
    for timestamp, weight in pairs:
        x = _to_x(timestamp)
        if x is None:
            continue
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            continue
        if not math.isfinite(weight):
            continue
        valid.append((timestamp, x, float(weight)))
    return valid


def _fit(xs: np.ndarray, ys: np.ndarray) -> Optional[tuple[float, float]]:
    n = len(xs)
    sum_x = float(np.sum(xs))
    sum_y = float(np.sum(ys))
    sum_xy = float(np.dot(xs, ys))
    sum_xx = float(np.dot(xs, xs))

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        # All x values identical
        return None
    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def fit_line(pairs: Iterable[tuple[Any, Any]]) -> Optional[tuple[float, float]]:
    """
    Fit y = m*x + b by ordinary least squares.

    Dates are mapped to ordinal days, so the slope of a date series is in
    weight units per day.

    Args:
        pairs: (timestamp, weight) pairs; invalid pairs are skipped

    Returns:
        (slope, intercept), or None if fewer than two valid pairs remain or
        every timestamp is identical
    """
    valid = _valid_pairs(pairs)
    if len(valid) < 2:
        return None
    xs = np.array([x for _, x, _ in valid])
    ys = np.array([y for _, _, y in valid])
    return _fit(xs, ys)


def linear_trend(pairs: Iterable[tuple[Any, Any]]) -> list[TrendPoint]:
    """
    Calculate the two endpoints of a least-squares trend line.

    Slope and intercept use every valid point, not just the endpoints:
        m = (nΣxy - ΣxΣy) / (nΣxx - (Σx)²)
        b = (Σy - mΣx) / n

    Args:
        pairs: (timestamp, weight) pairs, already in a single unit.
               Timestamps may be dates or plain numbers.

    Returns:
        [TrendPoint(min_x, m*min_x + b), TrendPoint(max_x, m*max_x + b)],
        or [] when no trend can be drawn

    Example:
        >>> linear_trend([(0, 200.0), (1, 199.0), (2, 198.0)])
        [TrendPoint(measured_at=0, weight=200.0), TrendPoint(measured_at=2, weight=198.0)]
    """
    valid = _valid_pairs(pairs)
    if len(valid) < 2:
        return []

    xs = np.array([x for _, x, _ in valid])
    ys = np.array([y for _, _, y in valid])
    fitted = _fit(xs, ys)
    if fitted is None:
        return []
    slope, intercept = fitted

    first = min(valid, key=lambda item: item[1])
    last = max(valid, key=lambda item: item[1])
    return [
        TrendPoint(measured_at=first[0], weight=slope * first[1] + intercept),
        TrendPoint(measured_at=last[0], weight=slope * last[1] + intercept),
    ]


def weight_trend(
    records: Sequence[MeasurementRecord],
    display_unit: Union[WeightUnit, str] = WeightUnit.POUND,
) -> list[TrendPoint]:
    """Trend of record weights after converting them to ``display_unit``."""
    pairs = [
        (r.measured_at, convert_weight(r.weight, r.weight_unit, display_unit))
        if isinstance(r.weight, (int, float)) else (r.measured_at, r.weight)
        for r in records
    ]
    return linear_trend(pairs)
