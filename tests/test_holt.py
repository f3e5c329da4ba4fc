"""Tests for Holt's smoothing forecast."""

from __future__ import annotations

from datetime import date, timedelta
from itertools import islice

import pytest

from bodyforecast.tracking.holt import (
    MAX_FORECAST_DAYS,
    iter_holt_forecast,
    project_holt,
    smooth_series,
)

START = date(2025, 1, 1)


def _days(*weights: float) -> list[tuple[date, float]]:
    return [(START + timedelta(days=i), w) for i, w in enumerate(weights)]


class TestSmoothSeries:
    """Tests for the level/trend recurrence."""

    def test_two_points(self) -> None:
        level, trend = smooth_series(_days(200.0, 198.0), alpha=0.5, beta=0.3)  # type: ignore[misc]
        assert level == pytest.approx(198.0)
        assert trend == pytest.approx(-2.0)

    def test_irregular_gaps(self) -> None:
        series = [
            (START, 200.0),
            (START + timedelta(days=2), 196.0),
            (START + timedelta(days=3), 195.0),
        ]
        level, trend = smooth_series(series, alpha=0.5, beta=0.3)  # type: ignore[misc]
        # T0 = -4/2 = -2; L1 = 196, T1 = 0.3*(-4) + 0.7*(-2) = -2.6
        # L2 = 0.5*195 + 0.5*(196 - 2.6) = 194.2, T2 = 0.3*(-1.8) + 0.7*(-2.6) = -2.36
        assert level == pytest.approx(194.2)
        assert trend == pytest.approx(-2.36)

    def test_gap_level_change_not_divided_by_days(self) -> None:
        series = [(START, 200.0), (START + timedelta(days=2), 196.0)]
        level, trend = smooth_series(series, alpha=0.5, beta=0.3)  # type: ignore[misc]
        assert level == pytest.approx(196.0)
        assert trend == pytest.approx(-2.6)

    def test_shared_first_timestamp_zero_trend(self) -> None:
        series = [(START, 200.0), (START, 198.0)]
        level, trend = smooth_series(series, alpha=0.5, beta=0.3)  # type: ignore[misc]
        assert level == pytest.approx(199.0)
        assert trend == pytest.approx(-0.3)

    def test_too_few_points(self) -> None:
        assert smooth_series(_days(200.0)) is None

    @pytest.mark.parametrize("alpha,beta", [(1.5, 0.3), (0.5, -0.1), (None, 0.3)])
    def test_out_of_range_weights(self, alpha, beta) -> None:
        assert smooth_series(_days(200.0, 198.0), alpha, beta) is None  # type: ignore[arg-type]


class TestProjectHolt:
    """Tests for the dynamic-horizon forecast."""

    def test_stops_at_target_inclusive(self) -> None:
        points = project_holt(_days(200.0, 198.0), alpha=0.5, beta=0.3, target_weight=150.0)

        weights = [p.weight for p in points]
        assert weights[0] == 198.0  # last historical point repeated
        assert all(b < a for a, b in zip(weights, weights[1:]))
        assert weights[-1] <= 150.0
        assert weights[-2] > 150.0
        # 198 - 2k reaches 150 at k = 24
        assert len(points) == 25
        assert weights[-1] == pytest.approx(150.0)

    def test_dates_continue_daily(self) -> None:
        points = project_holt(_days(200.0, 198.0), target_weight=190.0)
        last_date = START + timedelta(days=1)
        for k, point in enumerate(points):
            assert point.measured_at == last_date + timedelta(days=k)

    def test_never_reaching_target_stops_at_cap(self) -> None:
        points = project_holt(_days(200.0, 200.0), target_weight=150.0)
        assert len(points) == 1 + MAX_FORECAST_DAYS
        assert points[-1].measured_at == START + timedelta(days=1 + MAX_FORECAST_DAYS)

    def test_no_target_runs_to_cap(self) -> None:
        points = project_holt(_days(200.0, 199.9))
        assert len(points) == 1 + MAX_FORECAST_DAYS

    def test_gain_target_reached_from_below(self) -> None:
        points = project_holt(_days(150.0, 152.0), alpha=0.5, beta=0.3, target_weight=160.0)
        assert [p.weight for p in points] == pytest.approx([152.0, 154.0, 156.0, 158.0, 160.0])

    def test_forecast_never_negative(self) -> None:
        points = project_holt(_days(10.0, 5.0))
        assert all(p.weight >= 0 for p in points)
        assert len(points) <= 1 + MAX_FORECAST_DAYS

    def test_no_body_fat(self) -> None:
        points = project_holt(_days(200.0, 198.0), target_weight=190.0)
        assert all(p.body_fat_percent is None for p in points)

    def test_too_few_points(self) -> None:
        assert project_holt(_days(200.0), target_weight=150.0) == []
        assert project_holt([], target_weight=150.0) == []

    def test_invalid_alpha(self) -> None:
        assert project_holt(_days(200.0, 198.0), alpha=2.0) == []


class TestIterHoltForecast:
    """Tests for lazy evaluation."""

    def test_caller_can_stop_early(self) -> None:
        points = list(islice(iter_holt_forecast(_days(200.0, 200.0)), 3))
        assert len(points) == 3

    def test_max_days_limits_steps(self) -> None:
        points = list(iter_holt_forecast(_days(200.0, 199.0), max_days=10))
        assert len(points) == 11

    def test_max_days_cannot_exceed_cap(self) -> None:
        points = list(iter_holt_forecast(_days(200.0, 200.0), max_days=10_000))
        assert len(points) == 1 + MAX_FORECAST_DAYS
