"""Tests for the closed-form energy-balance projection."""

from __future__ import annotations

import math
from datetime import date, timedelta

import pytest

from bodyforecast.tracking.energy_balance import (
    closed_form_weights,
    equilibrium_weight,
    maintenance_intake,
    project_from_profile,
    project_weight,
    recurrence_constants,
)
from bodyforecast.profiles.body_calc import Sex
from bodyforecast.tracking.models import MeasurementRecord, UserProfile


class TestRecurrence:
    """Tests for the recurrence constants and closed form."""

    def test_constants(self) -> None:
        r, b = recurrence_constants(Sex.MALE, 177.8, 35, 1.55, 2500)
        c = 6.25 * 177.8 - 5 * 35 + 5
        assert r == pytest.approx(1 - 1.55 * (10 * 0.453592) / 3500)
        assert b == pytest.approx((2500 - 1.55 * c) / 3500)

    def test_female_constant(self) -> None:
        _, b_male = recurrence_constants(Sex.MALE, 165, 30, 1.2, 2000)
        _, b_female = recurrence_constants(Sex.FEMALE, 165, 30, 1.2, 2000)
        assert (b_female - b_male) * 3500 == pytest.approx(1.2 * 166)

    def test_equilibrium_degenerate(self) -> None:
        assert math.isnan(equilibrium_weight(1.0, 0.5))

    def test_closed_form_matches_iteration(self) -> None:
        r, b, w0 = 0.998, 0.15, 90.0
        weights = closed_form_weights(w0, r, b, 30)

        w = w0
        iterated = [w]
        for _ in range(30):
            w = r * w + b
            iterated.append(w)

        assert len(weights) == 31
        for closed, step in zip(weights, iterated):
            assert closed == pytest.approx(step)


class TestProjectWeight:
    """Tests for project_weight."""

    def test_maintenance_intake_holds_weight(self, last_record, maintain_profile, today) -> None:
        intake = maintenance_intake(last_record, maintain_profile, today)
        points = project_weight(last_record, maintain_profile, intake, 60, today)

        assert len(points) == 61
        for point in points:
            assert point.weight == pytest.approx(200.0, rel=1e-5)

    def test_maintenance_in_kilograms(self, maintain_profile, today) -> None:
        record = MeasurementRecord(date(2025, 1, 1), 85.0, 22.0, "kg")
        intake = maintenance_intake(record, maintain_profile, today)
        points = project_weight(record, maintain_profile, intake, 30, today)
        assert points[-1].weight == pytest.approx(85.0, rel=1e-6)

    def test_first_point_repeats_last_record(self, last_record, lose_profile, today) -> None:
        points = project_weight(last_record, lose_profile, 2000, 10, today)
        assert points[0].measured_at == last_record.measured_at
        assert points[0].weight == last_record.weight
        assert points[0].body_fat_percent == last_record.body_fat_percent

    def test_daily_dates(self, last_record, lose_profile, today) -> None:
        points = project_weight(last_record, lose_profile, 2000, 10, today)
        for t, point in enumerate(points):
            assert point.measured_at == last_record.measured_at + timedelta(days=t)

    def test_deficit_strictly_decreasing(self, last_record, lose_profile, today) -> None:
        intake = maintenance_intake(last_record, lose_profile, today) - 500
        points = project_weight(last_record, lose_profile, intake, 90, today)
        weights = [p.weight for p in points]
        assert all(b < a for a, b in zip(weights, weights[1:]))

    def test_deficit_rate_near_one_pound_per_week(self, last_record, lose_profile, today) -> None:
        intake = maintenance_intake(last_record, lose_profile, today) - 500
        points = project_weight(last_record, lose_profile, intake, 7, today)
        # Slightly under 1 lb because TDEE drops as weight falls
        assert 200.0 - points[-1].weight == pytest.approx(1.0, abs=0.05)

    def test_body_fat_follows_lean_mass(self, last_record, lose_profile, today) -> None:
        intake = maintenance_intake(last_record, lose_profile, today) - 500
        points = project_weight(last_record, lose_profile, intake, 30, today)
        lean_lbs = 150.0
        for point in points[1:]:
            expected = (point.weight - lean_lbs) / point.weight * 100
            assert point.body_fat_percent == pytest.approx(expected, rel=1e-3)

    def test_body_fat_clamped_low(self, last_record, lose_profile, today) -> None:
        points = project_weight(last_record, lose_profile, 0, 180, today)
        body_fats = [p.body_fat_percent for p in points[1:]]
        assert all(5 <= bf <= 40 for bf in body_fats)
        assert body_fats[-1] == 5

    def test_body_fat_clamped_high(self, last_record, lose_profile, today) -> None:
        points = project_weight(last_record, lose_profile, 6000, 365, today)
        body_fats = [p.body_fat_percent for p in points[1:]]
        assert all(5 <= bf <= 40 for bf in body_fats)
        assert body_fats[-1] == 40

    def test_no_body_fat_recorded(self, lose_profile, today) -> None:
        record = MeasurementRecord(date(2025, 1, 1), 200.0, None, "lbs")
        points = project_weight(record, lose_profile, 2000, 5, today)
        assert len(points) == 6
        assert all(p.body_fat_percent is None for p in points)

    def test_kg_output_unit(self, lose_profile, today) -> None:
        record = MeasurementRecord(date(2025, 1, 1), 90.0, 25.0, "kg")
        points = project_weight(record, lose_profile, 2000, 5, today)
        assert 85.0 < points[-1].weight < 90.0


class TestProjectWeightInvalid:
    """Missing or invalid inputs give an empty projection."""

    def test_missing_record(self, lose_profile) -> None:
        assert project_weight(None, lose_profile, 2000, 30) == []

    def test_invalid_record_weight(self, lose_profile) -> None:
        record = MeasurementRecord(date(2025, 1, 1), -5.0, 20.0, "lbs")
        assert project_weight(record, lose_profile, 2000, 30) == []

    def test_missing_profile(self, last_record) -> None:
        assert project_weight(last_record, None, 2000, 30) == []

    @pytest.mark.parametrize("missing", ["sex", "date_of_birth", "height_inches", "activity_level"])
    def test_incomplete_profile(self, last_record, lose_profile, missing: str) -> None:
        setattr(lose_profile, missing, None)
        assert project_weight(last_record, lose_profile, 2000, 30) == []

    @pytest.mark.parametrize("days", [0, -5, 2.5, True, None])
    def test_invalid_prediction_days(self, last_record, lose_profile, days) -> None:
        assert project_weight(last_record, lose_profile, 2000, days) == []  # type: ignore[arg-type]

    def test_lose_goal_without_target(self, last_record, today) -> None:
        profile = UserProfile(
            sex="female",
            date_of_birth=date(1990, 1, 1),
            height_inches=65,
            activity_level="sedentary",
            weight_goal_type="lose",
            target_rate=1.0,
        )
        assert project_weight(last_record, profile, 1500, 30, today) == []

    def test_invalid_intake(self, last_record, lose_profile) -> None:
        assert project_weight(last_record, lose_profile, float("nan"), 30) == []


class TestProjectFromProfile:
    """Tests for project_from_profile."""

    def test_lose_goal_projection(self, last_record, lose_profile, today) -> None:
        points = project_from_profile(last_record, lose_profile, 28, today)
        assert len(points) == 29
        assert points[-1].weight == pytest.approx(196.0, abs=0.3)

    def test_maintain_goal_flat(self, last_record, maintain_profile, today) -> None:
        points = project_from_profile(last_record, maintain_profile, 28, today)
        assert points[-1].weight == pytest.approx(200.0, rel=1e-5)

    def test_missing_inputs(self, lose_profile) -> None:
        assert project_from_profile(None, lose_profile, 28) == []
