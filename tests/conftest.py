"""Pytest fixtures for bodyforecast tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from bodyforecast.tracking.models import MeasurementRecord, UserProfile
from bodyforecast.units import WeightUnit

# Fixed reference date so ages are stable
TODAY = date(2025, 6, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def maintain_profile() -> UserProfile:
    """35-year-old moderately active male maintaining weight."""
    return UserProfile(
        sex="male",
        date_of_birth=date(1990, 1, 1),
        height_inches=70.0,
        activity_level="moderately_active",
        weight_goal_type="maintain",
        weight_unit=WeightUnit.POUND,
    )


@pytest.fixture
def lose_profile() -> UserProfile:
    """Same person aiming to lose 1 lb/week down to 180 lbs."""
    return UserProfile(
        sex="male",
        date_of_birth=date(1990, 1, 1),
        height_inches=70.0,
        activity_level="moderately_active",
        weight_goal_type="lose",
        target_weight=180.0,
        target_rate=1.0,
        weight_unit=WeightUnit.POUND,
    )


@pytest.fixture
def last_record() -> MeasurementRecord:
    return MeasurementRecord(
        measured_at=date(2025, 1, 1),
        weight=200.0,
        body_fat_percent=25.0,
        weight_unit=WeightUnit.POUND,
    )


@pytest.fixture
def weekly_records() -> list[MeasurementRecord]:
    """Eight weekly measurements losing ~1 lb/week."""
    start = date(2024, 11, 6)
    return [
        MeasurementRecord(
            measured_at=start + timedelta(weeks=i),
            weight=207.0 - i,
            body_fat_percent=27.0 - 0.25 * i,
            weight_unit=WeightUnit.POUND,
        )
        for i in range(8)
    ]
