"""Weight tracking and projection module.

This module turns a history of dated weight/body-fat measurements into
trends and forecasts.

Key components:
- Least-squares linear trend of weight over time
- Energy-balance projection (closed-form daily recurrence)
- Holt's level + trend smoothing with a target-weight stopping rule
- Milestone detection over a projection
"""

from __future__ import annotations

from bodyforecast.tracking.energy_balance import project_from_profile, project_weight
from bodyforecast.tracking.holt import iter_holt_forecast, project_holt
from bodyforecast.tracking.milestones import find_milestones
from bodyforecast.tracking.models import (
    MeasurementRecord,
    Milestone,
    ProjectedPoint,
    TrendPoint,
    UserProfile,
)
from bodyforecast.tracking.regression import linear_trend

__all__ = [
    "MeasurementRecord",
    "Milestone",
    "ProjectedPoint",
    "TrendPoint",
    "UserProfile",
    "find_milestones",
    "iter_holt_forecast",
    "linear_trend",
    "project_from_profile",
    "project_holt",
    "project_weight",
]
