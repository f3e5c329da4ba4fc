"""Milestone detection over a projected weight/body-fat series."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Optional, Union

from bodyforecast.profiles.body_calc import WeightGoalType, parse_goal_type
from bodyforecast.tracking.models import Milestone, ProjectedPoint
from bodyforecast.units import WeightUnit, convert_weight

# Body fat % checkpoints for weight loss, highest first
DEFAULT_BODY_FAT_THRESHOLDS = (40, 35, 30, 25, 20, 15, 10, 5)

TARGET_WEIGHT_LABEL = "Target Weight"


def body_fat_label(threshold: float) -> str:
    """Label for a body fat checkpoint, e.g. "20% BF"."""
    return f"{threshold:g}% BF"


def _finite(value: Optional[float]) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def _crossed_down(previous: Optional[float], current: Optional[float], level: float) -> bool:
    if not (_finite(previous) and _finite(current)):
        return False
    return current <= level < previous  # type: ignore[operator]


def _crossed_up(previous: Optional[float], current: Optional[float], level: float) -> bool:
    if not (_finite(previous) and _finite(current)):
        return False
    return current >= level > previous  # type: ignore[operator]


def _milestone(point: ProjectedPoint, label: str) -> Milestone:
    return Milestone(
        measured_at=point.measured_at,
        weight=point.weight,
        body_fat_percent=point.body_fat_percent,
        label=label,
    )


def find_milestones(
    points: Sequence[ProjectedPoint],
    goal_type: Union[WeightGoalType, str, None],
    target_weight: Optional[float] = None,
    target_unit: Union[WeightUnit, str] = WeightUnit.POUND,
    projection_unit: Union[WeightUnit, str] = WeightUnit.POUND,
    thresholds: Sequence[float] = DEFAULT_BODY_FAT_THRESHOLDS,
) -> list[Milestone]:
    """
    Find the first crossing of each body fat checkpoint and the target weight.

    Points are compared pairwise. A body fat checkpoint fires when the
    current point is at or below it and the previous point was above it;
    this only applies to weight loss. The target weight fires on the first
    downward crossing for loss and upward crossing for gain. Each milestone
    fires at most once.

    Args:
        points: Projected series in chronological order
        goal_type: "lose", "gain" or "maintain"
        target_weight: User's target weight, in ``target_unit``
        target_unit: Unit of ``target_weight``
        projection_unit: Unit the projected weights are in
        thresholds: Body fat % checkpoints for loss goals

    Returns:
        Milestones sorted by date (empty for maintain)
    """
    goal = parse_goal_type(goal_type)
    if goal is None or goal == WeightGoalType.MAINTAIN:
        return []

    target: Optional[float] = None
    if _finite(target_weight):
        target = convert_weight(target_weight, target_unit, projection_unit)  # type: ignore[arg-type]

    bf_thresholds = list(thresholds) if goal == WeightGoalType.LOSE else []
    found: list[Milestone] = []
    seen_labels: set[str] = set()

    for previous, current in zip(points, points[1:]):
        for threshold in bf_thresholds:
            label = body_fat_label(threshold)
            if label in seen_labels:
                continue
            if _crossed_down(previous.body_fat_percent, current.body_fat_percent, threshold):
                found.append(_milestone(current, label))
                seen_labels.add(label)

        if target is None or TARGET_WEIGHT_LABEL in seen_labels:
            continue
        if goal == WeightGoalType.LOSE:
            crossed = _crossed_down(previous.weight, current.weight, target)
        else:
            crossed = _crossed_up(previous.weight, current.weight, target)
        if crossed:
            found.append(_milestone(current, TARGET_WEIGHT_LABEL))
            seen_labels.add(TARGET_WEIGHT_LABEL)

    found.sort(key=lambda m: m.measured_at)
    return found
