"""Body composition math: age, BMR, TDEE and intake targets."""

from __future__ import annotations

from bodyforecast.profiles.body_calc import (
    ActivityLevel,
    EnergyTargets,
    Sex,
    WeightGoalType,
    calculate_age,
    calculate_bmr,
    calculate_energy_targets,
    calculate_fat_mass,
    calculate_lean_mass,
    calculate_target_intake,
    calculate_tdee,
)

__all__ = [
    "ActivityLevel",
    "EnergyTargets",
    "Sex",
    "WeightGoalType",
    "calculate_age",
    "calculate_bmr",
    "calculate_energy_targets",
    "calculate_fat_mass",
    "calculate_lean_mass",
    "calculate_target_intake",
    "calculate_tdee",
]
