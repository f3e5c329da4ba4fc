"""Configuration management."""

from __future__ import annotations

from bodyforecast.config.settings import (
    DisplayConfig,
    ForecastConfig,
    Settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "DisplayConfig",
    "ForecastConfig",
    "Settings",
    "get_settings",
    "reload_settings",
]
