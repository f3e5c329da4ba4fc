"""Application settings and configuration management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from bodyforecast.tracking.holt import DEFAULT_ALPHA, DEFAULT_BETA
from bodyforecast.tracking.milestones import DEFAULT_BODY_FAT_THRESHOLDS
from bodyforecast.units import WeightUnit, normalize_unit

logger = logging.getLogger(__name__)

DEFAULT_PREDICTION_DAYS = 90
OUTPUT_FORMATS = ("table", "json")


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".bodyforecast"


def _default_config_path() -> Path:
    return _default_config_dir() / "config.yaml"


@dataclass
class ForecastConfig:
    """Parameters passed explicitly into each forecasting call."""

    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    prediction_days: int = DEFAULT_PREDICTION_DAYS
    body_fat_thresholds: tuple[float, ...] = DEFAULT_BODY_FAT_THRESHOLDS


@dataclass
class DisplayConfig:
    """Output preferences."""

    weight_unit: WeightUnit = WeightUnit.POUND
    output_format: str = "table"  # "table" or "json"


def _unit_weight(value: Any, name: str, default: float) -> float:
    """Parse a smoothing weight in [0, 1], falling back to ``default``."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s in config: %r", name, value)
        return default
    if not 0 <= parsed <= 1:
        logger.warning("Ignoring out-of-range %s in config: %r", name, value)
        return default
    return parsed


def _thresholds(value: Any) -> tuple[float, ...]:
    """Parse body-fat thresholds, sorted descending, or keep the defaults."""
    if not isinstance(value, (list, tuple)):
        logger.warning("Ignoring invalid body_fat_thresholds in config: %r", value)
        return DEFAULT_BODY_FAT_THRESHOLDS
    try:
        parsed = [float(t) for t in value]
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid body_fat_thresholds in config: %r", value)
        return DEFAULT_BODY_FAT_THRESHOLDS
    return tuple(sorted(parsed, reverse=True))


@dataclass
class Settings:
    """Main application settings."""

    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.bodyforecast/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = _default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse forecast config
        if "forecast" in data:
            fc_data = data["forecast"] or {}
            if "alpha" in fc_data:
                settings.forecast.alpha = _unit_weight(fc_data["alpha"], "alpha", DEFAULT_ALPHA)
            if "beta" in fc_data:
                settings.forecast.beta = _unit_weight(fc_data["beta"], "beta", DEFAULT_BETA)
            if "prediction_days" in fc_data:
                try:
                    days = int(fc_data["prediction_days"])
                except (TypeError, ValueError):
                    days = 0
                if days > 0:
                    settings.forecast.prediction_days = days
                else:
                    logger.warning(
                        "Ignoring invalid prediction_days in config: %r",
                        fc_data["prediction_days"],
                    )
            if "body_fat_thresholds" in fc_data:
                settings.forecast.body_fat_thresholds = _thresholds(
                    fc_data["body_fat_thresholds"]
                )

        # Parse display config
        if "display" in data:
            disp_data = data["display"] or {}
            if "weight_unit" in disp_data:
                unit = normalize_unit(disp_data["weight_unit"])
                if unit is None:
                    logger.warning(
                        "Ignoring unknown weight_unit in config: %r", disp_data["weight_unit"]
                    )
                else:
                    settings.display.weight_unit = unit
            if "output_format" in disp_data:
                fmt = disp_data["output_format"]
                if fmt in OUTPUT_FORMATS:
                    settings.display.output_format = fmt
                else:
                    logger.warning("Ignoring unknown output_format in config: %r", fmt)

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.bodyforecast/config.yaml
        """
        if config_path is None:
            config_path = _default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "forecast": {
                "alpha": self.forecast.alpha,
                "beta": self.forecast.beta,
                "prediction_days": self.forecast.prediction_days,
                "body_fat_thresholds": list(self.forecast.body_fat_thresholds),
            },
            "display": {
                "weight_unit": self.display.weight_unit.value,
                "output_format": self.display.output_format,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
