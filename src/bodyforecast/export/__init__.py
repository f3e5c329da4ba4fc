"""Output formatting for forecast results."""

from bodyforecast.export.formatters import (
    JSONFormatter,
    TableFormatter,
    forecast_to_dict,
    format_result,
)

__all__ = ["JSONFormatter", "TableFormatter", "forecast_to_dict", "format_result"]
