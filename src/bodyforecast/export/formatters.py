"""Output formatters for forecast results."""

from __future__ import annotations

import json
import math
from datetime import date
from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bodyforecast.forecast import ForecastResult
from bodyforecast.tracking.models import ProjectedPoint


def _round(value: Optional[float], digits: int = 1) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    return round(value, digits)


def _iso(value: Any) -> Any:
    return value.isoformat() if isinstance(value, date) else value


def _points_to_list(points: list[ProjectedPoint]) -> list[dict]:
    return [
        {
            "date": _iso(p.measured_at),
            "weight": _round(p.weight, 2),
            "body_fat_percent": _round(p.body_fat_percent, 2),
        }
        for p in points
    ]


def forecast_to_dict(result: ForecastResult) -> dict:
    """Convert a ForecastResult to a JSON-serialisable dict."""
    return {
        "display_unit": result.display_unit.value,
        "energy": {
            "age": _round(result.targets.age, 0),
            "bmr": _round(result.targets.bmr, 0),
            "tdee": _round(result.targets.tdee, 0),
            "target_intake": _round(result.targets.target_intake, 0),
        },
        "trend": [
            {"date": _iso(t.measured_at), "weight": _round(t.weight, 2)}
            for t in result.trend
        ],
        "projection": {
            "unit": result.projection_unit.value if result.projection_unit else None,
            "points": _points_to_list(result.projection),
        },
        "smoothing": _points_to_list(result.smoothing),
        "milestones": [
            {
                "label": m.label,
                "date": _iso(m.measured_at),
                "weight": _round(m.weight, 2),
                "body_fat_percent": _round(m.body_fat_percent, 2),
            }
            for m in result.milestones
        ],
    }


class JSONFormatter:
    """Format results as JSON."""

    def format(self, result: ForecastResult) -> str:
        return json.dumps(
            {"success": True, "command": "forecast", "data": forecast_to_dict(result)},
            indent=2,
        )


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format(self, result: ForecastResult, sample_every: int = 7) -> None:
        """Print formatted tables to console.

        Args:
            result: Forecast to format
            sample_every: Show every Nth projected day in the projection table
        """
        unit = result.display_unit.value
        targets = result.targets

        header_lines = []
        if targets.is_valid:
            header_lines.append(f"BMR: {targets.bmr:.0f} kcal/day")
            header_lines.append(f"TDEE: {targets.tdee:.0f} kcal/day")
            header_lines.append(f"Target intake: {targets.target_intake:.0f} kcal/day")
        else:
            header_lines.append("[yellow]Profile incomplete: no energy targets[/yellow]")

        if len(result.trend) == 2:
            start, end = result.trend
            header_lines.append(
                f"Trend: {start.weight:.1f} → {end.weight:.1f} {unit}"
            )

        self.console.print(Panel("\n".join(header_lines), title="Body Forecast"))

        if result.projection:
            proj_unit = result.projection_unit.value if result.projection_unit else unit
            table = Table(title="Energy-Balance Projection")
            table.add_column("Date", style="cyan")
            table.add_column(f"Weight ({proj_unit})", justify="right")
            table.add_column("Body Fat", justify="right", style="magenta")

            last_index = len(result.projection) - 1
            for i, point in enumerate(result.projection):
                if i % max(sample_every, 1) and i != last_index:
                    continue
                bf = (
                    f"{point.body_fat_percent:.1f}%"
                    if point.body_fat_percent is not None
                    else "-"
                )
                table.add_row(point.measured_at.isoformat(), f"{point.weight:.1f}", bf)
            self.console.print(table)

        if result.smoothing:
            final = result.smoothing[-1]
            days = len(result.smoothing) - 1
            self.console.print(
                f"[blue]Holt forecast:[/blue] {final.weight:.1f} {unit} "
                f"on {final.measured_at.isoformat()} ({days} days)"
            )

        if result.milestones:
            table = Table(title="Predicted Milestones")
            table.add_column("Milestone", style="green")
            table.add_column("Date", style="cyan")
            table.add_column("Weight", justify="right")
            table.add_column("Body Fat", justify="right")
            for m in result.milestones:
                table.add_row(
                    m.label,
                    m.measured_at.isoformat(),
                    f"{m.weight:.1f}",
                    f"{m.body_fat_percent:.1f}%" if m.body_fat_percent is not None else "-",
                )
            self.console.print(table)


def format_result(
    result: ForecastResult,
    output_format: str = "table",
    console: Optional[Console] = None,
) -> Optional[str]:
    """Format a forecast in the specified format.

    Args:
        result: Forecast to format
        output_format: One of 'table', 'json'
        console: Rich console (for table format)

    Returns:
        Formatted string for json, None for table (prints directly)
    """
    if output_format == "table":
        TableFormatter(console).format(result)
        return None
    elif output_format == "json":
        return JSONFormatter().format(result)
    else:
        raise ValueError(f"Unknown output format: {output_format}")
