"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from bodyforecast.config import ForecastConfig, Settings, get_settings
from bodyforecast.config.settings import _default_config_path
from bodyforecast.export.formatters import format_result
from bodyforecast.forecast import build_forecast
from bodyforecast.profiles.body_calc import (
    ACTIVITY_MULTIPLIERS,
    calculate_energy_targets,
)
from bodyforecast.tracking.models import MeasurementRecord, UserProfile
from bodyforecast.units import WeightUnit, normalize_unit

app = typer.Typer(
    help="Body composition tracking with weight and body fat forecasts",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show and initialise forecast settings")
app.add_typer(config_app, name="config")

ACTIVITY_CHOICES = ", ".join(level.value for level in ACTIVITY_MULTIPLIERS)


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict) -> None:
    """Output JSON response to stdout."""
    print(json.dumps(response, indent=2))


def parse_unit(value: str) -> WeightUnit:
    unit = normalize_unit(value)
    if unit is None:
        raise typer.BadParameter(f"unknown weight unit '{value}' (use lbs or kg)")
    return unit


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"invalid date '{value}' (use YYYY-MM-DD)") from e


def parse_entry(entry: str, unit: WeightUnit) -> MeasurementRecord:
    """Parse 'YYYY-MM-DD:WEIGHT[:BODYFAT]' into a record.

    Args:
        entry: Entry string, e.g. "2025-01-01:185.2:24.5"
        unit: Unit of the weight

    Returns:
        MeasurementRecord
    """
    parts = entry.split(":")
    if len(parts) not in (2, 3):
        raise typer.BadParameter(f"entry '{entry}' must be DATE:WEIGHT[:BODYFAT]")

    measured_at = parse_date(parts[0])
    try:
        weight = float(parts[1])
        body_fat = float(parts[2]) if len(parts) == 3 else None
    except ValueError as e:
        raise typer.BadParameter(f"entry '{entry}' has a non-numeric value") from e

    return MeasurementRecord(
        measured_at=measured_at,
        weight=weight,
        body_fat_percent=body_fat,
        weight_unit=unit,
    )


def build_profile(
    sex: Optional[str],
    dob: Optional[str],
    height: Optional[float],
    activity: Optional[str],
    goal: str,
    target_weight: Optional[float],
    rate: Optional[float],
    unit: WeightUnit,
) -> UserProfile:
    try:
        return UserProfile(
            sex=sex,  # type: ignore[arg-type]
            date_of_birth=parse_date(dob) if dob else None,
            height_inches=height,
            activity_level=activity,  # type: ignore[arg-type]
            weight_goal_type=goal,  # type: ignore[arg-type]
            target_weight=target_weight,
            target_rate=rate,
            weight_unit=unit,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# ============================================================================
# Commands
# ============================================================================


@app.command("energy")
def energy(
    weight: float = typer.Argument(..., help="Current weight"),
    sex: str = typer.Option(..., "--sex", help="male or female"),
    dob: str = typer.Option(..., "--dob", help="Date of birth (YYYY-MM-DD)"),
    height: float = typer.Option(..., "--height", help="Height in inches"),
    activity: str = typer.Option(
        "sedentary", "--activity", "-a", help=f"Activity level ({ACTIVITY_CHOICES})"
    ),
    goal: str = typer.Option("maintain", "--goal", "-g", help="maintain, lose or gain"),
    rate: Optional[float] = typer.Option(None, "--rate", help="Target change per week"),
    unit_str: str = typer.Option("lbs", "--unit", "-u", help="Weight unit (lbs or kg)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show BMR, TDEE and the daily intake for a weight goal."""
    unit = parse_unit(unit_str)
    profile = build_profile(sex, dob, height, activity, goal, None, rate, unit)
    record = MeasurementRecord(measured_at=date.today(), weight=weight, weight_unit=unit)
    targets = calculate_energy_targets(record, profile)

    if not targets.is_valid:
        if json_output:
            output_json({"success": False, "errors": ["Could not calculate energy targets"]})
        else:
            console.print("[red]Could not calculate energy targets. Check the inputs.[/red]")
        raise typer.Exit(1)

    if json_output:
        output_json({
            "success": True,
            "command": "energy",
            "data": {
                "age": targets.age,
                "bmr": round(targets.bmr),
                "tdee": round(targets.tdee),
                "target_intake": round(targets.target_intake),
            },
        })
    else:
        table = Table(title="Energy Expenditure")
        table.add_column("Metric", style="cyan")
        table.add_column("kcal/day", justify="right")
        table.add_row("BMR", f"{targets.bmr:.0f}")
        table.add_row("TDEE", f"{targets.tdee:.0f}")
        table.add_row(f"Intake ({profile.weight_goal_type.value})", f"{targets.target_intake:.0f}")
        console.print(table)


@app.command("forecast")
def forecast(
    entries: list[str] = typer.Option(
        ..., "--entry", "-e", help="Measurement as DATE:WEIGHT[:BODYFAT], repeatable"
    ),
    sex: Optional[str] = typer.Option(None, "--sex", help="male or female"),
    dob: Optional[str] = typer.Option(None, "--dob", help="Date of birth (YYYY-MM-DD)"),
    height: Optional[float] = typer.Option(None, "--height", help="Height in inches"),
    activity: Optional[str] = typer.Option(
        None, "--activity", "-a", help=f"Activity level ({ACTIVITY_CHOICES})"
    ),
    goal: str = typer.Option("maintain", "--goal", "-g", help="maintain, lose or gain"),
    target_weight: Optional[float] = typer.Option(None, "--target", help="Target weight"),
    rate: Optional[float] = typer.Option(None, "--rate", help="Target change per week"),
    unit_str: str = typer.Option("lbs", "--unit", "-u", help="Unit of entries and targets"),
    display_str: Optional[str] = typer.Option(
        None, "--display-unit", help="Unit for trend and Holt forecast (default: config)"
    ),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Projection horizon"),
    alpha: Optional[float] = typer.Option(None, "--alpha", help="Holt level weight"),
    beta: Optional[float] = typer.Option(None, "--beta", help="Holt trend weight"),
    json_output: bool = typer.Option(
        False, "--json", help="Output as JSON (default: config output_format)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Project weight and body fat from logged measurements."""
    configure_logging(verbose)
    settings = get_settings()

    unit = parse_unit(unit_str)
    display_unit = parse_unit(display_str) if display_str else settings.display.weight_unit
    records = sorted(
        (parse_entry(e, unit) for e in entries), key=lambda r: r.measured_at
    )
    profile = build_profile(sex, dob, height, activity, goal, target_weight, rate, unit)

    base = settings.forecast
    config = ForecastConfig(
        alpha=alpha if alpha is not None else base.alpha,
        beta=beta if beta is not None else base.beta,
        prediction_days=days if days is not None else base.prediction_days,
        body_fat_thresholds=base.body_fat_thresholds,
    )

    result = build_forecast(records, profile, config, display_unit)

    output_format = "json" if json_output else settings.display.output_format
    output = format_result(result, output_format, console)
    if output is not None:
        print(output)


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--path", help="Config file"),
) -> None:
    """Show the active forecast settings."""
    settings = Settings.load(config_path) if config_path else get_settings()

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("alpha", f"{settings.forecast.alpha:g}")
    table.add_row("beta", f"{settings.forecast.beta:g}")
    table.add_row("prediction_days", str(settings.forecast.prediction_days))
    table.add_row(
        "body_fat_thresholds",
        ", ".join(f"{t:g}" for t in settings.forecast.body_fat_thresholds),
    )
    table.add_row("weight_unit", settings.display.weight_unit.value)
    console.print(table)


@config_app.command("init")
def config_init(
    config_path: Optional[Path] = typer.Option(None, "--path", help="Config file"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing file"),
) -> None:
    """Write a config file with default settings."""
    path = config_path or _default_config_path()
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)

    Settings().save(path)
    console.print(f"[green]Wrote default settings to[/green] {path}")


if __name__ == "__main__":
    app()
