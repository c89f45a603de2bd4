# -*- coding: utf-8 -*-
"""
Psychrometer CLI
================

Evaluate a dry-bulb / wet-bulb reading from the command line.

    psychrometer calc 25 18
    psychrometer calc 25 18 --altitude 1600 --json
    psychrometer calc -- -5 -7
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from psychrometer.calculations.psychrometrics import (
    PsychrometricCalculator,
    PsychrometricResult,
    ResultStatus,
)
from psychrometer.config.schemas import (
    EngineConfig,
    load_config_from_env,
    load_config_from_file,
)
from psychrometer.exceptions import ConfigurationError
from psychrometer.readings import DISCONNECTED_SENTINEL_C, SensorSample, format_report

app = typer.Typer(
    name="psychrometer",
    help="Moist-air properties from dry-bulb and wet-bulb temperatures",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()

logger = logging.getLogger(__name__)


@app.callback()
def _root(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
):
    """
    Psychrometer - moist-air properties from two thermometers
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show psychrometer version"""
    from psychrometer import __version__

    console.print(f"[bold green]psychrometer v{__version__}[/bold green]")


def _resolve_config(
    config_file: Optional[Path],
    pressure: Optional[float],
    altitude: Optional[float],
) -> EngineConfig:
    if config_file is not None:
        config = load_config_from_file(config_file)
    else:
        config = load_config_from_env()

    if pressure is not None and altitude is not None:
        raise ConfigurationError(
            "--pressure and --altitude are mutually exclusive",
            source="cli",
        )
    if pressure is not None:
        return config.with_overrides(atmospheric_pressure_pa=pressure)
    if altitude is not None:
        return EngineConfig.at_altitude(
            altitude, **config.model_dump(exclude={"atmospheric_pressure_pa"})
        )
    return config


def _render(result: PsychrometricResult) -> None:
    if result.ok:
        table = Table(title="Psychrometric State")
        table.add_column("Quantity", style="cyan")
        table.add_column("Value", justify="right")
        for label, value in format_report(result.state).items():
            table.add_row(label, value)
        console.print(table)
        if not 0.0 <= result.state.relative_humidity <= 1.0:
            console.print(
                "[yellow]Relative humidity outside [0, 1]: check the sensors[/yellow]"
            )
    else:
        console.print(f"[red]{result.status.value}[/red] [{result.error_code}] {result.error_message}")
    console.print(f"[dim]provenance {result.provenance_hash[:16]}[/dim]")


@app.command()
def calc(
    dry_bulb: float = typer.Argument(..., help="Dry-bulb temperature (degC)"),
    wet_bulb: float = typer.Argument(..., help="Wet-bulb temperature (degC)"),
    pressure: Optional[float] = typer.Option(
        None, "--pressure", "-p", help="Atmospheric pressure (Pa)"
    ),
    altitude: Optional[float] = typer.Option(
        None, "--altitude", "-a", help="Site altitude (m), derives the pressure"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML engine configuration"
    ),
    output_json: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Derive humidity, dew point, volume and enthalpy from one reading"""
    sample = SensorSample(dry_bulb_c=dry_bulb, wet_bulb_c=wet_bulb)
    if not sample.usable:
        for label in sample.disconnected_sensors():
            console.print(
                f"[red]Error:[/red] {label} sensor reading failed "
                f"(disconnected sentinel {DISCONNECTED_SENTINEL_C})"
            )
        raise typer.Exit(2)

    try:
        config = _resolve_config(config_file, pressure, altitude)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)

    result = PsychrometricCalculator(config).evaluate(dry_bulb, wet_bulb)

    if output_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        _render(result)

    if result.status is not ResultStatus.OK:
        raise typer.Exit(1)


def main():
    app()


if __name__ == "__main__":
    main()
