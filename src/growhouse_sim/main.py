"""CLI interface for growhouse-sim.

This module provides a command-line interface for running greenhouse
simulations from YAML configuration files without writing code.

Usage:
    ghsim run my-greenhouse.yaml
    ghsim run --minutes 2880 --format json -o results/
    ghsim live my-greenhouse.yaml --seconds 10 --speed 100
    ghsim init "My Greenhouse" -o my-config.yaml
    ghsim validate my-config.yaml
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

if TYPE_CHECKING:
    from growhouse_sim.simulation.engine import SimulationEngine, SimulationStats

from growhouse_sim import __version__
from growhouse_sim.core.config import (
    ClockConfig,
    DatasetConfig,
    LayoutConfig,
    SimulationConfig,
    load_config,
    save_config,
)
from growhouse_sim.core.errors import GreenhouseSimError
from growhouse_sim.simulation.factory import create_engine_from_config
from growhouse_sim.simulation.runner import SimulationRunner

app = typer.Typer(
    name="ghsim",
    help="Minute-by-minute greenhouse crop and climate simulation.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

OUTPUT_FORMATS = ("console", "json")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(config_path: Path | None) -> SimulationConfig:
    """Load a config file, or the defaults when no file is given."""
    if config_path is None:
        return SimulationConfig()
    try:
        return load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] Config file not found: {config_path}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Error:[/] Invalid configuration: {e}")
        raise typer.Exit(1) from None


def _with_speed(config: SimulationConfig, speed: float | None) -> SimulationConfig:
    if speed is None:
        return config
    try:
        clock = ClockConfig.model_validate(
            {**config.clock.model_dump(), "speed": speed}
        )
    except Exception as e:
        console.print(f"[red]Error:[/] Invalid speed: {e}")
        raise typer.Exit(1) from None
    return config.model_copy(update={"clock": clock})


def _build_engine(config: SimulationConfig) -> SimulationEngine:
    try:
        return create_engine_from_config(config)
    except GreenhouseSimError as e:
        console.print(f"[red]Error:[/] Failed to create simulation: {e}")
        raise typer.Exit(1) from None


@app.command()
def run(
    config_path: Annotated[
        Path | None,
        typer.Argument(help="Path to YAML configuration file (defaults if omitted)"),
    ] = None,
    minutes: Annotated[
        int | None,
        typer.Option("--minutes", "-m", min=1, help="Override duration in minutes"),
    ] = None,
    speed: Annotated[
        float | None,
        typer.Option("--speed", help="Override speed multiplier"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Output directory for results"),
    ] = None,
    format_: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: console, json"),
    ] = "console",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Run a headless simulation as fast as possible."""
    if format_ not in OUTPUT_FORMATS:
        console.print(f"[red]Error:[/] Unknown format '{format_}'")
        console.print(f"Available: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    config = _with_speed(_load(config_path), speed)
    if minutes is not None:
        config = config.model_copy(update={"duration_minutes": minutes})

    _configure_logging("WARNING" if quiet else config.output.log_level)
    engine = _build_engine(config)

    if not quiet:
        console.print(f"\n[bold]Running:[/] {config.name}")
        console.print(f"  Duration: {config.duration_minutes} minutes")
        console.print(
            f"  Layout: {config.layout.greenhouse_count} greenhouses x "
            f"{config.layout.tables_per_greenhouse} tables\n"
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Simulating...", total=None)
            stats = engine.run(config.duration_minutes)
            progress.update(task, description="[green]Complete!")
    else:
        stats = engine.run(config.duration_minutes)

    _output_results(engine, stats, format_, output_dir, quiet)


@app.command()
def live(
    config_path: Annotated[
        Path | None,
        typer.Argument(help="Path to YAML configuration file (defaults if omitted)"),
    ] = None,
    seconds: Annotated[
        float,
        typer.Option("--seconds", "-s", min=0.0, help="Wall-clock seconds to run"),
    ] = 5.0,
    speed: Annotated[
        float | None,
        typer.Option("--speed", help="Override speed multiplier"),
    ] = None,
) -> None:
    """Run the simulation in real time for a number of seconds."""
    config = _with_speed(_load(config_path), speed)
    _configure_logging(config.output.log_level)
    engine = _build_engine(config)

    status = engine.simulation_status()
    console.print(f"\n[bold]Live:[/] {config.name}")
    console.print(
        f"  Speed: {status.speed:g}x ({status.tick_interval_ms:g}ms per minute)\n"
    )

    with SimulationRunner(engine) as runner:
        time.sleep(seconds)
        status = runner.simulation_status()

    if runner.error is not None:
        console.print(f"[red]Error:[/] Simulation stopped: {runner.error}")
        raise typer.Exit(1)

    console.print(
        f"Stopped at day {status.current_day}, minute {status.current_minute} "
        f"after {engine.stats.steps_completed} ticks"
    )
    console.print(_greenhouse_table(engine))


@app.command()
def init(
    name: Annotated[str, typer.Argument(help="Name for the new simulation")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
) -> None:
    """Generate a starter YAML configuration file."""
    config = SimulationConfig(
        name=name,
        duration_minutes=1440,
        clock=ClockConfig(start_day=100, base_tick_interval_ms=100.0, speed=1.0),
        layout=LayoutConfig(greenhouse_count=4, tables_per_greenhouse=8),
        dataset=DatasetConfig(source="synthetic"),
    )

    # "My Greenhouse" -> "my-greenhouse.yaml"
    if output is None:
        output = Path(name.lower().replace(" ", "-") + ".yaml")

    save_config(config, output)
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file to customize your simulation, then run:")
    console.print(f"  ghsim run {output}")


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
) -> None:
    """Validate a configuration file without running."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] File not found: {config_path}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Invalid:[/] {e}")
        raise typer.Exit(1) from None

    console.print(f"[green]Valid:[/] {config.name}")
    console.print(f"  Duration: {config.duration_minutes} minutes")
    console.print(
        f"  Clock: day {config.clock.start_day}, "
        f"{config.clock.base_tick_interval_ms:g}ms per minute at "
        f"{config.clock.speed:g}x"
    )
    console.print(
        f"  Layout: {config.layout.greenhouse_count} greenhouses x "
        f"{config.layout.tables_per_greenhouse} tables"
    )
    source = config.dataset.file if config.dataset.source == "file" else "synthetic"
    console.print(f"  Climate data: {source}")


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"growhouse-sim {__version__}")


def _greenhouse_table(engine: SimulationEngine) -> Table:
    table = Table(title="Greenhouses")
    table.add_column("Table", style="cyan")
    table.add_column("Temp", justify="right")
    table.add_column("RH", justify="right")
    table.add_column("Plants", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Moisture", justify="right")
    table.add_column("Fertility", justify="right")

    for greenhouse, row in engine.registry.iter_tables():
        table.add_row(
            row.position,
            f"{greenhouse.temperature:.1f}C",
            f"{greenhouse.humidity:.0f}%",
            str(row.plant_count),
            f"{row.plant_size:.1f}cm",
            f"{row.soil_moisture:.1f}",
            f"{row.soil_fertility:.1f}",
        )
    return table


def _output_results(
    engine: SimulationEngine,
    stats: SimulationStats,
    format_: str,
    output_dir: Path | None,
    quiet: bool,
) -> None:
    """Output simulation results in requested format.

    Args:
        engine: The simulation engine after running.
        stats: Statistics from the simulation run.
        format_: Output format (console, json).
        output_dir: Optional directory for file outputs.
        quiet: If True, suppress console output.
    """
    status = engine.simulation_status()

    if format_ == "console" and not quiet:
        console.print("\n[bold]Simulation Complete[/]")
        console.print(f"  Steps completed: {stats.steps_completed}")
        console.print(f"  Simulated time: {stats.simulation_time}")
        console.print(f"  Wall time: {stats.wall_time.total_seconds():.2f}s")
        console.print(f"  Now: day {status.current_day}, minute {status.current_minute}")
        console.print(
            f"  Harvests: {stats.harvests} ({stats.plants_harvested} plants), "
            f"replants: {stats.replants}"
        )
        console.print(_greenhouse_table(engine))

    result = {
        "steps_completed": stats.steps_completed,
        "simulation_time_minutes": stats.steps_completed,
        "wall_time_seconds": stats.wall_time.total_seconds(),
        "harvests": stats.harvests,
        "plants_harvested": stats.plants_harvested,
        "replants": stats.replants,
        "heat_deaths": stats.heat_deaths,
        "over_fertilization_deaths": stats.over_fertilization_deaths,
        "drought_deaths": stats.drought_deaths,
        "status": status.to_dict(),
        "greenhouses": [gh.to_dict() for gh in engine.registry.list_greenhouses()],
    }

    if format_ == "json" and output_dir is None:
        console.print_json(json.dumps(result))

    if output_dir:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        json_path = output_dir / "results.json"
        json_path.write_text(json.dumps(result, indent=2))
        if not quiet:
            console.print(f"\n[dim]Results saved to {json_path}[/]")


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
