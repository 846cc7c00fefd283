"""Command-line interface for the surge wave propagation engine."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="surge",
    help="Shallow water wave propagation on 1D and 2D grids",
    add_completion=False,
)
console = Console()


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def run(
    config: Annotated[Optional[Path], typer.Option(help="YAML configuration file")] = None,
    nx: Annotated[Optional[int], typer.Option(help="Cells along x")] = None,
    ny: Annotated[Optional[int], typer.Option(help="Cells along y (1 = 1D)")] = None,
    cell_size: Annotated[Optional[float], typer.Option(help="Cell size (m)")] = None,
    setup: Annotated[Optional[str], typer.Option(help="Setup kind, e.g. dam_break_1d")] = None,
    solver: Annotated[Optional[str], typer.Option(help="Riemann solver: fwave/roe")] = None,
    max_steps: Annotated[Optional[int], typer.Option(help="Maximum number of time steps")] = None,
    max_duration: Annotated[Optional[float], typer.Option(help="Simulated end time (s)")] = None,
    output: Annotated[Optional[Path], typer.Option(help="Output directory")] = None,
    resume: Annotated[Optional[Path], typer.Option(help="Checkpoint to resume from")] = None,
    regrid: Annotated[bool, typer.Option(help="Resample the checkpoint onto the configured grid")] = False,
    frame_format: Annotated[Optional[str], typer.Option(help="Frame format: csv/netcdf")] = None,
    strict: Annotated[bool, typer.Option(help="Fail instead of stopping when no finite time step exists")] = False,
    summary: Annotated[Optional[Path], typer.Option(help="Write the run summary as JSON")] = None,
    debug: Annotated[bool, typer.Option(help="Verbose logging")] = False,
):
    """Run a simulation."""
    from pydantic import ValidationError

    from surge.core.config import Settings, get_settings
    from surge.core.exceptions import SurgeError
    from surge.simulation.runner import SimulationRunner

    _configure_logging(debug)

    overrides = {
        "grid": {"nx": nx, "ny": ny, "cell_size": cell_size},
        "setup": {"kind": setup},
        "solver": {"kind": solver},
        "simulation": {"max_steps": max_steps, "max_duration": max_duration, "strict": strict or None},
        "output": {"directory": output, "frame_format": frame_format},
    }

    try:
        settings = Settings.from_yaml(config) if config else get_settings()
        data = settings.model_dump()
        for section, values in overrides.items():
            data[section].update({k: v for k, v in values.items() if v is not None})
        settings = Settings(**data)

        result = SimulationRunner(settings=settings).run(resume=resume, regrid=regrid)
    except ValidationError as exc:
        console.print(f"[red]Invalid configuration:[/red]\n{exc}")
        raise typer.Exit(1)
    except SurgeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    table = Table(title="Run summary")
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Setup", result.setup or "unknown")
    table.add_row("Solver", result.solver)
    table.add_row("Grid", f"{result.grid_shape[0]} x {result.grid_shape[1]}")
    table.add_row("Time steps", str(result.n_steps))
    table.add_row("Simulation time", f"{result.simulation_time:.4f} s")
    table.add_row("Wall time", f"{result.wall_time_seconds:.2f} s")
    table.add_row("Frames", str(len(result.frames)))
    table.add_row("Stopped by", result.termination_reason)
    if result.checkpoint:
        table.add_row("Checkpoint", result.checkpoint)
    console.print(table)

    if result.termination_reason == "no_fluid":
        console.print("[yellow]Stopped early:[/yellow] the grid holds no water")

    if summary:
        result.save(summary)
        console.print(f"[green]Summary saved to {summary}[/green]")


@app.command()
def riemann(
    h_l: Annotated[float, typer.Argument(help="Height left")],
    h_r: Annotated[float, typer.Argument(help="Height right")],
    hu_l: Annotated[float, typer.Argument(help="Momentum left")],
    hu_r: Annotated[float, typer.Argument(help="Momentum right")],
    b_l: Annotated[float, typer.Option("--bl", help="Bathymetry left")] = 0.0,
    b_r: Annotated[float, typer.Option("--br", help="Bathymetry right")] = 0.0,
    solver: Annotated[str, typer.Option(help="Riemann solver: fwave/roe")] = "fwave",
):
    """Solve a single Riemann problem and print the net updates."""
    from surge.solvers.riemann import SolverKind, net_updates

    try:
        kind = SolverKind(solver)
    except ValueError:
        console.print(f"[red]Unknown solver:[/red] {solver}")
        raise typer.Exit(1)

    (dh_l, dhu_l), (dh_r, dhu_r) = net_updates(kind, h_l, h_r, hu_l, hu_r, b_l, b_r)

    console.print(Panel.fit(
        f"[bold]{kind.value} net updates[/bold]\n"
        f"h: {h_l} | {h_r}   hu: {hu_l} | {hu_r}   b: {b_l} | {b_r}",
    ))
    table = Table()
    table.add_column("Side")
    table.add_column("Δh")
    table.add_column("Δhu")
    table.add_row("left", f"{float(dh_l):.10g}", f"{float(dhu_l):.10g}")
    table.add_row("right", f"{float(dh_r):.10g}", f"{float(dhu_r):.10g}")
    console.print(table)


@app.command()
def version():
    """Show version information."""
    from surge import __version__
    console.print(f"surge v{__version__}")


if __name__ == "__main__":
    app()
