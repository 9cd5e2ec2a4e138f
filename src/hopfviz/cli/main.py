# src/hopfviz/cli/main.py
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from hopfviz.cli.common import resolve_app_config, resolve_output_path
from hopfviz.core.exceptions import HopfVizError
from hopfviz.core.logging import logger, set_console_level, setup_json_logfile, setup_logfile
from hopfviz.core.state import AppState
from hopfviz.core.utils import dump_config

console = Console()

app = typer.Typer(
    help="hopfviz: interactive Hopf fibration viewer",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
config_app = typer.Typer(help="Inspect the resolved configuration.")
app.add_typer(config_app, name="config")

ConfigOption = typer.Option(None, "--config", "-c", help="Configuration file path (default: auto-detect)")
OverrideOption = typer.Option(None, "--set", "-s", help="Override a config key, e.g. fibers.fiber_resolution=256")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    json_log: Optional[Path] = typer.Option(None, "--json-log", help="Also write JSON-serialized logs to this file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    hopfviz: fibers of the Hopf map S³ -> S², projected to R³.

    Use 'hopfviz COMMAND --help' to see options for specific commands.
    """
    if version:
        from hopfviz.core.version import __version__
        typer.echo(f"hopfviz version {__version__}")
        raise typer.Exit()

    level = "DEBUG" if verbose else "INFO"
    set_console_level(level)
    if log_file:
        setup_logfile(str(log_file), level=level)
    if json_log:
        setup_json_logfile(str(json_log), level=level)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(exc: Exception):
    console.print(f"[bold red]✗ {exc}[/bold red]")
    raise typer.Exit(1)


@app.command("show")
def show(
    config: Optional[Path] = ConfigOption,
    overrides: Optional[List[str]] = OverrideOption,
):
    """Open the interactive viewer."""
    try:
        cfg = resolve_app_config(config, overrides)
        from hopfviz.viz.viewer import HopfViewer
        HopfViewer(cfg).run()
    except HopfVizError as e:
        _fail(e)


@app.command("snapshot")
def snapshot(
    output: Optional[Path] = typer.Argument(None, help="PNG file to write (default: ./outputs/snapshot/<run>/snapshot.png)"),
    config: Optional[Path] = ConfigOption,
    overrides: Optional[List[str]] = OverrideOption,
    frames: int = typer.Option(0, "--frames", "-n", min=0, help="Animation ticks to run before saving"),
    dpi: int = typer.Option(120, "--dpi", min=10, help="Image resolution"),
):
    """Render the scene offscreen and save it as an image."""
    try:
        cfg = resolve_app_config(config, overrides)
        import matplotlib
        matplotlib.use("Agg")
        from hopfviz.viz.viewer import render_snapshot

        path = render_snapshot(cfg, resolve_output_path(output, "snapshot"), frames=frames, dpi=dpi)
    except HopfVizError as e:
        _fail(e)
    console.print(f"[bold green]✓ Snapshot saved[/bold green] {path}")


@app.command("summary")
def summary(
    config: Optional[Path] = ConfigOption,
    overrides: Optional[List[str]] = OverrideOption,
    ticks: int = typer.Option(0, "--ticks", "-t", min=0, help="Animation ticks to run first"),
):
    """Build the scene without drawing and tabulate its circles and fibers."""
    try:
        cfg = resolve_app_config(config, overrides)
        state = AppState(cfg)
        for _ in range(ticks):
            state.tick()
    except HopfVizError as e:
        _fail(e)

    table = Table(title="Base-space circles")
    table.add_column("#", style="cyan")
    table.add_column("Offset")
    table.add_column("Circumference")
    table.add_column("Points")
    table.add_column("Vertices/fiber")
    table.add_column("Arc length (min..max)", style="green")
    for index, circle in enumerate(state.circles):
        lengths = [curve.arc_length for curve in circle.curves]
        table.add_row(
            str(index),
            f"{circle.distance_to_center:.4f}",
            f"{circle.circumference:.4f}",
            str(circle.point_count),
            str(circle.curves[0].geometry.vertex_count if circle.curves else 0),
            f"{min(lengths):.3f}..{max(lengths):.3f}" if lengths else "-",
        )
    console.print(table)
    console.print(
        f"resolution={state.settings.fiber_resolution} ball={state.settings.compress_to_ball} "
        f"fibers={len(state.scene)} base_clouds={len(state.base_scene)}",
        highlight=False,
    )
    logger.debug(f"Summary built after {ticks} tick(s)")


@config_app.command("show")
def show_config(
    config: Optional[Path] = ConfigOption,
    overrides: Optional[List[str]] = OverrideOption,
):
    """Print the resolved configuration as YAML."""
    try:
        cfg = resolve_app_config(config, overrides)
    except HopfVizError as e:
        _fail(e)
    console.print(dump_config(cfg), markup=False, highlight=False)


if __name__ == "__main__":
    app()
