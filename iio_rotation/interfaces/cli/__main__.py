"""Entry point for the iio-rotation command.

Without ``--event`` the command claims the accelerometer and runs actions for
every settled orientation change until it is interrupted or the bus fails.
With ``--event`` it runs the action for that orientation once and exits.
Executing ``python -m iio_rotation.interfaces.cli`` is equivalent to the
installed ``iio-rotation`` script.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from iio_rotation import __version__
from iio_rotation.app.config import (
    DEFAULT_CONFIG_PATH,
    Configuration,
    load_config,
    resolve_config_path,
)
from iio_rotation.app.merge import MergeDiagnostic
from iio_rotation.domain.errors import IioRotationError
from iio_rotation.domain.orientation import OrientationCategory, normalize
from iio_rotation.infrastructure.observability import configure_logging, get_logger
from iio_rotation.services.dispatcher import dispatch
from iio_rotation.services.watcher import watch

console = Console()
_logger = get_logger(__name__)

EVENT_METAVAR = "|".join(category.value for category in OrientationCategory)


def _print_config(
    config: Configuration, config_path: Path, diagnostics: list[MergeDiagnostic]
) -> None:
    console.print(f"[bold]Config file:[/bold] {config_path}")
    console.print(f"[bold]Debounce:[/bold] {config.debounce} ms")
    table = Table(title="Orientation actions")
    table.add_column("Orientation", style="bold")
    table.add_column("Command")
    for category in OrientationCategory:
        table.add_row(category.value, config.orientation.command_for(category))
    console.print(table)
    for diagnostic in diagnostics:
        console.print(f"[yellow]{diagnostic}[/yellow]")


@click.command(
    name="iio-rotation",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Custom config file, relative to the home directory.",
)
@click.option(
    "-d",
    "--debounce",
    type=click.IntRange(min=0),
    default=None,
    metavar="TIME",
    help="Debounce time in milliseconds; overrides the config file.",
)
@click.option(
    "-e",
    "--event",
    default=None,
    metavar=EVENT_METAVAR,
    help="Run the action for this orientation once and exit.",
)
@click.option(
    "--print-config",
    is_flag=True,
    default=False,
    help="Print the effective configuration and exit.",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.version_option(__version__, prog_name="iio-rotation")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path,
    debounce: int | None,
    event: str | None,
    print_config: bool,
    verbose: bool,
) -> None:
    """Run commands when the accelerometer orientation changes."""

    configure_logging(logging.DEBUG if verbose else logging.INFO)

    diagnostics: list[MergeDiagnostic] = []
    try:
        config = load_config(
            config_path, debounce_override=debounce, diagnostics=diagnostics
        )
    except IioRotationError as exc:
        raise click.ClickException(str(exc)) from exc

    if print_config:
        _print_config(config, resolve_config_path(config_path), diagnostics)
        return

    if event is not None:
        try:
            dispatch(normalize(event), config)
        except IioRotationError as exc:
            raise click.ClickException(str(exc)) from exc
        return

    _logger.info("Watching orientation with %d ms debounce", config.debounce)
    try:
        asyncio.run(watch(config))
    except IioRotationError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted.[/yellow]")
        ctx.exit(130)


if __name__ == "__main__":
    cli()
