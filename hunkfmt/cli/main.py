"""Top-level CLI callback for hunkfmt."""

import logging
from pathlib import Path
from typing import Optional

import typer

from hunkfmt import __version__
from hunkfmt.logger import configure_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"hunkfmt {__version__}")
        raise typer.Exit()


def main_command(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log pipeline and process details",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Write logs to this file instead of stderr",
    ),
) -> None:
    """hunkfmt: apply external formatter patches as precise editor edits."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING, log_file)
