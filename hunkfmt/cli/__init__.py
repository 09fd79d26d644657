"""CLI entry point for hunkfmt.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from hunkfmt.cli.config import config_app
from hunkfmt.cli.format import edits_command, format_command
from hunkfmt.cli.main import main_command

# Main application
app = typer.Typer(
    name="hunkfmt",
    help="hunkfmt: apply external formatter patches as precise editor edits",
    add_completion=False,
    no_args_is_help=True,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("format")(format_command)
app.command("edits")(edits_command)

app.callback()(main_command)


__all__ = [
    "app",
    "config_app",
    "format_command",
    "edits_command",
    "main_command",
]
