"""CLI commands that produce edits for a document."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer

from hunkfmt.config import ConfigError, load_config
from hunkfmt.formatter import Document, create_formatter
from hunkfmt.patch import PatchError, text_edits_from_patch
from hunkfmt.cli.utils import (
    CliNotifier,
    build_line_range,
    emit_edits,
    parse_formatter,
    read_document,
)


def format_command(
    file: Path = typer.Argument(..., help="Python file to format", exists=True, dir_okay=False),
    formatter: Optional[str] = typer.Option(
        None,
        "--formatter",
        "-f",
        help="Formatter to run (autopep8, yapf, black). Defaults to the configured one",
    ),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Apply the edits to the file instead of printing them",
    ),
    line_start: Optional[int] = typer.Option(
        None,
        "--line-start",
        help="First line (1-based) of the selection to format",
    ),
    line_end: Optional[int] = typer.Option(
        None,
        "--line-end",
        help="Last line (1-based) of the selection to format",
    ),
) -> None:
    """Run a formatter on FILE and print the resulting edits as JSON."""
    formatter_id = parse_formatter(formatter)
    text = read_document(file)
    selection = build_line_range(line_start, line_end, text)

    try:
        config = load_config()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    notifier = CliNotifier()
    document = Document(path=file, text=text)
    tool = create_formatter(config, formatter_id, notifier=notifier)

    edits = asyncio.run(tool.format_document(document, range=selection))
    if notifier.failed:
        raise typer.Exit(1)

    emit_edits(file, text, edits, write)


def edits_command(
    file: Path = typer.Argument(..., help="Original document", exists=True, dir_okay=False),
    patch: str = typer.Argument(..., help="Patch file produced for FILE, or '-' for stdin"),
    write: bool = typer.Option(
        False,
        "--write",
        "-w",
        help="Apply the edits to the file instead of printing them",
    ),
) -> None:
    """Convert an existing formatter patch for FILE into edits."""
    text = read_document(file)
    if patch == "-":
        patch_text = sys.stdin.read()
    else:
        patch_text = read_document(Path(patch))

    try:
        edits = text_edits_from_patch(text, patch_text)
    except PatchError as e:
        typer.echo(f"Error: Unable to parse formatter output: {e}", err=True)
        raise typer.Exit(1)

    emit_edits(file, text, edits, write)
