"""Shared utility functions for CLI commands."""

import json
from pathlib import Path
from typing import Optional

import typer

from hunkfmt.config import FormatterId
from hunkfmt.patch import EditorPosition, Range, TextEdit, apply_text_edits


class CliNotifier:
    """Notifier that echoes to the terminal and remembers failures."""

    def __init__(self) -> None:
        self.failed = False

    def __call__(self, message: str, level: str) -> None:
        if level == "warning":
            self.failed = True
            typer.echo(f"Error: {message}", err=True)
        else:
            typer.echo(message, err=True)


def parse_formatter(value: Optional[str]) -> Optional[FormatterId]:
    """Parse a --formatter value, exiting on unknown names."""
    if value is None:
        return None
    try:
        return FormatterId(value.lower())
    except ValueError:
        valid = ", ".join(f.value for f in FormatterId)
        typer.echo(f"Invalid formatter: {value}", err=True)
        typer.echo(f"Valid formatters: {valid}", err=True)
        raise typer.Exit(1)


def build_line_range(
    line_start: Optional[int], line_end: Optional[int], text: str = ""
) -> Optional[Range]:
    """Build a selection range from 1-based inclusive CLI line numbers.

    The range ends after the last character of line_end in ``text``.
    """
    if line_start is None and line_end is None:
        return None
    start = (line_start or 1) - 1
    end = (line_end or line_start or 1) - 1
    if start < 0 or end < start:
        typer.echo("Invalid line range", err=True)
        raise typer.Exit(1)
    lines = text.splitlines()
    return Range(
        start=EditorPosition(line=start, character=0),
        end=EditorPosition(line=end, character=len(lines[end]) if end < len(lines) else 0),
    )


def read_document(file: Path) -> str:
    try:
        with open(file, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except OSError as e:
        typer.echo(f"Error reading {file}: {e}", err=True)
        raise typer.Exit(1)


def emit_edits(file: Path, text: str, edits: list[TextEdit], write: bool) -> None:
    """Print edits as LSP JSON, or apply them to ``file``."""
    if not write:
        typer.echo(json.dumps([edit.model_dump(by_alias=True) for edit in edits], indent=2))
        return

    if not edits:
        typer.echo(f"{file}: already formatted")
        return

    new_text = apply_text_edits(text, edits)
    with open(file, "w", encoding="utf-8", newline="") as f:
        f.write(new_text)
    typer.echo(f"{file}: applied {len(edits)} edit(s)")
