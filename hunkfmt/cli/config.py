"""CLI commands for configuration management."""

from typing import List

import typer

from hunkfmt import config as hunkfmt_config
from hunkfmt.config import ConfigError, FormatterSettings
from hunkfmt.cli.utils import parse_formatter

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage hunkfmt configuration in ~/.hunkfmt/",
    add_completion=False,
)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    try:
        config = hunkfmt_config.load_config()
    except ConfigError as e:
        typer.echo(f"Error reading configuration: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Current hunkfmt configuration ({hunkfmt_config.get_config_file_path()}):")
    typer.echo()
    typer.echo(f"  Formatter: {config.formatter.value}")
    typer.echo(f"  Python: {config.python_path}")
    if config.workspace_root:
        typer.echo(f"  Workspace root: {config.workspace_root}")
    typer.echo()
    typer.echo("  Tools:")
    for name, settings in config.tools.items():
        args = " ".join(settings.args)
        typer.echo(f"    - {name}: {settings.path} {args}".rstrip())


@config_app.command("set-formatter")
def config_set_formatter(
    formatter: str = typer.Argument(..., help="Formatter name (autopep8, yapf, black)"),
) -> None:
    """Set the default formatter."""
    formatter_id = parse_formatter(formatter)
    try:
        config = hunkfmt_config.load_config()
        config.formatter = formatter_id
        hunkfmt_config.save_config(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ Default formatter set to {formatter_id.value}")


@config_app.command("set-path")
def config_set_path(
    formatter: str = typer.Argument(..., help="Formatter name (autopep8, yapf, black)"),
    path: str = typer.Argument(..., help="Executable path, or a module name to run with python -m"),
) -> None:
    """Set the executable used for a formatter."""
    formatter_id = parse_formatter(formatter)
    try:
        config = hunkfmt_config.load_config()
        current = hunkfmt_config.get_formatter_settings(config, formatter_id)
        config.tools[formatter_id.value] = FormatterSettings(path=path, args=current.args)
        hunkfmt_config.save_config(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {formatter_id.value} path set to {path}")


@config_app.command("set-args")
def config_set_args(
    formatter: str = typer.Argument(..., help="Formatter name (autopep8, yapf, black)"),
    args: List[str] = typer.Argument(None, help="Extra arguments passed before the file"),
) -> None:
    """Set extra arguments for a formatter (none clears them)."""
    formatter_id = parse_formatter(formatter)
    try:
        config = hunkfmt_config.load_config()
        current = hunkfmt_config.get_formatter_settings(config, formatter_id)
        config.tools[formatter_id.value] = FormatterSettings(path=current.path, args=list(args or []))
        hunkfmt_config.save_config(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {formatter_id.value} args set to {' '.join(args or []) or '(none)'}")
