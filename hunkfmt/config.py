"""Configuration management for hunkfmt.

Handles the user-level configuration stored in ~/.hunkfmt/config.yaml
(or the file named by $HUNKFMT_CONFIG):
- formatter: Which formatter runs by default
- python_path: Interpreter used to run formatters installed as modules
- workspace_root: Working directory handed to formatter processes
- tools: Per-formatter executable path and extra arguments
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError


class ConfigError(Exception):
    """Raised when there's an error with hunkfmt configuration."""
    pass


class FormatterId(Enum):
    """Supported formatters."""

    AUTOPEP8 = "autopep8"
    YAPF = "yapf"
    BLACK = "black"


DEFAULT_FORMATTER = FormatterId.AUTOPEP8
DEFAULT_PYTHON_PATH = "python"
CONFIG_ENV_VAR = "HUNKFMT_CONFIG"

_CONFIG_DIR = Path.home() / ".hunkfmt"


class FormatterSettings(BaseModel):
    """How to invoke one formatter.

    A bare ``path`` (no directory part) is run as ``python -m <path>``.
    """

    path: str
    args: list[str] = []


def _default_tools() -> Dict[str, FormatterSettings]:
    return {formatter.value: FormatterSettings(path=formatter.value) for formatter in FormatterId}


class FormattingConfig(BaseModel):
    """Complete hunkfmt configuration."""

    formatter: FormatterId = DEFAULT_FORMATTER
    python_path: str = DEFAULT_PYTHON_PATH
    workspace_root: Optional[Path] = None
    tools: Dict[str, FormatterSettings] = Field(default_factory=_default_tools)


def get_config_dir() -> Path:
    """Get the hunkfmt configuration directory.

    Returns:
        Path to ~/.hunkfmt/
    """
    return _CONFIG_DIR


def get_config_file_path() -> Path:
    """Get path to the config file, honouring $HUNKFMT_CONFIG.

    Returns:
        Path to the YAML configuration file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / "config.yaml"


def load_config(config_file: Optional[Path] = None) -> FormattingConfig:
    """Load configuration from YAML.

    Args:
        config_file: Explicit file to read. Defaults to get_config_file_path().

    Returns:
        FormattingConfig. Defaults if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or holds invalid values.
    """
    config_file = config_file or get_config_file_path()

    if not config_file.exists():
        return FormattingConfig()

    try:
        with open(config_file, "r") as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config in {config_file}: expected a mapping")

    # Keep the built-in tool entries when the file only overrides some of them
    tools = _default_tools()
    for name, settings in (data.get("tools") or {}).items():
        tools[name] = settings
    data["tools"] = tools

    try:
        return FormattingConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {config_file}: {e}")


def save_config(config: FormattingConfig, config_file: Optional[Path] = None) -> Path:
    """Save configuration to YAML.

    Args:
        config: Configuration to save.
        config_file: Explicit file to write. Defaults to get_config_file_path().

    Returns:
        The path written to.
    """
    config_file = config_file or get_config_file_path()

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, "w") as f:
            yaml.dump(
                config.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_file}: {e}")

    return config_file


def get_formatter_settings(
    config: FormattingConfig, formatter: Optional[FormatterId] = None
) -> FormatterSettings:
    """Get the invocation settings for a formatter.

    Args:
        config: Loaded configuration.
        formatter: Formatter to look up. Defaults to the configured formatter.

    Returns:
        FormatterSettings for the formatter.
    """
    formatter = formatter or config.formatter
    settings = config.tools.get(formatter.value)
    if settings is None:
        return FormatterSettings(path=formatter.value)
    return settings
