"""Patch-based formatter integration: turn formatter diffs into editor edits."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("hunkfmt")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
