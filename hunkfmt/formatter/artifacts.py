"""Temporary copies of documents handed to formatter processes.

The copy is created in the same folder as the original document, since
formatters look for configuration files in the workspace and would miss
custom rules if the file lived in a random temp location.
"""

import asyncio
import hashlib
from dataclasses import dataclass
from pathlib import Path

from hunkfmt.formatter.exceptions import TempFileError


@dataclass
class Document:
    """A document open in the editor."""

    path: Path
    text: str

    @property
    def uri(self) -> str:
        return self.path.resolve().as_uri()


def get_temp_file_path(document: Document) -> Path:
    """Path of the temporary copy: ``<path>.<md5(uri)><ext>``."""
    digest = hashlib.md5(document.uri.encode(), usedforsecurity=False).hexdigest()
    return document.path.with_name(f"{document.path.name}.{digest}{document.path.suffix}")


def _write_text(path: Path, text: str) -> None:
    # newline="" keeps the document's own line terminators
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


async def create_temp_file(document: Document) -> Path:
    """Write the document text next to the original file.

    Raises:
        TempFileError: If the file cannot be written.
    """
    temp_file = get_temp_file_path(document)
    try:
        await asyncio.to_thread(_write_text, temp_file, document.text)
    except OSError as e:
        raise TempFileError(f"Failed to create a temporary file, {e}") from e
    return temp_file


async def delete_temp_file(original_file: Path, temp_file: Path) -> None:
    """Remove the temporary copy, never the original document."""
    if original_file == temp_file:
        return
    await asyncio.to_thread(temp_file.unlink, missing_ok=True)
