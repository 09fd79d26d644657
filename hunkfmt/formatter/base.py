"""Formatting orchestrator.

Contains:
- Notifier: Callback used to report status to the user
- BaseFormatter: Runs a formatter on a document and returns editor edits
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

from hunkfmt.config import DEFAULT_PYTHON_PATH, FormatterId, FormatterSettings
from hunkfmt.formatter.artifacts import Document, create_temp_file, delete_temp_file
from hunkfmt.formatter.cancellation import CancellationToken
from hunkfmt.formatter.exceptions import FormatterError, FormattingCancelledError
from hunkfmt.formatter.runner import PythonToolRunner, get_execution_info, is_not_installed_error
from hunkfmt.logger import logger
from hunkfmt.patch import PatchError, Range, TextEdit, text_edits_from_patch

# (message, level) where level is "info" or "warning"
Notifier = Callable[[str, str], None]


def log_notifier(message: str, level: str) -> None:
    if level == "warning":
        logger.warning(message)
    else:
        logger.info(message)


class BaseFormatter(ABC):
    """Runs one external formatter and turns its patch output into edits.

    Configuration is passed in explicitly; nothing is read from global state.
    """

    formatter_id: FormatterId

    def __init__(
        self,
        settings: Optional[FormatterSettings] = None,
        *,
        python_path: str = DEFAULT_PYTHON_PATH,
        workspace_root: Optional[Path] = None,
        runner: Optional[PythonToolRunner] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.settings = settings or FormatterSettings(path=self.formatter_id.value)
        self.workspace_root = workspace_root
        self.runner = runner or PythonToolRunner(python_path)
        self.notifier = notifier or log_notifier

    @property
    def name(self) -> str:
        return self.formatter_id.value

    @abstractmethod
    async def format_document(
        self,
        document: Document,
        token: Optional[CancellationToken] = None,
        range: Optional[Range] = None,
    ) -> list[TextEdit]:
        """Format ``document`` (or only ``range`` where supported)."""

    def get_document_path(self, document: Document, fallback_path: Optional[Path] = None) -> Path:
        """Directory of the document, or ``fallback_path`` for a bare file name."""
        if fallback_path is not None and document.path.name == str(document.path):
            return fallback_path
        return document.path.parent

    async def provide_document_formatting_edits(
        self,
        document: Document,
        token: Optional[CancellationToken],
        args: list[str],
        cwd: Optional[Path] = None,
    ) -> list[TextEdit]:
        """Run the formatter on a temporary copy of ``document``.

        Returns:
            Edits for the whole document, or an empty list on cancellation
            or failure. Failures are reported through the notifier.
        """
        token = token or CancellationToken()
        if cwd is None:
            cwd = self.workspace_root or self.get_document_path(document)

        try:
            temp_file = await create_temp_file(document)
        except FormatterError as e:
            self.handle_error(e)
            return []

        try:
            if token.is_cancellation_requested:
                return []

            info = get_execution_info(self.settings, args)
            info.args.append(str(temp_file))
            logger.info("running_formatter", formatter=self.name, file=str(document.path))

            try:
                result = await self.runner.exec(info, cwd=cwd, token=token)
                if token.is_cancellation_requested:
                    return []
                edits = text_edits_from_patch(document.text, result.stdout)
            except FormattingCancelledError:
                return []
            except (FormatterError, PatchError) as e:
                if token.is_cancellation_requested:
                    return []
                self.handle_error(e)
                return []
        finally:
            try:
                await delete_temp_file(document.path, temp_file)
            except OSError as e:
                logger.warning("temp_file_cleanup_failed", file=str(temp_file), error=str(e))

        if token.is_cancellation_requested:
            return []

        logger.info("formatted", formatter=self.name, edits=len(edits))
        self.notifier(f"Formatted with {self.name}", "info")
        return edits

    def handle_error(self, error: Exception) -> None:
        """Report a failed formatting request to the user."""
        message = f"Formatting with {self.name} failed."
        if is_not_installed_error(error):
            message += f" {self.name} module is not installed."
        elif isinstance(error, PatchError):
            message += " Unable to parse formatter output."
        logger.warning("formatting_failed", formatter=self.name, error=str(error))
        self.notifier(message, "warning")
