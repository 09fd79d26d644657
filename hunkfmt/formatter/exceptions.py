"""Formatter-related exception classes.

Contains all exception classes for running external formatters:
- FormatterError: Base exception for formatter errors
- ExternalToolNotInstalledError: Raised when the formatter cannot be found
- ExternalToolExecutionError: Raised when the formatter process fails
- StdErrError: Raised when a process writes to stderr and that is not allowed
- TempFileError: Raised when the temporary input file cannot be written
- FormattingCancelledError: Raised when the request was cancelled
"""

from typing import Optional


class FormatterError(Exception):
    """Base exception for formatter errors."""

    pass


class ExternalToolNotInstalledError(FormatterError):
    """Raised when the formatter executable or module is not installed."""

    pass


class ExternalToolExecutionError(FormatterError):
    """Raised when the formatter terminates abnormally."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class StdErrError(ExternalToolExecutionError):
    """Raised when a process wrote to stderr and the caller treats that as failure."""

    pass


class TempFileError(FormatterError):
    """Raised when the temporary copy of the document cannot be created."""

    pass


class FormattingCancelledError(FormatterError):
    """Raised when a formatting request was cancelled. Not a real failure."""

    pass
