"""Formatter orchestration for hunkfmt.

This package runs external formatters and converts their output into edits:
- exceptions: FormatterError and the not-installed / execution / cancelled errors
- cancellation: CancellationToken
- artifacts: Document, create_temp_file, delete_temp_file
- runner: ProcessRunner, PythonToolRunner, get_execution_info
- base: BaseFormatter
- tools: Autopep8Formatter, YapfFormatter, BlackFormatter, create_formatter
"""

# Exceptions
from hunkfmt.formatter.exceptions import (
    ExternalToolExecutionError,
    ExternalToolNotInstalledError,
    FormatterError,
    FormattingCancelledError,
    StdErrError,
    TempFileError,
)

# Cancellation
from hunkfmt.formatter.cancellation import CancellationToken

# Temporary artifacts
from hunkfmt.formatter.artifacts import (
    Document,
    create_temp_file,
    delete_temp_file,
    get_temp_file_path,
)

# Process execution
from hunkfmt.formatter.runner import (
    ExecutionInfo,
    ExecutionResult,
    ProcessRunner,
    PythonToolRunner,
    get_execution_info,
    is_not_installed_error,
    output_has_module_not_installed_error,
)

# Orchestration
from hunkfmt.formatter.base import BaseFormatter, Notifier, log_notifier
from hunkfmt.formatter.tools import (
    Autopep8Formatter,
    BlackFormatter,
    YapfFormatter,
    create_formatter,
)


__all__ = [
    # Exceptions
    "FormatterError",
    "ExternalToolNotInstalledError",
    "ExternalToolExecutionError",
    "StdErrError",
    "TempFileError",
    "FormattingCancelledError",
    # Cancellation
    "CancellationToken",
    # Artifacts
    "Document",
    "create_temp_file",
    "delete_temp_file",
    "get_temp_file_path",
    # Runner
    "ExecutionInfo",
    "ExecutionResult",
    "ProcessRunner",
    "PythonToolRunner",
    "get_execution_info",
    "is_not_installed_error",
    "output_has_module_not_installed_error",
    # Orchestration
    "BaseFormatter",
    "Notifier",
    "log_notifier",
    "Autopep8Formatter",
    "YapfFormatter",
    "BlackFormatter",
    "create_formatter",
]
