"""Formatter process runner.

Contains:
- ExecutionInfo: How to start a formatter (executable or python module)
- ExecutionResult: Decoded output of a finished process
- ProcessRunner: Run a process with asyncio and cooperative cancellation
- PythonToolRunner: Run a formatter either as an executable or via ``python -m``
- get_execution_info: Build ExecutionInfo from FormatterSettings
- output_has_module_not_installed_error / is_not_installed_error: Not-installed detection
"""

from __future__ import annotations

import asyncio
import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from hunkfmt.config import DEFAULT_PYTHON_PATH, FormatterSettings
from hunkfmt.formatter.cancellation import CancellationToken
from hunkfmt.formatter.exceptions import (
    ExternalToolExecutionError,
    ExternalToolNotInstalledError,
    FormatterError,
    FormattingCancelledError,
    StdErrError,
)
from hunkfmt.logger import logger

DEFAULT_ENCODING = "utf-8"
COMMAND_NOT_FOUND_EXIT_CODE = 127


@dataclass
class ExecutionInfo:
    exec_path: str
    args: list[str] = field(default_factory=list)
    module_name: Optional[str] = None


@dataclass
class ExecutionResult:
    stdout: str
    stderr: str = ""
    returncode: Optional[int] = None


def get_execution_info(settings: FormatterSettings, custom_args: list[str]) -> ExecutionInfo:
    """Combine configured path/args with the formatter's own arguments.

    A path without a directory part is treated as a python module name.
    """
    exec_path = settings.path
    args = list(settings.args) + list(custom_args)

    module_name = None
    if os.path.basename(exec_path) == exec_path:
        module_name = exec_path

    return ExecutionInfo(exec_path=exec_path, args=args, module_name=module_name)


def output_has_module_not_installed_error(module_name: str, content: Optional[str]) -> bool:
    if not content:
        return False
    return (
        f"No module named {module_name}" in content
        or f"No module named '{module_name}'" in content
    )


def is_not_installed_error(error: BaseException) -> bool:
    if isinstance(error, (ExternalToolNotInstalledError, FileNotFoundError)):
        return True
    if isinstance(error, ExternalToolExecutionError) and error.returncode == COMMAND_NOT_FOUND_EXIT_CODE:
        return True
    return "No module named" in str(error)


def _decode(data: Optional[bytes], encoding: str) -> str:
    if not data:
        return ""
    try:
        codecs.lookup(encoding)
    except LookupError:
        encoding = DEFAULT_ENCODING
    return data.decode(encoding, errors="replace")


def _build_env() -> dict[str, str]:
    env = dict(os.environ)
    # Always ensure we have unbuffered output.
    env["PYTHONUNBUFFERED"] = "1"
    env.setdefault("PYTHONIOENCODING", DEFAULT_ENCODING)
    return env


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        # Process was already gone before we could kill it.
        pass


class ProcessRunner:
    """Runs external processes and collects their decoded output."""

    async def exec(
        self,
        file: str,
        args: list[str],
        *,
        cwd: Optional[Path] = None,
        token: Optional[CancellationToken] = None,
        merge_stderr: bool = False,
        throw_on_stderr: bool = False,
        encoding: str = DEFAULT_ENCODING,
    ) -> ExecutionResult:
        """Run ``file`` with ``args`` and wait for it to exit.

        Args:
            file: Executable to run. A leading ``~/`` is expanded.
            args: Arguments to pass.
            cwd: Working directory.
            token: Cancelling it kills the process.
            merge_stderr: Append stderr to the returned stdout as well.
            throw_on_stderr: Treat any stderr output as failure.
            encoding: Encoding of the process output.

        Returns:
            ExecutionResult with decoded stdout/stderr and the exit code.

        Raises:
            ExternalToolNotInstalledError: If the executable does not exist.
            ExternalToolExecutionError: If cwd is not a directory or the process
                cannot be started.
            FormattingCancelledError: If the token was cancelled.
            StdErrError: If throw_on_stderr is set and stderr is not empty.
        """
        if file.startswith("~/"):
            file = os.path.expanduser(file)

        if token is not None and token.is_cancellation_requested:
            raise FormattingCancelledError(f"Cancelled before starting {file}")

        if cwd is not None and not Path(cwd).is_dir():
            raise ExternalToolExecutionError(
                f"Working directory {cwd} does not exist or is not a directory."
            )

        logger.debug("spawn_process", file=file, args=args, cwd=str(cwd) if cwd else None)
        try:
            proc = await asyncio.create_subprocess_exec(
                file,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd) if cwd is not None else None,
                env=_build_env(),
            )
        except FileNotFoundError as e:
            raise ExternalToolNotInstalledError(f"{file} is not installed or not in PATH.") from e
        except PermissionError as e:
            raise ExternalToolExecutionError(f"{file} cannot be executed: {e}") from e
        except OSError as e:
            raise ExternalToolExecutionError(f"Failed to start {file}: {e}") from e

        unregister = None
        if token is not None:
            unregister = token.on_cancellation_requested(lambda: _kill(proc))

        try:
            stdout_bytes, stderr_bytes = await proc.communicate()
        except asyncio.CancelledError:
            _kill(proc)
            await proc.wait()
            raise
        finally:
            if unregister is not None:
                unregister()

        if token is not None and token.is_cancellation_requested:
            raise FormattingCancelledError(f"Cancelled while running {file}")

        stdout = _decode(stdout_bytes, encoding)
        stderr = _decode(stderr_bytes, encoding)
        if merge_stderr:
            stdout += stderr

        if stderr and throw_on_stderr:
            raise StdErrError(stderr, returncode=proc.returncode, stderr=stderr)

        return ExecutionResult(stdout=stdout, stderr=stderr, returncode=proc.returncode)


class PythonToolRunner:
    """Runs formatters either directly or as ``python -m <module>``."""

    def __init__(
        self,
        python_path: str = DEFAULT_PYTHON_PATH,
        process_runner: Optional[ProcessRunner] = None,
    ) -> None:
        self.python_path = python_path
        self.process_runner = process_runner or ProcessRunner()

    async def is_module_installed(self, module_name: str) -> bool:
        try:
            result = await self.process_runner.exec(
                self.python_path, ["-c", f"import {module_name}"], throw_on_stderr=True
            )
        except FormatterError:
            return False
        return result.returncode == 0

    async def exec(
        self,
        info: ExecutionInfo,
        *,
        cwd: Optional[Path] = None,
        token: Optional[CancellationToken] = None,
        merge_stderr: bool = False,
    ) -> ExecutionResult:
        """Run the formatter described by ``info``.

        Raises:
            ExternalToolNotInstalledError: If the tool or its module is missing.
            ExternalToolExecutionError: If the tool failed without printing a patch.
            FormattingCancelledError: If the token was cancelled.
        """
        if info.module_name:
            result = await self.process_runner.exec(
                self.python_path,
                ["-m", info.module_name, *info.args],
                cwd=cwd,
                token=token,
                merge_stderr=merge_stderr,
            )
            # A missing module shows up on stderr
            if output_has_module_not_installed_error(info.module_name, result.stderr):
                if not await self.is_module_installed(info.module_name):
                    raise ExternalToolNotInstalledError(f"Module '{info.module_name}' not installed.")
        else:
            result = await self.process_runner.exec(
                info.exec_path,
                info.args,
                cwd=cwd,
                token=token,
                merge_stderr=merge_stderr,
            )

        self._check_exit(info, result)
        return result

    def _check_exit(self, info: ExecutionInfo, result: ExecutionResult) -> None:
        # Some formatters (yapf --diff) exit non-zero when they print a patch,
        # so only a failure without output counts.
        if result.returncode in (0, None):
            return
        if result.returncode == COMMAND_NOT_FOUND_EXIT_CODE:
            raise ExternalToolNotInstalledError(f"{info.exec_path} is not installed or not in PATH.")
        if not result.stdout.strip():
            raise ExternalToolExecutionError(
                f"{info.exec_path} exited with code {result.returncode}: {result.stderr.strip()}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
