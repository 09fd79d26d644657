"""Tests for hunkfmt.formatter.runner module."""

import asyncio
import sys

import pytest

from hunkfmt.config import FormatterSettings
from hunkfmt.formatter import (
    CancellationToken,
    ExecutionInfo,
    ExecutionResult,
    ExternalToolExecutionError,
    ExternalToolNotInstalledError,
    FormattingCancelledError,
    ProcessRunner,
    PythonToolRunner,
    StdErrError,
    get_execution_info,
    is_not_installed_error,
    output_has_module_not_installed_error,
)


class FakeProcessRunner:
    """Records calls and replays canned results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    async def exec(self, file, args, **kwargs):
        self.calls.append((file, list(args), kwargs))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def run(coro):
    return asyncio.run(coro)


class TestProcessRunner:
    """Tests for ProcessRunner with real subprocesses."""

    def test_collects_stdout(self):
        """Test that stdout is decoded and returned."""
        result = run(ProcessRunner().exec(sys.executable, ["-c", "print('hello')"]))

        assert result.stdout.strip() == "hello"
        assert result.stderr == ""
        assert result.returncode == 0

    def test_collects_stderr_separately(self):
        """Test that stderr is kept out of stdout by default."""
        code = "import sys; sys.stderr.write('oops'); print('out')"

        result = run(ProcessRunner().exec(sys.executable, ["-c", code]))

        assert result.stdout.strip() == "out"
        assert result.stderr == "oops"

    def test_merge_stderr(self):
        """Test that merge_stderr appends stderr to stdout."""
        code = "import sys; sys.stderr.write('oops')"

        result = run(ProcessRunner().exec(sys.executable, ["-c", code], merge_stderr=True))

        assert "oops" in result.stdout

    def test_throw_on_stderr(self):
        """Test that stderr output fails the call when requested."""
        code = "import sys; sys.stderr.write('oops')"

        with pytest.raises(StdErrError) as exc_info:
            run(ProcessRunner().exec(sys.executable, ["-c", code], throw_on_stderr=True))

        assert exc_info.value.stderr == "oops"

    def test_nonzero_exit_is_reported(self):
        """Test that the exit code is returned, not raised."""
        result = run(ProcessRunner().exec(sys.executable, ["-c", "raise SystemExit(3)"]))

        assert result.returncode == 3

    def test_missing_executable(self, temp_dir):
        """Test that a missing executable is a not-installed error."""
        missing = str(temp_dir / "no-such-formatter")

        with pytest.raises(ExternalToolNotInstalledError):
            run(ProcessRunner().exec(missing, ["--diff"]))

    def test_missing_cwd_is_execution_error(self, temp_dir):
        """Test that a missing working directory is not reported as a missing tool."""
        with pytest.raises(ExternalToolExecutionError) as exc_info:
            run(ProcessRunner().exec(sys.executable, ["-c", "pass"], cwd=temp_dir / "gone"))

        assert not isinstance(exc_info.value, ExternalToolNotInstalledError)

    def test_cwd_that_is_a_file(self, temp_dir):
        """Test that a file used as working directory fails as an execution error."""
        not_a_dir = temp_dir / "module.py"
        not_a_dir.write_text("x = 1\n")

        with pytest.raises(ExternalToolExecutionError):
            run(ProcessRunner().exec(sys.executable, ["-c", "pass"], cwd=not_a_dir))

    def test_other_spawn_errors_are_execution_errors(self, mocker):
        """Test that any OS error while starting the process is wrapped."""
        mocker.patch(
            "hunkfmt.formatter.runner.asyncio.create_subprocess_exec",
            side_effect=OSError(8, "Exec format error"),
        )

        with pytest.raises(ExternalToolExecutionError) as exc_info:
            run(ProcessRunner().exec(sys.executable, ["-c", "pass"]))

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_runs_in_cwd(self, temp_dir):
        """Test that the process starts in the requested directory."""
        code = "import os; print(os.getcwd())"

        result = run(ProcessRunner().exec(sys.executable, ["-c", code], cwd=temp_dir))

        assert result.stdout.strip() == str(temp_dir.resolve())

    def test_unbuffered_environment(self):
        """Test that child processes run unbuffered."""
        code = "import os; print(os.environ['PYTHONUNBUFFERED'])"

        result = run(ProcessRunner().exec(sys.executable, ["-c", code]))

        assert result.stdout.strip() == "1"

    def test_unknown_encoding_falls_back_to_utf8(self):
        """Test that an unknown output encoding does not break decoding."""
        result = run(
            ProcessRunner().exec(sys.executable, ["-c", "print('ok')"], encoding="no-such-codec")
        )

        assert result.stdout.strip() == "ok"

    def test_cancelled_token_before_start(self):
        """Test that nothing is spawned for an already cancelled request."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(FormattingCancelledError):
            run(ProcessRunner().exec(sys.executable, ["-c", "print('x')"], token=token))

    def test_cancel_kills_running_process(self):
        """Test that cancelling the token stops a long-running process."""

        async def scenario():
            token = CancellationToken()
            asyncio.get_running_loop().call_later(0.1, token.cancel)
            await ProcessRunner().exec(
                sys.executable, ["-c", "import time; time.sleep(30)"], token=token
            )

        with pytest.raises(FormattingCancelledError):
            asyncio.run(asyncio.wait_for(scenario(), timeout=10))


class TestGetExecutionInfo:
    """Tests for get_execution_info function."""

    def test_bare_name_is_module(self):
        """Test that a bare tool name runs as a python module."""
        info = get_execution_info(FormatterSettings(path="autopep8"), ["--diff"])

        assert info.module_name == "autopep8"
        assert info.exec_path == "autopep8"
        assert info.args == ["--diff"]

    def test_path_is_executable(self):
        """Test that a path with a directory runs directly."""
        info = get_execution_info(FormatterSettings(path="/usr/local/bin/black"), ["--diff"])

        assert info.module_name is None
        assert info.exec_path == "/usr/local/bin/black"

    def test_configured_args_come_first(self):
        """Test that configured args precede the formatter's own."""
        settings = FormatterSettings(path="yapf", args=["--style", "pep8"])

        info = get_execution_info(settings, ["--diff"])

        assert info.args == ["--style", "pep8", "--diff"]

    def test_settings_args_not_mutated(self):
        """Test that appending to the info does not touch the settings."""
        settings = FormatterSettings(path="yapf", args=["--style", "pep8"])

        info = get_execution_info(settings, ["--diff"])
        info.args.append("file.py")

        assert settings.args == ["--style", "pep8"]


class TestNotInstalledDetection:
    """Tests for not-installed helpers."""

    def test_module_not_installed_output(self):
        """Test both quoting styles of the import error."""
        assert output_has_module_not_installed_error("black", "No module named black")
        assert output_has_module_not_installed_error(
            "black", "/usr/bin/python: No module named 'black'"
        )
        assert not output_has_module_not_installed_error("black", "No module named 'yapf'")
        assert not output_has_module_not_installed_error("black", "")
        assert not output_has_module_not_installed_error("black", None)

    def test_is_not_installed_error(self):
        """Test the error kinds that mean the formatter is missing."""
        assert is_not_installed_error(ExternalToolNotInstalledError("missing"))
        assert is_not_installed_error(FileNotFoundError("ENOENT"))
        assert is_not_installed_error(ExternalToolExecutionError("failed", returncode=127))
        assert is_not_installed_error(RuntimeError("No module named autopep8"))

    def test_other_errors_are_not_not_installed(self):
        """Test that ordinary failures are not mistaken for a missing tool."""
        assert not is_not_installed_error(ExternalToolExecutionError("failed", returncode=1))
        assert not is_not_installed_error(ValueError("bad patch"))


class TestPythonToolRunner:
    """Tests for PythonToolRunner class."""

    def test_module_runs_with_dash_m(self):
        """Test that a module is run through the configured interpreter."""
        fake = FakeProcessRunner(ExecutionResult(stdout="patch", returncode=0))
        runner = PythonToolRunner("/opt/python3", process_runner=fake)
        info = ExecutionInfo("autopep8", ["--diff", "f.py"], module_name="autopep8")

        result = run(runner.exec(info))

        assert result.stdout == "patch"
        file, args, _ = fake.calls[0]
        assert file == "/opt/python3"
        assert args == ["-m", "autopep8", "--diff", "f.py"]

    def test_executable_runs_directly(self):
        """Test that an executable path skips the interpreter."""
        fake = FakeProcessRunner(ExecutionResult(stdout="", returncode=0))
        runner = PythonToolRunner(process_runner=fake)
        info = ExecutionInfo("/usr/bin/black", ["--diff", "f.py"])

        run(runner.exec(info))

        file, args, _ = fake.calls[0]
        assert file == "/usr/bin/black"
        assert args == ["--diff", "f.py"]

    def test_passes_cwd_and_token(self, temp_dir):
        """Test that cwd and token reach the process runner."""
        fake = FakeProcessRunner(ExecutionResult(stdout="", returncode=0))
        token = CancellationToken()
        info = ExecutionInfo("yapf", ["--diff"], module_name="yapf")

        run(PythonToolRunner(process_runner=fake).exec(info, cwd=temp_dir, token=token))

        _, _, kwargs = fake.calls[0]
        assert kwargs["cwd"] == temp_dir
        assert kwargs["token"] is token

    def test_missing_module(self):
        """Test that a module import failure raises not-installed."""
        fake = FakeProcessRunner(
            ExecutionResult(stdout="", stderr="No module named 'yapf'", returncode=1),
            StdErrError("No module named 'yapf'", returncode=1),
        )
        info = ExecutionInfo("yapf", ["--diff"], module_name="yapf")

        with pytest.raises(ExternalToolNotInstalledError):
            run(PythonToolRunner(process_runner=fake).exec(info))

        assert fake.calls[1][1] == ["-c", "import yapf"]

    def test_exit_one_with_patch_is_success(self):
        """Test that a diff printed with a non-zero exit is accepted."""
        fake = FakeProcessRunner(ExecutionResult(stdout="@@ -1 +1 @@\n-a\n+b\n", returncode=1))
        info = ExecutionInfo("yapf", ["--diff"], module_name="yapf")

        result = run(PythonToolRunner(process_runner=fake).exec(info))

        assert result.returncode == 1

    def test_exit_one_without_output_fails(self):
        """Test that a non-zero exit without output is a failure."""
        fake = FakeProcessRunner(ExecutionResult(stdout="", stderr="error: boom", returncode=123))
        info = ExecutionInfo("black", ["--diff"], module_name="black")

        with pytest.raises(ExternalToolExecutionError) as exc_info:
            run(PythonToolRunner(process_runner=fake).exec(info))

        assert exc_info.value.returncode == 123
        assert "boom" in str(exc_info.value)

    def test_exit_127_is_not_installed(self):
        """Test that the shell's command-not-found code means not installed."""
        fake = FakeProcessRunner(ExecutionResult(stdout="", returncode=127))
        info = ExecutionInfo("/usr/bin/black", ["--diff"])

        with pytest.raises(ExternalToolNotInstalledError):
            run(PythonToolRunner(process_runner=fake).exec(info))

    def test_is_module_installed(self):
        """Test the import probe."""
        installed = FakeProcessRunner(ExecutionResult(stdout="", returncode=0))
        missing = FakeProcessRunner(StdErrError("No module named 'black'"))

        assert run(PythonToolRunner(process_runner=installed).is_module_installed("black"))
        assert not run(PythonToolRunner(process_runner=missing).is_module_installed("black"))

    def test_real_module(self):
        """Test running a real module through the current interpreter."""
        runner = PythonToolRunner(sys.executable)
        info = ExecutionInfo("json.tool", ["--help"], module_name="json.tool")

        result = run(runner.exec(info))

        assert "usage" in result.stdout.lower()

    def test_real_missing_module(self):
        """Test a module that is not installed in the current interpreter."""
        runner = PythonToolRunner(sys.executable)
        info = ExecutionInfo(
            "hunkfmt_no_such_formatter", ["--diff"], module_name="hunkfmt_no_such_formatter"
        )

        with pytest.raises(ExternalToolNotInstalledError):
            run(runner.exec(info))


class TestCancellationToken:
    """Tests for CancellationToken class."""

    def test_starts_uncancelled(self):
        """Test the initial state."""
        assert not CancellationToken().is_cancellation_requested

    def test_callbacks_run_once(self):
        """Test that cancel runs callbacks a single time."""
        token = CancellationToken()
        calls = []
        token.on_cancellation_requested(lambda: calls.append(1))

        token.cancel()
        token.cancel()

        assert token.is_cancellation_requested
        assert calls == [1]

    def test_unregister(self):
        """Test that an unregistered callback does not run."""
        token = CancellationToken()
        calls = []
        unregister = token.on_cancellation_requested(lambda: calls.append(1))

        unregister()
        token.cancel()

        assert calls == []

    def test_register_after_cancel_runs_immediately(self):
        """Test that late registration still observes the cancellation."""
        token = CancellationToken()
        token.cancel()
        calls = []

        token.on_cancellation_requested(lambda: calls.append(1))

        assert calls == [1]
