"""Shared test fixtures and configuration."""

import difflib
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(temp_dir, monkeypatch):
    """Point hunkfmt at a config file inside the temp directory."""
    path = temp_dir / "config.yaml"
    monkeypatch.setenv("HUNKFMT_CONFIG", str(path))
    return path


@pytest.fixture
def make_patch():
    """Build formatter-style unified diff text the way autopep8 --diff does."""

    def _make_patch(before: str, after: str) -> str:
        return "".join(
            difflib.unified_diff(
                before.splitlines(keepends=True),
                after.splitlines(keepends=True),
                fromfile="original/module.py",
                tofile="fixed/module.py",
            )
        )

    return _make_patch


@pytest.fixture
def unformatted_source():
    """Python source with a few formatting problems."""
    return """import os
import sys
def main( ):
    x=1
    y = 2
    return x+y


class Foo :
    pass
"""


@pytest.fixture
def formatted_source():
    """The same source after formatting."""
    return """import os
import sys


def main():
    x = 1
    y = 2
    return x + y


class Foo:
    pass
"""


@pytest.fixture
def sample_patch():
    """Sample formatter output with a file header and two hunks."""
    return """--- original/module.py
+++ fixed/module.py
@@ -1,4 +1,4 @@
 import os
-x=1
+x = 1
 y = 2
 z = 3
@@ -10,3 +10,4 @@
 a = 1
 b = 2
+
 c = 3
"""


@pytest.fixture
def sample_document():
    """Document that sample_patch was produced for."""
    return (
        "import os\n"
        "x=1\n"
        "y = 2\n"
        "z = 3\n"
        "\n"
        "def f():\n"
        "    pass\n"
        "\n"
        "\n"
        "a = 1\n"
        "b = 2\n"
        "c = 3\n"
    )
