import io
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from utest import DiagnosticSink, TestModule

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def stream() -> io.StringIO:
    """Text buffer standing in for stdout."""
    return io.StringIO()


@pytest.fixture
def repo_root() -> Path:
    """Root of this checkout."""
    return REPO_ROOT


@pytest.fixture
def terminations() -> list:
    """Exit codes passed to the module terminator, in call order."""
    return []


@pytest.fixture
def module(stream, terminations) -> TestModule:
    """Running TestModule named 'unit' writing into `stream`.

    Its terminator records the exit code instead of ending pytest, so a failed
    critical check surfaces as CriticalCheckAbort.
    """
    return TestModule(
        "unit", sink=DiagnosticSink(stream), terminate=terminations.append,
    ).start()


@pytest.fixture
def child_env() -> dict:
    """Environment that lets a child interpreter import utest from this checkout."""
    env = dict(os.environ)
    existing = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(REPO_ROOT) + (os.pathsep + existing if existing else "")
    return env


@pytest.fixture
def write_script(tmp_path):
    """Write a dedented test-module script into tmp_path and return its path."""
    def _write(source: str, name: str = "module_script.py") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def run_script(child_env):
    """Run a script with this interpreter and capture its output."""
    def _run(path: Path) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, str(path)],
            capture_output=True,
            text=True,
            cwd=str(path.parent),
            env=child_env,
            timeout=60,
        )
    return _run
