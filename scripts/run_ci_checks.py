#!/usr/bin/env python3
# =============================================================================
# utest -- CI CHECKS RUNNER
# File:   scripts/run_ci_checks.py
# =============================================================================
#
# PURPOSE
# -------
# Runs the full CI gate in two sequential stages:
#   Stage 1: pytest (the harness' own test suite)
#   Stage 2: module gate (usage_example.py run as a real test module)
#
# Exit codes:
#   0 -- All stages passed.
#   1 -- Stage 1 (pytest) failed.
#   2 -- Stage 2 (module gate) failed.
#
# Usage:
#   python scripts/run_ci_checks.py
# =============================================================================

from __future__ import annotations

import pathlib
import subprocess
import sys

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
_REPO_ROOT = pathlib.Path(__file__).parent.parent
_PYTHON    = sys.executable


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _run(cmd: list[str], label: str) -> int:
    """
    Run a subprocess command, stream stdout/stderr live, return exit code.
    """
    print(_separator())
    print(f"CI STAGE: {label}")
    print(f"CMD:      {' '.join(cmd)}")
    print(_separator("-"))
    sys.stdout.flush()

    proc = subprocess.run(
        cmd,
        cwd=str(_REPO_ROOT),
    )
    return proc.returncode


def main() -> int:
    print(_separator())
    print("UTEST CI GATE -- starting")
    print(_separator())
    sys.stdout.flush()

    pytest_rc = _run(
        [_PYTHON, "-m", "pytest"],
        "pytest",
    )
    if pytest_rc != 0:
        print(_separator())
        print(f"CI RESULT: FAIL  [stage=pytest  exit_code={pytest_rc}]")
        print(_separator())
        sys.stdout.flush()
        return 1

    # A non-zero exit code means a check in the example module failed.
    gate_rc = _run(
        [_PYTHON, "-m", "utest.run_modules", str(_REPO_ROOT / "usage_example.py")],
        "module gate (usage_example.py)",
    )
    if gate_rc != 0:
        print(_separator())
        print(f"CI RESULT: FAIL  [stage=modules  exit_code={gate_rc}]")
        print(_separator())
        sys.stdout.flush()
        return 2

    print(_separator())
    print("CI RESULT: PASS  [stages=pytest,modules]")
    print(_separator())
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
