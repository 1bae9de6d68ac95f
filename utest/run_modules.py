#!/usr/bin/env python3
# =============================================================================
# utest/run_modules.py
# =============================================================================
#
# PURPOSE
# -------
# Gate script. Runs each given test-module script in its own child process
# and exits 0 only if every one of them exited 0.
#
#   python -m utest.run_modules tests/modules/test_vector.py tests/modules/test_io.py
#
# Scripts are named explicitly; nothing is discovered. Each script's own
# output (case lines, diagnostics, summary) streams through unchanged.
#
# Exit codes:
#   0 -- every script exited EXIT_SUCCESS.
#   1 -- at least one script failed, aborted, or could not be started.
#   2 -- argparse usage error.
# =============================================================================

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from utest.harness_version import EXIT_FAILURE, EXIT_SUCCESS, HARNESS_VERSION


def _separator(char: str = "=", width: int = 72) -> str:
    return char * width


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=f"utest module gate v{HARNESS_VERSION}",
        prog="python -m utest.run_modules",
    )
    parser.add_argument(
        "scripts",
        nargs="+",
        help="Test-module scripts to run, in order.",
    )
    parser.add_argument(
        "--python",
        default=sys.executable,
        help="Interpreter used to run each script (default: this interpreter).",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=False,
        help="Stop after the first failing script.",
    )
    return parser.parse_args(argv)


def run_script(path: Path, python: str = sys.executable) -> int:
    """
    Run one test-module script in a child process and return its exit code.

    A script that cannot be started reports on stderr and counts as
    EXIT_FAILURE.
    """
    if not path.is_file():
        print(f"UTEST GATE ERROR: no such script: {path}", file=sys.stderr)
        return EXIT_FAILURE

    sys.stdout.flush()
    try:
        proc = subprocess.run([python, str(path)], cwd=str(path.parent))
    except OSError as exc:
        print(f"UTEST GATE ERROR: cannot run {path}: {exc}", file=sys.stderr)
        return EXIT_FAILURE
    return proc.returncode


def run_scripts(
    paths:     Sequence[Path],
    python:    str = sys.executable,
    fail_fast: bool = False,
) -> int:
    """
    Run every script in order and return the gate exit code.

    Prints one PASS/FAIL line per script and a final RESULT line.
    """
    failed: List[Path] = []
    for path in paths:
        print(_separator())
        print(f"MODULE: {path}")
        print(_separator("-"))
        rc = run_script(path, python)
        if rc == EXIT_SUCCESS:
            print(f"PASS  {path}")
        else:
            print(f"FAIL  {path}  [exit_code={rc}]")
            failed.append(path)
            if fail_fast:
                break
        sys.stdout.flush()

    print(_separator())
    if failed:
        print(f"RESULT: FAIL  [{len(failed)} of {len(paths)} modules failed]")
        return EXIT_FAILURE
    print(f"RESULT: PASS  [{len(paths)} modules]")
    return EXIT_SUCCESS


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    paths = [Path(script) for script in args.scripts]
    return run_scripts(paths, python=args.python, fail_fast=args.fail_fast)


if __name__ == "__main__":
    sys.exit(main())
