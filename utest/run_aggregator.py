# =============================================================================
# utest/run_aggregator.py
# =============================================================================
#
# PURPOSE
# -------
# TestModule owns the RunCounters of one harness run and turns them into the
# process verdict:
#
#   TestModule(name)    -- create module  (state UNSTARTED, counters at zero)
#   module.start()      -- start module   (state RUNNING)
#   module.case(name)   -- start case     (label overwritten, count + 1)
#   module.check_*(...) -- checks         (see check_evaluator.py)
#   module.end()        -- end module     (summary once, exit code returned)
#
# run_module() starts a module, runs its body and reports any failure
# escaping it. main() is the entry point of a test-module script:
#
#   def body(m):
#       m.case("arithmetic")
#       m.check_equal(2 + 2, 4)
#
#   if __name__ == "__main__":
#       main("example", body)
#
# EXIT CODES
# ----------
#   0 -- EXIT_SUCCESS: no failed check, no uncaught exception.
#   1 -- EXIT_FAILURE: any failed check, critical abort, or uncaught exception.
#
# A failed require_* check calls the module terminator, os._exit(1) unless
# another is injected: no summary is written, no later check or finally
# block runs, and a check in a worker thread ends the whole process.
# =============================================================================

from __future__ import annotations

import os
import sys
from enum import Enum
from typing import Any, Callable, Optional, TextIO

from utest.check_evaluator import CheckEvaluator
from utest.data_models.run_counters import RunCounters
from utest.diagnostic_sink import DiagnosticSink
from utest.exceptions import CriticalCheckAbort, HarnessStateError
from utest.harness_version import EXIT_FAILURE, EXIT_SUCCESS

Terminator = Callable[[int], Any]


class ModuleState(Enum):
    UNSTARTED = "UNSTARTED"
    RUNNING   = "RUNNING"
    ENDED     = "ENDED"


def _plural_checks(count: int) -> str:
    return f"{count} check" + ("" if count == 1 else "s")


def _describe(exc: BaseException) -> str:
    message = str(exc)
    if not message:
        return type(exc).__name__
    return f"{type(exc).__name__}: {message}"


class TestModule(CheckEvaluator):
    """
    One execution of the harness: a named module, its current case and its
    counters.

    Attributes:
        name      -- Module name. Set once at construction.
        case_name -- Label of the most recently started case. Empty before
                     the first case.
        counters  -- RunCounters for the whole module.
        sink      -- DiagnosticSink for diagnostics and the summary line.
        terminate -- Called with EXIT_FAILURE after a failed critical check.
                     Defaults to os._exit.
        state     -- ModuleState. UNSTARTED after construction, RUNNING
                     after start(), ENDED after end().
    """

    # Not a pytest test class.
    __test__ = False

    def __init__(
        self,
        name:      str,
        sink:      Optional[DiagnosticSink] = None,
        terminate: Optional[Terminator] = None,
    ):
        self.name      = name
        self.case_name = ""
        self.counters  = RunCounters()
        self.sink      = sink if sink is not None else DiagnosticSink()
        self.terminate = terminate if terminate is not None else os._exit
        self.state     = ModuleState.UNSTARTED

    def start(self) -> "TestModule":
        """Move the module to RUNNING. May be called once. Returns the module."""
        if self.state is not ModuleState.UNSTARTED:
            raise HarnessStateError(self.name, "start", self.state.value)
        self.state = ModuleState.RUNNING
        return self

    def ensure_running(self, operation: str) -> None:
        if self.state is not ModuleState.RUNNING:
            raise HarnessStateError(self.name, operation, self.state.value)

    def case(self, name: str) -> int:
        """
        Start a new case. Returns its sequence number (1 for the first case).

        Cases never end; the next case() or end() supersedes them.
        """
        self.ensure_running("start a case")
        sequence = self.counters.start_case()
        self.case_name = name
        self.sink.write_line(f"running test case [{self.name}/{self.case_name}] ...")
        return sequence

    def verdict(self) -> int:
        """EXIT_SUCCESS iff no check has failed so far."""
        return EXIT_SUCCESS if self.counters.passed else EXIT_FAILURE

    def summary(self) -> str:
        checks = self.counters.checks_evaluated
        failures = self.counters.checks_failed
        if failures > 0:
            return f"  failed with {failures} errors in {_plural_checks(checks)}!"
        return f"  no errors detected in {_plural_checks(checks)}."

    def end(self) -> int:
        """
        End the module: write the summary line and return the exit code.

        May be called once, on a running module. Otherwise raises
        HarnessStateError.
        """
        self.ensure_running("end")
        self.state = ModuleState.ENDED
        self.sink.write_line(self.summary())
        return self.verdict()


def run_module(
    name:      str,
    body:      Callable[[TestModule], object],
    sink:      Optional[DiagnosticSink] = None,
    terminate: Optional[Terminator] = None,
) -> int:
    """
    Run `body` inside a fresh, started TestModule and return the exit code.

    If `body` ends the module itself, its result is returned unchanged.
    An Exception escaping `body` is reported with its description and
    yields EXIT_FAILURE; any other BaseException, SystemExit included, is
    reported as unknown and yields EXIT_FAILURE. Only CriticalCheckAbort
    and KeyboardInterrupt propagate.
    """
    module = TestModule(name, sink=sink, terminate=terminate).start()
    try:
        body(module)
    except (CriticalCheckAbort, KeyboardInterrupt):
        raise
    except Exception as exc:  # noqa: BLE001 - module boundary reports every failure
        module.sink.write_line(f" failed with uncaught exception <{_describe(exc)}>!")
        return EXIT_FAILURE
    except BaseException:  # noqa: BLE001 - e.g. SystemExit raised by the body
        module.sink.write_line(" failed with uncaught unknown exception!")
        return EXIT_FAILURE

    if module.state is ModuleState.ENDED:
        return module.verdict()
    return module.end()


def main(
    name:   str,
    body:   Callable[[TestModule], object],
    stream: Optional[TextIO] = None,
) -> None:
    """Run the module and exit the interpreter with its exit code. Does not return."""
    sink = DiagnosticSink(stream) if stream is not None else None
    sys.exit(run_module(name, body, sink=sink))
