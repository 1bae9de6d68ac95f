# utest/__init__.py
# Minimal sequential unit-test harness.
# Harness Version: 1.0.0
#
# A test module is an ordinary script: it creates one TestModule, starts
# named cases, runs checks against it and ends with a single verdict that
# becomes the process exit code.
#
# ENTRY POINTS:
#   utest.main(name, body)                -- inside a test-module script
#   python -m utest.run_modules SCRIPT... -- run several scripts as a gate

from .harness_version import (
    HARNESS_VERSION,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    DIAGNOSTIC_PRECISION,
)
from .exceptions import (
    UtestError,
    HarnessStateError,
    HarnessUsageError,
    CriticalCheckAbort,
)
from .data_models import ExceptionStatus, Relation, RunCounters, SourceLocation
from .diagnostic_sink import DiagnosticSink
from .outcome_classifier import classify_call
from .check_evaluator import CheckEvaluator
from .run_aggregator import ModuleState, TestModule, main, run_module

__all__ = [
    # Constants
    "HARNESS_VERSION",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "DIAGNOSTIC_PRECISION",
    # Errors
    "UtestError",
    "HarnessStateError",
    "HarnessUsageError",
    "CriticalCheckAbort",
    # Data models
    "ExceptionStatus",
    "Relation",
    "RunCounters",
    "SourceLocation",
    # Components
    "DiagnosticSink",
    "classify_call",
    "CheckEvaluator",
    "ModuleState",
    "TestModule",
    # Entry points
    "main",
    "run_module",
]
