# =============================================================================
# utest/exceptions.py
# =============================================================================
#
# EXCEPTION HIERARCHY
# -------------------
#   UtestError(Exception)                 -- base; never raised directly
#     HarnessStateError(UtestError)       -- operation invalid in module state
#     HarnessUsageError(UtestError)       -- invalid argument to a harness call
#   CriticalCheckAbort(SystemExit)        -- a require_* check failed
#
# UtestError subclasses report bugs in the test code itself. They are raised
# to the caller and are never counted as failed checks.
#
# A failed critical check ends the process through the module terminator
# (os._exit). CriticalCheckAbort is raised only when an injected terminator
# returns, as in-process tests do. It derives from SystemExit and is let
# through by the outcome classifier and the module boundary.
# =============================================================================

from __future__ import annotations

from utest.harness_version import EXIT_FAILURE


class UtestError(Exception):
    """
    Base class for harness misuse errors.

    Attributes:
        message: Human-readable description. Always non-empty.
    """

    def __init__(self, message: str) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError("UtestError: message must be a non-empty string")
        super().__init__(message)
        self.message: str = message

    def __repr__(self) -> str:
        return self.__class__.__name__ + "(message=" + repr(self.message) + ")"


class HarnessStateError(UtestError):
    """Raised when a check or end() is invoked on a module that has ended."""

    def __init__(self, module_name: str, operation: str, state: str) -> None:
        super().__init__(
            f"test module '{module_name}' cannot {operation} in state {state}"
        )
        self.module_name: str = module_name
        self.operation:   str = operation
        self.state:       str = state


class HarnessUsageError(UtestError):
    """Raised when a harness operation receives an argument it cannot use."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(f"{operation}: {detail}")
        self.operation: str = operation
        self.detail:    str = detail


class CriticalCheckAbort(SystemExit):
    """
    Termination signal for a failed critical check.

    Raised after the diagnostic has been written, the sink flushed and the
    module terminator has returned.
    `code` is always EXIT_FAILURE; `diagnostic` is the line that was written.
    """

    def __init__(self, diagnostic: str) -> None:
        super().__init__(EXIT_FAILURE)
        self.diagnostic: str = diagnostic
