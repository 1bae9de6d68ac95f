# utest/outcome_classifier.py
# Outcome classifier -- runs one unit of work and reports how it ended.
#
# The work is invoked exactly once, synchronously, in the calling thread.
# Everything it raises, SystemExit included, is absorbed and reported through
# the returned ExceptionStatus. Two kinds always propagate:
#   CriticalCheckAbort -- a require_* check inside the work failed.
#   KeyboardInterrupt  -- unless it is the designated expected kind.

from typing import Any, Callable, Tuple, Type, Union

from utest.data_models.outcome import ExceptionStatus
from utest.exceptions import CriticalCheckAbort, HarnessUsageError

ExpectedKind = Union[Type[BaseException], Tuple[Type[BaseException], ...]]


def _is_exception_class(candidate: Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, BaseException)


def validate_expected(expected: Any) -> None:
    """Raise HarnessUsageError unless `expected` can appear in an except clause."""
    if _is_exception_class(expected):
        return
    if (
        isinstance(expected, tuple)
        and expected
        and all(_is_exception_class(item) for item in expected)
    ):
        return
    raise HarnessUsageError(
        "classify_call",
        f"expected must be an exception class or a non-empty tuple of them, "
        f"got {expected!r}",
    )


def expected_name(expected: ExpectedKind) -> str:
    """Name of the expected kind as written in diagnostics."""
    if isinstance(expected, tuple):
        return ", ".join(kind.__name__ for kind in expected)
    return expected.__name__


def classify_call(
    work:     Callable[[], Any],
    expected: ExpectedKind = Exception,
) -> ExceptionStatus:
    """
    Invoke `work()` and classify its exception behaviour.

    Returns:
        ExceptionStatus.NONE       -- work returned normally.
        ExceptionStatus.EXPECTED   -- work raised an instance of `expected`.
        ExceptionStatus.UNEXPECTED -- work raised anything else.

    Raises HarnessUsageError before invoking the work if `expected` is not an
    exception class or tuple of exception classes.
    """
    validate_expected(expected)
    try:
        work()
    except CriticalCheckAbort:
        raise
    except expected:
        return ExceptionStatus.EXPECTED
    except KeyboardInterrupt:
        raise
    except BaseException:  # noqa: BLE001 - every other failure is classified, not raised
        return ExceptionStatus.UNEXPECTED
    return ExceptionStatus.NONE
