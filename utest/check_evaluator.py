# =============================================================================
# utest/check_evaluator.py
# =============================================================================
#
# SCOPE
# -----
# Every check family, each in a non-critical check_* and a critical
# require_* variant:
#
#   check / require                     -- boolean condition
#   check_<relation> / require_<...>    -- ==, !=, <, <=, >, >=
#   check_close / require_close         -- scale-aware approximate equality
#   check_throw / require_throw         -- expected exception kind
#   check_nothrow / require_nothrow     -- no exception at all
#   check_array_close / require_...     -- numpy approximate equality
#
# All of them reduce to one generic evaluation:
#   1. count the check,
#   2. compute the failure message (None on pass),
#   3. on failure count it and write one diagnostic line,
#   4. on critical failure flush the sink and end the process through the
#      host terminator (os._exit by default).
#
# CheckEvaluator is an abstract mixin. The host (TestModule) supplies the
# module name, the current case label, the RunCounters, the DiagnosticSink,
# the terminator and ensure_running(). No counter lives at module level.
# =============================================================================

from __future__ import annotations

import math
import numbers
import re
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from utest import array_checks
from utest.data_models.outcome import ExceptionStatus
from utest.data_models.relation import Relation
from utest.data_models.run_counters import RunCounters
from utest.data_models.source_location import (
    SourceLocation,
    call_argument_text,
    caller_location,
    split_arguments,
)
from utest.diagnostic_sink import DiagnosticSink, format_diagnostic, format_value
from utest.exceptions import CriticalCheckAbort, HarnessUsageError
from utest.harness_version import EXIT_FAILURE
from utest.outcome_classifier import (
    ExpectedKind,
    classify_call,
    expected_name,
    validate_expected,
)

_LAMBDA_PREFIX = re.compile(r"^lambda\s*:\s*")


# =============================================================================
# SECTION 1 -- EXPRESSION TEXT
# =============================================================================

def _argument_texts(location: SourceLocation, func_name: str) -> List[str]:
    text = call_argument_text(location, func_name)
    if text is None:
        return []
    return split_arguments(text)


def _operands(
    location:  SourceLocation,
    func_name: str,
    fallbacks: List[str],
) -> List[str]:
    """Positional argument texts of the call, padded with `fallbacks`."""
    texts = _argument_texts(location, func_name)
    return [
        texts[index] if index < len(texts) else fallback
        for index, fallback in enumerate(fallbacks)
    ]


def _call_text(location: SourceLocation, func_name: str) -> str:
    """Text of the unit of work passed to a throw check, lambda prefix removed."""
    (work,) = _operands(location, func_name, ["work"])
    return _LAMBDA_PREFIX.sub("", work)


def _validate_epsilon(epsilon: Any, func_name: str) -> None:
    if (
        isinstance(epsilon, bool)
        or not isinstance(epsilon, numbers.Real)
        or not math.isfinite(epsilon)
        or epsilon < 0
    ):
        raise HarnessUsageError(
            func_name,
            f"epsilon must be a finite non-negative real number, got {epsilon!r}",
        )


# =============================================================================
# SECTION 2 -- CHECK EVALUATOR
# =============================================================================

def _relational(func_name: str, relation: Relation, critical: bool):
    """Build the named public wrapper for one relation and criticality."""

    def method(self: "CheckEvaluator", left: Any, right: Any) -> bool:
        location = caller_location()
        left_text, right_text = _operands(location, func_name, ["left", "right"])
        return self._evaluate_relation(
            left, right, relation, critical, location,
            f"{left_text} {relation.symbol} {right_text}",
        )

    method.__name__ = func_name
    method.__qualname__ = "CheckEvaluator." + func_name
    method.__doc__ = (
        f"{'Critical' if critical else 'Non-critical'} check that "
        f"`left {relation.symbol} right` holds."
    )
    return method


class CheckEvaluator(ABC):
    """
    Check operations shared by every test module.

    The host class must provide:
      name           -- module name used in diagnostics.
      case_name      -- label of the most recently started case.
      counters       -- RunCounters mutated by every check.
      sink           -- DiagnosticSink receiving failure diagnostics.
      terminate      -- called with EXIT_FAILURE on a failed critical check.
      ensure_running -- raises HarnessStateError once the module has ended.

    Every public check returns True if it passed and False if it failed
    non-critically. A failed critical check does not return.
    """

    name:      str
    case_name: str
    counters:  RunCounters
    sink:      DiagnosticSink
    terminate: Callable[[int], Any]

    @abstractmethod
    def ensure_running(self, operation: str) -> None:
        """Raise HarnessStateError unless checks may be evaluated."""

    # -------------------------------------------------------------------------
    # Generic evaluation
    # -------------------------------------------------------------------------

    def _evaluate(
        self,
        evaluate: Callable[[], Optional[str]],
        critical: bool,
        location: SourceLocation,
    ) -> bool:
        self.ensure_running("evaluate a check")
        self.counters.record_check()
        message = evaluate()
        if message is None:
            return True

        self.counters.record_failure()
        diagnostic = format_diagnostic(location, self.name, self.case_name, message)
        self.sink.write_line(diagnostic)
        if critical:
            self.sink.flush()
            self.terminate(EXIT_FAILURE)
            # Reached only when the host terminator returns.
            raise CriticalCheckAbort(diagnostic)
        return False

    def _evaluate_condition(
        self,
        condition: Any,
        expr:      Optional[str],
        critical:  bool,
        location:  SourceLocation,
        func_name: str,
    ) -> bool:
        if expr is None:
            texts = _argument_texts(location, func_name)
            expr = texts[0] if texts else location.text

        def evaluate() -> Optional[str]:
            if condition:
                return None
            return f"check {{{expr}}} failed!"

        return self._evaluate(evaluate, critical, location)

    def _evaluate_relation(
        self,
        left:     Any,
        right:    Any,
        relation: Relation,
        critical: bool,
        location: SourceLocation,
        expr:     str,
    ) -> bool:
        if not isinstance(relation, Relation):
            raise HarnessUsageError(
                "check_relation",
                f"relation must be a Relation member, got {relation!r}",
            )

        def evaluate() -> Optional[str]:
            if relation.holds(left, right):
                return None
            return (
                f"check {{{expr}}} failed "
                f"{{{format_value(left)} {relation.symbol} {format_value(right)}}}!"
            )

        return self._evaluate(evaluate, critical, location)

    def _evaluate_close(
        self,
        left:      Any,
        right:     Any,
        epsilon:   Any,
        critical:  bool,
        location:  SourceLocation,
        func_name: str,
    ) -> bool:
        _validate_epsilon(epsilon, func_name)
        a, b, e = _operands(location, func_name, ["left", "right", "epsilon"])
        difference = abs(left - right)
        bound = epsilon * (1 + abs(left) + abs(right))
        return self._evaluate_relation(
            difference, bound, Relation.LESS, critical, location,
            f"abs({a} - {b}) < {e} * (1 + abs({a}) + abs({b}))",
        )

    def _evaluate_array_close(
        self,
        left:      Any,
        right:     Any,
        epsilon:   Any,
        critical:  bool,
        location:  SourceLocation,
        func_name: str,
    ) -> bool:
        _validate_epsilon(epsilon, func_name)
        a, b, e = _operands(location, func_name, ["left", "right", "epsilon"])
        left_array = array_checks.as_flat_array(left)
        right_array = array_checks.as_flat_array(right)

        # Equal size is a precondition of the comparison, always critical.
        self._evaluate_relation(
            left_array.size, right_array.size, Relation.EQUAL, True, location,
            f"{a}.size == {b}.size",
        )

        difference = array_checks.max_abs_difference(left_array, right_array)
        bound = epsilon * (
            1 + array_checks.max_abs(left_array) + array_checks.max_abs(right_array)
        )
        return self._evaluate_relation(
            difference, bound, Relation.LESS, critical, location,
            f"max|{a} - {b}| < {e} * (1 + max|{a}| + max|{b}|)",
        )

    def _evaluate_throw(
        self,
        work:      Callable[[], Any],
        expected:  ExpectedKind,
        critical:  bool,
        location:  SourceLocation,
        func_name: str,
    ) -> bool:
        validate_expected(expected)
        if not callable(work):
            raise HarnessUsageError(func_name, f"work must be callable, got {work!r}")
        call = _call_text(location, func_name)

        def evaluate() -> Optional[str]:
            status = classify_call(work, expected)
            if status is ExceptionStatus.EXPECTED:
                return None
            if status is ExceptionStatus.NONE:
                return f"call {{{call}}} does not throw!"
            return f"call {{{call}}} does not throw {{{expected_name(expected)}}}!"

        return self._evaluate(evaluate, critical, location)

    def _evaluate_nothrow(
        self,
        work:      Callable[[], Any],
        critical:  bool,
        location:  SourceLocation,
        func_name: str,
    ) -> bool:
        if not callable(work):
            raise HarnessUsageError(func_name, f"work must be callable, got {work!r}")
        call = _call_text(location, func_name)

        def evaluate() -> Optional[str]:
            if classify_call(work) is ExceptionStatus.NONE:
                return None
            return f"call {{{call}}} throws!"

        return self._evaluate(evaluate, critical, location)

    # -------------------------------------------------------------------------
    # Boolean checks
    # -------------------------------------------------------------------------

    def check(self, condition: Any, expr: Optional[str] = None) -> bool:
        """
        Non-critical check that `condition` is truthy.

        `expr` overrides the expression text shown in the diagnostic; by
        default it is the argument as written at the call site.
        """
        return self._evaluate_condition(condition, expr, False, caller_location(), "check")

    def require(self, condition: Any, expr: Optional[str] = None) -> bool:
        """Critical variant of check()."""
        return self._evaluate_condition(condition, expr, True, caller_location(), "require")

    # -------------------------------------------------------------------------
    # Relational checks
    # -------------------------------------------------------------------------

    def check_relation(
        self,
        left:     Any,
        right:    Any,
        relation: Relation,
        critical: bool = False,
    ) -> bool:
        """Check `left <relation> right`. Operands are evaluated by the caller, once."""
        location = caller_location()
        left_text, right_text = _operands(location, "check_relation", ["left", "right"])
        symbol = relation.symbol if isinstance(relation, Relation) else "?"
        return self._evaluate_relation(
            left, right, relation, critical, location,
            f"{left_text} {symbol} {right_text}",
        )

    check_equal           = _relational("check_equal", Relation.EQUAL, False)
    require_equal         = _relational("require_equal", Relation.EQUAL, True)
    check_not_equal       = _relational("check_not_equal", Relation.NOT_EQUAL, False)
    require_not_equal     = _relational("require_not_equal", Relation.NOT_EQUAL, True)
    check_less            = _relational("check_less", Relation.LESS, False)
    require_less          = _relational("require_less", Relation.LESS, True)
    check_less_equal      = _relational("check_less_equal", Relation.LESS_EQUAL, False)
    require_less_equal    = _relational("require_less_equal", Relation.LESS_EQUAL, True)
    check_greater         = _relational("check_greater", Relation.GREATER, False)
    require_greater       = _relational("require_greater", Relation.GREATER, True)
    check_greater_equal   = _relational("check_greater_equal", Relation.GREATER_EQUAL, False)
    require_greater_equal = _relational("require_greater_equal", Relation.GREATER_EQUAL, True)

    # -------------------------------------------------------------------------
    # Approximate equality
    # -------------------------------------------------------------------------

    def check_close(self, left: Any, right: Any, epsilon: float) -> bool:
        """
        Non-critical check that |left - right| < epsilon * (1 + |left| + |right|).

        The tolerance is relative plus absolute, so it stays meaningful near
        zero and at large magnitudes. Evaluated as a LESS relational check.
        """
        return self._evaluate_close(
            left, right, epsilon, False, caller_location(), "check_close"
        )

    def require_close(self, left: Any, right: Any, epsilon: float) -> bool:
        return self._evaluate_close(
            left, right, epsilon, True, caller_location(), "require_close"
        )

    def check_array_close(self, left: Any, right: Any, epsilon: float) -> bool:
        """
        check_close() over array-likes, using the maximum absolute coefficient.

        Counts two checks: a critical size equality, then the closeness check.
        """
        return self._evaluate_array_close(
            left, right, epsilon, False, caller_location(), "check_array_close"
        )

    def require_array_close(self, left: Any, right: Any, epsilon: float) -> bool:
        return self._evaluate_array_close(
            left, right, epsilon, True, caller_location(), "require_array_close"
        )

    # -------------------------------------------------------------------------
    # Exception expectations
    # -------------------------------------------------------------------------

    def check_throw(self, work: Callable[[], Any], expected: ExpectedKind) -> bool:
        """Non-critical check that `work()` raises `expected`."""
        return self._evaluate_throw(
            work, expected, False, caller_location(), "check_throw"
        )

    def require_throw(self, work: Callable[[], Any], expected: ExpectedKind) -> bool:
        return self._evaluate_throw(
            work, expected, True, caller_location(), "require_throw"
        )

    def check_nothrow(self, work: Callable[[], Any]) -> bool:
        """Non-critical check that `work()` raises nothing."""
        return self._evaluate_nothrow(work, False, caller_location(), "check_nothrow")

    def require_nothrow(self, work: Callable[[], Any]) -> bool:
        return self._evaluate_nothrow(work, True, caller_location(), "require_nothrow")
