import sys
from pathlib import Path

import pytest

from utest import (
    EXIT_FAILURE,
    CheckEvaluator,
    CriticalCheckAbort,
    HarnessStateError,
    HarnessUsageError,
    Relation,
)


# =============================================================================
# SHARED HELPERS
# =============================================================================

def _diagnostics(stream):
    """Failure lines only; case banners start with 'running test case'."""
    return [
        line for line in stream.getvalue().splitlines()
        if not line.startswith("running test case")
    ]


def _counts(module):
    return module.counters.checks_evaluated, module.counters.checks_failed


def _raise_key_error():
    raise KeyError("k")


def _return_none():
    return None


# =============================================================================
# SECTION 1 -- Boolean checks
# =============================================================================

class TestBooleanCheck:

    def test_true_condition_counts_check_only(self, module, stream):
        assert module.check(1 < 2) is True
        assert _counts(module) == (1, 0)
        assert stream.getvalue() == ""

    def test_false_condition_counts_failure_and_continues(self, module, stream):
        module.case("bool")
        assert module.check(1 > 2) is False
        reached = True
        assert reached
        assert _counts(module) == (1, 1)
        assert _diagnostics(stream) != []

    def test_diagnostic_contains_location_labels_and_expression(self, module, stream):
        module.case("bool")
        module.check(1 > 2)
        (line,) = _diagnostics(stream)
        location, _, rest = line.partition(": [")
        path, _, lineno = location.rpartition(":")
        assert Path(path).name == "test_check_evaluator.py"
        assert lineno.isdigit()
        assert rest == "unit/bool]: check {1 > 2} failed!"

    def test_expr_overrides_source_text(self, module, stream):
        module.check(False, expr="cache is warm")
        assert _diagnostics(stream)[0].endswith("check {cache is warm} failed!")

    def test_diagnostic_uses_latest_case(self, module, stream):
        module.case("first")
        module.case("second")
        module.check(False)
        assert "[unit/second]" in _diagnostics(stream)[0]

    def test_diagnostic_before_any_case(self, module, stream):
        module.check(False)
        assert "[unit/]" in _diagnostics(stream)[0]

    def test_require_true_passes(self, module):
        assert module.require(True) is True
        assert _counts(module) == (1, 0)

    def test_require_false_aborts(self, module, stream, terminations):
        executed = []
        with pytest.raises(CriticalCheckAbort) as info:
            module.require(1 > 2)
            executed.append("after")
        assert executed == []
        assert info.value.code == EXIT_FAILURE
        assert info.value.diagnostic == _diagnostics(stream)[0]
        assert _counts(module) == (1, 1)
        assert terminations == [EXIT_FAILURE]

    def test_passing_require_never_terminates(self, module, terminations):
        module.require(True)
        module.require_equal(1, 1)
        assert terminations == []

    def test_critical_abort_escapes_except_exception(self, module):
        with pytest.raises(SystemExit):
            try:
                module.require(False)
            except Exception:  # noqa: BLE001
                pytest.fail("critical abort must not be an Exception")

    def test_same_passing_check_twice(self, module, stream):
        for _ in range(2):
            module.check(True)
        assert _counts(module) == (2, 0)
        assert stream.getvalue() == ""


# =============================================================================
# SECTION 2 -- Relational checks
# =============================================================================

class TestRelationalCheck:

    def test_equal_passes(self, module):
        assert module.check_equal(2 + 2, 4) is True
        assert _counts(module) == (1, 0)

    def test_equal_fails_with_both_operands(self, module, stream):
        assert module.check_equal(2 + 2, 5) is False
        (line,) = _diagnostics(stream)
        assert line.endswith("check {2 + 2 == 5} failed {4 == 5}!")
        assert _counts(module) == (1, 1)

    def test_operands_evaluated_once(self, module):
        calls = []

        def value():
            calls.append(1)
            return 3

        module.check_equal(value(), 4)
        module.check_less(value(), 4)
        assert len(calls) == 2

    def test_real_operands_use_fixed_point(self, module, stream):
        module.check_equal(0.5, 0.25)
        assert _diagnostics(stream)[0].endswith(
            "failed {0.500000000000 == 0.250000000000}!"
        )

    @pytest.mark.parametrize("name, left, right, passed", [
        ("check_equal",         1, 1, True),
        ("check_equal",         1, 2, False),
        ("check_not_equal",     1, 2, True),
        ("check_not_equal",     1, 1, False),
        ("check_less",          1, 2, True),
        ("check_less",          2, 2, False),
        ("check_less_equal",    2, 2, True),
        ("check_less_equal",    3, 2, False),
        ("check_greater",       3, 2, True),
        ("check_greater",       2, 2, False),
        ("check_greater_equal", 2, 2, True),
        ("check_greater_equal", 1, 2, False),
    ])
    def test_every_relation(self, module, name, left, right, passed):
        assert getattr(module, name)(left, right) is passed
        assert _counts(module) == (1, 0 if passed else 1)

    @pytest.mark.parametrize("name", [
        "require_equal",
        "require_not_equal",
        "require_less",
        "require_less_equal",
        "require_greater",
        "require_greater_equal",
    ])
    def test_every_critical_relation_aborts(self, module, name):
        left, right = {
            "require_equal":         (1, 2),
            "require_not_equal":     (1, 1),
            "require_less":          (2, 1),
            "require_less_equal":    (2, 1),
            "require_greater":       (1, 2),
            "require_greater_equal": (1, 2),
        }[name]
        with pytest.raises(CriticalCheckAbort):
            getattr(module, name)(left, right)

    def test_symbol_in_diagnostic(self, module, stream):
        module.check_greater_equal(1, 2)
        assert _diagnostics(stream)[0].endswith("check {1 >= 2} failed {1 >= 2}!")

    def test_generic_relation(self, module, stream):
        assert module.check_relation(3, 3, Relation.LESS_EQUAL) is True
        assert module.check_relation(4, 3, Relation.LESS) is False
        assert _diagnostics(stream)[0].endswith("check {4 < 3} failed {4 < 3}!")

    def test_generic_relation_critical(self, module):
        with pytest.raises(CriticalCheckAbort):
            module.check_relation(4, 3, Relation.LESS, critical=True)

    def test_generic_relation_rejects_unknown_relation(self, module):
        with pytest.raises(HarnessUsageError):
            module.check_relation(1, 2, "<")
        assert _counts(module) == (0, 0)

    def test_generated_wrappers_are_named(self, module):
        assert module.check_equal.__name__ == "check_equal"
        assert "==" in module.check_equal.__doc__


# =============================================================================
# SECTION 3 -- Approximate equality
# =============================================================================

class TestCloseCheck:

    def test_tiny_difference_passes(self, module):
        assert module.check_close(1.0, 1.0 + 1e-10, 1e-6) is True
        assert _counts(module) == (1, 0)

    def test_large_difference_fails(self, module, stream):
        assert module.check_close(1.0, 1.1, 1e-6) is False
        line = _diagnostics(stream)[0]
        assert "abs(1.0 - 1.1) < 1e-6 * (1 + abs(1.0) + abs(1.1))" in line
        assert _counts(module) == (1, 1)

    def test_meaningful_near_zero(self, module):
        assert module.check_close(0.0, 1e-9, 1e-6) is True
        assert module.check_close(0.0, 1e-3, 1e-6) is False

    def test_scales_with_magnitude(self, module):
        assert module.check_close(1e12, 1e12 + 1.0, 1e-9) is True
        assert module.check_close(1e12, 1.01e12, 1e-9) is False

    def test_nan_never_close(self, module):
        assert module.check_close(float("nan"), 1.0, 1e-6) is False

    def test_require_close_aborts(self, module):
        with pytest.raises(CriticalCheckAbort):
            module.require_close(1.0, 2.0, 1e-6)

    @pytest.mark.parametrize("epsilon", [-1e-6, float("nan"), float("inf"), "1e-6", True])
    def test_invalid_epsilon(self, module, epsilon):
        with pytest.raises(HarnessUsageError, match="epsilon"):
            module.check_close(1.0, 1.0, epsilon)
        assert _counts(module) == (0, 0)


# =============================================================================
# SECTION 4 -- Exception expectations
# =============================================================================

class TestThrowCheck:

    def test_expected_kind_passes(self, module):
        assert module.check_throw(lambda: int("x"), ValueError) is True
        assert _counts(module) == (1, 0)

    def test_other_kind_fails(self, module, stream):
        assert module.check_throw(_raise_key_error, ValueError) is False
        assert _diagnostics(stream)[0].endswith(
            "call {_raise_key_error} does not throw {ValueError}!"
        )
        assert _counts(module) == (1, 1)

    def test_no_exception_fails(self, module, stream):
        assert module.check_throw(lambda: int("7"), ValueError) is False
        assert _diagnostics(stream)[0].endswith('call {int("7")} does not throw!')

    def test_require_throw_aborts(self, module):
        with pytest.raises(CriticalCheckAbort):
            module.require_throw(_return_none, ValueError)

    def test_nested_require_is_not_absorbed(self, module):
        with pytest.raises(CriticalCheckAbort):
            module.check_throw(lambda: module.require(False), SystemExit)

    def test_non_callable_work_rejected(self, module):
        with pytest.raises(HarnessUsageError, match="callable"):
            module.check_throw(None, ValueError)
        assert _counts(module) == (0, 0)

    def test_invalid_kind_rejected(self, module):
        with pytest.raises(HarnessUsageError):
            module.check_throw(_return_none, "ValueError")


class TestNothrowCheck:

    def test_no_exception_passes(self, module):
        assert module.check_nothrow(lambda: int("7")) is True
        assert _counts(module) == (1, 0)

    def test_any_exception_fails(self, module, stream):
        assert module.check_nothrow(lambda: int("x")) is False
        assert module.check_nothrow(_raise_key_error) is False
        lines = _diagnostics(stream)
        assert lines[0].endswith('call {int("x")} throws!')
        assert lines[1].endswith("call {_raise_key_error} throws!")
        assert _counts(module) == (2, 2)

    def test_require_nothrow_aborts(self, module):
        with pytest.raises(CriticalCheckAbort):
            module.require_nothrow(_raise_key_error)

    def test_inner_checks_are_counted(self, module):
        module.check_nothrow(lambda: module.check(False))
        assert _counts(module) == (2, 1)

    def test_exiting_work_fails_the_check(self, module, stream):
        assert module.check_nothrow(lambda: sys.exit(0)) is False
        assert _counts(module) == (1, 1)
        assert _diagnostics(stream)[0].endswith("call {sys.exit(0)} throws!")

    def test_exiting_work_does_not_end_the_module(self, module):
        module.check(False)
        module.check_nothrow(lambda: sys.exit(0))
        module.check(True)
        assert _counts(module) == (3, 2)
        assert module.end() == EXIT_FAILURE


# =============================================================================
# SECTION 5 -- Module state
# =============================================================================

class TestChecksAfterEnd:

    def test_check_after_end_rejected(self, module):
        module.end()
        with pytest.raises(HarnessStateError):
            module.check(True)
        with pytest.raises(HarnessStateError):
            module.check_equal(1, 1)
        assert _counts(module) == (0, 0)


class TestHostContract:

    def test_evaluator_without_host_cannot_be_created(self):
        with pytest.raises(TypeError):
            CheckEvaluator()
