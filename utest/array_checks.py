# utest/array_checks.py
# numpy reductions behind check_array_close / require_array_close.
#
# Arrays are compared by size, not shape: both operands are flattened before
# the element-wise difference. An empty array reduces to 0.0.

from typing import Any

import numpy as np


def as_flat_array(value: Any) -> np.ndarray:
    """Convert `value` to a flattened float64 array."""
    return np.ravel(np.asarray(value, dtype=np.float64))


def max_abs(array: np.ndarray) -> float:
    """Maximum absolute coefficient of `array`; 0.0 when empty."""
    if array.size == 0:
        return 0.0
    return float(np.max(np.abs(array)))


def max_abs_difference(left: np.ndarray, right: np.ndarray) -> float:
    """
    Maximum absolute element-wise difference of two equal-size arrays.

    Raises ValueError if the sizes differ; callers enforce equal size first.
    """
    if left.size != right.size:
        raise ValueError(
            f"max_abs_difference: size mismatch {left.size} != {right.size}"
        )
    return max_abs(left - right)
