"""
Numerical precision constants and utilities.

Provides machine epsilon, representable-range limits, result-type
selection and checked narrowing used by every evaluator. All helpers are
parameterised by a numpy floating dtype so the evaluators stay generic over
float32, float64 and longdouble.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pyspecial.core.policy import NumericPolicy


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    Args:
        dtype: NumPy dtype or type

    Returns:
        Machine epsilon for the dtype
    """
    return float(np.finfo(dtype).eps)


def max_value(dtype: np.dtype | type = np.float64) -> Any:
    """Largest finite value of dtype, as a dtype scalar."""
    return np.finfo(dtype).max


def min_value(dtype: np.dtype | type = np.float64) -> Any:
    """Smallest positive normalised value of dtype, as a dtype scalar."""
    return np.finfo(dtype).tiny


def log_max_value(dtype: np.dtype | type = np.float64) -> float:
    """log of the largest finite value (~709.78 for float64)."""
    return float(np.log(np.finfo(dtype).max))


def log_min_value(dtype: np.dtype | type = np.float64) -> float:
    """log of the smallest normalised value (~-708.40 for float64)."""
    return float(np.log(np.finfo(dtype).tiny))


def result_dtype(*args: Any) -> np.dtype:
    """
    Floating dtype of an evaluation's result.

    Python scalars are "weak" (numpy >= 2 promotion), so a float32 argument
    mixed with Python floats stays float32. Integer results map to float64.
    """
    dtype = np.result_type(*args)
    if not np.issubdtype(dtype, np.floating):
        return np.dtype(np.float64)
    return dtype


def narrow(
    value: Any,
    dtype: np.dtype,
    policy: NumericPolicy,
    function: str,
) -> Any:
    """
    Checked narrowing conversion of a working-precision result.

    Overflow to infinity, underflow of a non-zero value to zero, and
    denormalised results are reported through the policy.

    Returns:
        A scalar of ``dtype``.
    """
    dtype = np.dtype(dtype)
    with np.errstate(over='ignore', under='ignore'):
        narrowed = dtype.type(value)
    if not np.isfinite(value) or value == 0:
        return narrowed
    if not np.isfinite(narrowed):
        sign = 1.0 if value > 0 else -1.0
        return policy.report(
            'overflow', function,
            f"result {value!r} overflows {dtype.name}",
            value=value,
            special=dtype.type(sign * np.inf),
            clamped=dtype.type(sign) * max_value(dtype),
        )
    if narrowed == 0:
        sign = 1.0 if value > 0 else -1.0
        return policy.report(
            'underflow', function,
            f"result {value!r} underflows {dtype.name}",
            value=value,
            special=dtype.type(0.0),
            clamped=dtype.type(sign) * min_value(dtype),
        )
    if abs(narrowed) < min_value(dtype):
        return policy.report(
            'rounding', function,
            f"result {value!r} is denormalised in {dtype.name}",
            value=value,
            special=narrowed,
            clamped=narrowed,
        )
    return narrowed


def safe_divide(
    numerator: NDArray[np.floating[Any]],
    denominator: NDArray[np.floating[Any]],
    fill_value: float = 0.0
) -> NDArray[np.floating[Any]]:
    """
    Division with protection against divide-by-zero.

    Args:
        numerator: Numerator array
        denominator: Denominator array
        fill_value: Value to use where denominator is zero

    Returns:
        Result of division with fill_value where denominator is zero
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        result = numerator / denominator
    return np.where(denominator == 0, fill_value, result)


def evaluate(
    func: Callable[..., Any],
    function: str,
    policy: NumericPolicy,
    *args: Any,
) -> Any:
    """
    Run a scalar evaluator in working precision and narrow the result.

    The arguments are converted to the working type chosen by
    ``policy.working_dtype`` for their result dtype; overflow and underflow
    inside the evaluator are silenced, since the evaluator reports them
    itself and ``narrow`` checks the final conversion.
    """
    out = result_dtype(*args)
    work = policy.working_dtype(out).type
    with np.errstate(over='ignore', under='ignore', divide='ignore', invalid='ignore'):
        value = func(*(work(arg) for arg in args))
    return narrow(value, out, policy, function)
