"""
Input validation utilities for PySpecial.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent. They guard construction-time
inputs (knot sequences); evaluation-time domain checks go through the
NumericPolicy instead.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pyspecial.core.exceptions import (
    DimensionError,
    InvalidInputError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).
    Floating dtypes are preserved so that float32 and longdouble knots are
    interpolated in their own precision.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        InvalidInputError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise InvalidInputError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise InvalidInputError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise InvalidInputError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise InvalidInputError(f"{name}: complex dtype {result.dtype} is not supported")

    if not np.issubdtype(result.dtype, np.floating) or result.dtype == np.float16:
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        InvalidInputError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise InvalidInputError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    if array.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}"
        )


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of entries.

    Raises:
        InvalidInputError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise InvalidInputError(
            f"{name}: requires at least {min_samples} points, got {n}"
        )


def check_strictly_increasing(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify a 1D array is strictly increasing (hence free of duplicates).

    Raises:
        InvalidInputError: If any consecutive pair is not increasing
    """
    steps = np.diff(array)
    bad = np.where(steps <= 0)[0]
    if len(bad) > 0:
        i = int(bad[0])
        kind = "duplicate" if steps[i] == 0 else "decreasing"
        raise InvalidInputError(
            f"{name}: must be strictly increasing; {kind} values at indices "
            f"{i} and {i + 1} ({array[i]!r}, {array[i + 1]!r})"
        )
