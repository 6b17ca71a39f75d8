"""
Elementwise application of scalar evaluators.

The special functions and distribution queries are written for scalars,
where regime selection is a plain ``if``. The ``elementwise`` decorator
lets them accept array-likes too: arguments are broadcast and the scalar
implementation is applied per element, preserving the result dtype.
"""

from __future__ import annotations

import functools
from typing import Any, Callable

import numpy as np

from pyspecial.core.compute.precision import result_dtype


def elementwise(func: Callable[..., Any] | None = None, *, skip: int = 0):
    """
    Decorate a scalar function so it broadcasts over array arguments.

    Args:
        func: Scalar function.
        skip: Number of leading positional arguments that are not numeric
            (e.g. 1 for ``self`` on methods).

    Usage:
        @elementwise
        def gamma_p(a, x, policy=DEFAULT_POLICY): ...

        class StudentsT:
            @elementwise(skip=1)
            def cdf(self, t): ...
    """
    def decorate(scalar_func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(scalar_func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            head, numeric = args[:skip], args[skip:]
            if not any(np.ndim(arg) for arg in numeric):
                return scalar_func(*args, **kwargs)
            # Scalars stay as given so Python floats remain weakly typed.
            numeric = [np.asarray(arg) if np.ndim(arg) else arg for arg in numeric]
            shape = np.broadcast_shapes(*(np.shape(arg) for arg in numeric))
            out = np.empty(shape, dtype=result_dtype(*numeric))
            expanded = [
                np.broadcast_to(arg, shape) if isinstance(arg, np.ndarray) and arg.ndim
                else arg
                for arg in numeric
            ]
            for index in np.ndindex(shape):
                out[index] = scalar_func(
                    *head,
                    *(arg[index] if isinstance(arg, np.ndarray) and arg.ndim else arg
                      for arg in expanded),
                    **kwargs,
                )
            return out
        return wrapper

    if func is not None:
        return decorate(func)
    return decorate
