"""
Series and continued-fraction evaluators.

Both take an iterator of terms, stop once the next contribution is below
the target relative precision, and report exhaustion of the iteration cap
through the NumericPolicy (the partial result is the clamped value).

References:
    Lentz, W.J. (1976) "Generating Bessel functions in Mie scattering
    calculations using continued fractions", Applied Optics 15, 668-671.
    Thompson, I.J. and Barnett, A.R. (1986) "Coulomb and Bessel functions
    of complex arguments and order", J. Comput. Phys. 64, 490-509
    (the "modified" Lentz algorithm used here).
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np

from pyspecial.core.compute.precision import min_value
from pyspecial.core.policy import NumericPolicy


def sum_series(
    terms: Iterator[Any],
    *,
    initial: Any,
    tolerance: float,
    policy: NumericPolicy,
    function: str,
) -> Any:
    """
    Sum ``initial + t1 + t2 + ...`` until ``|t_k| <= tolerance * |sum|``.

    Args:
        terms: Iterator of terms (may be infinite).
        initial: Value the sum starts from.
        tolerance: Relative stopping threshold.
        policy: Supplies the iteration cap and error disposition.
        function: Public function name for error reports.
    """
    total = initial
    term = initial
    limit = policy.max_series_iterations
    for count, term in enumerate(terms, start=1):
        total += term
        if abs(term) <= tolerance * abs(total):
            return total
        if count >= limit:
            break
    else:
        return total
    return policy.report_evaluation(
        function,
        f"series did not converge after {limit} terms (last term {term!r})",
        iterations=limit,
        final_change=float(abs(term)),
        threshold=tolerance,
        clamped=total,
    )


def continued_fraction(
    b0: Any,
    pairs: Iterator[tuple[Any, Any]],
    *,
    tolerance: float,
    policy: NumericPolicy,
    function: str,
) -> Any:
    """
    Evaluate ``b0 + a1/(b1 + a2/(b2 + ...))`` by the modified Lentz method.

    Zero denominators are replaced by a tiny value so that no intermediate
    ever overflows or divides by zero.

    Args:
        b0: Leading term.
        pairs: Iterator of (a_k, b_k) for k = 1, 2, ...
        tolerance: Stop when the multiplicative update is within
            ``tolerance`` of 1.
    """
    tiny = min_value(type(b0)) * 16
    f = b0 if b0 != 0 else tiny
    c = f
    d = f * 0
    delta = f
    limit = policy.max_series_iterations
    count = 0
    for count, (a, b) in enumerate(pairs, start=1):
        d = b + a * d
        if d == 0:
            d = tiny
        c = b + a / c
        if c == 0:
            c = tiny
        d = 1 / d
        delta = c * d
        f *= delta
        if abs(delta - 1) <= tolerance:
            return f
        if count >= limit:
            break
    else:
        return f
    return policy.report_evaluation(
        function,
        f"continued fraction did not converge after {limit} iterations",
        iterations=count,
        final_change=float(abs(delta - 1)),
        threshold=tolerance,
        clamped=f,
    )


def is_integer(value: Any) -> bool:
    return bool(np.isfinite(value) and np.floor(value) == value)


def is_half_integer(value: Any) -> bool:
    return bool(np.isfinite(value) and not is_integer(value) and is_integer(2 * value))
