"""
Bracketed root finding for monotone functions.

Provides the two pieces used to invert CDFs and incomplete gamma functions:

    geometric_search: widen a starting point geometrically until the
        function changes sign, yielding a verified bracket
    newton_bisect: Newton iteration that never leaves a maintained bracket,
        falling back to bisection for any step that would

Both work on *increasing* functions; callers negate decreasing ones. The
finders report convergence failure in their return value rather than
raising, so the calling evaluator can route it through its NumericPolicy.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of a root search.

    Attributes:
        root: Best estimate of the root
        iterations: Function evaluations used
        converged: Whether the precision target was met
        bracket: Final (lower, upper) interval known to contain the root
        final_change: Size of the last step taken
    """
    root: Any
    iterations: int
    converged: bool
    bracket: tuple[Any, Any]
    final_change: float = math.nan


@dataclass(frozen=True)
class Bracket:
    """Result of geometric_search: f(lower) <= 0 <= f(upper) when found."""
    lower: Any
    upper: Any
    found: bool
    iterations: int


def geometric_search(
    f: Callable[[Any], Any],
    start: Any,
    factor: float,
    max_iterations: int,
) -> Bracket:
    """
    Widen geometrically from ``start`` until ``f`` changes sign.

    The step starts at ``factor`` (> 1 moves away from zero, < 1 moves
    towards it) and is squared after every iteration, so the whole range
    of the floating type is covered in a few dozen evaluations. A point
    that overflows is replaced by the largest finite value of the same
    sign; a point that underflows is evaluated at zero. The search stops
    unsuccessfully at either end.

    Args:
        f: Increasing function.
        start: Non-zero starting point.
        factor: Initial multiplicative step.
        max_iterations: Cap on evaluations.

    Returns:
        Bracket ordered so that lower < upper.
    """
    largest = np.finfo(type(start)).max
    x = start
    fx = f(x)
    start_sign = fx > 0
    step = factor
    for iteration in range(1, max_iterations + 1):
        previous = x
        x = x * step
        step = step * step
        if not np.isfinite(x):
            x = np.copysign(largest, previous)
        fx = f(x)
        if (fx > 0) != start_sign or fx == 0:
            lower, upper = sorted((previous, x))
            return Bracket(lower, upper, True, iteration)
        if x == 0 or abs(x) >= largest:
            lower, upper = sorted((previous, x))
            return Bracket(lower, upper, False, iteration)
    lower, upper = sorted((start, x))
    return Bracket(lower, upper, False, max_iterations)


def _bisect(lower: Any, upper: Any) -> Any:
    # Geometric midpoint when the bracket spans orders of magnitude.
    if (lower > 0) == (upper > 0) and lower != 0 and upper != 0:
        ratio = upper / lower
        if ratio > 8 or ratio < 0.125:
            sign = 1 if upper > 0 else -1
            return sign * np.sqrt(abs(lower)) * np.sqrt(abs(upper))
    return lower + (upper - lower) / 2


def newton_bisect(
    f: Callable[[Any], tuple[Any, Any]],
    guess: Any,
    lower: Any,
    upper: Any,
    *,
    tolerance: float,
    max_iterations: int,
    residual_tolerance: float = 0.0,
) -> RootResult:
    """
    Safeguarded Newton iteration on an increasing function.

    Args:
        f: Returns ``(value, derivative)`` at a point.
        guess: Starting point; clipped into the bracket.
        lower, upper: Bracket with f(lower) <= 0 <= f(upper).
        tolerance: Relative step / bracket width at which to stop.
        max_iterations: Cap on evaluations.
        residual_tolerance: Absolute |f| at which to stop.

    Returns:
        RootResult; ``converged`` is False when the cap was hit.
    """
    lo, hi = lower, upper
    x = guess
    if not (lo <= x <= hi):
        x = _bisect(lo, hi)
    change = math.inf

    for iteration in range(1, max_iterations + 1):
        fx, dfx = f(x)
        if fx == 0 or abs(fx) <= residual_tolerance:
            return RootResult(x, iteration, True, (lo, hi), change)
        if fx < 0:
            lo = x
        else:
            hi = x

        x_new = None
        if dfx > 0 and np.isfinite(dfx):
            x_new = x - fx / dfx
            if not (lo < x_new < hi):
                x_new = None
        if x_new is None:
            x_new = _bisect(lo, hi)

        change = abs(x_new - x)
        x = x_new
        if change <= tolerance * abs(x) or change == 0:
            logger.debug("newton_bisect converged in %d iterations", iteration)
            return RootResult(x, iteration, True, (lo, hi), change)
        if hi - lo <= tolerance * max(abs(lo), abs(hi)):
            logger.debug("newton_bisect bracket collapsed in %d iterations", iteration)
            return RootResult(x, iteration, True, (lo, hi), change)

    return RootResult(x, max_iterations, False, (lo, hi), change)
