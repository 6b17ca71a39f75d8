"""
Modified Akima piecewise cubic Hermite interpolation.

Each knot gets a slope that is a weighted mean of the secant slopes on
either side. The weights

    w1 = |m_{i+1} - m_i| + |m_{i+1} + m_i| / 2
    w2 = |m_{i-1} - m_{i-2}| + |m_{i-1} + m_{i-2}| / 2
    d_i = (w1 m_{i-1} + w2 m_i) / (w1 + w2)

differ from Akima's original |m_{i+1} - m_i| by the |m_{i+1} + m_i| / 2
term, so that runs of equal secants no longer give 0/0 and the slope
falls back to the arithmetic mean of comparable neighbours. Where both
weights vanish (all four secants zero) the slope is 0.

Two secants are appended at each end by quadratic extrapolation,
m_{-1} = 2 m_0 - m_1 and m_{-2} = 2 m_{-1} - m_0, mirrored at the right.

Guarantees:
    - exact reproduction of the knot values
    - constant data gives a constant; linear data gives the line

References:
    Akima, H. (1970) "A new method of interpolation and smooth curve
    fitting based on local procedures", J. ACM 17, 589-602.
    Moler, C. (2019) "Makima Piecewise Cubic Interpolation",
    Cleve's Corner, MathWorks blog.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyspecial.core.compute.precision import safe_divide
from pyspecial.core.policy import DEFAULT_POLICY, NumericPolicy
from pyspecial.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_strictly_increasing,
)

logger = logging.getLogger(__name__)

MIN_KNOTS = 2


def _padded_secants(m: NDArray) -> NDArray:
    """Secants m_{-2} .. m_{n} with two extrapolated values at each end."""
    if len(m) == 1:
        return np.full(5, m[0], dtype=m.dtype)
    padded = np.empty(len(m) + 4, dtype=m.dtype)
    padded[2:-2] = m
    padded[1] = 2 * m[0] - m[1]
    padded[0] = 2 * padded[1] - m[0]
    padded[-2] = 2 * m[-1] - m[-2]
    padded[-1] = 2 * padded[-2] - m[-1]
    return padded


def makima_slopes(x: NDArray, y: NDArray) -> NDArray:
    """Per-knot slopes for strictly increasing x (len(x) >= 2)."""
    m = np.diff(y) / np.diff(x)
    padded = _padded_secants(m)
    # For knot i: m_{i-2}, m_{i-1}, m_i, m_{i+1}
    m_left2 = padded[:-3]
    m_left1 = padded[1:-2]
    m_right0 = padded[2:-1]
    m_right1 = padded[3:]
    w1 = np.abs(m_right1 - m_right0) + np.abs(m_right1 + m_right0) / 2
    w2 = np.abs(m_left1 - m_left2) + np.abs(m_left1 + m_left2) / 2
    slopes = safe_divide(w1 * m_left1 + w2 * m_right0, w1 + w2, 0.0)
    return slopes.astype(x.dtype, copy=False)


def hermite_coefficients(x: NDArray, y: NDArray, slopes: NDArray) -> NDArray:
    """
    Segment table of shape (n-1, 4).

    Row i holds (c0, c1, c2, c3) with
    p_i(t) = c0 + c1 u + c2 u^2 + c3 u^3, u = t - x_i.
    """
    h = np.diff(x)
    secant = np.diff(y) / h
    s0 = slopes[:-1]
    s1 = slopes[1:]
    table = np.empty((len(h), 4), dtype=x.dtype)
    table[:, 0] = y[:-1]
    table[:, 1] = s0
    table[:, 2] = (3 * secant - 2 * s0 - s1) / h
    table[:, 3] = (s0 + s1 - 2 * secant) / (h * h)
    return table


class Makima:
    """
    Modified Akima interpolant through (x, y).

    Parameters
    ----------
    x : array-like
        Strictly increasing, finite knot abscissas (at least two).
    y : array-like
        Finite knot ordinates, same length as x.
    policy : NumericPolicy
        Governs the handling of queries outside [x[0], x[-1]].

    Raises
    ------
    InvalidInputError
        Malformed knots: non-numeric, non-finite, too few, not strictly
        increasing. DimensionError (a subclass) for shape problems.

    Notes
    -----
    Knots keep their floating dtype (float32 in, float32 out). The knot,
    slope and coefficient arrays are read-only; the object is immutable
    and safe to share between threads.

    Examples
    --------
    >>> s = Makima([0, 1, 2, 3], [0, 1, 2, 3])
    >>> float(s(1.5))
    1.5
    """

    def __init__(
        self,
        x: ArrayLike,
        y: ArrayLike,
        *,
        policy: NumericPolicy = DEFAULT_POLICY,
    ):
        x = check_array(x, 'x')
        y = check_array(y, 'y')
        check_1d(x, 'x')
        check_1d(y, 'y')
        check_consistent_length(x, y, names=('x', 'y'))
        check_min_samples(x, MIN_KNOTS, 'x')
        check_finite(x, 'x')
        check_finite(y, 'y')
        check_strictly_increasing(x, 'x')

        dtype = np.result_type(x, y)
        x = x.astype(dtype, copy=True)
        y = y.astype(dtype, copy=True)
        slopes = makima_slopes(x, y)
        coefficients = hermite_coefficients(x, y, slopes)
        for array in (x, y, slopes, coefficients):
            array.flags.writeable = False

        self._x = x
        self._y = y
        self._slopes = slopes
        self._coefficients = coefficients
        self._policy = policy
        logger.debug("Makima built on %d knots (%s)", len(x), dtype)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def x(self) -> NDArray:
        return self._x

    @property
    def y(self) -> NDArray:
        return self._y

    @property
    def slopes(self) -> NDArray:
        """Slope assigned to each knot."""
        return self._slopes

    @property
    def coefficients(self) -> NDArray:
        """(n-1, 4) table of segment cubics in powers of t - x_i."""
        return self._coefficients

    @property
    def policy(self) -> NumericPolicy:
        return self._policy

    @property
    def domain(self) -> tuple[Any, Any]:
        """Closed interval [x[0], x[-1]] on which the interpolant is defined."""
        return self._x[0], self._x[-1]

    @property
    def dtype(self) -> np.dtype:
        return self._x.dtype

    def __len__(self) -> int:
        return len(self._x)

    def __repr__(self) -> str:
        lo, hi = self.domain
        return (
            f"Makima(n_knots={len(self)}, domain=[{lo!r}, {hi!r}], "
            f"dtype={self.dtype})"
        )

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _locate(self, t: ArrayLike, function: str) -> tuple[NDArray, NDArray, NDArray]:
        """
        Segment index and offset for each query.

        Returns (t, index, bad) with t cast to the knot dtype; entries
        flagged in ``bad`` are outside the domain or NaN and have a dummy
        index.
        """
        t = np.asarray(t, dtype=self.dtype)
        lo, hi = self.domain
        bad = np.isnan(t) | (t < lo) | (t > hi)
        if np.any(bad):
            first = t[bad].flat[0]
            # Raises under the default policy.
            self._policy.report(
                'domain', function,
                f"query {first!r} is outside the interpolation domain "
                f"[{lo!r}, {hi!r}]",
                value=first,
            )
        index = np.searchsorted(self._x, t, side='right') - 1
        index = np.clip(index, 0, len(self._x) - 2)
        return t, index, bad

    def _finish(self, values: NDArray, bad: NDArray, scalar: bool) -> Any:
        if np.any(bad):
            values = np.where(bad, np.nan, values).astype(self.dtype, copy=False)
        if scalar:
            return values[()]
        return values

    def __call__(self, t: ArrayLike) -> Any:
        """
        Evaluate the interpolant at t (scalar or array).

        Raises:
            DomainError: t outside [x[0], x[-1]] or NaN (policy permitting;
                otherwise those entries are NaN).
        """
        scalar = np.ndim(t) == 0
        t, index, bad = self._locate(t, 'Makima')
        c = self._coefficients[index]
        u = t - self._x[index]
        values = ((c[..., 3] * u + c[..., 2]) * u + c[..., 1]) * u + c[..., 0]
        # Right end point is the last knot itself, not a segment value.
        values = np.where(t == self._x[-1], self._y[-1], values)
        return self._finish(values, bad, scalar)

    def derivative(self, t: ArrayLike) -> Any:
        """First derivative of the interpolant at t (scalar or array)."""
        scalar = np.ndim(t) == 0
        t, index, bad = self._locate(t, 'Makima.derivative')
        c = self._coefficients[index]
        u = t - self._x[index]
        values = (3 * c[..., 3] * u + 2 * c[..., 2]) * u + c[..., 1]
        values = np.where(t == self._x[-1], self._slopes[-1], values)
        return self._finish(values, bad, scalar)


def build_interpolator(
    x: ArrayLike,
    y: ArrayLike,
    *,
    policy: NumericPolicy = DEFAULT_POLICY,
) -> Makima:
    """Construct a Makima interpolant; see Makima for the contract."""
    return Makima(x, y, policy=policy)


def evaluate(interpolator: Makima, t: ArrayLike) -> Any:
    """Evaluate an interpolant at t; equivalent to ``interpolator(t)``."""
    return interpolator(t)
