"""
Student's t distribution.

All queries reduce to the regularized incomplete beta function:

    cdf(t) = I_x(v/2, 1/2) / 2           for t < 0,  x = v / (v + t^2)
    cdf(t) = 1 - I_x(v/2, 1/2) / 2       for t >= 0

with x and y = t^2 / (v + t^2) both formed directly, so neither tail loses
precision to 1 - x. The quantile inverts the lower tail by a bracketed
Newton iteration; the upper tail follows from the symmetry
quantile(p) = -quantile(1 - p).

For v = +inf, or v so large that 1/v is below machine epsilon, the
limiting standard normal distribution is used.

References:
    Hill, G.W. (1970) "Algorithm 396: Student's t-quantiles",
    Communications of the ACM 13, 619-620 (Cornish-Fisher seed).
    Shaw, W.T. (2006) "Sampling Student's T distribution - use of the
    inverse cumulative distribution function", J. Comput. Finance 9, 37-73.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy import special as sp_special

from pyspecial.core.compute.precision import (
    evaluate,
    log_max_value,
    machine_epsilon,
    max_value,
)
from pyspecial.core.compute.roots import geometric_search, newton_bisect
from pyspecial.core.compute.vectorize import elementwise
from pyspecial.core.families import FAMILY_STUDENTS_T
from pyspecial.core.policy import DEFAULT_POLICY, NumericPolicy
from pyspecial.special._gamma_utils import erfc, log_beta, log_gamma_delta_ratio
from pyspecial.special.beta import ibeta_pair


# =====================================================================
# Scalar kernels (working precision, v already validated)
# =====================================================================

def _is_normal_limit(v: Any) -> bool:
    return bool(np.isinf(v) or v > 1 / machine_epsilon(type(v)))


def _normal_pdf(t: Any) -> Any:
    pi = type(t)(np.pi)
    return np.exp(-t * t / 2) / np.sqrt(2 * pi)


def _normal_cdf(t: Any) -> Any:
    return erfc(-t / np.sqrt(type(t)(2))) / 2


def _normal_quantile(p: Any) -> Any:
    return type(p)(sp_special.ndtri(float(p)))


def _pdf(v: Any, t: Any) -> Any:
    if np.isinf(t):
        return type(v)(0)
    if _is_normal_limit(v):
        return _normal_pdf(t)
    # Gamma((v+1)/2) / Gamma(v/2) / sqrt(v pi) * (1 + t^2/v)^(-(v+1)/2)
    pi = type(v)(np.pi)
    if abs(t) > np.sqrt(v) / machine_epsilon(type(v)):
        # t^2 / v may overflow; the 1 in 1 + t^2/v is below rounding
        log_term = 2 * (np.log(abs(t)) - np.log(v) / 2)
    else:
        log_term = np.log1p(t * t / v)
    log_density = (
        -log_gamma_delta_ratio(v / 2, type(v)(0.5))
        - (v + 1) / 2 * log_term
    )
    return np.exp(log_density) / np.sqrt(v * pi)


def _beta_arguments(v: Any, t: Any) -> tuple[Any, Any]:
    """x = v / (v + t^2) and y = t^2 / (v + t^2), each without cancellation."""
    t2 = t * t
    if t2 > v:
        r = v / t2
        return r / (1 + r), 1 / (1 + r)
    r = t2 / v
    return 1 / (1 + r), r / (1 + r)


def _far_lower_tail(v: Any, t: Any) -> Any:
    """
    Lower tail once x = v / (v + t^2) is below machine epsilon.

    I_x(a, 1/2) = x^a / (a B(a, 1/2)) to within a relative O(x), taken in
    logs so that neither t^2 overflows nor x underflows.
    """
    log_ratio = np.log(v) - 2 * np.log(abs(t))
    log_x = log_ratio - np.log1p(np.exp(log_ratio))
    a = v / 2
    return np.exp(a * log_x - np.log(a) - log_beta(a, type(v)(0.5))) / 2


def _lower_tail(v: Any, t: Any, policy: NumericPolicy, function: str) -> Any:
    """P(T <= t) for t <= 0, or equivalently P(T > -t)."""
    if t == 0:
        return type(v)(0.5)
    if np.isinf(t):
        return type(v)(0)
    if _is_normal_limit(v):
        return _normal_cdf(t)
    if t * t > v / machine_epsilon(type(v)):
        return _far_lower_tail(v, t)
    x, y = _beta_arguments(v, t)
    lower, _ = ibeta_pair(v / 2, type(v)(0.5), x, y, policy, function)
    return lower / 2


def _cdf(v: Any, t: Any, policy: NumericPolicy, function: str) -> Any:
    if np.isnan(v):
        return v
    if np.isnan(t):
        return policy.report(
            'domain', function, "random variable t must not be NaN", value=t,
        )
    if t > 0:
        return 1 - _lower_tail(v, -t, policy, function)
    return _lower_tail(v, t, policy, function)


def _cornish_fisher_seed(v: Any, p: Any) -> Any:
    """Expansion of the t quantile about the normal quantile z, to O(1/v^2)."""
    z = _normal_quantile(p)
    z2 = z * z
    return (
        z
        + z * (z2 + 1) / (4 * v)
        + z * ((5 * z2 + 16) * z2 + 3) / (96 * v * v)
    )


def _log_tail_quantile(v: Any, p: Any) -> Any:
    """
    log|t| from the leading term of the lower tail (Hill, 1970):
    p = (v / t^2)^(v/2) / (v B(v/2, 1/2)), exact as t -> -inf.
    """
    return (
        np.log(v) / 2
        - (np.log(p) + np.log(v) + log_beta(v / 2, type(v)(0.5))) / v
    )


def _quantile_overflow(v: Any, p: Any, policy: NumericPolicy,
                       function: str) -> Any:
    return policy.report(
        'overflow', function,
        f"quantile of p={p!r} is beyond the largest finite value for df={v!r}",
        value=p,
        special=type(v)(-np.inf),
    )


def _lower_quantile(v: Any, p: Any, policy: NumericPolicy, function: str) -> Any:
    """t <= 0 with P(T <= t) = p, for 0 < p < 1/2."""
    if _is_normal_limit(v):
        return _normal_quantile(p)
    if v == 1:
        return -1 / np.tan(type(p)(np.pi) * p)
    q = 1 - p
    if v == 2:
        return -(q - p) / np.sqrt(2 * p * q)

    def residual(t):
        return _lower_tail(v, t, policy, function) - p

    def with_derivative(t):
        return residual(t), _pdf(v, t)

    log_tail = _log_tail_quantile(v, p)
    if log_tail > log_max_value(type(v)):
        return _quantile_overflow(v, p, policy, function)
    if 2 * log_tail > np.log(4 * v):
        guess = -np.exp(log_tail)
    else:
        guess = _cornish_fisher_seed(v, p)
    if not (guess < 0) or not np.isfinite(guess):
        guess = -type(v)(1)

    if residual(guess) > 0:
        bracket = geometric_search(residual, guess, 2.0, policy.max_root_iterations)
    else:
        bracket = geometric_search(residual, guess, 0.5, policy.max_root_iterations)
    if not bracket.found:
        if abs(bracket.lower) >= max_value(type(v)):
            return _quantile_overflow(v, p, policy, function)
        return policy.report_evaluation(
            function, f"could not bracket the quantile for df={v!r}, p={p!r}",
            iterations=bracket.iterations, reason='no_bracket',
        )

    result = newton_bisect(
        with_derivative, guess, bracket.lower, bracket.upper,
        tolerance=2 * policy.tolerance(type(v)),
        max_iterations=policy.max_root_iterations,
        residual_tolerance=4 * policy.tolerance(type(v)) * p,
    )
    if not result.converged:
        return policy.report_evaluation(
            function,
            f"root finding did not converge for df={v!r}, p={p!r}",
            iterations=result.iterations,
            final_change=float(result.final_change),
            threshold=2 * policy.tolerance(type(v)),
            clamped=result.root,
        )
    return result.root


def _quantile(v: Any, p: Any, policy: NumericPolicy, function: str) -> Any:
    if np.isnan(v):
        return v
    if np.isnan(p) or p < 0 or p > 1:
        return policy.report(
            'domain', function,
            f"probability must be in [0, 1], got {p!r}",
            value=p,
        )
    if p == 0:
        return type(v)(-np.inf)
    if p == 1:
        return type(v)(np.inf)
    if p == 0.5:
        return type(v)(0)
    if p < 0.5:
        return _lower_quantile(v, p, policy, function)
    # 1 - p is exact for p in [1/2, 1]
    return -_lower_quantile(v, 1 - p, policy, function)


# =====================================================================
# Distribution object
# =====================================================================

@dataclass(frozen=True)
class StudentsT:
    """
    Student's t distribution with ``df`` degrees of freedom.

    Immutable: the parameter is checked once at construction and every
    query is a pure function of it. Queries accept scalars or array-likes
    and return the floating type of their argument.

    Attributes:
        df: Degrees of freedom, > 0 (``inf`` gives the standard normal).
        policy: NumericPolicy governing every query.

    Raises:
        DomainError: df <= 0 or NaN (policy permitting; otherwise df is
            stored as NaN and every query returns NaN).

    Examples:
        >>> d = StudentsT(10)
        >>> float(d.cdf(1.812461123))       # doctest: +ELLIPSIS
        0.95...
        >>> float(d.quantile(0.5))
        0.0
    """
    df: Any
    policy: NumericPolicy = DEFAULT_POLICY

    def __post_init__(self):
        df = float(self.df) if isinstance(self.df, (int, np.integer)) else self.df
        if np.isnan(df) or not (df > 0):
            df = self.policy.report(
                'domain', 'StudentsT',
                f"degrees of freedom must be > 0, got {df!r}",
                value=df,
            )
            df = df * np.nan
        object.__setattr__(self, 'df', df)

    @property
    def family(self) -> str:
        return FAMILY_STUDENTS_T

    @property
    def parameters(self) -> dict[str, Any]:
        return {'df': self.df}

    def __repr__(self) -> str:
        return f"StudentsT(df={self.df!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @elementwise(skip=1)
    def pdf(self, t: Any) -> Any:
        """Probability density at t."""
        def kernel(v, t_):
            if np.isnan(v):
                return v
            if np.isnan(t_):
                return self.policy.report(
                    'domain', 'pdf', "random variable t must not be NaN", value=t_,
                )
            return _pdf(v, t_)
        return evaluate(kernel, 'pdf', self.policy, self.df, t)

    @elementwise(skip=1)
    def cdf(self, t: Any) -> Any:
        """P(T <= t)."""
        return evaluate(
            lambda v, t_: _cdf(v, t_, self.policy, 'cdf'),
            'cdf', self.policy, self.df, t,
        )

    @elementwise(skip=1)
    def complement_cdf(self, t: Any) -> Any:
        """P(T > t), equal to cdf(-t) by symmetry."""
        return evaluate(
            lambda v, t_: _cdf(v, -t_, self.policy, 'complement_cdf'),
            'complement_cdf', self.policy, self.df, t,
        )

    @elementwise(skip=1)
    def quantile(self, p: Any) -> Any:
        """
        Inverse of the cdf.

        quantile(0) = -inf, quantile(1) = +inf and quantile(0.5) = 0 exactly.
        """
        return evaluate(
            lambda v, p_: _quantile(v, p_, self.policy, 'quantile'),
            'quantile', self.policy, self.df, p,
        )

    @elementwise(skip=1)
    def complement_quantile(self, q: Any) -> Any:
        """t with P(T > t) = q, i.e. -quantile(q), never forming 1 - q."""
        return evaluate(
            lambda v, q_: -_quantile(v, q_, self.policy, 'complement_quantile'),
            'complement_quantile', self.policy, self.df, q,
        )

    # ------------------------------------------------------------------
    # Moments and descriptive properties
    # ------------------------------------------------------------------

    def _moment(self, function: str, compute) -> Any:
        return evaluate(
            lambda v: v if np.isnan(v) else compute(v), function, self.policy, self.df,
        )

    def _undefined(self, function: str, v: Any, condition: str) -> Any:
        return self.policy.report(
            'domain', function,
            f"{function} is undefined for df={v!r}; requires {condition}",
            value=v,
        )

    def mean(self) -> Any:
        """0 for df > 1."""
        return self._moment(
            'mean',
            lambda v: type(v)(0) if v > 1 else self._undefined('mean', v, 'df > 1'),
        )

    def variance(self) -> Any:
        """df / (df - 2) for df > 2; infinite for 1 < df <= 2."""
        def compute(v):
            if np.isinf(v):
                return type(v)(1)
            if v > 2:
                return v / (v - 2)
            if v > 1:
                return type(v)(np.inf)
            return self._undefined('variance', v, 'df > 1')
        return self._moment('variance', compute)

    def skewness(self) -> Any:
        """0 for df > 3."""
        return self._moment(
            'skewness',
            lambda v: type(v)(0) if v > 3 else self._undefined('skewness', v, 'df > 3'),
        )

    def kurtosis_excess(self) -> Any:
        """6 / (df - 4) for df > 4; infinite for 2 < df <= 4."""
        def compute(v):
            if v > 4:
                return 6 / (v - 4)
            if v > 2:
                return type(v)(np.inf)
            return self._undefined('kurtosis_excess', v, 'df > 2')
        return self._moment('kurtosis_excess', compute)

    def kurtosis(self) -> Any:
        """kurtosis_excess() + 3."""
        def compute(v):
            if v > 4:
                return 3 + 6 / (v - 4)
            if v > 2:
                return type(v)(np.inf)
            return self._undefined('kurtosis', v, 'df > 2')
        return self._moment('kurtosis', compute)

    def median(self) -> Any:
        return self._moment('median', lambda v: type(v)(0))

    def mode(self) -> Any:
        return self._moment('mode', lambda v: type(v)(0))

    def support(self) -> tuple[float, float]:
        """Interval where the density is non-zero."""
        return (-np.inf, np.inf)

    def range(self) -> tuple[float, float]:
        """Interval of values the random variable can take."""
        return (-np.inf, np.inf)
