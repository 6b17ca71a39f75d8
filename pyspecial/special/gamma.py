"""
Gamma function family: complete, ratio and regularized incomplete forms.

Public API:
    gamma_p(a, x)             - regularized lower incomplete gamma P(a, x)
    gamma_q(a, x)             - regularized upper incomplete gamma Q(a, x)
    gamma_p_derivative(a, x)  - dP/dx = x^(a-1) e^-x / Gamma(a)
    gamma_p_inv(a, p)         - x such that P(a, x) = p
    gamma_q_inv(a, q)         - x such that Q(a, x) = q
    tgamma(z), lgamma(z)      - Gamma(z) and log|Gamma(z)|
    tgamma_ratio(a, b)        - Gamma(a) / Gamma(b)
    tgamma_delta_ratio(z, d)  - Gamma(z) / Gamma(z + d)

Regime selection for P and Q. Whichever of P, Q is smaller is computed
directly; the other is its complement. In order:

    1. integer a < 30, a <= x + 1, x > 0.6:
       Q = e^-x sum_{k<a} x^k / k!                     (finite Poisson tail)
    2. half-integer a < 30, a <= x + 1, x > 0.2:
       Q = erfc(sqrt x) + e^-x / sqrt(pi x) sum ...     (finite sum)
    3. x < 0.5:  P by series if -0.4 / log(x) < a, else Q by the small-a
       expansion built on Gamma(1 + a) - 1 and x^a - 1
    4. x < 1.1:  P by series if 0.75 x < a, else Q by the small-a expansion
    5. x >= 1.1: Temme's uniform expansion if a > 20 and |x - a| / a < 0.4;
       otherwise P by series if x - 1 / (3x) < a, else Q by Legendre's
       continued fraction

The leading factor x^a e^-x / Gamma(a) is always formed in the log domain
and exponentiated once.

References:
    DiDonato, A.R. and Morris, A.H. (1986) "Computation of the incomplete
    gamma function ratios and their inverse", ACM TOMS 12, 377-393.
    Gautschi, W. (1979) "A computational procedure for incomplete gamma
    functions", ACM TOMS 5, 466-481.
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np
from scipy import special as sp_special

from pyspecial.core.compute.precision import (
    evaluate,
    log_max_value,
    log_min_value,
)
from pyspecial.core.compute.roots import geometric_search, newton_bisect
from pyspecial.core.compute.vectorize import elementwise
from pyspecial.core.policy import DEFAULT_POLICY, NumericPolicy
from pyspecial.special._gamma_utils import (
    erfc,
    lgamma_kernel,
    log_gamma_delta_ratio,
    log_regularized_prefix,
    powm1,
    tgamma1pm1,
    tgamma_kernel,
)
from pyspecial.special._temme import temme_large
from pyspecial.special._tools import (
    continued_fraction,
    is_half_integer,
    is_integer,
    sum_series,
)


# ---------------------------------------------------------------------
# Regime implementations. Each returns (value, is_q).
# ---------------------------------------------------------------------

def _regularized_prefix(a: Any, x: Any) -> Any:
    """x^a e^-x / Gamma(a); zero when it underflows."""
    log_prefix = log_regularized_prefix(a, x)
    if log_prefix < log_min_value(type(a)):
        return a * 0
    return np.exp(log_prefix)


def _finite_gamma_q(a: Any, x: Any) -> Any:
    """Q(n, x) = e^-x sum_{k=0}^{n-1} x^k / k! for integer n >= 1."""
    term = np.exp(-x)
    total = term
    for k in range(1, int(a)):
        term = term * x / k
        total += term
    return total


def _finite_half_gamma_q(a: Any, x: Any) -> Any:
    """Q(n + 1/2, x) = erfc(sqrt x) + e^-x / sqrt(pi x) sum_{k=1}^{n} ..."""
    root = np.sqrt(x)
    result = erfc(root)
    if a > 1:
        pi = type(x)(np.pi)
        term = 2 * np.exp(-x) * root / np.sqrt(pi)
        total = term
        for k in range(2, int(a + 0.5)):
            term = term * x / (k - type(x)(0.5))
            total += term
        result += total
    return result


def _lower_series_terms(a: Any, x: Any) -> Iterator[Any]:
    term = a / a
    n = 0
    while True:
        n += 1
        term = term * x / (a + n)
        yield term


def _lower_series(a: Any, x: Any, tolerance: float, policy: NumericPolicy,
                  function: str) -> Any:
    """P(a, x) = x^a e^-x / Gamma(a + 1) * sum_n x^n / ((a+1)...(a+n))."""
    prefix = _regularized_prefix(a, x)
    if prefix == 0:
        return prefix
    total = sum_series(
        _lower_series_terms(a, x),
        initial=a / a,
        tolerance=tolerance,
        policy=policy,
        function=function,
    )
    return prefix / a * total


def _small_a_upper_terms(a: Any, x: Any) -> Iterator[Any]:
    # (-1)^(n+1) x^n / (n! (a + n)), n >= 1
    power = -(a / a)
    n = 0
    while True:
        n += 1
        power = -power * x / n
        yield power / (a + n)


def _small_a_upper(a: Any, x: Any, tolerance: float, policy: NumericPolicy,
                   function: str) -> Any:
    """
    Q(a, x) for small a and x < 1.1.

    Q = [Gamma(1+a) - 1 - (x^a - 1) + a x^a S] / Gamma(1+a), with
    S = sum_{n>=1} (-1)^(n+1) x^n / (n! (a + n)).
    """
    gm1 = tgamma1pm1(a)
    xam1 = powm1(x, a)
    series = sum_series(
        _small_a_upper_terms(a, x),
        initial=a * 0,
        tolerance=tolerance,
        policy=policy,
        function=function,
    )
    return (gm1 - xam1 + a * (xam1 + 1) * series) / (gm1 + 1)


def _upper_fraction_pairs(a: Any, x: Any) -> Iterator[tuple[Any, Any]]:
    b = x - a + 1
    k = 0
    while True:
        k += 1
        b = b + 2
        yield k * (a - k), b


def _upper_fraction(a: Any, x: Any, tolerance: float, policy: NumericPolicy,
                    function: str) -> Any:
    """Q(a, x) = prefix / (x + 1 - a + K_k k(a-k) / (x + 2k + 1 - a))."""
    prefix = _regularized_prefix(a, x)
    if prefix == 0:
        return prefix
    denominator = continued_fraction(
        x - a + 1,
        _upper_fraction_pairs(a, x),
        tolerance=tolerance,
        policy=policy,
        function=function,
    )
    return prefix / denominator


def _incomplete_gamma(a: Any, x: Any, policy: NumericPolicy,
                      function: str) -> tuple[Any, bool]:
    """Select the regime for positive a and x; return (value, is_q)."""
    tolerance = policy.tolerance(type(a))

    if a < 30 and a <= x + 1:
        if is_integer(a) and x > 0.6 and x < log_max_value(type(a)):
            return _finite_gamma_q(a, x), True
        if is_half_integer(a) and x > 0.2:
            return _finite_half_gamma_q(a, x), True

    if x < 0.5:
        if -0.4 / np.log(x) < a:
            return _lower_series(a, x, tolerance, policy, function), False
        return _small_a_upper(a, x, tolerance, policy, function), True

    if x < 1.1:
        if 0.75 * x < a:
            return _lower_series(a, x, tolerance, policy, function), False
        return _small_a_upper(a, x, tolerance, policy, function), True

    if a > 20 and abs((x - a) / a) < 0.4:
        return temme_large(a, x)

    if x - 1 / (3 * x) < a:
        return _lower_series(a, x, tolerance, policy, function), False
    return _upper_fraction(a, x, tolerance, policy, function), True


def _gamma_pq(a: Any, x: Any, want_q: bool, policy: NumericPolicy,
              function: str) -> Any:
    """Shared body of gamma_p / gamma_q in working precision."""
    zero = a * 0
    if np.isnan(a) or not (a > 0) or not np.isfinite(a):
        return policy.report(
            'domain', function,
            f"shape parameter a must be positive and finite, got {a!r}",
            value=a,
        )
    if np.isnan(x):
        return policy.report(
            'domain', function, "argument x must not be NaN", value=x,
        )
    if x < 0:
        clamped = zero + 1 if want_q else zero
        return policy.report(
            'domain', function,
            f"argument x must be >= 0, got {x!r}",
            value=x,
            clamped=clamped,
        )
    if x == 0:
        return zero + 1 if want_q else zero
    if np.isinf(x):
        return zero if want_q else zero + 1

    value, is_q = _incomplete_gamma(a, x, policy, function)
    if is_q != want_q:
        return 1 - value
    if value == 0:
        return policy.report(
            'underflow', function,
            f"result underflows for a={a!r}, x={x!r}",
            value=value,
            special=zero,
        )
    return value


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

@elementwise
def gamma_p(a: Any, x: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """
    Regularized lower incomplete gamma function P(a, x).

    P(a, x) = gamma(a, x) / Gamma(a) = 1/Gamma(a) int_0^x t^(a-1) e^-t dt

    Args:
        a: Shape parameter, a > 0.
        x: Argument, x >= 0.
        policy: NumericPolicy governing precision and error handling.

    Returns:
        P(a, x) in [0, 1], in the numeric type of the arguments.

    Raises:
        DomainError: a <= 0, x < 0 or NaN arguments (policy permitting).
        EvaluationError: iteration cap exhausted (policy permitting).
    """
    return evaluate(
        lambda a_, x_: _gamma_pq(a_, x_, False, policy, 'gamma_p'),
        'gamma_p', policy, a, x,
    )


@elementwise
def gamma_q(a: Any, x: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """
    Regularized upper incomplete gamma function Q(a, x) = 1 - P(a, x).

    Computed directly (not as 1 - P) wherever Q is the smaller of the two,
    so it keeps full relative precision in the upper tail.
    """
    return evaluate(
        lambda a_, x_: _gamma_pq(a_, x_, True, policy, 'gamma_q'),
        'gamma_q', policy, a, x,
    )


def _gamma_p_derivative(a: Any, x: Any, policy: NumericPolicy) -> Any:
    function = 'gamma_p_derivative'
    if np.isnan(a) or not (a > 0) or not np.isfinite(a):
        return policy.report(
            'domain', function, f"shape parameter a must be positive, got {a!r}", value=a,
        )
    if np.isnan(x) or x < 0:
        return policy.report(
            'domain', function, f"argument x must be >= 0, got {x!r}", value=x,
        )
    if x == 0:
        if a > 1:
            return a * 0
        if a == 1:
            return a / a
        return policy.report(
            'overflow', function, f"derivative is infinite at x=0 for a={a!r}",
            value=x, special=a * 0 + np.inf,
        )
    if np.isinf(x):
        return a * 0
    return np.exp(log_regularized_prefix(a, x) - np.log(x))


@elementwise
def gamma_p_derivative(a: Any, x: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """Partial derivative of P(a, x) with respect to x."""
    return evaluate(
        lambda a_, x_: _gamma_p_derivative(a_, x_, policy),
        'gamma_p_derivative', policy, a, x,
    )


def _initial_inverse_guess(a: Any, p: Any, q: Any) -> Any:
    """Wilson-Hilferty for a > 1, the small-x leading term otherwise."""
    if a > 1:
        z = type(a)(sp_special.ndtri(float(p))) if p < q else -type(a)(sp_special.ndtri(float(q)))
        guess = a * (1 - 1 / (9 * a) + z / (3 * np.sqrt(a))) ** 3
        if guess > 0:
            return guess
    # P(a, x) ~ x^a / Gamma(a + 1) as x -> 0
    return np.exp((np.log(p) + lgamma_kernel(a + 1)) / a) if p > 0 else a * 0


def _gamma_inverse(a: Any, target: Any, want_q: bool, policy: NumericPolicy,
                   function: str) -> Any:
    zero = a * 0
    if np.isnan(a) or not (a > 0) or not np.isfinite(a):
        return policy.report(
            'domain', function, f"shape parameter a must be positive, got {a!r}", value=a,
        )
    if np.isnan(target) or target < 0 or target > 1:
        return policy.report(
            'domain', function,
            f"probability must be in [0, 1], got {target!r}",
            value=target,
        )
    p, q = (1 - target, target) if want_q else (target, 1 - target)
    if p == 0:
        return zero
    if q == 0:
        return policy.report(
            'overflow', function, "inverse is infinite at probability 1",
            value=target, special=zero + np.inf,
        )
    if p < q:
        # The root is below the smallest float: x^a / Gamma(a + 1) = p
        log_small = (np.log(p) + lgamma_kernel(a + 1)) / a
        if log_small < log_min_value(type(a)):
            return policy.report(
                'underflow', function,
                f"inverse underflows for a={a!r}, p={target!r}",
                value=target, special=zero,
            )

    # f(x) increasing in x: P(a, x) - p, or q - Q(a, x) in the upper tail
    if want_q:
        def residual(x):
            return q - _gamma_pq(a, x, True, policy, function)
    else:
        def residual(x):
            return _gamma_pq(a, x, False, policy, function) - p

    def with_derivative(x):
        return residual(x), _gamma_p_derivative(a, x, policy)

    guess = _initial_inverse_guess(a, p, q)
    if not (guess > 0) or not np.isfinite(guess):
        guess = a
    if residual(guess) < 0:
        bracket = geometric_search(residual, guess, 2.0, policy.max_root_iterations)
    else:
        bracket = geometric_search(residual, guess, 0.5, policy.max_root_iterations)
    if not bracket.found:
        return policy.report_evaluation(
            function, f"could not bracket the inverse for a={a!r}, p={target!r}",
            iterations=bracket.iterations, reason='no_bracket',
        )

    result = newton_bisect(
        with_derivative, guess, bracket.lower, bracket.upper,
        tolerance=2 * policy.tolerance(type(a)),
        max_iterations=policy.max_root_iterations,
        residual_tolerance=4 * policy.tolerance(type(a)) * (q if want_q else p),
    )
    if not result.converged:
        return policy.report_evaluation(
            function, f"root finding did not converge for a={a!r}, p={target!r}",
            iterations=result.iterations, final_change=float(result.final_change),
            clamped=result.root,
        )
    return result.root


@elementwise
def gamma_p_inv(a: Any, p: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """
    Inverse of P(a, x) in x.

    Returns x >= 0 with P(a, x) = p. p = 0 gives 0; p = 1 is an overflow
    (special value +inf).
    """
    return evaluate(
        lambda a_, p_: _gamma_inverse(a_, p_, False, policy, 'gamma_p_inv'),
        'gamma_p_inv', policy, a, p,
    )


@elementwise
def gamma_q_inv(a: Any, q: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """Inverse of Q(a, x) in x, solved on Q directly for upper-tail accuracy."""
    return evaluate(
        lambda a_, q_: _gamma_inverse(a_, q_, True, policy, 'gamma_q_inv'),
        'gamma_q_inv', policy, a, q,
    )


def _check_pole(z: Any, policy: NumericPolicy, function: str) -> Any:
    if z <= 0 and is_integer(z):
        return policy.report(
            'pole', function, f"evaluation at pole z={z!r}",
            value=z, special=z * 0 + np.nan,
        )
    return None


def _tgamma(z: Any, policy: NumericPolicy) -> Any:
    if np.isnan(z):
        return policy.report('domain', 'tgamma', "argument must not be NaN", value=z)
    pole = _check_pole(z, policy, 'tgamma')
    if pole is not None:
        return pole
    value = tgamma_kernel(z)
    if np.isinf(value):
        return policy.report(
            'overflow', 'tgamma', f"Gamma({z!r}) overflows",
            value=z, special=value,
        )
    return value


@elementwise
def tgamma(z: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """Gamma(z); PoleError at zero and the negative integers."""
    return evaluate(lambda z_: _tgamma(z_, policy), 'tgamma', policy, z)


def _lgamma(z: Any, policy: NumericPolicy) -> Any:
    if np.isnan(z):
        return policy.report('domain', 'lgamma', "argument must not be NaN", value=z)
    pole = _check_pole(z, policy, 'lgamma')
    if pole is not None:
        return pole
    return lgamma_kernel(z)


@elementwise
def lgamma(z: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """log|Gamma(z)|; PoleError at zero and the negative integers."""
    return evaluate(lambda z_: _lgamma(z_, policy), 'lgamma', policy, z)


def _delta_ratio(z: Any, delta: Any, policy: NumericPolicy, function: str) -> Any:
    if np.isnan(z) or np.isnan(delta) or not (z > 0) or not (z + delta > 0):
        return policy.report(
            'domain', function,
            f"arguments must be positive, got z={z!r}, z+delta={z + delta!r}",
            value=z,
        )
    if delta == 0:
        return z / z
    log_ratio = log_gamma_delta_ratio(z, delta)
    if log_ratio > log_max_value(type(z)):
        return policy.report(
            'overflow', function, f"ratio overflows for z={z!r}, delta={delta!r}",
            value=z, special=z * 0 + np.inf,
        )
    return np.exp(log_ratio)


@elementwise
def tgamma_delta_ratio(z: Any, delta: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """Gamma(z) / Gamma(z + delta), without forming either gamma."""
    return evaluate(
        lambda z_, d_: _delta_ratio(z_, d_, policy, 'tgamma_delta_ratio'),
        'tgamma_delta_ratio', policy, z, delta,
    )


@elementwise
def tgamma_ratio(a: Any, b: Any, policy: NumericPolicy = DEFAULT_POLICY) -> Any:
    """Gamma(a) / Gamma(b) for a, b > 0."""
    return evaluate(
        lambda a_, b_: _delta_ratio(a_, b_ - a_, policy, 'tgamma_ratio'),
        'tgamma_ratio', policy, a, b,
    )
