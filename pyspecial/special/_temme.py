"""
Temme's uniform asymptotic expansion of the incomplete gamma functions.

For large a with x close to a, both the power series and the continued
fraction converge slowly. With lambda = x/a and eta defined by

    eta^2 / 2 = lambda - 1 - log(lambda),   sign(eta) = sign(lambda - 1)

the regularized functions satisfy (DLMF 8.12.3, 8.12.4)

    Q(a, x) = erfc(eta sqrt(a/2)) / 2 + R_a(eta)
    P(a, x) = erfc(-eta sqrt(a/2)) / 2 - R_a(eta)
    R_a(eta) ~ exp(-a eta^2 / 2) / sqrt(2 pi a) * sum_k c_k(eta) a^-k

The c_k are analytic at eta = 0. Their Taylor coefficients are derived
here once, exactly, in rational arithmetic from the recurrence
(DLMF 8.12.8, 8.12.9)

    c_0 = 1/(lambda - 1) - 1/eta
    c_k = (1/eta) c_{k-1}'(eta) + (-1)^k g_k / (lambda - 1)

where g_k are the coefficients of Gamma*(a) ~ sum g_k a^-k, themselves
obtained from the Bernoulli numbers. The poles at eta = 0 cancel exactly
in rational arithmetic, so no removable singularity is ever evaluated.

References:
    Temme, N.M. (1979) "The asymptotic expansion of the incomplete gamma
    functions", SIAM J. Math. Anal. 10, 757-766.
    DiDonato, A.R. and Morris, A.H. (1986) "Computation of the incomplete
    gamma function ratios and their inverse", ACM TOMS 12, 377-393.
"""

from __future__ import annotations

import functools
from fractions import Fraction
from math import comb
from typing import Any

import numpy as np

from pyspecial.special._gamma_utils import erfc, log1pmx

# Number of c_k functions (powers of 1/a) and Taylor terms kept per c_k.
N_ORDERS = 10
N_TERMS = 25


def _bernoulli(n: int) -> list[Fraction]:
    """B_0..B_n (B_1 = -1/2 convention)."""
    b = [Fraction(0)] * (n + 1)
    b[0] = Fraction(1)
    for m in range(1, n + 1):
        b[m] = -sum(comb(m + 1, j) * b[j] for j in range(m)) / (m + 1)
    return b


def _gamma_star_coefficients(n: int) -> list[Fraction]:
    """g_0..g_n with Gamma*(a) = exp(sum B_2k / (2k(2k-1)) a^(1-2k))."""
    bern = _bernoulli(n + 1)
    s = [Fraction(0)] * (n + 1)
    for k in range(1, n // 2 + 2):
        if 2 * k - 1 <= n:
            s[2 * k - 1] = bern[2 * k] / (2 * k * (2 * k - 1))
    g = [Fraction(0)] * (n + 1)
    g[0] = Fraction(1)
    for m in range(1, n + 1):
        g[m] = sum(k * s[k] * g[m - k] for k in range(1, m + 1)) / m
    return g


def _series_sqrt(s: list[Fraction]) -> list[Fraction]:
    """sqrt of a power series with s[0] == 1."""
    r = [Fraction(0)] * len(s)
    r[0] = Fraction(1)
    for n in range(1, len(s)):
        r[n] = (s[n] - sum(r[k] * r[n - k] for k in range(1, n))) / 2
    return r


def _series_reciprocal(u: list[Fraction]) -> list[Fraction]:
    """1 / u for a power series with u[0] == 1."""
    out = [Fraction(0)] * len(u)
    out[0] = Fraction(1)
    for n in range(1, len(u)):
        out[n] = -sum(u[k] * out[n - k] for k in range(1, n + 1))
    return out


def _mu_of_eta(order: int) -> list[Fraction]:
    """Taylor coefficients m_0..m_order of mu = lambda - 1 as a series in eta."""
    # eta = mu * sqrt(sum_j 2 (-1)^j mu^j / (j + 2))
    f = [Fraction(2 * (-1) ** j, j + 2) for j in range(order)]
    root = _series_sqrt(f)
    e = [Fraction(0)] + root  # e[k] = coefficient of mu^k in eta(mu)

    # Series reversion: powers[j][n] = coefficient of eta^n in mu(eta)^j.
    m = [Fraction(0)] * (order + 1)
    m[1] = Fraction(1)
    powers = [[Fraction(0)] * (order + 1) for _ in range(order + 1)]
    powers[1][1] = Fraction(1)
    for n in range(2, order + 1):
        for j in range(2, n + 1):
            powers[j][n] = sum(
                m[i] * powers[j - 1][n - i] for i in range(1, n - j + 2)
            )
        m[n] = -sum(e[j] * powers[j][n] for j in range(2, n + 1))
        powers[1][n] = m[n]
    return m


@functools.lru_cache(maxsize=None)
def temme_coefficients(n_orders: int = N_ORDERS, n_terms: int = N_TERMS) -> np.ndarray:
    """
    Float table C with c_k(eta) = sum_n C[k, n] eta^n.

    Computed once per process and cached.
    """
    order = n_terms + 2 * n_orders + 1
    m = _mu_of_eta(order + 1)
    # L = eta / mu, a regular series with L[0] == 1
    lam = _series_reciprocal(m[1:order + 2])
    g = _gamma_star_coefficients(n_orders)

    # c_0 = (L - 1) / eta
    c = [lam[n + 1] for n in range(len(lam) - 1)]
    table = [c[:n_terms]]
    for k in range(1, n_orders):
        sign = 1 if k % 2 == 0 else -1
        # c_k[n] = (n + 2) c_{k-1}[n + 2] + (-1)^k g_k L[n + 1]
        c = [
            (n + 2) * c[n + 2] + sign * g[k] * lam[n + 1]
            for n in range(len(c) - 2)
        ]
        table.append(c[:n_terms])
    return np.array([[float(v) for v in row] for row in table], dtype=np.float64)


def _horner(coefficients: np.ndarray, z: Any) -> Any:
    total = z * 0
    for coefficient in coefficients[::-1]:
        total = total * z + coefficient
    return total


def temme_large(a: Any, x: Any) -> tuple[Any, bool]:
    """
    Uniform asymptotic evaluation for large a, x near a.

    Returns:
        (value, is_q): Q(a, x) when x >= a, else P(a, x), so that the
        returned function is always the one below about one half.
    """
    sigma = (x - a) / a
    phi = -log1pmx(sigma)
    y = a * phi
    eta = np.sqrt(2 * phi)
    if x < a:
        eta = -eta

    table = temme_coefficients()
    inv_a = 1 / a
    total = a * 0
    for row in table[::-1]:
        total = total * inv_a + _horner(row, eta)

    pi = type(a)(np.pi)
    r = total * np.exp(-y) / np.sqrt(2 * pi * a)
    if x < a:
        r = -r
    return erfc(np.sqrt(y)) / 2 + r, x >= a
