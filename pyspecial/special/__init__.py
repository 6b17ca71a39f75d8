"""
Special functions.

Every function accepts scalars or array-likes (broadcast elementwise),
returns results in the floating type of its arguments, and takes an
optional ``policy`` keyword governing precision and error handling.

Gamma family:
    gamma_p, gamma_q: Regularized incomplete gamma functions
    gamma_p_derivative: dP/dx
    gamma_p_inv, gamma_q_inv: Inverses in x
    tgamma, lgamma: Gamma and log|Gamma|
    tgamma_ratio, tgamma_delta_ratio: Ratios of gamma functions

Beta family:
    beta: Complete beta function
    ibeta, ibetac: Regularized incomplete beta and its complement
"""

from pyspecial.special.gamma import (
    gamma_p,
    gamma_q,
    gamma_p_derivative,
    gamma_p_inv,
    gamma_q_inv,
    tgamma,
    lgamma,
    tgamma_ratio,
    tgamma_delta_ratio,
)
from pyspecial.special.beta import beta, ibeta, ibetac

__all__ = [
    # Incomplete gamma
    "gamma_p",
    "gamma_q",
    "gamma_p_derivative",
    "gamma_p_inv",
    "gamma_q_inv",
    # Complete gamma
    "tgamma",
    "lgamma",
    "tgamma_ratio",
    "tgamma_delta_ratio",
    # Beta
    "beta",
    "ibeta",
    "ibetac",
]
