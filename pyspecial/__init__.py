"""
PySpecial: special functions, distributions and interpolation for Python.

Accurate evaluation of the incomplete gamma and beta families, Student's t
distribution and a modified Akima interpolator, generic over float32,
float64 and longdouble, with error handling governed by an explicit,
immutable NumericPolicy.

Submodules:
    special: Incomplete gamma and beta functions and relatives
    distributions: Distribution objects and free query functions
    interpolators: Piecewise cubic interpolation
    core: Policy, exceptions, validation and numeric infrastructure
"""

__version__ = "0.1.0"

from pyspecial.core import (
    DEFAULT_POLICY,
    ErrorAction,
    ErrorKind,
    NumericPolicy,
    PySpecialError,
    ValidationError,
    InvalidInputError,
    DimensionError,
    NumericalError,
    DomainError,
    PoleError,
    NumericOverflowError,
    NumericUnderflowError,
    RoundingError,
    EvaluationError,
)
from pyspecial.special import (
    gamma_p,
    gamma_q,
    gamma_p_inv,
    gamma_q_inv,
    gamma_p_derivative,
    tgamma,
    lgamma,
    tgamma_ratio,
    tgamma_delta_ratio,
    beta,
    ibeta,
    ibetac,
)
from pyspecial.distributions import (
    make_distribution,
    StudentsT,
    cdf,
    complement_cdf,
    pdf,
    quantile,
    complement_quantile,
)
from pyspecial.interpolators import Makima, build_interpolator, evaluate

__all__ = [
    "__version__",
    # Policy
    "DEFAULT_POLICY",
    "ErrorAction",
    "ErrorKind",
    "NumericPolicy",
    # Special functions
    "gamma_p",
    "gamma_q",
    "gamma_p_inv",
    "gamma_q_inv",
    "gamma_p_derivative",
    "tgamma",
    "lgamma",
    "tgamma_ratio",
    "tgamma_delta_ratio",
    "beta",
    "ibeta",
    "ibetac",
    # Distributions
    "make_distribution",
    "StudentsT",
    "cdf",
    "complement_cdf",
    "pdf",
    "quantile",
    "complement_quantile",
    # Interpolation
    "Makima",
    "build_interpolator",
    "evaluate",
    # Exceptions
    "PySpecialError",
    "ValidationError",
    "InvalidInputError",
    "DimensionError",
    "NumericalError",
    "DomainError",
    "PoleError",
    "NumericOverflowError",
    "NumericUnderflowError",
    "RoundingError",
    "EvaluationError",
]
