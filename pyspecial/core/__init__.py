"""
Core infrastructure for PySpecial.

This module provides shared abstractions and numeric infrastructure used by
the special functions, distributions and interpolators.

Key components:
    policy: NumericPolicy, the immutable evaluation configuration
    exceptions: Exception hierarchy
    protocols: Distribution protocol
    families: Distribution family tags
    validation: Input validators
    compute: Precision helpers, tolerance tiers, root finding
"""

from pyspecial.core.policy import (
    DEFAULT_POLICY,
    ErrorAction,
    ErrorKind,
    NumericPolicy,
)
from pyspecial.core.protocols import Distribution
from pyspecial.core.exceptions import (
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

__all__ = [
    # Policy
    "DEFAULT_POLICY",
    "ErrorAction",
    "ErrorKind",
    "NumericPolicy",
    # Protocols
    "Distribution",
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
