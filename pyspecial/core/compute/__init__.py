"""
Shared compute infrastructure for PySpecial.

IMPORTANT: This is NOT where evaluators live. Those go in special/,
distributions/ and interpolators/. This module contains shared NUMERIC
infrastructure.

Submodules:
    precision: Machine limits, result dtypes, checked narrowing
    tolerances: Accuracy tiers per numeric type
    roots: Bracket search and safeguarded Newton iteration
    vectorize: Elementwise broadcasting of scalar evaluators
"""

from pyspecial.core.compute.precision import (
    evaluate,
    machine_epsilon,
    narrow,
    result_dtype,
)
from pyspecial.core.compute.roots import (
    Bracket,
    RootResult,
    geometric_search,
    newton_bisect,
)
from pyspecial.core.compute.vectorize import elementwise

__all__ = [
    # Precision
    "evaluate",
    "machine_epsilon",
    "narrow",
    "result_dtype",
    # Root finding
    "Bracket",
    "RootResult",
    "geometric_search",
    "newton_bisect",
    # Vectorization
    "elementwise",
]
