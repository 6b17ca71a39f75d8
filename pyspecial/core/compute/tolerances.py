"""
Tolerance tiers for numerical validation.

Defines accuracy expectations for each result type:
- float64: a few thousand epsilon against an independent reference,
  which carries its own rounding error
- float32: evaluated in float64 by default, so limited only by narrowing
- longdouble: elementary kernels (erfc, gammaln) run in float64, so the
  float64 tier applies

Used by the test suite.
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


FLOAT64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-300,
    name='float64',
    description='double precision against an independent reference',
)

# Hard regimes: tails of distributions, large shape parameters, quantiles
FLOAT64_DIFFICULT = ToleranceTier(
    rtol=1e-9,
    atol=1e-300,
    name='float64_difficult',
    description='double precision, extreme parameter regimes',
)

FLOAT32 = ToleranceTier(
    rtol=2e-7,
    atol=1e-38,
    name='float32',
    description='single precision, evaluated in promoted double',
)

LONGDOUBLE = FLOAT64


def select_tolerance(
    dtype: np.dtype | type = np.float64,
    difficult: bool = False,
) -> ToleranceTier:
    """Select appropriate tolerance tier for a given result dtype."""
    dtype = np.dtype(dtype)
    if dtype == np.float32:
        return FLOAT32
    if difficult:
        return FLOAT64_DIFFICULT
    if dtype == np.longdouble:
        return LONGDOUBLE
    return FLOAT64
