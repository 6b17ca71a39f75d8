"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pyspecial.core.policy import NumericPolicy


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def quiet_policy():
    """Policy under which no numerical error raises."""
    return NumericPolicy.never_raise()


@pytest.fixture
def random_knots(rng):
    """Factory for random strictly increasing knots with random values."""
    def make(n, dtype=np.float64):
        x = np.cumsum(rng.uniform(0.0, 1.0, n) + 1e-3)
        y = rng.uniform(0.0, 1.0, n)
        return x.astype(dtype), y.astype(dtype)
    return make
