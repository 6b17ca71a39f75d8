"""
Tests for bracketed root finding (geometric_search, newton_bisect).
"""

import math

import numpy as np
import pytest

from pyspecial.core.compute.roots import (
    Bracket,
    RootResult,
    geometric_search,
    newton_bisect,
)


class TestGeometricSearch:

    def test_widens_upwards(self):
        bracket = geometric_search(lambda x: x - 100.0, 1.0, 2.0, 50)
        assert isinstance(bracket, Bracket)
        assert bracket.found
        assert bracket.lower <= 100.0 <= bracket.upper
        # steps of 2, 4, 16: 1 -> 2 -> 8 -> 128
        assert (bracket.lower, bracket.upper) == (8.0, 128.0)
        assert bracket.iterations == 3

    def test_shrinks_towards_zero(self):
        bracket = geometric_search(lambda x: x - 1e-3, 1.0, 0.5, 50)
        assert bracket.found
        assert bracket.lower <= 1e-3 <= bracket.upper

    def test_negative_start(self):
        # increasing function with root at -50, start at -1 moving outwards
        bracket = geometric_search(lambda x: x + 50.0, -1.0, 2.0, 50)
        assert bracket.found
        assert bracket.lower <= -50.0 <= bracket.upper

    def test_reaches_far_roots_quickly(self):
        bracket = geometric_search(lambda x: x - 1e300, 1.0, 2.0, 20)
        assert bracket.found
        assert bracket.lower <= 1e300 <= bracket.upper
        assert bracket.iterations <= 12

    def test_reaches_tiny_roots_quickly(self):
        bracket = geometric_search(lambda x: x - 1e-300, 1.0, 0.5, 20)
        assert bracket.found
        assert bracket.lower <= 1e-300 <= bracket.upper

    def test_overflow_is_clamped_to_largest_float(self):
        bracket = geometric_search(lambda x: -1.0, 1.0, 1e100, 50)
        assert not bracket.found
        assert bracket.upper == np.finfo(np.float64).max
        assert np.isfinite(bracket.lower)

    def test_root_beyond_largest_float(self):
        bracket = geometric_search(lambda x: -1.0, -1.0, 2.0, 50)
        assert not bracket.found
        assert bracket.lower == -np.finfo(np.float64).max

    def test_iteration_cap(self):
        bracket = geometric_search(lambda x: x - 1e6, 1.0, 2.0, 3)
        assert not bracket.found
        assert bracket.iterations == 3


class TestNewtonBisect:

    def test_square_root(self):
        result = newton_bisect(
            lambda x: (x * x - 2.0, 2.0 * x), 1.0, 0.0, 2.0,
            tolerance=1e-15, max_iterations=100,
        )
        assert isinstance(result, RootResult)
        assert result.converged
        assert result.root == pytest.approx(math.sqrt(2.0), rel=1e-14)

    def test_zero_derivative_falls_back_to_bisection(self):
        # f' = 0 everywhere as reported: pure bisection
        result = newton_bisect(
            lambda x: (x - 0.3, 0.0), 0.9, 0.0, 1.0,
            tolerance=1e-12, max_iterations=200,
        )
        assert result.converged
        assert result.root == pytest.approx(0.3, abs=1e-11)

    def test_guess_outside_bracket_is_clipped(self):
        result = newton_bisect(
            lambda x: (x ** 3 - 8.0, 3.0 * x * x), 100.0, 0.0, 4.0,
            tolerance=1e-15, max_iterations=100,
        )
        assert result.converged
        assert result.root == pytest.approx(2.0, rel=1e-14)
        lo, hi = result.bracket
        assert lo <= 2.0 <= hi

    def test_wide_bracket_uses_geometric_midpoint(self):
        result = newton_bisect(
            lambda x: (math.log(x) + 20.0, 0.0), 1.0, 1e-20, 1.0,
            tolerance=1e-12, max_iterations=500,
        )
        assert result.converged
        assert result.root == pytest.approx(math.exp(-20.0), rel=1e-10)

    def test_not_converged_reported(self):
        result = newton_bisect(
            lambda x: (x - 0.3, 0.0), 0.9, 0.0, 1.0,
            tolerance=1e-15, max_iterations=3,
        )
        assert not result.converged
        assert result.iterations == 3
        assert math.isfinite(result.final_change)
