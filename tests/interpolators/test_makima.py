"""
Tests for the modified Akima interpolator.
"""

import numpy as np
import pytest

from pyspecial.core.compute.tolerances import FLOAT64
from pyspecial.core.exceptions import (
    DimensionError,
    DomainError,
    InvalidInputError,
)
from pyspecial.interpolators import Makima, build_interpolator, evaluate
from pyspecial.interpolators.makima import hermite_coefficients, makima_slopes


# ═══════════════════════════════════════════════════════════════════════
# Reproduction guarantees
# ═══════════════════════════════════════════════════════════════════════


class TestReproduction:

    def test_constant_data(self):
        x = np.array([0.0, 1.0, 2.0, 3.0, 9.0, 22.0, 81.0])
        y = np.full_like(x, 7.0)
        s = Makima(x, y)
        t = np.arange(0.0, 81.0 + 0.25, 0.25)
        np.testing.assert_allclose(s(t), 7.0, rtol=2 * np.finfo(np.float64).eps)

    def test_constant_slopes_are_zero(self):
        s = Makima([0.0, 1.0, 5.0], [3.0, 3.0, 3.0])
        np.testing.assert_array_equal(s.slopes, 0.0)

    def test_linear_four_knots(self):
        s = Makima([0, 1, 2, 3], [0, 1, 2, 3])
        for t in (0.5, 1.5, 2.5):
            assert s(t) == t

    def test_linear_many_knots(self):
        x = 0.5 * np.arange(45)
        y = 2.0 * x + 1.0
        s = Makima(x, y)
        t = x[:-1] + 0.25
        np.testing.assert_array_equal(s(t), 2.0 * t + 1.0)
        np.testing.assert_array_equal(s.derivative(t), 2.0)

    def test_two_knots_is_a_line(self):
        s = Makima([1.0, 3.0], [2.0, 6.0])
        assert s(2.0) == pytest.approx(4.0, rel=FLOAT64.rtol)
        assert s.derivative(1.5) == pytest.approx(2.0, rel=FLOAT64.rtol)

    @pytest.mark.parametrize("dtype", [np.float32, np.float64, np.longdouble])
    @pytest.mark.parametrize("n", [4, 5, 17, 49])
    def test_exact_at_knots(self, random_knots, n, dtype):
        x, y = random_knots(n, dtype)
        s = Makima(x, y)
        values = s(x)
        assert values.dtype == np.dtype(dtype)
        np.testing.assert_array_equal(values, y)

    def test_exact_at_knots_scalar_queries(self, random_knots):
        x, y = random_knots(12)
        s = Makima(x, y)
        for xi, yi in zip(x, y):
            assert s(xi) == yi

    def test_segment_ends_meet_next_knot(self, random_knots):
        x, y = random_knots(20)
        s = Makima(x, y)
        h = np.diff(x)
        c = s.coefficients
        right = ((c[:, 3] * h + c[:, 2]) * h + c[:, 1]) * h + c[:, 0]
        np.testing.assert_allclose(right, y[1:], rtol=1e-12, atol=1e-14)


# ═══════════════════════════════════════════════════════════════════════
# Slopes and derivative
# ═══════════════════════════════════════════════════════════════════════


class TestSlopes:

    def test_derivative_at_knots_is_slope(self, random_knots):
        x, y = random_knots(15)
        s = Makima(x, y)
        np.testing.assert_array_equal(s.derivative(x), s.slopes)

    def test_derivative_matches_finite_difference(self, random_knots):
        x, y = random_knots(10)
        s = Makima(x, y)
        t = 0.5 * (x[:-1] + x[1:])
        step = 1e-7
        numeric = (s(t + step) - s(t - step)) / (2 * step)
        np.testing.assert_allclose(s.derivative(t), numeric, rtol=1e-5, atol=1e-6)

    def test_kink_takes_flat_side(self):
        # Secants 0, 0, 1, 1: the weight on the rising side vanishes.
        x = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        y = np.array([0.0, 0.0, 0.0, 1.0, 2.0])
        assert makima_slopes(x, y)[2] == 0.0

    def test_flat_region_has_zero_slope(self):
        x = np.arange(6.0)
        y = np.array([0.0, 0.0, 0.0, 0.0, 1.0, 2.0])
        slopes = makima_slopes(x, y)
        assert slopes[1] == 0.0
        assert slopes[2] == 0.0

    def test_coefficient_table_shape(self, random_knots):
        x, y = random_knots(8)
        table = hermite_coefficients(x, y, makima_slopes(x, y))
        assert table.shape == (7, 4)
        np.testing.assert_array_equal(table[:, 0], y[:-1])


# ═══════════════════════════════════════════════════════════════════════
# Domain handling
# ═══════════════════════════════════════════════════════════════════════


class TestDomain:

    def test_endpoints_are_inside(self):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
        assert s(0.0) == 1.0
        assert s(2.0) == 2.0

    @pytest.mark.parametrize("t", [-0.001, 2.001, np.inf, -np.inf])
    def test_outside_raises(self, t):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
        with pytest.raises(DomainError, match="outside the interpolation domain"):
            s(t)

    def test_nan_raises(self):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
        with pytest.raises(DomainError):
            s(np.nan)

    def test_array_with_one_bad_entry_raises(self):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
        with pytest.raises(DomainError):
            s([0.5, 1.5, 3.0])

    def test_derivative_outside_raises(self):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0])
        with pytest.raises(DomainError, match="Makima.derivative"):
            s.derivative(-1.0)

    def test_quiet_policy_gives_nan(self, quiet_policy):
        s = Makima([0.0, 1.0, 2.0], [1.0, 3.0, 2.0], policy=quiet_policy)
        values = s([-1.0, 0.0, 1.0, np.nan, 5.0])
        assert np.isnan(values[0])
        assert values[1] == 1.0
        assert values[2] == 3.0
        assert np.isnan(values[3])
        assert np.isnan(values[4])

    def test_quiet_policy_scalar(self, quiet_policy):
        s = Makima([0.0, 1.0], [0.0, 1.0], policy=quiet_policy)
        assert np.isnan(s(2.0))


# ═══════════════════════════════════════════════════════════════════════
# Construction errors
# ═══════════════════════════════════════════════════════════════════════


class TestInvalidInput:

    def test_not_increasing(self):
        with pytest.raises(InvalidInputError, match="strictly increasing"):
            Makima([0.0, 2.0, 1.0], [0.0, 1.0, 2.0])

    def test_duplicate_abscissa(self):
        with pytest.raises(InvalidInputError):
            Makima([0.0, 1.0, 1.0, 2.0], [0.0, 1.0, 2.0, 3.0])

    def test_too_few_knots(self):
        with pytest.raises(InvalidInputError, match="at least 2"):
            Makima([1.0], [1.0])

    def test_empty(self):
        with pytest.raises(InvalidInputError):
            Makima([], [])

    def test_non_finite_x(self):
        with pytest.raises(InvalidInputError, match="non-finite"):
            Makima([0.0, np.nan, 2.0], [0.0, 1.0, 2.0])

    def test_non_finite_y(self):
        with pytest.raises(InvalidInputError, match="non-finite"):
            Makima([0.0, 1.0, 2.0], [0.0, np.inf, 2.0])

    def test_two_dimensional(self):
        with pytest.raises(DimensionError):
            Makima(np.zeros((2, 3)), np.zeros((2, 3)))

    def test_length_mismatch(self):
        with pytest.raises(InvalidInputError, match="Inconsistent lengths"):
            Makima([0.0, 1.0, 2.0], [0.0, 1.0])

    def test_non_numeric(self):
        with pytest.raises(InvalidInputError):
            Makima(['a', 'b'], [0.0, 1.0])

    def test_dimension_error_is_invalid_input(self):
        assert issubclass(DimensionError, InvalidInputError)


# ═══════════════════════════════════════════════════════════════════════
# Object behaviour
# ═══════════════════════════════════════════════════════════════════════


class TestObject:

    def test_arrays_read_only(self, random_knots):
        x, y = random_knots(6)
        s = Makima(x, y)
        for array in (s.x, s.y, s.slopes, s.coefficients):
            with pytest.raises(ValueError):
                array[0] = 0.0

    def test_caller_arrays_not_shared(self, random_knots):
        x, y = random_knots(6)
        s = Makima(x, y)
        y[0] = 100.0
        assert s.y[0] != 100.0

    def test_float32_preserved(self, random_knots):
        x, y = random_knots(6, np.float32)
        s = Makima(x, y)
        assert s.dtype == np.float32
        assert s(x[2] + np.float32(0.01)).dtype == np.float32

    def test_integer_knots_become_float64(self):
        s = Makima([0, 1, 2], [0, 1, 4])
        assert s.dtype == np.float64

    def test_scalar_in_scalar_out(self):
        s = Makima([0.0, 1.0, 2.0], [0.0, 1.0, 4.0])
        assert np.ndim(s(0.5)) == 0
        assert s([0.5, 1.5]).shape == (2,)
        assert s(np.full((2, 3), 0.5)).shape == (2, 3)

    def test_len_and_domain(self):
        s = Makima([1.0, 2.0, 4.0], [0.0, 1.0, 0.0])
        assert len(s) == 3
        assert s.domain == (1.0, 4.0)

    def test_repr(self):
        s = Makima([1.0, 2.0, 4.0], [0.0, 1.0, 0.0])
        text = repr(s)
        assert text.startswith("Makima(n_knots=3")
        assert "float64" in text

    def test_free_functions(self, random_knots):
        x, y = random_knots(9)
        s = build_interpolator(x, y)
        assert isinstance(s, Makima)
        t = 0.5 * (x[3] + x[4])
        assert evaluate(s, t) == s(t)
