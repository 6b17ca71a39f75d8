"""
Tests for the beta function family: beta, ibeta, ibetac.
"""

import math

import numpy as np
import pytest
from scipy import special as sp_special

from pyspecial.core.compute.tolerances import FLOAT32, FLOAT64, FLOAT64_DIFFICULT
from pyspecial.core.exceptions import DomainError, NumericOverflowError
from pyspecial.core.policy import DEFAULT_POLICY
from pyspecial.special import beta, ibeta, ibetac
from pyspecial.special.beta import ibeta_pair


IBETA_CASES = [
    pytest.param(2.0, 3.0, 0.4, id="small-lower-side"),
    pytest.param(2.0, 3.0, 0.8, id="small-upper-side"),
    pytest.param(0.5, 0.5, 0.1, id="arcsine"),
    pytest.param(5.0, 0.5, 0.999, id="student-t-shape"),
    pytest.param(50.0, 0.5, 0.9, id="large-a"),
    pytest.param(200.0, 300.0, 0.41, id="large-both"),
    pytest.param(0.01, 3.0, 0.5, id="tiny-a"),
]


class TestIncompleteBeta:

    @pytest.mark.parametrize("a, b, x", IBETA_CASES)
    def test_against_scipy(self, a, b, x):
        assert ibeta(a, b, x) == pytest.approx(
            sp_special.betainc(a, b, x), rel=FLOAT64_DIFFICULT.rtol,
        )

    @pytest.mark.parametrize("a, b, x", IBETA_CASES)
    def test_complement_against_scipy(self, a, b, x):
        assert ibetac(a, b, x) == pytest.approx(
            sp_special.betaincc(a, b, x), rel=FLOAT64_DIFFICULT.rtol,
        )

    @pytest.mark.parametrize("a, b, x", IBETA_CASES)
    def test_complementary(self, a, b, x):
        assert ibeta(a, b, x) + ibetac(a, b, x) == pytest.approx(1.0, abs=4e-16)

    def test_symmetry(self):
        a, b, x = 3.5, 1.25, 0.3
        assert ibeta(a, b, x) == pytest.approx(ibetac(b, a, 1 - x), rel=FLOAT64.rtol)

    def test_closed_form_integer_b(self):
        # I_x(a, 1) = x^a
        assert ibeta(3.0, 1.0, 0.6) == pytest.approx(0.6 ** 3, rel=FLOAT64.rtol)

    def test_uniform(self):
        for x in (0.0, 0.25, 0.9, 1.0):
            assert ibeta(1.0, 1.0, x) == pytest.approx(x, rel=FLOAT64.rtol)

    def test_random_against_scipy(self, rng):
        a = 10 ** rng.uniform(-1, 2, 200)
        b = 10 ** rng.uniform(-1, 2, 200)
        x = rng.uniform(0.0, 1.0, 200)
        np.testing.assert_allclose(
            ibeta(a, b, x), sp_special.betainc(a, b, x),
            rtol=FLOAT64_DIFFICULT.rtol, atol=1e-300,
        )

    def test_upper_tail_relative_precision(self):
        value = ibetac(2.0, 30.0, 0.9)
        assert 0 < value < 1e-25
        assert value == pytest.approx(sp_special.betaincc(2.0, 30.0, 0.9), rel=FLOAT64_DIFFICULT.rtol)

    def test_large_a_integer_b_closed_form(self):
        # I_x(a, 1) = x^a, with a * y far past where the fraction converges
        x = 1 - 1e-10
        assert ibeta(1e10, 1.0, x) == pytest.approx(
            np.exp(1e10 * np.log(x)), rel=FLOAT64_DIFFICULT.rtol,
        )

    @pytest.mark.parametrize("a", [5e7, 5e11, 5e14])
    def test_large_a_half_b_is_erfc(self, a):
        # For huge a, I_x(a, 1/2) -> Q(1/2, u) = erfc(sqrt(u)), u = -(a - 1/4) log x
        x = 1 - 9 / (2 * a)
        u = -(a - 0.25) * np.log1p(-(1 - x))
        assert ibeta(a, 0.5, x) == pytest.approx(
            sp_special.erfc(np.sqrt(u)), rel=FLOAT64_DIFFICULT.rtol,
        )

    @pytest.mark.parametrize("a, b, x", [
        (20.0, 0.3, 0.75), (80.0, 0.9, 0.99), (15.0, 1.0, 0.8), (400.0, 0.05, 0.999),
    ])
    def test_large_a_small_b_against_scipy(self, a, b, x):
        assert ibeta(a, b, x) == pytest.approx(
            sp_special.betainc(a, b, x), rel=FLOAT64_DIFFICULT.rtol,
        )
        assert ibetac(a, b, x) == pytest.approx(
            sp_special.betaincc(a, b, x), rel=FLOAT64_DIFFICULT.rtol,
        )
        # and the mirrored arguments
        assert ibetac(b, a, 1 - x) == pytest.approx(
            sp_special.betainc(a, b, x), rel=FLOAT64_DIFFICULT.rtol,
        )


class TestIncompleteBetaBoundaries:

    def test_endpoints(self):
        assert ibeta(2.0, 3.0, 0.0) == 0.0
        assert ibeta(2.0, 3.0, 1.0) == 1.0
        assert ibetac(2.0, 3.0, 0.0) == 1.0
        assert ibetac(2.0, 3.0, 1.0) == 0.0

    @pytest.mark.parametrize("a, b, x", [
        (0.0, 1.0, 0.5), (1.0, -2.0, 0.5), (1.0, 1.0, 1.5),
        (1.0, 1.0, -0.1), (np.nan, 1.0, 0.5), (1.0, 1.0, np.nan),
    ])
    def test_domain_errors(self, a, b, x):
        with pytest.raises(DomainError):
            ibeta(a, b, x)

    def test_float32(self):
        result = ibeta(np.float32(2.0), np.float32(3.0), np.float32(0.4))
        assert isinstance(result, np.float32)
        assert float(result) == pytest.approx(sp_special.betainc(2.0, 3.0, 0.4), rel=FLOAT32.rtol)


class TestIbetaPair:
    """The internal pair keeps y = 1 - x exact when the caller supplies it."""

    def test_pair_sums_to_one(self):
        lower, upper = ibeta_pair(
            np.float64(4.0), np.float64(0.5), np.float64(0.7), np.float64(0.3),
            DEFAULT_POLICY, 'test',
        )
        assert lower + upper == pytest.approx(1.0, abs=4e-16)
        assert lower == pytest.approx(sp_special.betainc(4.0, 0.5, 0.7), rel=FLOAT64_DIFFICULT.rtol)

    def test_tiny_y_not_lost(self):
        # x = 1 - 1e-20 rounds to 1, but y carries the information
        lower, upper = ibeta_pair(
            np.float64(2.0), np.float64(0.5), np.float64(1.0), np.float64(1e-20),
            DEFAULT_POLICY, 'test',
        )
        assert upper == pytest.approx(
            sp_special.betainc(0.5, 2.0, 1e-20), rel=FLOAT64_DIFFICULT.rtol,
        )
        assert lower < 1.0


class TestCompleteBeta:

    def test_small_values(self):
        assert beta(2.0, 3.0) == pytest.approx(1 / 12, rel=FLOAT64.rtol)
        assert beta(0.5, 0.5) == pytest.approx(math.pi, rel=FLOAT64.rtol)

    def test_large_arguments(self):
        assert beta(300.0, 400.0) == pytest.approx(
            math.exp(sp_special.betaln(300.0, 400.0)), rel=FLOAT64_DIFFICULT.rtol,
        )

    def test_tiny_arguments(self):
        # B(a, b) -> (a + b) / (a b) as a, b -> 0
        assert beta(1e-200, 1e-200) == pytest.approx(2e200, rel=FLOAT64.rtol)
        assert beta(1e-20, 3e-20) == pytest.approx(4e-20 / 3e-40, rel=FLOAT64.rtol)

    def test_overflow(self):
        with pytest.raises(NumericOverflowError):
            beta(1e-310, 1e-310)

    def test_domain(self):
        with pytest.raises(DomainError):
            beta(-1.0, 2.0)
