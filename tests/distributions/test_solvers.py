"""
Tests for make_distribution() and the free distribution query functions.
"""

import numpy as np
import pytest
from scipy import stats

from pyspecial.core.compute.tolerances import FLOAT64_DIFFICULT
from pyspecial.core.exceptions import DomainError, InvalidInputError
from pyspecial.core.families import ALL_FAMILIES, FAMILY_ALIASES, FAMILY_STUDENTS_T
from pyspecial.core.protocols import Distribution
from pyspecial.distributions import (
    StudentsT,
    cdf,
    complement_cdf,
    complement_quantile,
    make_distribution,
    pdf,
    quantile,
)


# ═══════════════════════════════════════════════════════════════════════
# Construction by family tag
# ═══════════════════════════════════════════════════════════════════════


class TestMakeDistribution:

    @pytest.mark.parametrize("family", sorted(FAMILY_ALIASES))
    def test_aliases(self, family):
        d = make_distribution(family, 4.0)
        assert isinstance(d, StudentsT)
        assert d.df == 4.0

    @pytest.mark.parametrize("family", ["Students_T", "  t ", "STUDENT_T"])
    def test_case_and_whitespace_insensitive(self, family):
        assert make_distribution(family, 3).family == FAMILY_STUDENTS_T

    def test_aliases_resolve_to_known_families(self):
        assert set(FAMILY_ALIASES.values()) <= ALL_FAMILIES

    def test_unknown_family(self):
        with pytest.raises(InvalidInputError, match="Unknown distribution family"):
            make_distribution("normal", 0.0, 1.0)

    def test_non_string_family(self):
        with pytest.raises(InvalidInputError, match="expected a string"):
            make_distribution(StudentsT, 3.0)

    def test_missing_parameter(self):
        with pytest.raises(InvalidInputError, match="expected 1 parameter"):
            make_distribution(FAMILY_STUDENTS_T)

    def test_extra_parameter(self):
        with pytest.raises(InvalidInputError, match="got 2"):
            make_distribution(FAMILY_STUDENTS_T, 3.0, 4.0)

    def test_invalid_parameter_is_domain_error(self):
        with pytest.raises(DomainError):
            make_distribution(FAMILY_STUDENTS_T, -1.0)

    def test_policy_is_passed_through(self, quiet_policy):
        d = make_distribution(FAMILY_STUDENTS_T, 5.0, policy=quiet_policy)
        assert d.policy is quiet_policy
        assert np.isnan(d.quantile(1.5))

    def test_result_satisfies_protocol(self):
        assert isinstance(make_distribution('t', 2.5), Distribution)


# ═══════════════════════════════════════════════════════════════════════
# Free query functions
# ═══════════════════════════════════════════════════════════════════════


class TestFreeFunctions:

    def test_match_methods(self):
        d = make_distribution('t', 6.0)
        assert cdf(d, 1.2) == d.cdf(1.2)
        assert complement_cdf(d, 1.2) == d.complement_cdf(1.2)
        assert pdf(d, 1.2) == d.pdf(1.2)
        assert quantile(d, 0.2) == d.quantile(0.2)
        assert complement_quantile(d, 0.2) == d.complement_quantile(0.2)

    def test_against_scipy(self):
        d = make_distribution('t', 6.0)
        t = np.linspace(-5.0, 5.0, 21)
        np.testing.assert_allclose(cdf(d, t), stats.t.cdf(t, 6.0), rtol=FLOAT64_DIFFICULT.rtol)
        np.testing.assert_allclose(pdf(d, t), stats.t.pdf(t, 6.0), rtol=FLOAT64_DIFFICULT.rtol)
        np.testing.assert_allclose(
            complement_cdf(d, t), stats.t.sf(t, 6.0), rtol=FLOAT64_DIFFICULT.rtol,
        )

    def test_quantile_inverts_cdf(self):
        d = make_distribution('t', 6.0)
        for p in (1e-9, 0.05, 0.5, 0.9):
            assert cdf(d, quantile(d, p)) == pytest.approx(p, rel=FLOAT64_DIFFICULT.rtol)

    def test_complement_quantile_inverts_complement_cdf(self):
        d = make_distribution('t', 6.0)
        q = 1e-7
        assert complement_cdf(d, complement_quantile(d, q)) == pytest.approx(
            q, rel=FLOAT64_DIFFICULT.rtol,
        )

    @pytest.mark.parametrize("func", [cdf, complement_cdf, pdf, quantile, complement_quantile])
    def test_rejects_non_distribution(self, func):
        with pytest.raises(InvalidInputError, match="expected a Distribution"):
            func("t", 0.5)

    def test_domain_error_propagates(self):
        d = make_distribution('t', 6.0)
        with pytest.raises(DomainError):
            quantile(d, -0.1)
