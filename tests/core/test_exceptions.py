"""
Tests for PySpecial exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PySpecialError)
    - Diagnostic attributes on NumericalError and EvaluationError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pyspecial.core.exceptions import (
    DimensionError,
    DomainError,
    EvaluationError,
    InvalidInputError,
    NumericalError,
    NumericOverflowError,
    NumericUnderflowError,
    PoleError,
    PySpecialError,
    RoundingError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PySpecialError."""

    @pytest.mark.parametrize("exc", [
        ValidationError, InvalidInputError, DimensionError, NumericalError,
        DomainError, PoleError, NumericOverflowError, NumericUnderflowError,
        RoundingError,
    ])
    def test_catchable_as_base(self, exc):
        with pytest.raises(PySpecialError):
            raise exc("failure")

    def test_evaluation_error_is_pyspecial_error(self):
        with pytest.raises(PySpecialError):
            raise EvaluationError("no convergence", iterations=10)

    def test_dimension_error_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            raise DimensionError("wrong shape")

    def test_invalid_input_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise InvalidInputError("bad knots")

    def test_pole_error_is_domain_error(self):
        with pytest.raises(DomainError):
            raise PoleError("pole")

    @pytest.mark.parametrize("exc", [
        DomainError, NumericOverflowError, NumericUnderflowError, RoundingError,
    ])
    def test_numerical_kinds_are_numerical_errors(self, exc):
        assert issubclass(exc, NumericalError)

    def test_evaluation_error_is_not_numerical_error(self):
        assert not issubclass(EvaluationError, NumericalError)

    def test_validation_is_not_numerical(self):
        assert not issubclass(ValidationError, NumericalError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestNumericalErrorAttributes:

    def test_attributes_stored(self):
        e = DomainError("bad a", function="gamma_p", value=-1.0)
        assert e.function == "gamma_p"
        assert e.value == -1.0
        assert str(e) == "bad a"

    def test_defaults_none(self):
        e = NumericOverflowError("too big")
        assert e.function is None
        assert e.value is None


class TestEvaluationErrorAttributes:

    def test_all_attributes(self):
        e = EvaluationError(
            "did not converge",
            iterations=200,
            final_change=1e-3,
            reason="max_iterations",
            threshold=1e-15,
            function="quantile",
        )
        assert e.iterations == 200
        assert e.final_change == 1e-3
        assert e.reason == "max_iterations"
        assert e.threshold == 1e-15
        assert e.function == "quantile"

    def test_optional_defaults(self):
        e = EvaluationError("failed", iterations=5)
        assert e.final_change is None
        assert e.reason is None
        assert e.threshold is None
        assert e.function is None
