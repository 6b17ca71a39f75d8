"""
Exception hierarchy for PySpecial.

All exceptions inherit from PySpecialError to allow catching any
library-specific error. Whether a numerical error is actually raised is
decided by the active NumericPolicy; validation errors on malformed input
are always raised.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages name the function and the offending value
    - Never catch and re-raise with less information
"""


class PySpecialError(Exception):
    """Base exception for all PySpecial errors."""
    pass


class ValidationError(PySpecialError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class InvalidInputError(ValidationError):
    """
    Malformed interpolation knot sequence or other construction input.

    Raised when knot abscissas are not strictly increasing, contain
    duplicates or non-finite values, or when too few knots are supplied.
    """
    pass


class DimensionError(InvalidInputError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes. A kind of
    InvalidInputError, since knot arrays of the wrong shape are malformed.
    """
    pass


class NumericalError(PySpecialError):
    """
    Numerical evaluation failed.

    Base class for errors arising from a function evaluation.

    Attributes:
        function: Name of the public function that reported the error
        value: The offending argument or intermediate value, if any
    """

    def __init__(
        self,
        message: str,
        function: str | None = None,
        value: float | None = None,
    ):
        super().__init__(message)
        self.function = function
        self.value = value


class DomainError(NumericalError):
    """
    Parameter or argument outside the function's valid domain.

    Examples: gamma_p with a <= 0, a probability outside [0, 1], an
    interpolation query outside the knot range.
    """
    pass


class PoleError(DomainError):
    """
    Evaluation point coincides with a pole of the function.

    Example: tgamma at zero or a negative integer.
    """
    pass


class NumericOverflowError(NumericalError):
    """Result magnitude exceeds the largest representable value."""
    pass


class NumericUnderflowError(NumericalError):
    """Non-zero result is smaller than the smallest representable value."""
    pass


class RoundingError(NumericalError):
    """
    Result is indistinguishable from a nearby value at this precision.

    Informational: reported when a narrowing conversion produces a
    denormalised value.
    """
    pass


class EvaluationError(PySpecialError):
    """
    Iterative algorithm failed to converge.

    Raised when a series, continued fraction or root finder exhausts its
    iteration cap without meeting the target precision.

    Attributes:
        iterations: Number of iterations completed
        final_change: Last relative change (or term size) observed
        reason: Why convergence failed (e.g., 'max_iterations', 'no_bracket')
        threshold: The precision target that was not met
        function: Name of the public function that reported the error
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None,
        function: str | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
        self.function = function
