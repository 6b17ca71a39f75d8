"""
Numeric evaluation policy.

A NumericPolicy is the single, immutable configuration value threaded
through every evaluation call. It controls:

    - precision promotion (evaluate float32 in float64, float64 in longdouble)
    - the disposition of each error kind (raise, return a special value,
      or clamp to the nearest valid value)
    - iteration caps for series, continued fractions and root finders
    - the target relative precision, in units of machine epsilon

There is no global mutable configuration: DEFAULT_POLICY is a frozen
instance, and variants are derived with replace() / with_actions().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace as dc_replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np

from pyspecial.core.exceptions import (
    DomainError,
    EvaluationError,
    NumericOverflowError,
    NumericUnderflowError,
    PoleError,
    RoundingError,
    ValidationError,
)
from pyspecial.core.compute.precision import machine_epsilon

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Kinds of numerical error whose handling is policy-controlled."""
    DOMAIN = 'domain'
    POLE = 'pole'
    OVERFLOW = 'overflow'
    UNDERFLOW = 'underflow'
    ROUNDING = 'rounding'
    EVALUATION = 'evaluation'


class ErrorAction(str, Enum):
    """What to do when an error of a given kind is reported."""
    RAISE = 'raise'
    SPECIAL_VALUE = 'special_value'
    CLAMP = 'clamp'


_EXCEPTION_TYPES = {
    ErrorKind.DOMAIN: DomainError,
    ErrorKind.POLE: PoleError,
    ErrorKind.OVERFLOW: NumericOverflowError,
    ErrorKind.UNDERFLOW: NumericUnderflowError,
    ErrorKind.ROUNDING: RoundingError,
}

_DEFAULT_ACTIONS: dict[ErrorKind, ErrorAction] = {
    ErrorKind.DOMAIN: ErrorAction.RAISE,
    ErrorKind.POLE: ErrorAction.RAISE,
    ErrorKind.OVERFLOW: ErrorAction.RAISE,
    ErrorKind.UNDERFLOW: ErrorAction.SPECIAL_VALUE,
    ErrorKind.ROUNDING: ErrorAction.CLAMP,
    ErrorKind.EVALUATION: ErrorAction.RAISE,
}


def _normalise_actions(
    actions: Mapping[Any, Any] | tuple[tuple[Any, Any], ...] | None,
) -> tuple[tuple[ErrorKind, ErrorAction], ...]:
    """Merge user actions over the defaults; store as a sorted tuple."""
    merged = dict(_DEFAULT_ACTIONS)
    if actions:
        items = actions.items() if isinstance(actions, Mapping) else actions
        for kind, action in items:
            try:
                merged[ErrorKind(kind)] = ErrorAction(action)
            except ValueError as e:
                raise ValidationError(
                    f"error_actions: invalid entry {kind!r} -> {action!r}: {e}"
                ) from e
    return tuple(sorted(merged.items(), key=lambda item: item[0].value))


@dataclass(frozen=True)
class NumericPolicy:
    """
    Immutable evaluation policy.

    Attributes:
        promote_float: Evaluate float32 arguments in float64.
        promote_double: Evaluate float64 arguments in numpy.longdouble.
        max_series_iterations: Cap for series and continued fractions.
        max_root_iterations: Cap for root-finding iterations.
        precision_multiple: Target relative precision in units of the
            working type's machine epsilon.
        error_actions: Mapping (or pairs) of ErrorKind -> ErrorAction.
            Missing kinds take the defaults: domain, pole, overflow and
            evaluation errors raise; underflow returns zero; rounding
            returns the rounded value.

    Being frozen and hashable, a policy can be shared between threads and
    used as a cache key.

    Examples:
        >>> batch = NumericPolicy.never_raise()
        >>> strict = DEFAULT_POLICY.with_actions(underflow='raise')
    """
    promote_float: bool = True
    promote_double: bool = False
    max_series_iterations: int = 1_000_000
    max_root_iterations: int = 200
    precision_multiple: float = 1.0
    error_actions: tuple[tuple[ErrorKind, ErrorAction], ...] = field(
        default_factory=lambda: _normalise_actions(None)
    )

    def __post_init__(self):
        object.__setattr__(
            self, 'error_actions', _normalise_actions(self.error_actions)
        )
        if int(self.max_series_iterations) < 1:
            raise ValidationError(
                f"max_series_iterations: must be >= 1, got {self.max_series_iterations}"
            )
        if int(self.max_root_iterations) < 1:
            raise ValidationError(
                f"max_root_iterations: must be >= 1, got {self.max_root_iterations}"
            )
        if not (self.precision_multiple > 0):
            raise ValidationError(
                f"precision_multiple: must be positive, got {self.precision_multiple}"
            )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def default(cls) -> NumericPolicy:
        return cls()

    @classmethod
    def never_raise(cls, **kwargs: Any) -> NumericPolicy:
        """Policy for batch callers: every error yields its special value."""
        actions = {kind: ErrorAction.SPECIAL_VALUE for kind in ErrorKind}
        return cls(error_actions=actions, **kwargs)

    def replace(self, **changes: Any) -> NumericPolicy:
        """Return a copy with the given fields changed."""
        return dc_replace(self, **changes)

    def with_actions(self, **actions: str | ErrorAction) -> NumericPolicy:
        """Return a copy with the given error kinds remapped.

        Keyword names are ErrorKind values, e.g. ``domain='special_value'``.
        """
        merged = dict(self.error_actions)
        merged.update({ErrorKind(k): ErrorAction(v) for k, v in actions.items()})
        return dc_replace(self, error_actions=tuple(merged.items()))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def actions(self) -> Mapping[ErrorKind, ErrorAction]:
        """Read-only view of the error-action table."""
        return MappingProxyType(dict(self.error_actions))

    def action_for(self, kind: ErrorKind | str) -> ErrorAction:
        return dict(self.error_actions)[ErrorKind(kind)]

    def working_dtype(self, dtype: np.dtype | type) -> np.dtype:
        """Apply the promotion rule to a result dtype."""
        dtype = np.dtype(dtype)
        if dtype == np.float16 or (dtype == np.float32 and self.promote_float):
            return np.dtype(np.float64)
        if dtype == np.float64 and self.promote_double:
            return np.dtype(np.longdouble)
        return dtype

    def tolerance(self, dtype: np.dtype | type = np.float64) -> float:
        """Target relative precision for the given working dtype."""
        return self.precision_multiple * machine_epsilon(dtype)

    # ------------------------------------------------------------------
    # Error reporting
    # ------------------------------------------------------------------

    def report(
        self,
        kind: ErrorKind | str,
        function: str,
        message: str,
        *,
        value: Any = None,
        special: Any = np.nan,
        clamped: Any = None,
    ) -> Any:
        """
        Report a numerical error according to this policy.

        Args:
            kind: The ErrorKind being reported.
            function: Public function name, for the message.
            message: Description including the offending value.
            value: Offending value, attached to the exception.
            special: Value returned under ErrorAction.SPECIAL_VALUE.
            clamped: Value returned under ErrorAction.CLAMP; falls back to
                ``special`` when no clamped value exists.

        Returns:
            The special or clamped value when the action does not raise.

        Raises:
            NumericalError subclass matching ``kind`` when the action is RAISE.
        """
        kind = ErrorKind(kind)
        if kind is ErrorKind.EVALUATION:
            return self.report_evaluation(
                function, message, iterations=0, special=special, clamped=clamped,
            )
        action = self.action_for(kind)
        if action is ErrorAction.RAISE:
            raise _EXCEPTION_TYPES[kind](
                f"Error in function {function}: {message}",
                function=function,
                value=value,
            )
        result = special if action is ErrorAction.SPECIAL_VALUE or clamped is None else clamped
        logger.debug(
            "%s error in %s handled as %s: %s", kind.value, function, action.value, message
        )
        return result

    def report_evaluation(
        self,
        function: str,
        message: str,
        *,
        iterations: int,
        final_change: float | None = None,
        threshold: float | None = None,
        reason: str = 'max_iterations',
        special: Any = np.nan,
        clamped: Any = None,
    ) -> Any:
        """Report a convergence failure (see report())."""
        action = self.action_for(ErrorKind.EVALUATION)
        if action is ErrorAction.RAISE:
            raise EvaluationError(
                f"Error in function {function}: {message}",
                iterations=iterations,
                final_change=final_change,
                reason=reason,
                threshold=threshold,
                function=function,
            )
        logger.debug(
            "evaluation error in %s after %d iterations handled as %s: %s",
            function, iterations, action.value, message,
        )
        return special if action is ErrorAction.SPECIAL_VALUE or clamped is None else clamped


DEFAULT_POLICY = NumericPolicy()
