"""
Solver dispatch for distributions.

Provides make_distribution() and the free query functions cdf(),
complement_cdf(), pdf(), quantile() and complement_quantile(). Each free
function accepts any object satisfying the Distribution protocol and
forwards to the matching method.
"""

from __future__ import annotations

from typing import Any

from pyspecial.core.exceptions import InvalidInputError
from pyspecial.core.families import FAMILY_ALIASES, FAMILY_STUDENTS_T
from pyspecial.core.policy import DEFAULT_POLICY, NumericPolicy
from pyspecial.core.protocols import Distribution
from pyspecial.distributions.students_t import StudentsT


# family tag -> (constructor, parameter names)
_CONSTRUCTORS = {
    FAMILY_STUDENTS_T: (StudentsT, ('df',)),
}


def make_distribution(
    family: str,
    *params: Any,
    policy: NumericPolicy = DEFAULT_POLICY,
) -> Distribution:
    """
    Construct a distribution from its family tag and shape parameters.

    Parameters
    ----------
    family : str
        Family tag or alias (see pyspecial.core.families.FAMILY_ALIASES),
        case-insensitive.
    *params
        Shape parameters in the family's order (Student's t: df).
    policy : NumericPolicy
        Policy governing every query on the returned distribution.

    Returns
    -------
    Distribution

    Raises
    ------
    InvalidInputError
        Unknown family or wrong number of parameters.
    DomainError
        Parameter outside the family's domain (policy permitting).
    """
    if not isinstance(family, str):
        raise InvalidInputError(
            f"family: expected a string, got {type(family).__name__}"
        )
    tag = FAMILY_ALIASES.get(family.strip().lower())
    if tag is None:
        raise InvalidInputError(
            f"Unknown distribution family: {family!r}. "
            f"Use one of {sorted(FAMILY_ALIASES)}."
        )
    constructor, names = _CONSTRUCTORS[tag]
    if len(params) != len(names):
        raise InvalidInputError(
            f"{tag}: expected {len(names)} parameter(s) {names}, got {len(params)}"
        )
    return constructor(*params, policy=policy)


def _check_distribution(dist: Any) -> Distribution:
    if not isinstance(dist, Distribution):
        raise InvalidInputError(
            f"expected a Distribution, got {type(dist).__name__}"
        )
    return dist


def cdf(dist: Distribution, x: Any) -> Any:
    """P(X <= x)."""
    return _check_distribution(dist).cdf(x)


def complement_cdf(dist: Distribution, x: Any) -> Any:
    """P(X > x), without cancellation in the upper tail."""
    return _check_distribution(dist).complement_cdf(x)


def pdf(dist: Distribution, x: Any) -> Any:
    """Probability density at x."""
    return _check_distribution(dist).pdf(x)


def quantile(dist: Distribution, p: Any) -> Any:
    """x such that cdf(dist, x) == p."""
    return _check_distribution(dist).quantile(p)


def complement_quantile(dist: Distribution, q: Any) -> Any:
    """x such that complement_cdf(dist, x) == q."""
    return _check_distribution(dist).complement_quantile(q)
