"""
Core protocols for PySpecial.

These define structural interfaces that family-specific implementations
must satisfy. We use Protocol (structural typing) rather than ABC (nominal
typing) so a distribution only has to provide the methods, not inherit
from a library base class.

Design Principles:
    - Minimal contracts: prescribe only what every family provides
    - Stateless queries: every method is a pure function of the fixed
      shape parameters and its argument
"""

from typing import Any, Protocol, runtime_checkable

from pyspecial.core.policy import NumericPolicy


@runtime_checkable
class Distribution(Protocol):
    """
    Minimal protocol for a continuous univariate distribution.

    Implementations are immutable: constructed once from shape parameters,
    then queried any number of times, from any thread.

    The free functions in pyspecial.distributions (cdf, pdf, quantile, ...)
    dispatch to these methods, so any object satisfying this protocol can
    be passed to them.
    """

    @property
    def family(self) -> str:
        """Family tag, one of pyspecial.core.families.ALL_FAMILIES."""
        ...

    @property
    def parameters(self) -> dict[str, Any]:
        """
        Shape parameters by name.

        Examples:
            Student's t: {'df': 10.0}
        """
        ...

    @property
    def policy(self) -> NumericPolicy:
        """Policy governing every query on this distribution."""
        ...

    def pdf(self, x: Any) -> Any:
        """Probability density at x."""
        ...

    def cdf(self, x: Any) -> Any:
        """P(X <= x)."""
        ...

    def complement_cdf(self, x: Any) -> Any:
        """P(X > x), computed without forming 1 - cdf(x)."""
        ...

    def quantile(self, p: Any) -> Any:
        """x such that cdf(x) == p."""
        ...

    def complement_quantile(self, q: Any) -> Any:
        """x such that complement_cdf(x) == q."""
        ...
