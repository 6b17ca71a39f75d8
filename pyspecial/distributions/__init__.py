"""
Statistical distributions.

Distributions are immutable objects built from shape parameters and a
NumericPolicy. Queries are available both as methods and as free
functions that take the distribution first.

Public API:
    make_distribution(family, *params)  - construct by family tag
    StudentsT(df)                       - Student's t distribution
    cdf(d, x), complement_cdf(d, x)     - lower and upper tail probabilities
    pdf(d, x)                           - density
    quantile(d, p)                      - inverse of cdf
    complement_quantile(d, q)           - inverse of complement_cdf
"""

from pyspecial.distributions.solvers import (
    make_distribution,
    cdf,
    complement_cdf,
    pdf,
    quantile,
    complement_quantile,
)
from pyspecial.distributions.students_t import StudentsT

__all__ = [
    "make_distribution",
    "cdf",
    "complement_cdf",
    "pdf",
    "quantile",
    "complement_quantile",
    "StudentsT",
]
