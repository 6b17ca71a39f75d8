"""
Curve interpolators.

Public API:
    Makima(x, y)                - modified Akima piecewise cubic interpolant
    build_interpolator(x, y)    - factory returning a Makima
    evaluate(interp, t)         - evaluate an interpolant at t
"""

from pyspecial.interpolators.makima import Makima, build_interpolator, evaluate

__all__ = [
    "Makima",
    "build_interpolator",
    "evaluate",
]
