# errors.py
"""Exception types raised at the estimator boundary.

Each error also derives from the builtin exception a caller would naturally
catch (`ValueError`, `IndexError`, `RuntimeError`). Numerical trouble during
a solve is never raised; it is reported through logging instead.
"""

__all__ = [
    "KexpfamError",
    "DimensionMismatchError",
    "PointIndexError",
    "NotFittedError",
]


class KexpfamError(Exception):
    """Base class for all kexpfam errors."""


class DimensionMismatchError(KexpfamError, ValueError):
    """Arrays disagree on the point dimension or the linear system's size."""


class PointIndexError(KexpfamError, IndexError):
    """A point index lies outside ``[0, num_points)``."""

    def __init__(self, index: int, num_points: int, which: str = "point"):
        self.index = index
        self.num_points = num_points
        super().__init__(
            f"{which} index {index} out of range; valid indices are [0, {num_points})."
        )


class NotFittedError(KexpfamError, RuntimeError):
    """Coefficients are required but `fit()` has not been called yet."""
