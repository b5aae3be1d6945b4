# kernels/base.py
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_point_set
from ..errors import DimensionMismatchError, PointIndexError

logger = logging.getLogger(__name__)

__all__ = ["Kernel"]


class Kernel(ABC):
    """Abstract base class for kernels evaluated between two point sets.

    A kernel holds a left-hand side point set (lhs, shape (D, N)) and a
    right-hand side point set (rhs, shape (D, M)), and provides k(x_a, y_b)
    together with its first and second derivatives with respect to the rhs
    point y_b. Points are stored as columns.

    Statistics are served from caches built by `precompute()`. Changing
    either side drops the caches; the owner is responsible for calling
    `precompute()` again, the kernel never recomputes on its own.

    Concrete subclasses implement `_precompute`, `_clear_cache` and the three
    per-rhs-point statistics `_kernel_column`, `_rhs_gradients` and
    `_rhs_hessian_diags`.
    """

    def __init__(self) -> None:
        self._lhs: Array | None = None
        self._rhs: Array | None = None
        self._precomputed = False
        self._owner: object | None = None

    # ---- Ownership ----

    @property
    def owner(self) -> object | None:
        """The estimator this kernel is bound to, if any."""
        return self._owner

    def _bind(self, owner: object) -> None:
        """Bind to `owner`; a kernel serves one estimator at a time."""
        if self._owner is not None and self._owner is not owner:
            raise ValueError("kernel is already owned by another estimator.")
        self._owner = owner

    def _release(self) -> None:
        """Drop the caches and the binding so another estimator may take the kernel."""
        self.clear()
        self._owner = None

    # ---- Point sets ----

    def set_lhs(self, X: ArrayLike) -> None:
        X = _ensure_point_set(X)
        self._lhs = X
        self.clear()

    def set_rhs(self, X: ArrayLike) -> None:
        X = _ensure_point_set(X)
        self._rhs = X
        self.clear()

    @property
    def lhs(self) -> Array | None:
        return self._lhs

    @property
    def rhs(self) -> Array | None:
        return self._rhs

    @property
    def num_lhs(self) -> int:
        return 0 if self._lhs is None else self._lhs.shape[1]

    @property
    def num_rhs(self) -> int:
        return 0 if self._rhs is None else self._rhs.shape[1]

    @property
    def num_dimensions(self) -> int:
        return 0 if self._lhs is None else self._lhs.shape[0]

    # ---- Caching ----

    def precompute(self) -> None:
        """Build caches for the current lhs/rhs pair."""
        if self._lhs is None or self._rhs is None:
            raise RuntimeError("Both lhs and rhs must be set before precompute().")
        if self._lhs.shape[0] != self._rhs.shape[0]:
            raise DimensionMismatchError(
                f"lhs has dimension {self._lhs.shape[0]} but rhs has dimension {self._rhs.shape[0]}."
            )
        logger.debug("Precomputing %s for %d x %d points.",
                     type(self).__name__, self.num_lhs, self.num_rhs)
        self._precompute()
        self._precomputed = True

    @property
    def is_precomputed(self) -> bool:
        return self._precomputed

    def clear(self) -> None:
        """Drop all cached statistics."""
        self._precomputed = False
        self._clear_cache()

    def _check_precomputed(self) -> None:
        if not self._precomputed:
            raise RuntimeError(f"{type(self).__name__}.precompute() must be called before evaluation.")

    def _check_rhs_index(self, idx_b: int) -> None:
        if not 0 <= idx_b < self.num_rhs:
            raise PointIndexError(idx_b, self.num_rhs, "rhs")

    def _check_lhs_index(self, idx_a: int) -> None:
        if not 0 <= idx_a < self.num_lhs:
            raise PointIndexError(idx_a, self.num_lhs, "lhs")

    # ---- Per rhs point statistics over all lhs points ----

    def kernel_column(self, idx_b: int) -> Array:
        """Return k(x_a, y_b) for all lhs points x_a, shape (N,)."""
        self._check_precomputed()
        self._check_rhs_index(idx_b)
        return self._kernel_column(idx_b)

    def rhs_gradients(self, idx_b: int) -> Array:
        """Return the gradients d/dy k(x_a, y) at y = y_b, shape (N, D)."""
        self._check_precomputed()
        self._check_rhs_index(idx_b)
        return self._rhs_gradients(idx_b)

    def rhs_hessian_diags(self, idx_b: int) -> Array:
        """Return the Hessian diagonals d^2/dy_d^2 k(x_a, y) at y = y_b, shape (N, D)."""
        self._check_precomputed()
        self._check_rhs_index(idx_b)
        return self._rhs_hessian_diags(idx_b)

    # ---- Single pair conveniences ----

    def kernel(self, idx_a: int, idx_b: int) -> float:
        self._check_lhs_index(idx_a)
        return float(self.kernel_column(idx_b)[idx_a])

    def dy(self, idx_a: int, idx_b: int) -> Array:
        self._check_lhs_index(idx_a)
        return self.rhs_gradients(idx_b)[idx_a]

    def dy_dy(self, idx_a: int, idx_b: int) -> Array:
        self._check_lhs_index(idx_a)
        return self.rhs_hessian_diags(idx_b)[idx_a]

    def kernel_matrix(self) -> Array:
        """Return the (N, M) matrix of all k(x_a, y_b)."""
        return np.column_stack([self.kernel_column(b) for b in range(self.num_rhs)])

    # ---- Hooks ----

    @abstractmethod
    def _precompute(self) -> None:
        ...

    @abstractmethod
    def _clear_cache(self) -> None:
        ...

    @abstractmethod
    def _kernel_column(self, idx_b: int) -> Array:
        ...

    @abstractmethod
    def _rhs_gradients(self, idx_b: int) -> Array:
        ...

    @abstractmethod
    def _rhs_hessian_diags(self, idx_b: int) -> Array:
        ...
