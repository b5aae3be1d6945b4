# kernels/gaussian.py
from __future__ import annotations

import numpy as np
from scipy.spatial.distance import cdist

from ..custom_types import Array
from ..array_backend.utils import _ensure_real_scalar
from .base import Kernel

__all__ = ["GaussianKernel"]


class GaussianKernel(Kernel):
    """Gaussian kernel k(x, y) = exp(-||x - y||^2 / sigma).

    Note the bandwidth enters without the usual factor two; `sigma` plays the
    role of 2 * lengthscale^2.

    Derivatives with respect to the rhs point y, per dimension d:

    .. math::

        \\partial_{y_d} k = \\frac{2}{\\sigma} (x_d - y_d) k(x, y)

        \\partial^2_{y_d} k = \\left(\\frac{4}{\\sigma^2} (x_d - y_d)^2 - \\frac{2}{\\sigma}\\right) k(x, y)

    Args:
        sigma: positive bandwidth.
    """

    def __init__(self, sigma: float = 1.0):
        super().__init__()
        sigma = _ensure_real_scalar(sigma, name="sigma")
        if sigma <= 0:
            raise ValueError(f"GaussianKernel: sigma must be positive; got {sigma}")
        self._sigma = sigma
        self._sq_dists: Array | None = None
        self._K: Array | None = None

    @property
    def sigma(self) -> float:
        return self._sigma

    def _precompute(self) -> None:
        self._sq_dists = cdist(self._lhs.T, self._rhs.T, metric="sqeuclidean")  # (N, M)
        self._K = np.exp(-self._sq_dists / self._sigma)

    def _clear_cache(self) -> None:
        self._sq_dists = None
        self._K = None

    def _differences(self, idx_b: int) -> Array:
        """x_a - y_b for all lhs points, shape (N, D)."""
        return (self._lhs - self._rhs[:, idx_b, np.newaxis]).T

    def _kernel_column(self, idx_b: int) -> Array:
        return self._K[:, idx_b].copy()

    def _rhs_gradients(self, idx_b: int) -> Array:
        k = self._K[:, idx_b, np.newaxis]
        return (2.0 / self._sigma) * self._differences(idx_b) * k

    def _rhs_hessian_diags(self, idx_b: int) -> Array:
        k = self._K[:, idx_b, np.newaxis]
        diff = self._differences(idx_b)
        return (4.0 / self._sigma ** 2 * diff ** 2 - 2.0 / self._sigma) * k

    def kernel_matrix(self) -> Array:
        self._check_precomputed()
        return self._K.copy()

    def __repr__(self) -> str:
        return f"GaussianKernel(sigma={self._sigma!r})"
