# estimators/lite.py
from __future__ import annotations

import numpy as np

from ..custom_types import Array, LinearSystem
from ..linalg.utils import add_diag_jitter
from .base import Estimator

__all__ = ["LiteEstimator"]


class LiteEstimator(Estimator):
    """Kernel exponential family with one coefficient per training point.

    The unnormalized log density is

    .. math::

        f(y) = \\sum_{a=1}^N \\alpha_a k(x_a, y),

    and the coefficients minimize the regularized score matching objective

    .. math::

        J(\\alpha) = \\frac{1}{N} \\sum_{i=1}^N \\sum_{d=1}^D
            \\left[ \\frac{1}{2} (\\partial_d f(x_i))^2 + \\partial_d^2 f(x_i) \\right]
            + \\frac{\\lambda}{2} \\|\\alpha\\|^2.

    With G_i, H_i the (N, D) matrices of first and second rhs-derivatives of
    k(x_a, .) at x_i, the minimizer solves

    .. math::

        \\left(\\frac{1}{N} \\sum_i G_i G_i^\\top + \\lambda I\\right) \\alpha
            = -\\frac{1}{N} \\sum_i H_i \\mathbf{1}.
    """

    def build_system(self) -> LinearSystem:
        kernel = self.kernel
        N = self.get_num_lhs()

        C = np.zeros((N, N))
        b = np.zeros(N)
        for i in range(N):
            G = kernel.rhs_gradients(i)
            C += G @ G.T
            b += kernel.rhs_hessian_diags(i).sum(axis=1)

        A = add_diag_jitter(C / N, self.lmbda, copy=False)
        return A, -b / N

    def log_pdf_point(self, i: int) -> float:
        return float(self.kernel.kernel_column(i) @ self._alpha_beta)

    def grad_point(self, i: int) -> Array:
        return self.kernel.rhs_gradients(i).T @ self._alpha_beta

    def hessian_diag_point(self, i: int) -> Array:
        return self.kernel.rhs_hessian_diags(i).T @ self._alpha_beta
