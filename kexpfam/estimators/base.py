# estimators/base.py
"""
Base class for kernel exponential family density estimators.

An estimator owns a training point set and a kernel. Fitting builds a
variant-specific linear system from kernel statistics on the training points
and solves it by SVD; the solution is stored as the coefficient vector
`alpha_beta`. Density queries (`log_pdf`, `grad`, `hessian_diag`,
`objective`) are evaluated at the current test points, which default to the
training points.

Point sets are stored one point per column, shape (D, N).
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np

from ..config import ParallelConfig
from ..custom_types import Array, ArrayLike, LinearSystem
from ..array_backend.utils import (
    _ensure_matrix,
    _ensure_point_set,
    _ensure_real_scalar,
    _same_storage
)
from ..errors import DimensionMismatchError, NotFittedError, PointIndexError
from ..kernels.base import Kernel
from ..linalg.solvers import svd_lstsq
from ..parallel import parallel_map_chunks, parallel_sum

logger = logging.getLogger(__name__)

__all__ = ["Estimator"]


class Estimator(ABC):
    """Fit-and-evaluate skeleton shared by all estimator variants.

    Subclasses provide `build_system()` and the per-point hooks
    `log_pdf_point(i)`, `grad_point(i)` and `hessian_diag_point(i)`; this
    class assembles them over all test points.

    The estimator takes exclusive ownership of `kernel`: the kernel's lhs and
    rhs always mirror the estimator's training and test data, and a kernel
    can be bound to one estimator at a time. Call `close()` (or use the
    estimator as a context manager) to release it.

    Args:
        data: training points, shape (D, N).
        kernel: kernel to evaluate statistics with.
        lmbda: non-negative regularization strength.
        parallel: how test point evaluations are spread over workers.
    """

    def __init__(self, data: ArrayLike, kernel: Kernel, lmbda: float,
                 *, parallel: ParallelConfig | None = None):
        if not isinstance(kernel, Kernel):
            raise TypeError(f"kernel must be a Kernel instance; got {type(kernel).__name__}")
        if kernel.owner is not None:
            raise ValueError("kernel is already owned by another estimator.")

        lmbda = _ensure_real_scalar(lmbda, name="lmbda")
        if lmbda < 0:
            raise ValueError(f"lmbda must be non-negative; got {lmbda}")

        X = _ensure_point_set(data)
        self._lhs = X
        self._rhs = X
        self._lmbda = lmbda
        self._parallel = parallel or ParallelConfig()
        self._alpha_beta: Array | None = None
        self._eigenspectrum_range: Tuple[float, float] | None = None

        kernel._bind(self)
        self._kernel: Kernel | None = kernel
        kernel.set_lhs(X)
        kernel.set_rhs(X)

        logger.info("Problem size is N=%d, D=%d.", self.get_num_lhs(), self.get_num_dimensions())
        kernel.precompute()

    # ---- Ownership ----

    @property
    def kernel(self) -> Kernel:
        if self._kernel is None:
            raise RuntimeError(f"{type(self).__name__} has been closed.")
        return self._kernel

    def close(self) -> None:
        """Release the kernel and its caches. The estimator is unusable afterwards."""
        if self._kernel is not None:
            self._kernel._release()
            self._kernel = None

    def __enter__(self) -> Estimator:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ---- Data ----

    def set_test_data(self, X: ArrayLike) -> None:
        """Evaluate subsequent queries at `X`.

        `X` is either a (D, M) matrix of points or a single point of length D,
        which is treated as a (D, 1) matrix.
        """
        kernel = self.kernel
        X = _ensure_matrix(X)
        if X.shape[0] != self.get_num_dimensions():
            raise DimensionMismatchError(
                f"Test points have dimension {X.shape[0]}, "
                f"training points have dimension {self.get_num_dimensions()}."
            )
        X = _ensure_point_set(X)

        self._rhs = X
        kernel.set_rhs(X)
        kernel.precompute()

    def reset_test_data(self) -> None:
        """Use the training points as test points again."""
        self.set_test_data(self._lhs)

    def is_test_equals_train_data(self) -> bool:
        """True if the test data is the training data's own buffer with the same shape.

        This compares storage, not values: an equal-valued copy of the
        training data is not the training data.
        """
        return _same_storage(self._lhs, self._rhs)

    # ---- Accessors ----

    def get_num_dimensions(self) -> int:
        return self._lhs.shape[0]

    def get_num_lhs(self) -> int:
        return self._lhs.shape[1]

    def get_num_rhs(self) -> int:
        return self._rhs.shape[1]

    def get_lhs_point(self, i: int) -> Array:
        """Return a view (not a copy) of training point `i`, shape (D,)."""
        self._check_index(i, self.get_num_lhs(), "lhs")
        return self._lhs[:, i]

    def get_rhs_point(self, i: int) -> Array:
        """Return a view (not a copy) of test point `i`, shape (D,)."""
        self._check_index(i, self.get_num_rhs(), "rhs")
        return self._rhs[:, i]

    @staticmethod
    def _check_index(i: int, count: int, which: str) -> None:
        if isinstance(i, (bool, np.bool_)) or not isinstance(i, (int, np.integer)):
            raise TypeError(f"{which} index must be an integer; got {type(i).__name__}")
        if not 0 <= i < count:
            raise PointIndexError(int(i), count, which)

    @property
    def lmbda(self) -> float:
        return self._lmbda

    @property
    def parallel(self) -> ParallelConfig:
        return self._parallel

    @parallel.setter
    def parallel(self, config: ParallelConfig) -> None:
        self._parallel = config

    @property
    def alpha_beta(self) -> Array:
        self._check_fitted()
        return self._alpha_beta

    @property
    def eigenspectrum_range(self) -> Tuple[float, float]:
        """(min, max) of the squared singular values from the last solve."""
        self._check_fitted()
        return self._eigenspectrum_range

    @property
    def is_fitted(self) -> bool:
        return self._alpha_beta is not None

    def _check_fitted(self) -> None:
        if self._alpha_beta is None:
            raise NotFittedError(f"{type(self).__name__} must be fitted before evaluation.")

    # ---- Fitting ----

    def fit(self) -> None:
        # a strided view of the training buffer (e.g. its transpose) passes
        # is_test_equals_train_data() but holds different points
        if self._rhs is not self._lhs:
            logger.debug("Resetting test data to training data before fitting.")
            self.reset_test_data()

        logger.info("Building system.")
        A, b = self.build_system()

        logger.info("Solving system of size %d.", len(b))
        self.solve_and_store(A, b)

    def solve_and_store(self, A: ArrayLike, b: ArrayLike) -> Tuple[float, float]:
        """Solve ``A x = b`` by SVD and store x as the coefficients.

        An ill-conditioned or singular `A` is solved anyway (minimum-norm
        least-squares solution); its eigenspectrum range is logged and
        returned so the caller can judge conditioning.

        Returns:
            (min, max) of the squared singular values of A.
        """
        A = _ensure_matrix(A)
        if A.shape[0] != A.shape[1]:
            raise DimensionMismatchError(f"System matrix must be square; got shape {A.shape}.")

        logger.info("Solving with SVD.")
        result = svd_lstsq(A, b)

        self._alpha_beta = result.x
        self._eigenspectrum_range = result.eigenspectrum_range

        lo, hi = result.eigenspectrum_range
        log_lo, log_hi = result.log_eigenspectrum_range
        logger.info("Eigenspectrum range is [%f, %f], or [exp(%f), exp(%f)].", lo, hi, log_lo, log_hi)
        if result.is_rank_deficient:
            logger.warning("System of size %d is numerically rank deficient (rank %d); "
                           "using the minimum-norm solution.", result.x.size, result.rank)
        return self._eigenspectrum_range

    @abstractmethod
    def build_system(self) -> LinearSystem:
        """Return the linear system (A, b) whose solution are the coefficients."""
        ...

    # ---- Per point hooks ----

    @abstractmethod
    def log_pdf_point(self, i: int) -> float:
        """Unnormalized log density at test point `i`."""
        ...

    @abstractmethod
    def grad_point(self, i: int) -> Array:
        """Gradient of the log density at test point `i`, shape (D,)."""
        ...

    @abstractmethod
    def hessian_diag_point(self, i: int) -> Array:
        """Diagonal of the log density's Hessian at test point `i`, shape (D,)."""
        ...

    # ---- Queries over all test points ----

    def objective(self) -> float:
        """Score matching objective of the fitted model on the test points.

        The mean over test points of 0.5 * ||grad||^2 + sum(hessian_diag).
        """
        self._check_fitted()
        N = self.get_num_rhs()

        def _term(i: int) -> float:
            gradient = self.grad_point(i)
            hessian_diag = self.hessian_diag_point(i)
            return 0.5 * float(gradient @ gradient) + float(np.sum(hessian_diag))

        return parallel_sum(_term, N, self._parallel) / N

    def log_pdf(self, i: int | None = None) -> Array | float:
        """Log density at every test point, shape (M,), or at test point `i`."""
        self._check_fitted()
        if i is not None:
            self._check_index(i, self.get_num_rhs(), "rhs")
            return self.log_pdf_point(i)

        N_test = self.get_num_rhs()
        chunks = parallel_map_chunks(
            lambda chunk: (chunk, np.array([self.log_pdf_point(j) for j in chunk])),
            N_test, self._parallel,
        )
        result = np.empty(N_test)
        for chunk, values in chunks:
            result[chunk.start:chunk.stop] = values
        return result

    def grad(self, i: int | None = None) -> Array:
        """Gradients at every test point as columns, shape (D, M), or at test point `i`."""
        self._check_fitted()
        if i is not None:
            self._check_index(i, self.get_num_rhs(), "rhs")
            return self.grad_point(i)
        return self._stack_columns(self.grad_point)

    def hessian_diag(self, i: int | None = None) -> Array:
        """Hessian diagonals at every test point as columns, shape (D, M), or at test point `i`."""
        self._check_fitted()
        if i is not None:
            self._check_index(i, self.get_num_rhs(), "rhs")
            return self.hessian_diag_point(i)
        return self._stack_columns(self.hessian_diag_point)

    def _stack_columns(self, point_func) -> Array:
        N_test = self.get_num_rhs()
        D = self.get_num_dimensions()

        def _block(chunk: range):
            block = np.empty((D, len(chunk)))
            for k, j in enumerate(chunk):
                block[:, k] = point_func(j)
            return chunk, block

        result = np.empty((D, N_test))
        for chunk, block in parallel_map_chunks(_block, N_test, self._parallel):
            result[:, chunk.start:chunk.stop] = block
        return result
