# linalg/solvers.py
"""
Least-squares solves for the linear systems that arise when fitting kernel
exponential families.

These systems are frequently ill-conditioned and need not be positive
definite, so Cholesky/LDLT factorizations are not used here. The SVD gives
the minimum-norm least-squares solution for any `A`, and its singular values
double as a conditioning diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy.linalg import svd, LinAlgError

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_matrix, _ensure_vector
from ..errors import DimensionMismatchError

__all__ = [
    "SVDSolveResult",
    "svd_lstsq",
]


@dataclass(frozen=True)
class SVDSolveResult:
    """Solution of ``A x = b`` together with the spectrum of ``A``.

    Attributes:
        x: minimum-norm least-squares solution, shape (n,).
        singular_values: singular values of A in descending order.
        rank: number of singular values above the truncation threshold.
    """
    x: Array
    singular_values: Array
    rank: int

    @property
    def eigenspectrum(self) -> Array:
        """Squared singular values, i.e. the eigenvalues of A^T A."""
        return self.singular_values ** 2

    @property
    def eigenspectrum_range(self) -> Tuple[float, float]:
        s = self.eigenspectrum
        return float(s.min()), float(s.max())

    @property
    def log_eigenspectrum_range(self) -> Tuple[float, float]:
        """Logarithm of `eigenspectrum_range`; -inf for a zero eigenvalue."""
        lo, hi = self.eigenspectrum_range
        with np.errstate(divide="ignore"):
            return float(np.log(lo)), float(np.log(hi))

    @property
    def is_rank_deficient(self) -> bool:
        return self.rank < self.singular_values.size


def _thin_svd(A: Array) -> Tuple[Array, Array, Array]:
    """Thin SVD; falls back to the slower but more robust gesvd driver."""
    try:
        return svd(A, full_matrices=False, lapack_driver="gesdd")
    except LinAlgError:
        return svd(A, full_matrices=False, lapack_driver="gesvd")


def svd_lstsq(A: ArrayLike, b: ArrayLike, *, rcond: float | None = None) -> SVDSolveResult:
    """Solve ``A x = b`` in the least-squares sense via a thin SVD.

    Singular values below ``rcond * s_max`` are treated as zero, which yields
    the minimum-norm solution for rank-deficient `A`. A singular system is not
    an error. The default `rcond` is ``eps * max(m, n)``.

    Args:
        A: matrix of shape (m, n).
        b: vector of length m.
        rcond: relative cutoff for small singular values.

    Returns:
        SVDSolveResult with the solution of length n.

    Raises:
        DimensionMismatchError: if `b` does not have one entry per row of `A`.
        ValueError: if `A` is empty.
    """
    A = _ensure_matrix(A)
    b = _ensure_vector(b)
    m, n = A.shape
    if m == 0 or n == 0:
        raise ValueError(f"svd_lstsq: cannot solve an empty system. A has shape {A.shape}.")
    if b.shape[0] != m:
        raise DimensionMismatchError(
            f"svd_lstsq: A has {m} rows but b has length {b.shape[0]}."
        )

    U, s, Vt = _thin_svd(A)

    if rcond is None:
        rcond = np.finfo(A.dtype).eps * max(m, n)
    cutoff = rcond * s[0] if s.size else 0.0
    rank = int(np.sum(s > cutoff))

    # x = V_r diag(1/s_r) U_r^T b
    coeffs = (U[:, :rank].T @ b) / s[:rank]
    x = Vt[:rank].T @ coeffs
    return SVDSolveResult(x=x, singular_values=s, rank=rank)
