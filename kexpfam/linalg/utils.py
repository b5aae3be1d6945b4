# linalg/utils.py

from __future__ import annotations

import numpy as np

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_real_scalar, _ensure_square_matrix


def add_diag_jitter(matrix: ArrayLike, jitter: float = 1e-6, *, copy: bool = True) -> Array:
    """
    Return matrix + jitter * I.

    In kexpfam the "jitter" is usually the ridge term of a linear system
    rather than a numerical safeguard, so zero is allowed.

    Args:
      matrix: 2D square array-like
      jitter: real scalar added to every diagonal entry
      copy: if True (default) operate on and return a copy; if False, update
            the input in place when it already is a float64 ndarray.

    Returns:
      Array with jitter added to diagonal.

    Raises:
        ValueError on a non-square matrix or a non-real jitter.
    """
    mat = _ensure_square_matrix(matrix, copy=copy)
    jitter = _ensure_real_scalar(jitter, name="jitter")

    diag_idcs = np.diag_indices(mat.shape[0])
    mat[diag_idcs] += jitter
    return mat
