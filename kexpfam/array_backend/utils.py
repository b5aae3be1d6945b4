# array_backend/utils.py
"""
Utility functions for array canonicalization used by kexpfam.

Unlike most numerical helpers, the functions here default to `copy=False`.
The estimator tracks whether its test data *is* its training data by buffer
identity, so a float64 ndarray handed in by the caller must come back as the
very same object. Pass `copy=True` when an independent array is required.
"""

from __future__ import annotations

import numpy as np
from typing import Any

from ..custom_types import Array, ArrayLike


def _as_array(x: Any, dtype: Any = None) -> Array:
    try:
        return np.asarray(x, dtype=dtype)
    except Exception as e:
        raise TypeError(
            f"Could not convert input to array.\n"
            f"Input type: {type(x).__name__}\n"
            f"Input value: {repr(x)}\n"
            f"Original error: {e}"
        ) from e


def _is_numpy_scalar(x: Any) -> bool:
    """Return true if object is a numpy generic or Python scalar"""
    return np.isscalar(x) or isinstance(x, np.generic)


def _ensure_real_scalar(x: Any, *, name: str = "input") -> float:
    """
    Return a Python float for inputs that contain a single real value.

    Accepts Python scalars, numpy scalar types and 0-D numpy arrays.

    Raises:
      ValueError if input contains more than one element, is complex-valued,
      or is not finite.
    """
    if _is_numpy_scalar(x):
        if np.iscomplexobj(x) or isinstance(x, (str, bytes)):
            raise ValueError(f"_ensure_real_scalar: {name} is not a real number: {x!r}")
        value = float(x)
    else:
        arr = _as_array(x)
        if arr.size != 1 or arr.ndim > 0:
            raise ValueError(f"_ensure_real_scalar: {name} must be a scalar; got shape={arr.shape}")
        if np.iscomplexobj(arr):
            raise ValueError(f"_ensure_real_scalar: {name} is complex-valued.")
        value = float(arr.item())

    if not np.isfinite(value):
        raise ValueError(f"_ensure_real_scalar: {name} must be finite; got {value}")
    return value


def _ensure_vector(x: ArrayLike, *, length: int | None = None, copy: bool = False) -> Array:
    """
    Ensure input is returned as a float64 vector of shape (n,).

    Accepts:
      - 1D arrays -> (n,)
      - 2D arrays shaped (n,1) or (1,n) -> flattened
      - 0D scalar -> (1,)

    Raises:
      ValueError for incompatible shapes (ndim > 2 or 2D with both dims >1)
    """
    arr = _as_array(x, dtype=np.float64)

    if arr.ndim == 0:
        out = arr.reshape((1,))
    elif arr.ndim == 1:
        out = arr
    elif arr.ndim == 2 and 1 in arr.shape:
        out = np.ravel(arr)
    else:
        raise ValueError(f"_ensure_vector: input of shape {arr.shape} is not a vector.")

    if length is not None and out.size != length:
        raise ValueError(f"_ensure_vector: required length {length}. Got {out.size}.")

    return out.copy() if copy else out


def _ensure_matrix(x: ArrayLike, *, num_rows: int | None = None, num_cols: int | None = None,
                   copy: bool = False) -> Array:
    """ Ensure input is a 2D float64 matrix

    - Scalar inputs (0D) become arrays of shape (1, 1)
    - 1D inputs of length n become a single column, shape (n, 1)
    - 2D inputs are passed through as is
    - Other shapes raise an error
    """
    arr = _as_array(x, dtype=np.float64)

    if arr.ndim == 2:
        out = arr
    elif arr.ndim == 1:
        out = arr.reshape(-1, 1)
    elif arr.ndim == 0:
        out = arr.reshape(1, 1)
    else:
        raise ValueError(f"_ensure_matrix: Input cannot be converted to a 2D matrix. Shape {arr.shape}")

    if num_rows is not None and out.shape[0] != num_rows:
        raise ValueError(f"_ensure_matrix: Required {num_rows} rows. Got {out.shape[0]}.")

    if num_cols is not None and out.shape[1] != num_cols:
        raise ValueError(f"_ensure_matrix: Required {num_cols} columns. Got {out.shape[1]}.")

    return out.copy() if copy else out


def _ensure_square_matrix(x: ArrayLike, n: int | None = None, *, copy: bool = False) -> Array:
    """Ensure input is a 2d square matrix"""
    matrix = _ensure_matrix(x, copy=copy)
    num_rows, num_cols = matrix.shape
    if num_rows != num_cols:
        raise ValueError(f"Array is not square. Shape {matrix.shape}")

    if n is not None and num_rows != n:
        raise ValueError(f"Required matrix dimension {n}. Got {num_rows}.")

    return matrix


def _ensure_point_set(x: ArrayLike, *, num_dims: int | None = None) -> Array:
    """Ensure `x` is a non-empty, finite set of points stored as columns.

    A 1D input of length D is a single point and becomes shape (D, 1). A 2D
    input of shape (D, N) holds N points. The result shares memory with `x`
    whenever `x` already is a float64 ndarray.

    Raises:
        ValueError: on empty input, non-finite values, or a row count that
        differs from `num_dims`.
    """
    X = _ensure_matrix(x)
    if X.shape[0] == 0 or X.shape[1] == 0:
        raise ValueError(f"_ensure_point_set: point set must be non-empty. Got shape {X.shape}.")
    if num_dims is not None and X.shape[0] != num_dims:
        raise ValueError(f"_ensure_point_set: Required points of dimension {num_dims}. Got {X.shape[0]}.")
    if not np.all(np.isfinite(X)):
        raise ValueError("_ensure_point_set: point set contains non-finite values.")
    return X


def _same_storage(x: Array, y: Array) -> bool:
    """True if both arrays start at the same data buffer address and have equal shape."""
    if x.shape != y.shape:
        return False
    return x.__array_interface__["data"][0] == y.__array_interface__["data"][0]
