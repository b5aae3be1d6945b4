# custom_types.py
"""
Type aliases shared across kexpfam.

We generally follow the conventions:
- Annotate function input with `ArrayLike`
- Annotate function output with `Array`

Point sets are stored one point per column, so a data matrix has shape (D, N).
"""
from __future__ import annotations
from typing import Tuple, TypeAlias

from numpy.typing import (
    NDArray as NumpyArray,
    ArrayLike as NumpyArrayLike
)

Array = NumpyArray
ArrayLike: TypeAlias = NumpyArrayLike

# (A, b) pair handed from `build_system` to `solve_and_store`
LinearSystem: TypeAlias = Tuple[Array, Array]
