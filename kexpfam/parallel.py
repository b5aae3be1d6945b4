# parallel.py
"""
Fork-join evaluation over a fixed index range.

The range ``[0, n)`` is cut into contiguous chunks, one joblib task per chunk.
Tasks run in no particular order; `Parallel` returns their results in chunk
order once every task has finished, which is the only barrier. Callers place
chunk results into disjoint slices of their output, or add them up.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, List

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from .config import ParallelConfig

logger = logging.getLogger(__name__)

__all__ = [
    "chunk_ranges",
    "parallel_map_chunks",
    "parallel_sum",
]


def chunk_ranges(n: int, n_chunks: int, min_chunk_size: int = 1) -> List[range]:
    """Split ``range(n)`` into at most `n_chunks` contiguous, non-empty ranges."""
    if n <= 0:
        return []
    n_chunks = max(1, min(n_chunks, n // min_chunk_size or 1))
    bounds = np.linspace(0, n, n_chunks + 1).astype(int)
    return [range(lo, hi) for lo, hi in zip(bounds[:-1], bounds[1:]) if hi > lo]


def parallel_map_chunks(func: Callable[[range], Any], n: int,
                        config: ParallelConfig | None = None) -> List[Any]:
    """Apply `func` to each chunk of ``range(n)``; results come back in chunk order."""
    config = config or ParallelConfig()
    n_jobs = effective_n_jobs(config.n_jobs)
    chunks = chunk_ranges(n, n_jobs, config.min_chunk_size)

    if n_jobs == 1 or len(chunks) <= 1:
        return [func(chunk) for chunk in chunks]

    logger.debug("Evaluating %d points in %d chunks on %d workers.", n, len(chunks), n_jobs)
    return Parallel(n_jobs=n_jobs, prefer=config.prefer)(
        delayed(func)(chunk) for chunk in chunks
    )


def parallel_sum(func: Callable[[int], float], n: int,
                 config: ParallelConfig | None = None) -> float:
    """Sum ``func(i)`` over ``i in range(n)`` as a chunked reduction.

    Each chunk is summed locally, then the partial sums are added. The result
    depends on the chunking only through floating-point rounding.
    """
    def _partial(chunk: range) -> float:
        return float(sum(func(i) for i in chunk))

    return float(sum(parallel_map_chunks(_partial, n, config)))
