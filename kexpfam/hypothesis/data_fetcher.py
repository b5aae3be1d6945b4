# hypothesis/data_fetcher.py
"""
Strategies for handing samples to a hypothesis test in blocks.

Unlike the estimators, samples here are stored one per row, shape (n, d).
"""
from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np

from ..custom_types import Array, ArrayLike
from ..array_backend.utils import _ensure_matrix

logger = logging.getLogger(__name__)

__all__ = [
    "DataFetcher",
    "StreamingDataFetcher",
    "DataFetcherFactory",
]


class DataFetcher:
    """Serves an in-memory sample array, whole or in fixed-size row blocks."""

    def __init__(self, samples: ArrayLike):
        X = _ensure_matrix(samples)
        if X.shape[0] == 0:
            raise ValueError("DataFetcher requires at least one sample.")
        self._samples = X

    @property
    def samples(self) -> Any:
        """The feature set this fetcher was built from."""
        return self._samples

    @property
    def num_samples(self) -> int:
        return self._samples.shape[0]

    def blocks(self, block_size: int | None = None) -> Iterator[Array]:
        """Yield consecutive row blocks; a single block holding everything if `block_size` is None."""
        if block_size is None:
            yield self._samples
            return
        if block_size < 1:
            raise ValueError(f"block_size must be positive; got {block_size}")
        for start in range(0, self.num_samples, block_size):
            yield self._samples[start:start + block_size]


class StreamingDataFetcher(DataFetcher):
    """Draws samples from an iterable of rows, `num_samples` at most."""

    def __init__(self, stream: Iterable[ArrayLike], num_samples: int):
        if num_samples < 1:
            raise ValueError(f"num_samples must be positive; got {num_samples}")
        self._stream = stream
        self._iterator = iter(stream)
        self._num_samples = int(num_samples)

    @property
    def samples(self) -> Iterable[ArrayLike]:
        return self._stream

    @property
    def num_samples(self) -> int:
        return self._num_samples

    def blocks(self, block_size: int | None = None) -> Iterator[Array]:
        if block_size is None:
            block_size = self._num_samples
        if block_size < 1:
            raise ValueError(f"block_size must be positive; got {block_size}")

        remaining = self._num_samples
        while remaining > 0:
            rows = list(itertools.islice(self._iterator, min(block_size, remaining)))
            if not rows:
                logger.warning("Stream exhausted with %d of %d samples left.", remaining, self._num_samples)
                return
            remaining -= len(rows)
            yield np.vstack([np.atleast_1d(np.asarray(r, dtype=np.float64)) for r in rows])


class DataFetcherFactory:

    @staticmethod
    def get_instance(features: Any, num_samples: int | None = None) -> DataFetcher:
        """Return the fetcher matching a feature set.

        An existing fetcher is passed through, an iterator becomes a
        `StreamingDataFetcher` (requires `num_samples`), anything else is
        treated as an in-memory sample array.
        """
        if isinstance(features, DataFetcher):
            return features
        if isinstance(features, Iterator):
            if num_samples is None:
                raise ValueError("num_samples is required for streaming features.")
            return StreamingDataFetcher(features, num_samples)
        return DataFetcher(features)
