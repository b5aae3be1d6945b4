# hypothesis/init_per_feature.py
from __future__ import annotations

from typing import Any

from .data_fetcher import DataFetcher, DataFetcherFactory

__all__ = ["FetcherSlot", "InitPerFeature"]


class FetcherSlot:
    """Mutable holder for the data fetcher of one sample (e.g. P or Q of a two-sample test)."""

    def __init__(self, fetcher: DataFetcher | None = None):
        self.fetcher = fetcher


class InitPerFeature:
    """Initializes one fetcher slot from a feature set.

    Assigning features replaces whatever fetcher the slot held with the one
    `DataFetcherFactory` picks for them; reading `features` hands back the
    feature set the current fetcher serves.

    Example:
        p, q = FetcherSlot(), FetcherSlot()
        InitPerFeature(p).assign(samples_p)
        InitPerFeature(q).assign(samples_q)
    """

    def __init__(self, slot: FetcherSlot):
        self._slot = slot

    def assign(self, features: Any, num_samples: int | None = None) -> InitPerFeature:
        self._slot.fetcher = DataFetcherFactory.get_instance(features, num_samples)
        return self

    @property
    def features(self) -> Any:
        if self._slot.fetcher is None:
            raise RuntimeError("No features have been assigned.")
        return self._slot.fetcher.samples
