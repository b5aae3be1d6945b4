from .data_fetcher import DataFetcher, StreamingDataFetcher, DataFetcherFactory
from .init_per_feature import FetcherSlot, InitPerFeature

__all__ = [
    "DataFetcher",
    "StreamingDataFetcher",
    "DataFetcherFactory",
    "FetcherSlot",
    "InitPerFeature",
]
