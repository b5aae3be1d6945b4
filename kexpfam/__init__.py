import logging

from kexpfam.config import ParallelConfig
from kexpfam.errors import (
    KexpfamError,
    DimensionMismatchError,
    PointIndexError,
    NotFittedError,
)
from kexpfam.kernels import Kernel, GaussianKernel
from kexpfam.estimators import Estimator, LiteEstimator
from kexpfam.hypothesis import DataFetcherFactory, FetcherSlot, InitPerFeature

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
