from .base import Estimator
from .lite import LiteEstimator

__all__ = ["Estimator", "LiteEstimator"]
