import pytest
import numpy as np

from kexpfam.kernels import GaussianKernel
from kexpfam.estimators import LiteEstimator


@pytest.fixture
def rng():
    return np.random.default_rng(42)

@pytest.fixture
def dim():
    return 2

@pytest.fixture
def num_points():
    return 12

@pytest.fixture
def train_data(rng, dim, num_points):
    # one point per column
    return rng.standard_normal((dim, num_points))

@pytest.fixture
def test_data(rng, dim):
    return rng.standard_normal((dim, 5))

@pytest.fixture
def kernel():
    return GaussianKernel(sigma=2.0)

@pytest.fixture
def estimator(train_data, kernel):
    return LiteEstimator(train_data, kernel, lmbda=0.01)

@pytest.fixture
def fitted(estimator):
    estimator.fit()
    return estimator
