# tests/kernels/test_gaussian_kernel.py
import numpy as np
import pytest
from numpy.testing import assert_allclose

from kexpfam.errors import DimensionMismatchError, PointIndexError
from kexpfam.kernels import GaussianKernel


def gaussian(x, y, sigma):
    return np.exp(-np.sum((x - y) ** 2) / sigma)


@pytest.fixture
def points(rng):
    return rng.standard_normal((3, 4)), rng.standard_normal((3, 2))


@pytest.fixture
def precomputed(points):
    X, Y = points
    k = GaussianKernel(sigma=1.5)
    k.set_lhs(X)
    k.set_rhs(Y)
    k.precompute()
    return k


def test_rejects_bad_sigma():
    with pytest.raises(ValueError):
        GaussianKernel(sigma=0.0)
    with pytest.raises(ValueError):
        GaussianKernel(sigma=-1.0)


def test_kernel_values(points, precomputed):
    X, Y = points
    K = precomputed.kernel_matrix()
    assert K.shape == (4, 2)
    for a in range(4):
        for b in range(2):
            assert K[a, b] == pytest.approx(gaussian(X[:, a], Y[:, b], 1.5))
            assert precomputed.kernel(a, b) == pytest.approx(K[a, b])
    assert_allclose(precomputed.kernel_column(1), K[:, 1])


def test_derivatives_match_finite_differences(points, precomputed):
    X, Y = points
    sigma, h = 1.5, 1e-5
    for a in range(4):
        for b in range(2):
            x, y = X[:, a], Y[:, b]
            grad = precomputed.dy(a, b)
            hess = precomputed.dy_dy(a, b)
            for d in range(3):
                e = np.zeros(3)
                e[d] = h
                k_plus, k0, k_minus = (gaussian(x, y + e, sigma), gaussian(x, y, sigma),
                                       gaussian(x, y - e, sigma))
                assert grad[d] == pytest.approx((k_plus - k_minus) / (2 * h), abs=1e-7)
                assert hess[d] == pytest.approx((k_plus - 2 * k0 + k_minus) / h ** 2, abs=1e-4)


def test_per_point_statistic_shapes(precomputed):
    assert precomputed.rhs_gradients(0).shape == (4, 3)
    assert precomputed.rhs_hessian_diags(1).shape == (4, 3)
    assert precomputed.num_lhs == 4
    assert precomputed.num_rhs == 2
    assert precomputed.num_dimensions == 3


def test_requires_precompute(points):
    X, Y = points
    k = GaussianKernel()
    k.set_lhs(X)
    k.set_rhs(Y)
    assert not k.is_precomputed
    with pytest.raises(RuntimeError):
        k.kernel_column(0)
    k.precompute()
    assert k.is_precomputed

    # changing a side drops the cache
    k.set_rhs(X)
    assert not k.is_precomputed
    with pytest.raises(RuntimeError):
        k.rhs_gradients(0)


def test_precompute_checks_sides(points, rng):
    X, _ = points
    k = GaussianKernel()
    with pytest.raises(RuntimeError):
        k.precompute()
    k.set_lhs(X)
    k.set_rhs(rng.standard_normal((2, 3)))
    with pytest.raises(DimensionMismatchError):
        k.precompute()


def test_index_checks(precomputed):
    with pytest.raises(PointIndexError):
        precomputed.kernel_column(2)
    with pytest.raises(PointIndexError):
        precomputed.rhs_gradients(-1)
    with pytest.raises(PointIndexError):
        precomputed.kernel(4, 0)


def test_owner_binding(precomputed):
    first, second = object(), object()
    assert precomputed.owner is None

    precomputed._bind(first)
    precomputed._bind(first)
    assert precomputed.owner is first
    with pytest.raises(ValueError):
        precomputed._bind(second)
    assert precomputed.owner is first

    precomputed._release()
    assert precomputed.owner is None
    assert not precomputed.is_precomputed
    precomputed._bind(second)
    assert precomputed.owner is second
