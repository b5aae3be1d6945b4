# tests/estimators/test_lite.py
import numpy as np
import pytest
from numpy.testing import assert_allclose

from kexpfam.config import ParallelConfig
from kexpfam.estimators import LiteEstimator
from kexpfam.kernels import GaussianKernel


def regularized_objective(est, alpha):
    """Score matching objective on the training data plus the ridge penalty."""
    est.reset_test_data()
    est.solve_and_store(np.eye(alpha.size), alpha)
    return est.objective() + 0.5 * est.lmbda * alpha @ alpha


def test_system_shapes_and_symmetry(estimator, num_points):
    A, b = estimator.build_system()
    assert A.shape == (num_points, num_points)
    assert b.shape == (num_points,)
    assert_allclose(A, A.T, atol=1e-12)
    # positive definite thanks to the ridge term
    assert np.linalg.eigvalsh(A).min() >= estimator.lmbda - 1e-10


def test_fit_stores_one_coefficient_per_point(fitted, num_points):
    assert fitted.alpha_beta.shape == (num_points,)
    lo, hi = fitted.eigenspectrum_range
    assert 0 < lo <= hi


def test_fit_minimizes_regularized_objective(fitted, rng):
    alpha = fitted.alpha_beta.copy()
    best = regularized_objective(fitted, alpha)

    for scale in (0.5, 0.9, 1.1, 2.0):
        assert regularized_objective(fitted, scale * alpha) > best
    for _ in range(5):
        direction = rng.standard_normal(alpha.size)
        direction *= 0.1 * np.linalg.norm(alpha) / np.linalg.norm(direction)
        assert regularized_objective(fitted, alpha + direction) > best


def test_objective_is_negative_after_fit(fitted):
    # alpha = 0 gives objective 0; the fitted model can only do better
    assert fitted.objective() < 0


def test_grad_matches_finite_differences_of_log_pdf(fitted, rng, dim):
    y = rng.standard_normal(dim)

    def f(point):
        fitted.set_test_data(point)
        return fitted.log_pdf()[0]

    fitted.set_test_data(y)
    grad = fitted.grad()[:, 0]
    hess = fitted.hessian_diag()[:, 0]
    f0 = f(y)
    for d in range(dim):
        e = np.zeros(dim)
        e[d] = 1.0
        h = 1e-5
        assert grad[d] == pytest.approx((f(y + h * e) - f(y - h * e)) / (2 * h), rel=1e-5, abs=1e-6)
        h = 1e-4
        assert hess[d] == pytest.approx((f(y + h * e) - 2 * f0 + f(y - h * e)) / h ** 2, rel=1e-3, abs=1e-3)


def test_query_shapes(fitted, test_data):
    fitted.set_test_data(test_data)
    M = test_data.shape[1]
    assert fitted.log_pdf().shape == (M,)
    assert fitted.grad().shape == (fitted.get_num_dimensions(), M)
    assert fitted.hessian_diag().shape == (fitted.get_num_dimensions(), M)


def test_log_pdf_is_higher_near_data(rng):
    X = 0.3 * rng.standard_normal((2, 30))
    est = LiteEstimator(X, GaussianKernel(sigma=1.0), lmbda=1e-3)
    est.fit()
    est.set_test_data(np.array([[0.0, 6.0], [0.0, 6.0]]))
    near, far = est.log_pdf()
    assert near > far


def test_objective_independent_of_worker_count(train_data, rng):
    est = LiteEstimator(train_data, GaussianKernel(sigma=2.0), lmbda=0.01,
                        parallel=ParallelConfig(n_jobs=1))
    est.fit()
    est.set_test_data(rng.standard_normal((train_data.shape[0], 50)))
    serial = est.objective()

    est.parallel = ParallelConfig(n_jobs=4, min_chunk_size=3)
    assert est.objective() == pytest.approx(serial, rel=1e-10)


def test_refit_after_data_mutation(train_data):
    est = LiteEstimator(train_data, GaussianKernel(sigma=2.0), lmbda=0.01)
    est.fit()
    before = est.alpha_beta.copy()

    # mutating points does not invalidate anything by itself
    est.get_lhs_point(0)[:] += 1.0
    assert_allclose(est.alpha_beta, before)

    est.kernel.precompute()
    est.fit()
    assert not np.allclose(est.alpha_beta, before)


def test_process_workers_match_serial(fitted, rng):
    fitted.set_test_data(rng.standard_normal((fitted.get_num_dimensions(), 20)))

    def queries():
        return (fitted.objective(), fitted.log_pdf(), fitted.grad(), fitted.hessian_diag())

    fitted.parallel = ParallelConfig(n_jobs=1)
    serial = queries()
    fitted.parallel = ParallelConfig(n_jobs=2, prefer="processes")
    parallel = queries()

    assert parallel[0] == pytest.approx(serial[0], rel=1e-12)
    for got, expected in zip(parallel[1:], serial[1:]):
        assert_allclose(got, expected)


def test_fit_ignores_transposed_view_of_training_data(rng):
    X = rng.standard_normal((3, 3))
    clean = LiteEstimator(X.copy(), GaussianKernel(sigma=2.0), lmbda=0.01)
    clean.fit()

    est = LiteEstimator(X, GaussianKernel(sigma=2.0), lmbda=0.01)
    est.set_test_data(X.T)
    # same buffer and shape as the training data, but different points
    assert est.is_test_equals_train_data()
    est.fit()

    assert est.kernel.rhs is est.kernel.lhs
    assert_allclose(est.alpha_beta, clean.alpha_beta)
