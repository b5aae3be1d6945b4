# tests/linalg/test_utils.py
import numpy as np
import pytest

from kexpfam.linalg import utils as U


def test_add_diag_jitter():
    M = np.eye(3)
    out = U.add_diag_jitter(M, jitter=1e-3, copy=True)
    assert out is not M
    assert np.allclose(np.diag(out), np.diag(M) + 1e-3)
    assert np.allclose(M, np.eye(3))

    # zero is a valid ridge
    assert np.array_equal(U.add_diag_jitter(M, jitter=0.0), M)

    # in-place (copy=False) modifies same object when input is a float ndarray
    M2 = np.eye(3)
    ret = U.add_diag_jitter(M2, jitter=1e-4, copy=False)
    assert ret is M2
    assert np.allclose(np.diag(M2), np.ones(3) + 1e-4)


def test_add_diag_jitter_rejects_bad_input():
    with pytest.raises(ValueError):
        U.add_diag_jitter(np.ones((2, 3)), jitter=1e-3)
    with pytest.raises(ValueError):
        U.add_diag_jitter(np.eye(3), jitter=np.array([1e-3, 2e-3]))
