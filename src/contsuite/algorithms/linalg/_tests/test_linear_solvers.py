import logging

import numpy as np
import pytest

from contsuite.algorithms.linalg import (GMRESSolver, LUSolver, QRSolver,
                                         nullspace_vector)
from contsuite.algorithms.types.exceptions import SingularJacobianError

A = np.array([[4.0, 1.0, 0.0], [2.0, 3.0, 1.0], [0.0, 1.0, 5.0]])
b = np.array([1.0, 2.0, -1.0])
SINGULAR = np.array([[1.0, 2.0], [2.0, 4.0]])


@pytest.mark.parametrize("solver", [LUSolver(), QRSolver(), GMRESSolver()])
def test_solvers_agree_with_numpy(solver):
    x = solver.solve(A, b)
    assert np.allclose(x, np.linalg.solve(A, b), atol=1e-10)


@pytest.mark.parametrize("solver", [LUSolver(), QRSolver()])
def test_direct_solvers_reject_singular_matrix(solver):
    with pytest.raises(SingularJacobianError):
        solver.solve(SINGULAR, [1.0, 1.0])


def test_lu_rejects_ill_conditioned_matrix_with_unit_pivots():
    # Both pivots are 1 but cond_1(A) is about 1e18.
    A = np.array([[1.0, 1e9], [0.0, 1.0]])
    with pytest.raises(SingularJacobianError, match="rcond"):
        LUSolver().solve(A, [1.0, 1.0])
    assert np.allclose(LUSolver(rcond_min=0.0).solve(A, [1.0, 1.0]), [1.0 - 1e9, 1.0])


@pytest.mark.parametrize("solver", [LUSolver(), QRSolver(), GMRESSolver()])
def test_non_finite_system_raises(solver):
    bad = A.copy()
    bad[1, 1] = np.nan
    with pytest.raises(SingularJacobianError):
        solver.solve(bad, b)


def test_non_square_system_raises():
    with pytest.raises(SingularJacobianError):
        LUSolver().solve(np.ones((2, 3)), [1.0, 1.0])


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        LUSolver().solve(A, [1.0, 2.0])


def test_nullspace_vector_is_unit_and_orthogonal():
    J = np.array([[2.0, -2.0, -1.0], [-2.0, -2.0, 0.0]])
    t = nullspace_vector(J)
    assert t.shape == (3,)
    assert np.isclose(np.linalg.norm(t), 1.0)
    assert np.allclose(J @ t, 0.0, atol=1e-14)
    # Nullspace of this matrix is spanned by (1, -1, 4).
    assert np.isclose(abs(t @ np.array([1.0, -1.0, 4.0])) / np.sqrt(18.0), 1.0)


def test_nullspace_vector_requires_one_extra_column():
    with pytest.raises(ValueError):
        nullspace_vector(np.eye(2))


def test_nullspace_vector_warns_on_rank_deficiency(caplog):
    J = np.array([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
    with caplog.at_level(logging.WARNING, logger="contsuite"):
        t = nullspace_vector(J)
    assert "rank deficient" in caplog.text
    assert np.allclose(J @ t, 0.0, atol=1e-12)
