"""Dense linear solvers used by the nonlinear correctors.

Every solver implements the same one-method contract, ``solve(A, b) -> x``,
and signals an unusable matrix with
:class:`~contsuite.algorithms.types.exceptions.SingularJacobianError`
instead of returning non-finite values.
"""

import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np
import scipy.linalg
from scipy.linalg import LinAlgError, LinAlgWarning, get_lapack_funcs
from scipy.sparse.linalg import gmres

from contsuite.algorithms.types.exceptions import SingularJacobianError
from contsuite.algorithms.utils.config import GMRES_RTOL, MACHINE_EPS, RCOND_MIN
from contsuite.utils.log_config import logger


def _as_system(A, b) -> tuple[np.ndarray, np.ndarray]:
    A = np.atleast_2d(np.asarray(A, dtype=float))
    b = np.asarray(b, dtype=float).ravel()
    if A.shape[0] != A.shape[1]:
        raise SingularJacobianError(f"Cannot solve non-square system of shape {A.shape}.")
    if A.shape[0] != b.size:
        raise ValueError(f"Incompatible shapes: A is {A.shape}, b has {b.size} entries.")
    if not (np.all(np.isfinite(A)) and np.all(np.isfinite(b))):
        raise SingularJacobianError("Linear system contains non-finite entries.")
    return A, b


class LinearSolver(ABC):
    """Strategy solving ``A @ x = b`` for a dense square matrix ``A``."""

    @abstractmethod
    def solve(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        """Return ``x`` such that ``A @ x`` approximates ``b``.

        Raises
        ------
        SingularJacobianError
            If ``A`` is singular, badly conditioned or the method breaks down.
        """


@dataclass(frozen=True)
class LUSolver(LinearSolver):
    """Direct solve through an LU factorization with partial pivoting.

    Parameters
    ----------
    rcond_min : float, default=machine epsilon
        Smallest accepted reciprocal condition number in the 1-norm, as
        estimated by LAPACK ``gecon`` from the factorization. Below it the
        matrix is reported as singular.
    """

    rcond_min: float = RCOND_MIN

    def solve(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        A, b = _as_system(A, b)
        with warnings.catch_warnings():
            warnings.simplefilter("error", LinAlgWarning)
            try:
                lu, piv = scipy.linalg.lu_factor(A, check_finite=False)
            except (LinAlgError, LinAlgWarning, ValueError) as exc:
                raise SingularJacobianError(f"LU factorization failed: {exc}") from exc

        gecon, = get_lapack_funcs(("gecon",), (lu,))
        rcond, info = gecon(lu, np.linalg.norm(A, 1), norm="1")
        if info != 0 or not rcond >= self.rcond_min:
            raise SingularJacobianError(
                f"Matrix is singular to working precision (rcond {rcond:.2e})."
            )
        return scipy.linalg.lu_solve((lu, piv), b, check_finite=False)


@dataclass(frozen=True)
class QRSolver(LinearSolver):
    """Direct solve through a QR factorization with column pivoting.

    Parameters
    ----------
    rcond_min : float, default=machine epsilon
        Relative threshold on the diagonal of ``R`` used to detect rank
        deficiency.
    """

    rcond_min: float = RCOND_MIN

    def solve(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        A, b = _as_system(A, b)
        try:
            Q, R, P = scipy.linalg.qr(A, pivoting=True, check_finite=False)
        except LinAlgError as exc:
            raise SingularJacobianError(f"QR factorization failed: {exc}") from exc

        diag = np.abs(np.diag(R))
        if diag[0] == 0.0 or diag[-1] <= self.rcond_min * A.shape[0] * diag[0]:
            raise SingularJacobianError("Matrix is rank deficient to working precision.")

        z = scipy.linalg.solve_triangular(R, Q.T @ b, check_finite=False)
        x = np.empty_like(z)
        x[P] = z
        return x


@dataclass(frozen=True)
class GMRESSolver(LinearSolver):
    """Iterative solve with restarted GMRES.

    Parameters
    ----------
    rtol : float, default=1e-12
        Relative residual tolerance passed to :func:`scipy.sparse.linalg.gmres`.
    restart : int or None, default=None
        Krylov subspace size between restarts (SciPy default when ``None``).
    maxiter : int or None, default=None
        Maximum number of restart cycles (SciPy default when ``None``).
    """

    rtol: float = GMRES_RTOL
    restart: int | None = None
    maxiter: int | None = None

    def solve(self, A: np.ndarray, b: np.ndarray) -> np.ndarray:
        A, b = _as_system(A, b)
        x, info = gmres(A, b, rtol=self.rtol, atol=0.0, restart=self.restart, maxiter=self.maxiter)
        if info != 0:
            raise SingularJacobianError(f"GMRES did not converge (info={info}).")
        if not np.all(np.isfinite(x)):
            raise SingularJacobianError("GMRES produced non-finite values.")
        return x


def nullspace_vector(A: np.ndarray) -> np.ndarray:
    """Return a unit vector spanning the nullspace of an ``n x (n+1)`` matrix.

    The vector is the last column of the complete QR factorization of
    ``A.T``: it is orthogonal to every row of ``A`` and has unit norm by
    construction. Its sign is arbitrary.

    If ``A`` is rank deficient the nullspace has more than one dimension;
    one of its unit vectors is returned and a warning is logged.
    """
    A = np.atleast_2d(np.asarray(A, dtype=float))
    n, m = A.shape
    if m != n + 1:
        raise ValueError(f"Expected an n x (n+1) matrix, got shape {A.shape}.")

    Q, R = scipy.linalg.qr(A.T, mode="full", check_finite=False)
    diag = np.abs(np.diag(R))
    scale = diag.max() if diag.size else 0.0
    if scale == 0.0 or diag.min() <= MACHINE_EPS * m * scale:
        logger.warning("Extended Jacobian is rank deficient; tangent direction is not unique")
    return Q[:, -1].copy()
