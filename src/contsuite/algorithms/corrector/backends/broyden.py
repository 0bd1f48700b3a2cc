"""Provide Broyden's quasi-Newton correction backend."""

import numpy as np
from numba import njit

from contsuite.algorithms.corrector.backends.base import _CorrectorBackend
from contsuite.algorithms.corrector.types import JacobianFn
from contsuite.algorithms.utils.config import FASTMATH


@njit(fastmath=FASTMATH, cache=False)
def _broyden_update(J: np.ndarray, dx: np.ndarray, df: np.ndarray) -> np.ndarray:
    """Return ``J + ((df - J dx) dx^T) / (dx^T dx)`` as a new array.

    ``J`` is returned unchanged (copied) when ``dx`` is the zero vector.
    """
    m, n = J.shape
    J_new = J.copy()

    denom = 0.0
    for j in range(n):
        denom += dx[j] * dx[j]
    if denom == 0.0:
        return J_new

    for i in range(m):
        Jdx = 0.0
        for j in range(n):
            Jdx += J[i, j] * dx[j]
        u = (df[i] - Jdx) / denom
        for j in range(n):
            J_new[i, j] += u * dx[j]
    return J_new


class _BroydenBackend(_CorrectorBackend):
    """Broyden iteration: one Jacobian evaluation, then rank-one updates."""

    def _next_jacobian(
        self,
        J: np.ndarray,
        x_new: np.ndarray,
        dx: np.ndarray,
        df: np.ndarray,
        jacobian_fn: JacobianFn,
    ) -> np.ndarray:
        return _broyden_update(
            np.ascontiguousarray(J, dtype=np.float64),
            np.ascontiguousarray(dx, dtype=np.float64),
            np.ascontiguousarray(df, dtype=np.float64),
        )
