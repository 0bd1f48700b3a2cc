"""Provide the Newton-Raphson correction backend."""

import numpy as np

from contsuite.algorithms.corrector.backends.base import _CorrectorBackend
from contsuite.algorithms.corrector.types import JacobianFn


class _NewtonBackend(_CorrectorBackend):
    """Newton-Raphson iteration: the Jacobian is recomputed at every iterate."""

    def _next_jacobian(
        self,
        J: np.ndarray,
        x_new: np.ndarray,
        dx: np.ndarray,
        df: np.ndarray,
        jacobian_fn: JacobianFn,
    ) -> np.ndarray:
        return jacobian_fn(x_new)
