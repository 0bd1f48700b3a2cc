"""Shared iteration loop of the Newton-type correctors.

The loop is identical for every corrector; subclasses only decide how the
Jacobian of the next iteration is obtained.
"""

from abc import abstractmethod
from typing import Tuple

import numpy as np

from contsuite.algorithms.corrector.config import _BaseCorrectionConfig
from contsuite.algorithms.corrector.types import (CorrectionDiagnostics,
                                                  JacobianFn, ResidualFn)
from contsuite.algorithms.jacobian.base import _evaluate
from contsuite.algorithms.types.core import _ContsuiteBaseBackend
from contsuite.algorithms.types.exceptions import ConvergenceError
from contsuite.utils.log_config import logger


class _CorrectorBackend(_ContsuiteBaseBackend[Tuple[np.ndarray, CorrectionDiagnostics]]):
    """Iteratively refine an initial guess toward a root of a residual.

    Parameters
    ----------
    config : :class:`~contsuite.algorithms.corrector.config._BaseCorrectionConfig`
        Tolerances, iteration budget and linear solver.

    Notes
    -----
    The backend keeps no state between calls: every quantity of an iteration
    is local to :meth:`run`, so two calls with the same inputs return the
    same diagnostics.
    """

    def __init__(self, config: _BaseCorrectionConfig) -> None:
        self._config = config

    @property
    def config(self) -> _BaseCorrectionConfig:
        return self._config

    @abstractmethod
    def _next_jacobian(
        self,
        J: np.ndarray,
        x_new: np.ndarray,
        dx: np.ndarray,
        df: np.ndarray,
        jacobian_fn: JacobianFn,
    ) -> np.ndarray:
        """Return the Jacobian used at the next iterate."""

    def run(
        self,
        x0: np.ndarray,
        residual_fn: ResidualFn,
        *,
        jacobian_fn: JacobianFn,
    ) -> Tuple[np.ndarray, CorrectionDiagnostics]:
        """Solve ``residual_fn(x) = 0`` starting from *x0*.

        Parameters
        ----------
        x0 : np.ndarray
            Initial guess.
        residual_fn : :data:`~contsuite.algorithms.corrector.types.ResidualFn`
            Function to compute residual vector R(x).
        jacobian_fn : :data:`~contsuite.algorithms.corrector.types.JacobianFn`
            Function to compute the Jacobian dR/dx.

        Returns
        -------
        x_solution : np.ndarray
            Converged solution vector.
        diagnostics : :class:`~contsuite.algorithms.corrector.types.CorrectionDiagnostics`
            Residual norm, relative step norm and iteration count.

        Raises
        ------
        ConvergenceError
            If both tolerances are not met within ``maxiters`` iterations.
        NumericalEvaluationError
            If the residual or the Jacobian is not finite.
        SingularJacobianError
            If the linear solver cannot solve the Newton system.
        """
        cfg = self._config
        x = np.array(x0, dtype=float).ravel()
        r = _evaluate(residual_fn, x)
        J = jacobian_fn(x)

        r_norm = float("nan")
        step_norm = float("nan")
        for k in range(cfg.maxiters):
            r_norm = float(np.linalg.norm(r))
            dx = cfg.linear_solver.solve(J, -r)
            x_new = x + dx

            dx_norm = float(np.linalg.norm(dx))
            x_norm = float(np.linalg.norm(x_new))
            step_norm = dx_norm / x_norm if x_norm > 0.0 else dx_norm

            self.on_iteration(k, x_new, r_norm)
            logger.debug(
                "%s iter %d: |R|=%.3e, |dx|/|x|=%.3e", cfg.name, k, r_norm, step_norm
            )

            if step_norm < cfg.xtol and r_norm < cfg.rtol:
                diagnostics = CorrectionDiagnostics(r_norm, step_norm, k + 1)
                logger.debug("%s converged after %d iterations (|R|=%.2e)", cfg.name, k + 1, r_norm)
                self.on_accept(x_new, iterations=k + 1, residual_norm=r_norm)
                return x_new, diagnostics

            r_new = _evaluate(residual_fn, x_new)
            J = self._next_jacobian(J, x_new, dx, r_new - r, jacobian_fn)
            x, r = x_new, r_new

        diagnostics = CorrectionDiagnostics(r_norm, step_norm, cfg.maxiters)
        self.on_failure(x, iterations=cfg.maxiters, residual_norm=r_norm)
        logger.warning(
            "%s did not converge after %d iterations (|R|=%.2e, |dx|/|x|=%.2e)",
            cfg.name, cfg.maxiters, r_norm, step_norm,
        )
        raise ConvergenceError(
            f"{cfg.name} did not converge after {cfg.maxiters} iterations "
            f"(|R|={r_norm:.2e}, |dx|/|x|={step_norm:.2e}).",
            diagnostics,
        )
