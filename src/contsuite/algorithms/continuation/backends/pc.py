"""Predict-correct continuation backend implementation."""

from typing import Optional

import numpy as np

from contsuite.algorithms.continuation.config import ContinuationParameters
from contsuite.algorithms.continuation.predictors import _PredictorBase
from contsuite.algorithms.continuation.types import (ContinuationStatus,
                                                     CorrectorFn,
                                                     _StepProposal)
from contsuite.algorithms.corrector.types import (JacobianFn,
                                                  NonlinearSolution,
                                                  ResidualFn)
from contsuite.algorithms.types.core import _ContsuiteBaseBackend
from contsuite.algorithms.types.exceptions import ContsuiteError
from contsuite.utils.log_config import logger


class _PCContinuationBackend(_ContsuiteBaseBackend):
    """Trace a solution branch by repeated prediction and correction.

    The backend owns the accepted points, the tangent of the last step and
    the per-step diagnostics for the duration of :meth:`run`. A step either
    appends a point or ends the run; rejected points are never stored.
    """

    def __init__(self) -> None:
        self._last_residual: float = float("nan")

    def _reset_state(self) -> None:
        self._last_residual = float("nan")

    def _advance(
        self,
        u_prev: np.ndarray,
        tangent: Optional[np.ndarray],
        *,
        step: int,
        predictor: _PredictorBase,
        corrector: CorrectorFn,
        residual_fn: ResidualFn,
        jacobian_fn: JacobianFn,
        params: ContinuationParameters,
    ) -> tuple[_StepProposal, NonlinearSolution]:
        """Predict and correct one step, shrinking ``ds`` on failure.

        Raises the last error once ``max_retries`` is exhausted or the
        reduced step would fall below ``ds_min``.
        """
        ds = float(params.ds)
        attempt = 0
        while True:
            try:
                proposal = predictor.predict(u_prev, tangent, ds, params.sign, residual_fn, jacobian_fn)
                solution = corrector(proposal.prediction, proposal.residual_fn, proposal.jacobian_fn)
                return proposal, solution
            except ContsuiteError as exc:
                self.on_failure(u_prev, iterations=step, residual_norm=self._last_residual)
                reduced = ds * params.step_reduction
                if attempt >= params.max_retries or reduced < params.ds_min:
                    raise
                attempt += 1
                logger.debug(
                    "Step %d failed with ds=%.3e (%s); retrying with ds=%.3e",
                    step, ds, exc, reduced,
                )
                ds = reduced

    def run(
        self,
        *,
        seed: np.ndarray,
        predictor: _PredictorBase,
        corrector: CorrectorFn,
        residual_fn: ResidualFn,
        jacobian_fn: JacobianFn,
        params: ContinuationParameters,
    ) -> tuple[list[np.ndarray], dict]:
        self._reset_state()

        family: list[np.ndarray] = [np.asarray(seed, dtype=float).copy()]
        tangents: list[np.ndarray] = []
        diagnostics: list = []
        tangent: Optional[np.ndarray] = None
        status = ContinuationStatus.RUNNING
        error: Optional[Exception] = None

        while status is ContinuationStatus.RUNNING:
            step = len(family)
            if step > params.max_steps:
                status = ContinuationStatus.TERMINATED_MAXSTEPS
                break

            u_prev = family[-1]
            try:
                proposal, solution = self._advance(
                    u_prev,
                    tangent,
                    step=step,
                    predictor=predictor,
                    corrector=corrector,
                    residual_fn=residual_fn,
                    jacobian_fn=jacobian_fn,
                    params=params,
                )
            except ContsuiteError as exc:
                logger.warning("Continuation step %d failed: %s", step, exc)
                status = ContinuationStatus.FAILED
                error = exc
                break

            u_new = np.asarray(solution.x, dtype=float)
            lam = float(u_new[-1])
            if lam < params.lambda_min or lam > params.lambda_max:
                status = ContinuationStatus.TERMINATED_BOUNDS
                break

            tangent = predictor.on_accept(u_prev=u_prev, u_new=u_new, proposal=proposal)
            family.append(u_new.copy())
            tangents.append(np.asarray(tangent, dtype=float).copy())
            diagnostics.append(solution.diagnostics)
            self._last_residual = float(solution.residual_norm)

            self.on_iteration(step, u_new, self._last_residual)
            self.on_accept(u_new, iterations=solution.iterations, residual_norm=self._last_residual)

            if params.verbose:
                logger.info(
                    "step %4d | lambda = %+.6e | |R| = %.3e | |dx| = %.3e | iters = %2d | x = %s",
                    step,
                    lam,
                    solution.residual_norm,
                    solution.step_norm,
                    solution.iterations,
                    np.array2string(u_new[:-1][: params.ncols], precision=6),
                )

        logger.info(
            "Continuation %s after %d point(s), lambda = %.6g",
            status,
            len(family),
            family[-1][-1],
        )

        info = {
            "status": status,
            "error": error,
            "tangents": tuple(tangents),
            "diagnostics": tuple(diagnostics),
            "residual_norm": self._last_residual,
        }
        return family, info
