"""Types for the continuation module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

import numpy as np

from contsuite.algorithms.corrector.types import (JacobianFn,
                                                  NonlinearSolution,
                                                  ResidualFn)

if TYPE_CHECKING:
    from contsuite.algorithms.continuation.config import ContinuationParameters


class ContinuationStatus(Enum):
    """State of a continuation run.

    Parameters
    ----------
    RUNNING : int
        The run is still stepping.
    TERMINATED_BOUNDS : int
        The next point left ``[lambda_min, lambda_max]``; normal termination.
    TERMINATED_MAXSTEPS : int
        ``max_steps`` points were accepted; normal termination.
    FAILED : int
        A predictor or corrector step failed; the trace accumulated so far
        is returned.
    """
    RUNNING = 0
    TERMINATED_BOUNDS = 1
    TERMINATED_MAXSTEPS = 2
    FAILED = 3

    def __str__(self) -> str:
        return self.name.lower()


class Direction(Enum):
    """Initial direction of travel along the continuation parameter."""
    FORWARD = 1
    BACKWARD = -1

    @property
    def sign(self) -> float:
        return float(self.value)


@dataclass(slots=True)
class _StepProposal:
    """Prediction payload returned by continuation predictors.

    Attributes
    ----------
    prediction : np.ndarray
        Initial guess ``u = (x, lambda)`` for the corrector.
    tangent : np.ndarray
        Unit direction used for the prediction.
    residual_fn : :data:`~contsuite.algorithms.corrector.types.ResidualFn`
        Extended residual of ``u``: ``f`` plus one auxiliary equation.
    jacobian_fn : :data:`~contsuite.algorithms.corrector.types.JacobianFn`
        Jacobian of *residual_fn*, square of size ``n + 1``.
    step : float
        Step size used for the prediction.
    """

    prediction: np.ndarray
    tangent: np.ndarray
    residual_fn: ResidualFn
    jacobian_fn: JacobianFn
    step: float


#: Corrector callable injected in the continuation backend:
#: ``corrector(u_guess, residual_fn, jacobian_fn) -> NonlinearSolution``.
CorrectorFn = Callable[[np.ndarray, ResidualFn, JacobianFn], NonlinearSolution]


@dataclass(frozen=True)
class _ContinuationProblem:
    """Defines the inputs for a continuation run.

    Attributes
    ----------
    seed : np.ndarray
        Initial accepted point ``u0 = (x0, lambda0)``.
    residual_fn : :data:`~contsuite.algorithms.corrector.types.ResidualFn`
        ``f`` as a function of ``u`` (``n`` equations).
    jacobian_fn : :data:`~contsuite.algorithms.corrector.types.JacobianFn`
        ``[fx | flambda]`` as a function of ``u`` (``n x (n+1)``).
    params : :class:`~contsuite.algorithms.continuation.config.ContinuationParameters`
        Run configuration.
    corrector : :data:`CorrectorFn`
        Corrector applied to every prediction.
    domain_obj : object
        The continuation problem that produced the run.
    """

    seed: np.ndarray
    residual_fn: ResidualFn
    jacobian_fn: JacobianFn
    params: "ContinuationParameters"
    corrector: CorrectorFn
    domain_obj: object
