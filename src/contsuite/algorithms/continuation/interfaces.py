"""Provide the interface between continuation problems and the backend.

The interface turns a :class:`~contsuite.system.problem.ContinuationProblem`
and a starting point into the seed and the vector callables of ``u = (x,
lambda)`` the predict-correct backend works on, and packages the accepted
points into a :class:`~contsuite.system.solution.ContinuationSolution`.
"""

from functools import partial
from typing import TYPE_CHECKING

import numpy as np

from contsuite.algorithms.continuation.config import ContinuationParameters
from contsuite.algorithms.continuation.types import _ContinuationProblem
from contsuite.algorithms.corrector.base import _correct
from contsuite.algorithms.types.core import _BackendCall, _ContsuiteBaseInterface

if TYPE_CHECKING:
    from contsuite.system.problem import ContinuationProblem
    from contsuite.system.solution import ContinuationSolution


class _ContinuationProblemInterface(
    _ContsuiteBaseInterface[
        ContinuationParameters,
        _ContinuationProblem,
        "ContinuationSolution",
        tuple[list[np.ndarray], dict],
    ]
):
    """Adapter wiring continuation problems to the predict-correct backend."""

    def create_problem(
        self,
        *,
        domain_obj: "ContinuationProblem",
        config: ContinuationParameters,
        x0,
        lambda0: float,
    ) -> _ContinuationProblem:
        lambda0 = float(lambda0)
        if not config.lambda_min <= lambda0 <= config.lambda_max:
            raise ValueError(
                f"Initial lambda {lambda0} lies outside [{config.lambda_min}, {config.lambda_max}]"
            )
        x0_arr = np.array(x0, dtype=float).ravel()
        return _ContinuationProblem(
            seed=domain_obj.join(x0_arr, lambda0),
            residual_fn=domain_obj.residual,
            jacobian_fn=domain_obj.jacobian_fn(x0_arr.size),
            params=config,
            corrector=partial(_correct, config.corrector),
            domain_obj=domain_obj,
        )

    def to_backend_inputs(self, problem: _ContinuationProblem) -> _BackendCall:
        return _BackendCall(
            kwargs={
                "seed": problem.seed,
                "predictor": problem.params.predictor,
                "corrector": problem.corrector,
                "residual_fn": problem.residual_fn,
                "jacobian_fn": problem.jacobian_fn,
                "params": problem.params,
            }
        )

    def to_results(
        self,
        outputs: tuple[list[np.ndarray], dict],
        *,
        problem: _ContinuationProblem,
    ) -> "ContinuationSolution":
        from contsuite.system.solution import ContinuationSolution

        family, info = outputs
        solution = ContinuationSolution(problem.domain_obj, ncols=problem.params.ncols)
        x_seed, lam_seed = problem.domain_obj.split(family[0])
        solution._append(x_seed, lam_seed)
        for u, tangent, diagnostics in zip(family[1:], info["tangents"], info["diagnostics"]):
            x, lam = problem.domain_obj.split(u)
            solution._append(x, lam, tangent=tangent, diagnostics=diagnostics)
        solution._finish(info["status"], info["error"])
        return solution
