"""Provide interfaces between nonlinear problems and corrector backends.

The interface resolves the residual and the Jacobian of a
:class:`~contsuite.system.problem.NonlinearProblem` into the plain vector
callables the backends iterate on, and packages the backend outputs into a
:class:`~contsuite.algorithms.corrector.types.NonlinearSolution`.
"""

from typing import TYPE_CHECKING, Tuple

import numpy as np

from contsuite.algorithms.corrector.config import _BaseCorrectionConfig
from contsuite.algorithms.corrector.types import (CorrectionDiagnostics,
                                                  NonlinearSolution,
                                                  _CorrectionProblem)
from contsuite.algorithms.types.core import _BackendCall, _ContsuiteBaseInterface

if TYPE_CHECKING:
    from contsuite.system.problem import NonlinearProblem


class _NonlinearProblemInterface(
    _ContsuiteBaseInterface[
        _BaseCorrectionConfig,
        _CorrectionProblem,
        NonlinearSolution,
        Tuple[np.ndarray, CorrectionDiagnostics],
    ]
):
    """Adapter producing correction problems from nonlinear problems."""

    def create_problem(
        self,
        *,
        domain_obj: "NonlinearProblem",
        config: _BaseCorrectionConfig,
        x0: np.ndarray,
    ) -> _CorrectionProblem:
        x0_arr = np.array(x0, dtype=float).ravel()
        return _CorrectionProblem(
            initial_guess=x0_arr,
            residual_fn=domain_obj.residual,
            jacobian_fn=domain_obj.jacobian_fn(x0_arr.size),
            config=config,
        )

    def to_backend_inputs(self, problem: _CorrectionProblem) -> _BackendCall:
        return _BackendCall(
            args=(problem.initial_guess, problem.residual_fn),
            kwargs={"jacobian_fn": problem.jacobian_fn},
        )

    def to_results(
        self,
        outputs: Tuple[np.ndarray, CorrectionDiagnostics],
        *,
        problem: _CorrectionProblem,
    ) -> NonlinearSolution:
        x, diagnostics = outputs
        return NonlinearSolution(x=x, diagnostics=diagnostics, method=problem.config.name)
