"""User-facing entry point of the nonlinear correctors.

:func:`solve` assembles the engine, backend and interface for the requested
method and runs a single correction.
"""

from typing import Type

import numpy as np

from contsuite.algorithms.corrector.backends.base import _CorrectorBackend
from contsuite.algorithms.corrector.backends.broyden import _BroydenBackend
from contsuite.algorithms.corrector.backends.newton import _NewtonBackend
from contsuite.algorithms.corrector.config import (Broyden, Newton,
                                                   _BaseCorrectionConfig)
from contsuite.algorithms.corrector.engine import _CorrectionEngine
from contsuite.algorithms.corrector.interfaces import _NonlinearProblemInterface
from contsuite.algorithms.corrector.types import (JacobianFn,
                                                  NonlinearSolution,
                                                  ResidualFn,
                                                  _CorrectionProblem)

_BACKENDS: dict[Type[_BaseCorrectionConfig], Type[_CorrectorBackend]] = {
    Newton: _NewtonBackend,
    Broyden: _BroydenBackend,
}


def _backend_for(method: _BaseCorrectionConfig) -> _CorrectorBackend:
    for config_type in type(method).__mro__:
        backend_cls = _BACKENDS.get(config_type)
        if backend_cls is not None:
            return backend_cls(method)
    raise TypeError(f"No corrector backend registered for {type(method).__name__}")


def _make_engine(method: _BaseCorrectionConfig) -> _CorrectionEngine:
    return _CorrectionEngine(backend=_backend_for(method), interface=_NonlinearProblemInterface())


def solve(problem, method: _BaseCorrectionConfig | None = None, x0=None) -> NonlinearSolution:
    """Solve the nonlinear problem *problem* with *method* starting from *x0*.

    Parameters
    ----------
    problem : :class:`~contsuite.system.problem.NonlinearProblem`
        Problem defining ``f(x, p) = 0``.
    method : :class:`~contsuite.algorithms.corrector.config.Newton` or :class:`~contsuite.algorithms.corrector.config.Broyden`, optional
        Corrector configuration. Defaults to ``Newton()``.
    x0 : array_like
        Initial guess.

    Returns
    -------
    :class:`~contsuite.algorithms.corrector.types.NonlinearSolution`
        Converged solution and its diagnostics.

    Raises
    ------
    ConvergenceError
        If the method exhausts its iterations without meeting both tolerances.
    NumericalEvaluationError
        If ``f`` or its Jacobian cannot be evaluated to finite values.
    SingularJacobianError
        If a linear solve fails.
    """
    if x0 is None:
        raise ValueError("An initial guess x0 is required")
    method = Newton() if method is None else method
    engine = _make_engine(method)
    corr_problem = engine.interface.create_problem(domain_obj=problem, config=method, x0=x0)
    return engine.solve(corr_problem)


def _correct(
    method: _BaseCorrectionConfig,
    x0: np.ndarray,
    residual_fn: ResidualFn,
    jacobian_fn: JacobianFn,
) -> NonlinearSolution:
    """Run *method* on plain residual and Jacobian callables."""
    engine = _make_engine(method)
    corr_problem = _CorrectionProblem(
        initial_guess=np.array(x0, dtype=float).ravel(),
        residual_fn=residual_fn,
        jacobian_fn=jacobian_fn,
        config=method,
    )
    return engine.solve(corr_problem)
