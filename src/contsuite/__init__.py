"""Predictor-corrector continuation of nonlinear systems.

Trace the solution branch of ``f(x, lambda, p) = 0`` from one known point::

>>> from contsuite import ContinuationParameters, ContinuationProblem, continuation
>>> def f(x, lam, p):
...     return [x[0]**2 + x[1]**2 - lam, x[1]**2 - 2*x[0] + 1]
>>> params = ContinuationParameters(lambda_min=0.0, lambda_max=2.5,
...                                 ds=0.25, direction="backward")
>>> sol = continuation(ContinuationProblem(f, params), [1.0, -1.0], 2.0)
"""

from .algorithms import (Broyden, ContinuationParameters, ContinuationStatus,
                         CorrectionDiagnostics, Direction, GMRESSolver,
                         LinearSolver, LUSolver, NaturalParameter, Newton,
                         NonlinearSolution, PseudoArcLength, QRSolver, Secant,
                         autodiff_jac, continuation, finite_diff_jac, solve)
from .algorithms.types.exceptions import (BackendError, ContsuiteError,
                                          ConvergenceError, EngineError,
                                          NumericalEvaluationError,
                                          SingularJacobianError)
from .system import (ContinuationProblem, ContinuationSolution,
                     NonlinearProblem)

__version__ = "0.1.0"

__all__ = [
    "NonlinearProblem",
    "ContinuationProblem",
    "ContinuationParameters",
    "ContinuationSolution",
    "ContinuationStatus",
    "Direction",
    "Newton",
    "Broyden",
    "NonlinearSolution",
    "CorrectionDiagnostics",
    "LinearSolver",
    "LUSolver",
    "QRSolver",
    "GMRESSolver",
    "PseudoArcLength",
    "Secant",
    "NaturalParameter",
    "solve",
    "continuation",
    "finite_diff_jac",
    "autodiff_jac",
    "ContsuiteError",
    "NumericalEvaluationError",
    "SingularJacobianError",
    "ConvergenceError",
    "BackendError",
    "EngineError",
]
