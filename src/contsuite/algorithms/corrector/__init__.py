"""Provide iterative correction algorithms for solving nonlinear systems.

The :mod:`~contsuite.algorithms.corrector` package refines an approximate
root of ``f(x) = 0`` with Newton's method or Broyden's quasi-Newton method.
Both correctors share one iteration loop and differ only in how the Jacobian
of each iteration is obtained.

Examples
--------
>>> from contsuite import NonlinearProblem, Newton, Broyden, solve
>>> f = lambda x, p: [x[0]**2 + x[1]**2 - 1, x[0] + x[1] - 1]
>>> prob = NonlinearProblem(f)
>>> sol = solve(prob, Newton(), [0.25, 0.5])
>>> sol.x, sol.iterations

See Also
--------
:mod:`~contsuite.algorithms.continuation`
    Continuation algorithms that use the correctors on extended systems.
"""

from .backends import _BroydenBackend, _CorrectorBackend, _NewtonBackend
from .base import solve
from .config import Broyden, Newton, _BaseCorrectionConfig
from .engine import _CorrectionEngine
from .interfaces import _NonlinearProblemInterface
from .types import CorrectionDiagnostics, NonlinearSolution

__all__ = [
    "solve",
    "Newton",
    "Broyden",
    "CorrectionDiagnostics",
    "NonlinearSolution",

    "_BaseCorrectionConfig",
    "_CorrectorBackend",
    "_NewtonBackend",
    "_BroydenBackend",
    "_CorrectionEngine",
    "_NonlinearProblemInterface",
]
