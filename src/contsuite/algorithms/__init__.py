""" Public API for the :mod:`~contsuite.algorithms` package.
"""

from .continuation.base import continuation
from .continuation.config import ContinuationParameters
from .continuation.predictors import NaturalParameter, PseudoArcLength, Secant
from .continuation.types import ContinuationStatus, Direction
from .corrector.base import solve
from .corrector.config import Broyden, Newton
from .corrector.types import CorrectionDiagnostics, NonlinearSolution
from .jacobian.base import autodiff_jac, finite_diff_jac
from .linalg.base import GMRESSolver, LinearSolver, LUSolver, QRSolver

__all__ = [
    "continuation",
    "solve",
    "ContinuationParameters",
    "ContinuationStatus",
    "Direction",
    "PseudoArcLength",
    "Secant",
    "NaturalParameter",
    "Newton",
    "Broyden",
    "CorrectionDiagnostics",
    "NonlinearSolution",
    "LinearSolver",
    "LUSolver",
    "QRSolver",
    "GMRESSolver",
    "autodiff_jac",
    "finite_diff_jac",
]
