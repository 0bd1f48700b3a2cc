"""Provide predictor-corrector continuation of solution branches.

The :mod:`~contsuite.algorithms.continuation` package traces the curve of
solutions of ``f(x, lambda, p) = 0`` from one known point. Every step
predicts a new point along the branch and corrects it with one of the
nonlinear correctors of :mod:`~contsuite.algorithms.corrector`, applied to
``f`` extended with one auxiliary equation.

Three predictors are available:

- :class:`PseudoArcLength` (default) follows the tangent of the branch and
  passes turning points of lambda.
- :class:`Secant` follows the direction of the two last accepted points.
- :class:`NaturalParameter` steps lambda directly.

See Also
--------
:mod:`~contsuite.algorithms.corrector`
    Correctors applied to each prediction.
:mod:`~contsuite.system`
    Problem and solution objects.
"""

from .backends import _PCContinuationBackend
from .base import continuation
from .config import ContinuationParameters
from .engine import _ContinuationEngine
from .interfaces import _ContinuationProblemInterface
from .predictors import NaturalParameter, PseudoArcLength, Secant, _PredictorBase
from .types import ContinuationStatus, Direction

__all__ = [
    "continuation",
    "ContinuationParameters",
    "ContinuationStatus",
    "Direction",
    "PseudoArcLength",
    "Secant",
    "NaturalParameter",

    "_PredictorBase",
    "_PCContinuationBackend",
    "_ContinuationEngine",
    "_ContinuationProblemInterface",
]
