"""Public API for the :mod:`~contsuite.system` package.

This module re-exports the problem and solution classes so that users can
simply write::

>>> from contsuite.system import ContinuationProblem, ContinuationSolution
"""

from .solution import ContinuationSolution
from .problem import ContinuationProblem, NonlinearProblem

__all__ = [
    "NonlinearProblem",
    "ContinuationProblem",
    "ContinuationSolution",
]
