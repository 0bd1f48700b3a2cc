"""
Types for the corrector module.

This module provides the types for the corrector module.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

import numpy as np

if TYPE_CHECKING:
    from contsuite.algorithms.corrector.config import _BaseCorrectionConfig

#: Type alias for residual function signatures.
#:
#: Functions of this type compute residual vectors from parameter vectors,
#: representing the nonlinear equations to be solved. The residual should
#: approach zero as the parameter vector approaches the solution.
#:
#: Parameters
#: ----------
#: x : ndarray
#:     Parameter vector at which to evaluate the residual.
#:
#: Returns
#: -------
#: residual : ndarray
#:     Residual vector of the same length as the input.
ResidualFn = Callable[[np.ndarray], np.ndarray]

#: Type alias for Jacobian function signatures.
#:
#: Functions of this type compute Jacobian matrices (first derivatives)
#: of residual functions with respect to parameter vectors.
#:
#: Parameters
#: ----------
#: x : ndarray
#:     Parameter vector at which to evaluate the Jacobian.
#:
#: Returns
#: -------
#: jacobian : ndarray
#:     Jacobian matrix with shape (n, n) where n is the length of x.
#:     Element (i, j) contains the partial derivative of residual[i]
#:     with respect to x[j].
JacobianFn = Callable[[np.ndarray], np.ndarray]


@dataclass(frozen=True)
class CorrectionDiagnostics:
    """Diagnostics of a single corrector call.

    A fresh record is produced by every call; configurations are never
    written to.

    Attributes
    ----------
    residual_norm : float
        Norm of the residual ``||f(x_k)||`` at the last iterate.
    step_norm : float
        Relative norm of the last update ``||x_{k+1} - x_k|| / ||x_{k+1}||``.
    iterations : int
        Number of iterations performed.
    """
    residual_norm: float
    step_norm: float
    iterations: int


@dataclass(frozen=True)
class NonlinearSolution:
    """Standardized result for a successful corrector run.

    Attributes
    ----------
    x : ndarray
        Converged solution vector.
    diagnostics : :class:`CorrectionDiagnostics`
        Convergence information of the run.
    method : str
        Name of the corrector that produced the solution.
    """
    x: np.ndarray
    diagnostics: CorrectionDiagnostics
    method: str

    @property
    def residual_norm(self) -> float:
        return self.diagnostics.residual_norm

    @property
    def step_norm(self) -> float:
        return self.diagnostics.step_norm

    @property
    def iterations(self) -> int:
        return self.diagnostics.iterations


@dataclass(frozen=True)
class _CorrectionProblem:
    """Defines the inputs for a backend correction run.

    Attributes
    ----------
    initial_guess : ndarray
        Initial parameter vector.
    residual_fn : :data:`ResidualFn`
        Residual function R(x).
    jacobian_fn : :data:`JacobianFn`
        Jacobian of R, already resolved by the Jacobian provider.
    config : :class:`~contsuite.algorithms.corrector.config._BaseCorrectionConfig`
        Corrector configuration (method, tolerances, linear solver).
    """
    initial_guess: np.ndarray
    residual_fn: ResidualFn
    jacobian_fn: JacobianFn
    config: "_BaseCorrectionConfig"
