"""
Custom exceptions for the algorithms package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from contsuite.algorithms.corrector.types import CorrectionDiagnostics


class ContsuiteError(Exception):
    """Base exception for contsuite errors.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class NumericalEvaluationError(ContsuiteError):
    """Raised when a residual or Jacobian evaluation fails or is not finite.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class SingularJacobianError(ContsuiteError):
    """Raised when a linear system cannot be solved reliably.
    
    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConvergenceError(ContsuiteError):
    """Raised when an algorithm fails to converge.
    
    Parameters
    ----------
    message : str
        The error message.
    diagnostics : :class:`~contsuite.algorithms.corrector.types.CorrectionDiagnostics` or None
        Diagnostics of the last iteration performed.
    """

    def __init__(self, message: str, diagnostics: "CorrectionDiagnostics | None" = None):
        super().__init__(message)
        self.diagnostics = diagnostics

    @property
    def residual_norm(self) -> float:
        return float("nan") if self.diagnostics is None else self.diagnostics.residual_norm

    @property
    def step_norm(self) -> float:
        return float("nan") if self.diagnostics is None else self.diagnostics.step_norm

    @property
    def iterations(self) -> int:
        return 0 if self.diagnostics is None else self.diagnostics.iterations


class BackendError(ContsuiteError):
    """Raised when an exception occurs in a backend.
    
    Parameters
    ----------
    message : str
        The error message.
    """
    
    def __init__(self, message: str):
        super().__init__(message)


class EngineError(ContsuiteError):
    """Raised when an exception occurs in the engine.
    
    Parameters
    ----------
    message : str
        The error message.
    """
    
    def __init__(self, message: str):
        super().__init__(message)
