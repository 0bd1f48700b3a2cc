"""Shared pipeline base classes and exceptions."""

from .core import (_BackendCall, _ContsuiteBaseBackend, _ContsuiteBaseConfig,
                   _ContsuiteBaseEngine, _ContsuiteBaseInterface)
from .exceptions import (BackendError, ContsuiteError, ConvergenceError,
                         EngineError, NumericalEvaluationError,
                         SingularJacobianError)

__all__ = [
    "_BackendCall",
    "_ContsuiteBaseBackend",
    "_ContsuiteBaseConfig",
    "_ContsuiteBaseEngine",
    "_ContsuiteBaseInterface",
    "BackendError",
    "ContsuiteError",
    "ConvergenceError",
    "EngineError",
    "NumericalEvaluationError",
    "SingularJacobianError",
]
