from .base import _CorrectorBackend
from .broyden import _BroydenBackend
from .newton import _NewtonBackend

__all__ = [
    "_CorrectorBackend",
    "_NewtonBackend",
    "_BroydenBackend",
]
