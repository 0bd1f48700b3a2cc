from .pc import _PCContinuationBackend

__all__ = ["_PCContinuationBackend"]
