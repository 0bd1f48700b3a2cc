"""Continuation engine wiring the predict-correct backend to its interface."""

import numpy as np

from contsuite.algorithms.continuation.backends.pc import _PCContinuationBackend
from contsuite.algorithms.continuation.interfaces import _ContinuationProblemInterface
from contsuite.algorithms.types.core import _ContsuiteBaseEngine


class _ContinuationEngine(_ContsuiteBaseEngine):
    """Engine orchestrating a continuation run."""

    def __init__(
        self,
        *,
        backend: _PCContinuationBackend,
        interface: _ContinuationProblemInterface | None = None,
    ) -> None:
        super().__init__(backend=backend, interface=interface)

    def _after_backend_success(self, outputs, *, problem) -> None:
        family, info = outputs
        self._backend.on_success(
            np.asarray(family[-1], dtype=float),
            iterations=len(family) - 1,
            residual_norm=float(info["residual_norm"]),
        )
