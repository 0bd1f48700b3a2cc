"""Correction engine wiring a corrector backend to its interface."""

from contsuite.algorithms.corrector.backends.base import _CorrectorBackend
from contsuite.algorithms.corrector.interfaces import _NonlinearProblemInterface
from contsuite.algorithms.types.core import _ContsuiteBaseEngine


class _CorrectionEngine(_ContsuiteBaseEngine):
    """Engine orchestrating a single corrector call."""

    def __init__(
        self,
        *,
        backend: _CorrectorBackend,
        interface: _NonlinearProblemInterface | None = None,
    ) -> None:
        super().__init__(backend=backend, interface=interface)

    def _after_backend_success(self, outputs, *, problem) -> None:
        x, diagnostics = outputs
        self._backend.on_success(
            x,
            iterations=diagnostics.iterations,
            residual_norm=diagnostics.residual_norm,
        )
