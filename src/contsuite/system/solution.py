"""Light-weight container for the points of a continuation run.

:class:`ContinuationSolution` stores the accepted points ``(x, lambda)`` in
the order they were found, together with the tangent and the corrector
diagnostics of every step after the first. It offers helpers for iteration,
random access and conversion to a :class:`pandas.DataFrame`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Optional

import numpy as np
import pandas as pd

from contsuite.algorithms.continuation.types import ContinuationStatus
from contsuite.algorithms.corrector.types import CorrectionDiagnostics

if TYPE_CHECKING:
    from contsuite.system.problem import ContinuationProblem


class ContinuationSolution:
    """Ordered, append-only record of the points of a continuation run.

    Parameters
    ----------
    prob : :class:`~contsuite.system.problem.ContinuationProblem`
        Problem the points belong to.
    ncols : int, default=2
        Number of state components shown by :meth:`__str__`.

    Attributes
    ----------
    status : :class:`~contsuite.algorithms.continuation.types.ContinuationStatus`
        Why the run stopped. ``RUNNING`` until the run has finished.
    error : Exception or None
        Exception that stopped a ``FAILED`` run.

    Notes
    -----
    Points are only added by the continuation driver. The first point is the
    starting point exactly as given; it has no tangent and no diagnostics, so
    :attr:`tangents` and :attr:`diagnostics` hold one entry less than the
    number of points. The stored states are read-only arrays.
    """

    def __init__(self, prob: "ContinuationProblem", *, ncols: int = 2) -> None:
        self.prob = prob
        self.ncols = int(ncols)
        self.status: ContinuationStatus = ContinuationStatus.RUNNING
        self.error: Optional[Exception] = None
        self._states: List[np.ndarray] = []
        self._lambdas: List[float] = []
        self._tangents: List[np.ndarray] = []
        self._diagnostics: List[CorrectionDiagnostics] = []

    def _append(
        self,
        x: np.ndarray,
        lam: float,
        *,
        tangent: Optional[np.ndarray] = None,
        diagnostics: Optional[CorrectionDiagnostics] = None,
    ) -> None:
        state = np.array(x, dtype=float).ravel()
        state.setflags(write=False)
        self._states.append(state)
        self._lambdas.append(float(lam))
        if tangent is not None:
            self._tangents.append(np.array(tangent, dtype=float).ravel())
        if diagnostics is not None:
            self._diagnostics.append(diagnostics)

    def _finish(self, status: ContinuationStatus, error: Optional[Exception] = None) -> None:
        self.status = status
        self.error = error

    @property
    def x(self) -> np.ndarray:
        """States of the accepted points, shape ``(k, n)``."""
        if not self._states:
            return np.empty((0, 0), dtype=float)
        return np.vstack(self._states)

    @property
    def lambdas(self) -> np.ndarray:
        """Parameter values of the accepted points, shape ``(k,)``."""
        return np.asarray(self._lambdas, dtype=float)

    @property
    def tangents(self) -> np.ndarray:
        """Unit tangents ``(x_s, lambda_s)`` of the accepted steps, shape ``(k-1, n+1)``."""
        if not self._tangents:
            return np.empty((0, self.x.shape[1] + 1 if self._states else 0), dtype=float)
        return np.vstack(self._tangents)

    @property
    def diagnostics(self) -> tuple[CorrectionDiagnostics, ...]:
        """Corrector diagnostics of the accepted steps."""
        return tuple(self._diagnostics)

    @property
    def success(self) -> bool:
        """``True`` unless a step failed."""
        return self.status is not ContinuationStatus.FAILED

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[tuple[np.ndarray, float]]:
        return iter(zip(self._states, self._lambdas))

    def __getitem__(self, idx):
        if isinstance(idx, slice):
            return list(zip(self._states, self._lambdas))[idx]
        return self._states[idx], self._lambdas[idx]

    def to_df(self) -> pd.DataFrame:
        """Return a DataFrame with one row per point and columns ``x1..xn, λ``."""
        n = len(self._states[0]) if self._states else 0
        df = pd.DataFrame(self.x if n else None, columns=[f"x{i + 1}" for i in range(n)])
        df["λ"] = self.lambdas
        return df

    def __repr__(self) -> str:
        return f"ContinuationSolution(n_points={len(self)}, status={self.status})"

    def __str__(self) -> str:
        df = self.to_df()
        state_cols = [c for c in df.columns if c != "λ"]
        shown = df[state_cols[: self.ncols] + ["λ"]]
        header = f"ContinuationSolution with {len(self)} point(s), status: {self.status}"
        if len(state_cols) > self.ncols:
            header += f" (showing {self.ncols} of {len(state_cols)} state components)"
        if self.error is not None:
            header += f"\nerror: {self.error}"
        return header + "\n" + shown.to_string(float_format=lambda v: f"{v: .6e}")
