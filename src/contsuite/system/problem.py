"""Problem definitions for the correctors and the continuation driver.

A problem wraps the user's residual function and its optional parameters,
and resolves the Jacobian mechanism once per solve. Residuals are written in
terms of plain arrays::

    f(x, p)         -> n values      (NonlinearProblem)
    f(x, lam, p)    -> n values      (ContinuationProblem)

Residuals built from arithmetic operators only can be differentiated
symbolically; residuals calling numpy functions are differentiated by finite
differences unless an analytic Jacobian is supplied.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import numpy as np

from contsuite.algorithms.continuation.config import ContinuationParameters
from contsuite.algorithms.jacobian.base import _evaluate, _make_jacobian_fn


@dataclass(frozen=True)
class NonlinearProblem:
    """Nonlinear system ``f(x, p) = 0``.

    Parameters
    ----------
    f : callable
        Residual ``f(x, p)`` returning ``n`` values.
    p : Any, optional
        Parameters forwarded to *f* and *jac* unchanged.
    jac : callable, optional
        Analytic Jacobian ``jac(x, p)`` returning an ``n x n`` matrix.
        Takes precedence over *autodiff*.
    autodiff : bool, default=True
        Differentiate *f* symbolically when no *jac* is given. Falls back to
        finite differences when *f* cannot be traced.
    """

    f: Callable[..., Any]
    p: Any = None
    jac: Optional[Callable[..., Any]] = field(default=None, kw_only=True)
    autodiff: bool = field(default=True, kw_only=True)

    def _f(self, x):
        return self.f(x, self.p)

    def residual(self, x) -> np.ndarray:
        """Evaluate ``f(x, p)`` as a finite 1-D array."""
        return _evaluate(self._f, np.asarray(x, dtype=float).ravel())

    def jacobian_fn(self, n: int) -> Callable[[np.ndarray], np.ndarray]:
        """Return the Jacobian of the residual as a function of ``x``."""
        user_jac = None if self.jac is None else (lambda x: self.jac(x, self.p))
        return _make_jacobian_fn(self._f, n, jac=user_jac, autodiff=self.autodiff)


def _assemble_extended(out, n: int) -> np.ndarray:
    """Return ``[fx | flambda]`` from a matrix or a ``(fx, flambda)`` pair."""
    if isinstance(out, tuple) and len(out) == 2:
        fx = np.asarray(out[0], dtype=float)
        fl = np.asarray(out[1], dtype=float)
        if fx.size == n * n and fl.size == n:
            return np.hstack([fx.reshape(n, n), fl.reshape(n, 1)])
    return np.asarray(out, dtype=float).reshape(n, n + 1)


@dataclass(frozen=True)
class ContinuationProblem:
    """Parametrized system ``f(x, lambda, p) = 0`` with its run configuration.

    The problem is seen by the algorithms as a function of the extended
    unknown ``u = (x, lambda)`` of length ``n + 1``.

    Parameters
    ----------
    f : callable
        Residual ``f(x, lam, p)`` returning ``n`` values.
    cont_pars : :class:`~contsuite.algorithms.continuation.config.ContinuationParameters`
        Configuration of the run.
    p : Any, optional
        Parameters forwarded to *f* and *jac* unchanged.
    jac : callable, optional
        Analytic Jacobian ``jac(x, lam, p)`` returning either the
        ``n x (n+1)`` matrix ``[fx | flambda]`` or the pair ``(fx, flambda)``.
    autodiff : bool, default=True
        Differentiate *f* symbolically when no *jac* is given.

    Examples
    --------
    >>> def f(x, lam, p):
    ...     return [x[0]**2 + x[1]**2 - lam, x[1]**2 - 2*x[0] + 1]
    >>> params = ContinuationParameters(lambda_min=0.0, lambda_max=2.5, ds=0.25)
    >>> prob = ContinuationProblem(f, params)
    """

    f: Callable[..., Any]
    cont_pars: ContinuationParameters
    p: Any = None
    jac: Optional[Callable[..., Any]] = field(default=None, kw_only=True)
    autodiff: bool = field(default=True, kw_only=True)

    def __post_init__(self) -> None:
        if not isinstance(self.cont_pars, ContinuationParameters):
            raise TypeError(
                f"cont_pars must be a ContinuationParameters instance, got {type(self.cont_pars).__name__}"
            )

    @staticmethod
    def split(u: np.ndarray) -> tuple[np.ndarray, float]:
        """Split ``u = (x, lambda)`` into its state and parameter."""
        u = np.asarray(u, dtype=float).ravel()
        return u[:-1].copy(), float(u[-1])

    @staticmethod
    def join(x, lam: float) -> np.ndarray:
        """Build ``u = (x, lambda)``."""
        return np.append(np.asarray(x, dtype=float).ravel(), float(lam))

    def _f(self, u):
        return self.f(u[:-1], u[-1], self.p)

    def residual(self, u) -> np.ndarray:
        """Evaluate ``f(x, lambda, p)`` at ``u = (x, lambda)``."""
        return _evaluate(self._f, np.asarray(u, dtype=float).ravel())

    def jacobian_fn(self, n: int) -> Callable[[np.ndarray], np.ndarray]:
        """Return ``[fx | flambda]`` as a function of ``u``, for ``n`` states."""
        user_jac = None
        if self.jac is not None:
            def user_jac(u):
                return _assemble_extended(self.jac(u[:-1], u[-1], self.p), n)
        return _make_jacobian_fn(self._f, n + 1, jac=user_jac, autodiff=self.autodiff)
