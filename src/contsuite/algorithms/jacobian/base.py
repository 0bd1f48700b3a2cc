"""Jacobian providers for residual functions.

Three mechanisms are available and selected in this order of precedence:

1. a user supplied analytic Jacobian, trusted as is;
2. symbolic differentiation through SymPy ("autodiff");
3. forward finite differences.

Symbolic differentiation traces the residual on a vector of SymPy symbols,
so it only works for residuals written with plain arithmetic and SymPy aware
builtins such as ``abs``. When the trace or the compilation of the derivative
fails the provider logs a warning and falls back to finite differences.

Every Jacobian handed to a corrector is checked for finiteness; residual
evaluations are checked the same way through :func:`_evaluate`.
"""

from __future__ import annotations

from typing import Callable, Optional

import numpy as np
import sympy as sp
from numba import njit

from contsuite.algorithms.types.exceptions import (ContsuiteError,
                                                   NumericalEvaluationError)
from contsuite.algorithms.utils.config import FASTMATH, FD_EPS
from contsuite.utils.log_config import logger

# Exceptions raised by numpy, math or python control flow when a residual is
# fed symbols it cannot handle.
_TRACE_ERRORS = (TypeError, AttributeError, ValueError, sp.SympifyError)


@njit(fastmath=FASTMATH, cache=False)
def _fd_steps(x: np.ndarray, rel_step: float) -> np.ndarray:
    """Return forward-difference steps scaled to ``max(|x_i|, 1)``.

    Each step is rounded so that ``x_i + h_i`` is exactly representable,
    which removes the representation error from the difference quotient.
    """
    h = np.empty_like(x)
    for i in range(x.size):
        scale = abs(x[i])
        if scale < 1.0:
            scale = 1.0
        step = rel_step * scale
        h[i] = (x[i] + step) - x[i]
    return h


def _evaluate(f: Callable[[np.ndarray], np.ndarray], x: np.ndarray) -> np.ndarray:
    """Evaluate *f* at *x* and return a finite 1-D float array.

    Raises
    ------
    NumericalEvaluationError
        If *f* raises or returns non-finite values.
    """
    try:
        out = np.asarray(f(x), dtype=float).ravel()
    except ContsuiteError:
        raise
    except Exception as exc:
        raise NumericalEvaluationError(f"Residual evaluation failed: {exc}") from exc
    if not np.all(np.isfinite(out)):
        raise NumericalEvaluationError(
            f"Residual evaluation produced non-finite values: {out}"
        )
    return out


def _checked_jacobian(jac_fn: Callable[[np.ndarray], np.ndarray]) -> Callable[[np.ndarray], np.ndarray]:
    """Wrap *jac_fn* so that it always returns a finite 2-D float array."""

    def _jacobian(x: np.ndarray) -> np.ndarray:
        try:
            J = np.atleast_2d(np.asarray(jac_fn(x), dtype=float))
        except ContsuiteError:
            raise
        except Exception as exc:
            raise NumericalEvaluationError(f"Jacobian evaluation failed: {exc}") from exc
        if not np.all(np.isfinite(J)):
            raise NumericalEvaluationError("Jacobian evaluation produced non-finite values.")
        return J

    return _jacobian


def finite_diff_jac(f: Callable[[np.ndarray], np.ndarray], x: np.ndarray) -> np.ndarray:
    """Compute the Jacobian of *f* at *x* using forward finite differences.

    Parameters
    ----------
    f : callable
        Function of a 1-D array returning an array of ``m`` values.
    x : array_like
        Point of evaluation, ``n`` components.

    Returns
    -------
    numpy.ndarray
        Matrix of shape ``(m, n)``. Column ``i`` is
        ``(f(x + h_i e_i) - f(x)) / h_i`` with ``h_i = sqrt(eps) * max(|x_i|, 1)``.

    Raises
    ------
    NumericalEvaluationError
        If any evaluation of *f* fails or is not finite.
    """
    x = np.asarray(x, dtype=float).ravel()
    f0 = _evaluate(f, x)
    h = _fd_steps(x, FD_EPS)

    J = np.empty((f0.size, x.size), dtype=float)
    for i in range(x.size):
        x_pert = x.copy()
        x_pert[i] += h[i]
        J[:, i] = (_evaluate(f, x_pert) - f0) / h[i]
    return J


def _symbolic_jacobian(
    f: Callable[[np.ndarray], np.ndarray], n: int
) -> Optional[Callable[[np.ndarray], np.ndarray]]:
    """Differentiate *f* symbolically and compile the Jacobian.

    Returns ``None`` when *f* cannot be evaluated on SymPy symbols or when
    its derivative has no numpy translation.
    """
    symbols = sp.symbols(f"x0:{n}", real=True)
    x_sym = np.array(symbols, dtype=object)
    try:
        out = f(x_sym)
        exprs = sp.Matrix([sp.sympify(e) for e in np.ravel(np.asarray(out, dtype=object))])
    except _TRACE_ERRORS as exc:
        logger.debug("Symbolic trace of %s failed: %s", getattr(f, "__name__", f), exc)
        return None

    try:
        J_sym = exprs.jacobian(sp.Matrix(symbols))
        J_num = sp.lambdify((symbols,), J_sym, modules="numpy")
    except Exception as exc:
        logger.debug("Symbolic Jacobian of %s cannot be compiled: %s", getattr(f, "__name__", f), exc)
        return None
    m = J_sym.shape[0]

    def _jacobian(x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=float).ravel()
        return np.asarray(J_num(tuple(x)), dtype=float).reshape(m, n)

    return _jacobian


def autodiff_jac(f: Callable[[np.ndarray], np.ndarray], x: np.ndarray) -> np.ndarray:
    """Compute the Jacobian of *f* at *x* using automatic differentiation.

    The derivative is obtained by symbolic differentiation of *f* with SymPy
    and evaluated numerically at *x*.

    Raises
    ------
    ValueError
        If *f* cannot be traced on symbolic inputs.
    NumericalEvaluationError
        If the Jacobian at *x* is not finite.
    """
    x = np.asarray(x, dtype=float).ravel()
    jac_fn = _symbolic_jacobian(f, x.size)
    if jac_fn is None:
        raise ValueError("Function cannot be differentiated symbolically; use finite_diff_jac instead.")
    return _checked_jacobian(jac_fn)(x)


def _make_jacobian_fn(
    f: Callable[[np.ndarray], np.ndarray],
    n: int,
    *,
    jac: Optional[Callable[[np.ndarray], np.ndarray]] = None,
    autodiff: bool = True,
) -> Callable[[np.ndarray], np.ndarray]:
    """Select the Jacobian mechanism for a residual of ``n`` unknowns.

    Parameters
    ----------
    f : callable
        Residual function of a 1-D array.
    n : int
        Number of unknowns.
    jac : callable or None
        Analytic Jacobian of *f*. Takes precedence over *autodiff*.
    autodiff : bool
        Whether symbolic differentiation should be attempted.

    Returns
    -------
    callable
        Function of ``x`` returning a finite Jacobian matrix.
    """
    if jac is not None:
        logger.debug("Using user supplied Jacobian")
        return _checked_jacobian(jac)

    if autodiff:
        sym_jac = _symbolic_jacobian(f, n)
        if sym_jac is not None:
            logger.debug("Using symbolic Jacobian")
            return _checked_jacobian(sym_jac)
        logger.warning(
            "Automatic differentiation unavailable for %s; falling back to finite differences",
            getattr(f, "__name__", repr(f)),
        )

    logger.debug("Using finite-difference Jacobian")
    return lambda x: finite_diff_jac(f, x)
