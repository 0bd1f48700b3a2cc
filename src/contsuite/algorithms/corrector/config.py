"""Provide configuration classes for the nonlinear correctors.

Each configuration is a frozen dataclass that selects the corrector and
carries its tolerances and linear solver. The objects hold no state between
calls and can be shared freely; diagnostics are returned by every call as a
fresh :class:`~contsuite.algorithms.corrector.types.CorrectionDiagnostics`.
"""

from dataclasses import dataclass, field

from contsuite.algorithms.linalg.base import LinearSolver, LUSolver
from contsuite.algorithms.types.core import _ContsuiteBaseConfig
from contsuite.algorithms.utils.config import MAX_ITERS, TOL


@dataclass(frozen=True)
class _BaseCorrectionConfig(_ContsuiteBaseConfig):
    """Settings shared by every iterative corrector.

    Parameters
    ----------
    xtol : float, default=1e-8
        Tolerance on the relative update ``||x_{k+1} - x_k|| / ||x_{k+1}||``.
    rtol : float, default=1e-8
        Tolerance on the residual norm ``||f(x_k)||``.
    maxiters : int, default=20
        Maximum number of iterations.
    linear_solver : :class:`~contsuite.algorithms.linalg.base.LinearSolver`, default=LUSolver()
        Strategy used to solve ``J dx = -f``.

    Notes
    -----
    Both tolerances must hold at the same iteration for the corrector to
    report convergence.
    """
    xtol: float = TOL
    rtol: float = TOL
    maxiters: int = MAX_ITERS
    linear_solver: LinearSolver = field(default_factory=LUSolver)

    @property
    def name(self) -> str:
        return type(self).__name__

    def _validate(self) -> None:
        """Validate the configuration."""
        if not self.xtol > 0:
            raise ValueError(f"xtol must be positive, got {self.xtol}")
        if not self.rtol > 0:
            raise ValueError(f"rtol must be positive, got {self.rtol}")
        if int(self.maxiters) != self.maxiters or self.maxiters < 1:
            raise ValueError(f"maxiters must be a positive integer, got {self.maxiters}")
        if not isinstance(self.linear_solver, LinearSolver):
            raise ValueError(
                f"linear_solver must be a LinearSolver instance, got {type(self.linear_solver).__name__}"
            )


@dataclass(frozen=True)
class Newton(_BaseCorrectionConfig):
    """The Newton-Raphson method for solving nonlinear equations.

    The nonlinear problem is solved iteratively using

    .. math::

        J(x_n) \\Delta x_n = -f(x_n), \\qquad x_{n+1} = x_n + \\Delta x_n

    where the Jacobian :math:`J` is recomputed at every iterate.

    Examples
    --------
    >>> f = lambda x, p: [x[0]**2 + x[1]**2 - 1, x[0] + x[1] - 1]
    >>> prob = NonlinearProblem(f)
    >>> sol = solve(prob, Newton(), [0.25, 0.5])
    >>> sol = solve(prob, Newton(xtol=1e-10, maxiters=100), [0.25, 0.5])
    """


@dataclass(frozen=True)
class Broyden(_BaseCorrectionConfig):
    """Broyden's quasi-Newton method for solving nonlinear equations.

    The Jacobian is evaluated once, at the initial guess, and then updated
    at every iteration by the rank-one secant formula

    .. math::

        J_{n+1} = J_n + \\frac{(\\Delta f_n - J_n \\Delta x_n) \\Delta x_n^T}{\\Delta x_n^T \\Delta x_n}

    with :math:`\\Delta x_n = x_{n+1} - x_n` and
    :math:`\\Delta f_n = f(x_{n+1}) - f(x_n)`.

    Examples
    --------
    >>> sol = solve(prob, Broyden(), [0.25, 0.5])
    >>> sol = solve(prob, Broyden(xtol=1e-10, maxiters=100), [0.25, 0.5])
    """
