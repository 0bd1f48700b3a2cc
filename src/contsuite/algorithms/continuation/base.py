"""User-facing entry point of the continuation algorithms.

:func:`continuation` assembles the predict-correct backend, the engine and
the interface, then traces the branch of a
:class:`~contsuite.system.problem.ContinuationProblem` from a known solution.
"""

from typing import TYPE_CHECKING

from contsuite.algorithms.continuation.backends.pc import _PCContinuationBackend
from contsuite.algorithms.continuation.engine import _ContinuationEngine
from contsuite.algorithms.continuation.interfaces import _ContinuationProblemInterface

if TYPE_CHECKING:
    from contsuite.system.problem import ContinuationProblem
    from contsuite.system.solution import ContinuationSolution


def _make_engine() -> _ContinuationEngine:
    return _ContinuationEngine(
        backend=_PCContinuationBackend(),
        interface=_ContinuationProblemInterface(),
    )


def continuation(prob: "ContinuationProblem", x0, lambda0: float) -> "ContinuationSolution":
    """Trace the solution branch of *prob* through ``(x0, lambda0)``.

    Parameters
    ----------
    prob : :class:`~contsuite.system.problem.ContinuationProblem`
        Problem ``f(x, lambda, p) = 0`` with its
        :class:`~contsuite.algorithms.continuation.config.ContinuationParameters`.
    x0 : array_like
        State of the starting point. It is stored as given, without a
        correction, so it should satisfy ``f(x0, lambda0, p) = 0``.
    lambda0 : float
        Parameter value of the starting point.

    Returns
    -------
    :class:`~contsuite.system.solution.ContinuationSolution`
        Accepted points in order. Inspect ``status`` to tell a normal
        termination (bounds or step budget) from a failed step, whose
        exception is kept in ``error``.

    Raises
    ------
    ValueError
        If ``lambda0`` lies outside ``[lambda_min, lambda_max]``.

    Examples
    --------
    >>> def f(x, lam, p):
    ...     return [x[0]**2 + x[1]**2 - lam, x[1]**2 - 2*x[0] + 1]
    >>> params = ContinuationParameters(lambda_min=0.0, lambda_max=2.5,
    ...                                 ds=0.25, direction="backward")
    >>> sol = continuation(ContinuationProblem(f, params), [1.0, -1.0], 2.0)
    >>> sol.status
    <ContinuationStatus.TERMINATED_BOUNDS: 1>
    """
    engine = _make_engine()
    cont_problem = engine.interface.create_problem(
        domain_obj=prob, config=prob.cont_pars, x0=x0, lambda0=lambda0
    )
    return engine.solve(cont_problem)
