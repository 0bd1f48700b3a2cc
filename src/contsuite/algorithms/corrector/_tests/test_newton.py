import numpy as np
import pytest

from contsuite import (ConvergenceError, GMRESSolver, Newton,
                       NonlinearProblem, QRSolver, SingularJacobianError,
                       solve)


def _circle_line(x, p):
    return [x[0]**2 + x[1]**2 - 1, x[0] + x[1] - 1]


X0 = [0.25, 0.5]


def test_newton_converges_on_canonical_system():
    sol = solve(NonlinearProblem(_circle_line), Newton(), X0)
    assert np.allclose(sol.x, [0.0, 1.0], atol=1e-8)
    assert sol.method == "Newton"
    assert sol.residual_norm < 1e-8
    assert sol.step_norm < 1e-8
    assert 1 <= sol.iterations <= 20


def test_newton_is_the_default_method():
    sol = solve(NonlinearProblem(_circle_line), x0=X0)
    assert sol.method == "Newton"


def test_repeated_calls_return_identical_diagnostics():
    prob = NonlinearProblem(_circle_line)
    method = Newton()
    first = solve(prob, method, X0)
    second = solve(prob, method, X0)
    assert first.diagnostics == second.diagnostics
    assert np.array_equal(first.x, second.x)


def test_parameters_reach_the_residual():
    prob = NonlinearProblem(lambda x, p: x - p, [1.0, -2.0])
    sol = solve(prob, Newton(), [0.0, 0.0])
    assert np.allclose(sol.x, [1.0, -2.0])


def test_user_jacobian():
    jac = lambda x, p: np.array([[2 * x[0], 2 * x[1]], [1.0, 1.0]])
    sol = solve(NonlinearProblem(_circle_line, jac=jac), Newton(), X0)
    assert np.allclose(sol.x, [0.0, 1.0], atol=1e-8)


def test_finite_difference_jacobian():
    prob = NonlinearProblem(lambda x, p: np.exp(x) - 2.0)
    sol = solve(prob, Newton(), [0.0, 1.0])
    assert np.allclose(sol.x, np.log(2.0), atol=1e-8)


@pytest.mark.parametrize("linear_solver", [QRSolver(), GMRESSolver()])
def test_alternative_linear_solvers(linear_solver):
    sol = solve(NonlinearProblem(_circle_line), Newton(linear_solver=linear_solver), X0)
    assert np.allclose(sol.x, [0.0, 1.0], atol=1e-8)


def test_exhaustion_raises_with_diagnostics():
    with pytest.raises(ConvergenceError) as excinfo:
        solve(NonlinearProblem(_circle_line), Newton(maxiters=2), X0)
    err = excinfo.value
    assert err.iterations == 2
    assert err.diagnostics is not None
    assert np.isfinite(err.residual_norm)
    assert np.isfinite(err.step_norm)


def test_singular_jacobian_raises():
    prob = NonlinearProblem(lambda x, p: [x[0] + x[1] - 1, 2 * x[0] + 2 * x[1] - 2])
    with pytest.raises(SingularJacobianError):
        solve(prob, Newton(), [0.0, 0.0])


def test_initial_guess_is_required():
    with pytest.raises(ValueError):
        solve(NonlinearProblem(_circle_line), Newton())


@pytest.mark.parametrize(
    "kwargs",
    [dict(xtol=0.0), dict(rtol=-1.0), dict(maxiters=0), dict(linear_solver="lu")],
)
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        Newton(**kwargs)


def test_merge_returns_new_configuration():
    base = Newton()
    tuned = base.merge(maxiters=50, xtol=None)
    assert tuned.maxiters == 50
    assert tuned.xtol == base.xtol
    assert base.maxiters == 20
    with pytest.raises(ValueError):
        base.merge(tolerance=1e-3)
