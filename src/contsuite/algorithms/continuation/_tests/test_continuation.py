import logging

import numpy as np
import pytest

from contsuite import (Broyden, ContinuationParameters, ContinuationProblem,
                       ContinuationStatus, ContsuiteError, NaturalParameter,
                       NumericalEvaluationError, Secant,
                       SingularJacobianError, continuation)


def _parabola(x, lam, p):
    return [x[0]**2 + x[1]**2 - lam, x[1]**2 - 2 * x[0] + 1]


def _parabola_jac(x, lam, p):
    fx = np.array([[2 * x[0], 2 * x[1]], [-2.0, 2 * x[1]]])
    flam = np.array([-1.0, 0.0])
    return fx, flam


X0 = [1.0, -1.0]
LAMBDA0 = 2.0


def _params(**kwargs):
    base = dict(lambda_min=0.0, lambda_max=2.5, ds=0.25, direction="backward")
    base.update(kwargs)
    return ContinuationParameters(**base)


def _residual_norms(sol):
    return [np.linalg.norm(_parabola(x, lam, None)) for x, lam in sol]


def test_backward_run_through_the_fold():
    sol = continuation(ContinuationProblem(_parabola, _params()), X0, LAMBDA0)

    assert sol.status is ContinuationStatus.TERMINATED_BOUNDS
    assert sol.error is None
    assert len(sol) > 5
    assert np.allclose(sol[0][0], X0)
    assert sol[0][1] == LAMBDA0
    assert max(_residual_norms(sol)) < 1e-6
    assert np.all((sol.lambdas >= 0.0) & (sol.lambdas <= 2.5))

    # lambda decreases until the turning point at x2 = 0, lambda = 1/4.
    before_fold = sol.lambdas[sol.x[:, 1] <= 0.0]
    assert len(before_fold) >= 3
    assert np.all(np.diff(before_fold) < 0.0)
    assert sol.lambdas.min() >= 0.25 - 1e-8
    # The branch is followed past the fold.
    assert sol.x[-1, 1] > 0.0


def test_tangents_keep_their_orientation():
    sol = continuation(ContinuationProblem(_parabola, _params()), X0, LAMBDA0)
    tangents = sol.tangents
    assert tangents.shape == (len(sol) - 1, 3)
    assert np.allclose(np.linalg.norm(tangents, axis=1), 1.0)
    assert np.all(np.einsum("ij,ij->i", tangents[:-1], tangents[1:]) >= 0.0)
    # Backward: the first step decreases lambda.
    assert tangents[0, -1] < 0.0


def test_diagnostics_are_recorded_per_step():
    sol = continuation(ContinuationProblem(_parabola, _params(max_steps=4)), X0, LAMBDA0)
    assert len(sol.diagnostics) == len(sol) - 1
    for diag in sol.diagnostics:
        assert diag.residual_norm < 1e-8
        assert diag.iterations >= 1


def test_forward_run_stops_at_upper_bound():
    params = _params(direction="forward")
    sol = continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.TERMINATED_BOUNDS
    assert 2 <= len(sol) <= 3
    assert sol.lambdas[-1] <= 2.5
    assert np.all(np.diff(sol.lambdas) > 0.0)


def test_step_budget():
    sol = continuation(ContinuationProblem(_parabola, _params(max_steps=3)), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.TERMINATED_MAXSTEPS
    assert len(sol) == 4


def test_user_jacobian_pair_matches_autodiff():
    params = _params(max_steps=5)
    auto = continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    user = continuation(ContinuationProblem(_parabola, params, jac=_parabola_jac), X0, LAMBDA0)
    assert np.allclose(auto.x, user.x, atol=1e-8)
    assert np.allclose(auto.lambdas, user.lambdas, atol=1e-8)


def test_broyden_corrector():
    params = _params(max_steps=5, corrector=Broyden())
    sol = continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.TERMINATED_MAXSTEPS
    assert max(_residual_norms(sol)) < 1e-6


def test_secant_predictor():
    sol = continuation(ContinuationProblem(_parabola, _params(predictor=Secant())), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.TERMINATED_BOUNDS
    assert len(sol) > 5
    assert max(_residual_norms(sol)) < 1e-6
    assert sol.x[-1, 1] > 0.0


def test_natural_parameter_steps_lambda():
    params = _params(direction="forward", ds=0.1, max_steps=3, predictor=NaturalParameter())
    sol = continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.TERMINATED_MAXSTEPS
    assert np.allclose(sol.lambdas, [2.0, 2.1, 2.2, 2.3])
    assert max(_residual_norms(sol)) < 1e-6


def test_natural_parameter_stops_at_the_fold():
    params = _params(ds=0.1, predictor=NaturalParameter())
    sol = continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    assert sol.status is ContinuationStatus.FAILED
    assert isinstance(sol.error, ContsuiteError)
    assert sol.lambdas[-1] >= 0.25
    assert np.all(np.diff(sol.lambdas) < 0.0)


def test_singular_start_fails_on_first_step():
    # The second equation is twice the first: [fx | flambda] has rank one everywhere.
    def f(x, lam, p):
        return [x[0] + x[1] - lam, 2 * (x[0] + x[1] - lam)]

    sol = continuation(ContinuationProblem(f, ContinuationParameters()), [0.0, 0.0], 0.0)
    assert sol.status is ContinuationStatus.FAILED
    assert isinstance(sol.error, SingularJacobianError)
    assert len(sol) == 1
    assert not sol.success


def test_initial_lambda_out_of_bounds():
    with pytest.raises(ValueError):
        continuation(ContinuationProblem(_parabola, _params()), X0, 3.0)


def _capped(x, lam, p):
    if lam > p:
        return [np.nan]
    return [x[0] - lam]


def _capped_jac(x, lam, p):
    return [[1.0, -1.0]]


def test_failed_step_ends_run_without_retries():
    params = ContinuationParameters(
        lambda_min=0.0, lambda_max=1.0, ds=0.4, max_steps=2, predictor=NaturalParameter()
    )
    prob = ContinuationProblem(_capped, params, 0.55, jac=_capped_jac)
    sol = continuation(prob, [0.0], 0.0)
    assert sol.status is ContinuationStatus.FAILED
    assert isinstance(sol.error, NumericalEvaluationError)
    assert np.allclose(sol.lambdas, [0.0, 0.4])


def test_retries_shrink_the_step():
    params = ContinuationParameters(
        lambda_min=0.0, lambda_max=1.0, ds=0.4, max_steps=2,
        predictor=NaturalParameter(), max_retries=3,
    )
    prob = ContinuationProblem(_capped, params, 0.55, jac=_capped_jac)
    sol = continuation(prob, [0.0], 0.0)
    assert sol.status is ContinuationStatus.TERMINATED_MAXSTEPS
    assert np.allclose(sol.lambdas, [0.0, 0.4, 0.5])
    assert np.allclose(sol.x[:, 0], sol.lambdas)


def test_retries_respect_minimum_step():
    params = ContinuationParameters(
        lambda_min=0.0, lambda_max=1.0, ds=0.4, max_steps=2,
        predictor=NaturalParameter(), max_retries=3, ds_min=0.15,
    )
    prob = ContinuationProblem(_capped, params, 0.55, jac=_capped_jac)
    sol = continuation(prob, [0.0], 0.0)
    assert sol.status is ContinuationStatus.FAILED
    assert len(sol) == 2


def test_verbose_logs_every_step(caplog):
    params = _params(max_steps=3, verbose=True)
    with caplog.at_level(logging.INFO, logger="contsuite"):
        continuation(ContinuationProblem(_parabola, params), X0, LAMBDA0)
    step_lines = [r for r in caplog.records if r.getMessage().startswith("step")]
    assert len(step_lines) == 3


def test_quiet_run_logs_only_termination(caplog):
    with caplog.at_level(logging.INFO, logger="contsuite"):
        continuation(ContinuationProblem(_parabola, _params(max_steps=3)), X0, LAMBDA0)
    messages = [r.getMessage() for r in caplog.records]
    assert not any(m.startswith("step") for m in messages)
    assert any("terminated_maxsteps" in m for m in messages)
