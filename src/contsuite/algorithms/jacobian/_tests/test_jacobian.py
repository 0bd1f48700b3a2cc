import logging

import numpy as np
import pytest
import sympy as sp

from contsuite.algorithms.jacobian import (_make_jacobian_fn, autodiff_jac,
                                           finite_diff_jac)
from contsuite.algorithms.types.exceptions import NumericalEvaluationError


def _circle_line(x):
    return [x[0]**2 + x[1]**2 - 1, x[0] + x[1] - 1]


def _circle_line_jac(x):
    return np.array([[2 * x[0], 2 * x[1]], [1.0, 1.0]])


def _smooth(x):
    return [x[0] * x[1]**3 - x[2], x[0]**2 / (1 + x[2]**2), 3 * x[1] - x[0] * x[2]]


def test_finite_diff_matches_analytic():
    x = np.array([0.3, 0.7])
    J = finite_diff_jac(_circle_line, x)
    assert J.shape == (2, 2)
    assert np.allclose(J, _circle_line_jac(x), rtol=0.0, atol=1e-6)


def test_finite_diff_non_square():
    f = lambda x: [x[0] * x[1], x[0] + x[1], x[1]**2]
    J = finite_diff_jac(f, [2.0, -1.0])
    expected = np.array([[-1.0, 2.0], [1.0, 1.0], [0.0, -2.0]])
    assert J.shape == (3, 2)
    assert np.allclose(J, expected, atol=1e-6)


def test_autodiff_is_exact():
    x = np.array([0.3, 0.7])
    J = autodiff_jac(_circle_line, x)
    assert np.allclose(J, _circle_line_jac(x), rtol=1e-14, atol=1e-14)


def test_finite_diff_agrees_with_autodiff():
    x = np.array([1.3, -0.4, 2.1])
    J_fd = finite_diff_jac(_smooth, x)
    J_ad = autodiff_jac(_smooth, x)
    scale = np.maximum(np.abs(J_ad), 1.0)
    assert np.all(np.abs(J_fd - J_ad) / scale < 1e-6)


def test_autodiff_rejects_untraceable_function():
    with pytest.raises(ValueError):
        autodiff_jac(lambda x: np.sin(x), [0.1, 0.2])


def test_autodiff_falls_back_to_finite_differences(caplog):
    f = lambda x: np.exp(x) - 2.0
    with caplog.at_level(logging.WARNING, logger="contsuite"):
        jac = _make_jacobian_fn(f, 2, autodiff=True)
    assert "falling back to finite differences" in caplog.text

    x = np.array([0.5, 1.5])
    assert np.allclose(jac(x), np.diag(np.exp(x)), atol=1e-6)


def test_autodiff_of_abs_is_sign():
    f = lambda x: [abs(x[0]) - 1.0, x[0] * abs(x[1])]
    J = autodiff_jac(f, [-2.0, 3.0])
    assert np.allclose(J, [[-1.0, 0.0], [3.0, -2.0]])


def test_uncompilable_derivative_falls_back_to_finite_differences(monkeypatch, caplog):
    def _unprintable(*args, **kwargs):
        raise NotImplementedError("Unsupported by NumPyPrinter: Derivative")

    monkeypatch.setattr(sp, "lambdify", _unprintable)
    with caplog.at_level(logging.WARNING, logger="contsuite"):
        jac = _make_jacobian_fn(_circle_line, 2, autodiff=True)
    assert "falling back to finite differences" in caplog.text

    x = np.array([0.3, 0.7])
    assert np.allclose(jac(x), _circle_line_jac(x), atol=1e-6)
    with pytest.raises(ValueError):
        autodiff_jac(_circle_line, x)


def test_autodiff_disabled_uses_finite_differences(caplog):
    with caplog.at_level(logging.WARNING, logger="contsuite"):
        jac = _make_jacobian_fn(_circle_line, 2, autodiff=False)
    assert caplog.text == ""
    assert np.allclose(jac([0.3, 0.7]), _circle_line_jac([0.3, 0.7]), atol=1e-6)


def test_user_jacobian_used_verbatim():
    # A wrong Jacobian is trusted as given.
    jac = _make_jacobian_fn(_circle_line, 2, jac=lambda x: 7.0 * np.eye(2))
    assert np.array_equal(jac([0.3, 0.7]), 7.0 * np.eye(2))


def test_user_jacobian_must_be_finite():
    jac = _make_jacobian_fn(_circle_line, 2, jac=lambda x: np.full((2, 2), np.inf))
    with pytest.raises(NumericalEvaluationError):
        jac([0.3, 0.7])


def test_non_finite_residual_raises():
    with pytest.raises(NumericalEvaluationError):
        finite_diff_jac(lambda x: np.array([x[0], np.nan]), [1.0, 2.0])


def test_residual_exception_is_wrapped():
    def f(x):
        raise RuntimeError("boom")

    with pytest.raises(NumericalEvaluationError) as excinfo:
        finite_diff_jac(f, [1.0])
    assert isinstance(excinfo.value.__cause__, RuntimeError)
