"""
contsuite.algorithms.continuation.predictors
============================================

Predictors producing the initial guess of every continuation step.

A predictor receives the last accepted point ``u = (x, lambda)`` and the last
tangent, and returns a :class:`~contsuite.algorithms.continuation.types._StepProposal`
holding the guess plus an extended residual: ``f`` augmented with one
auxiliary equation so that the corrector works on a square system of size
``n + 1``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np

from contsuite.algorithms.continuation.types import _StepProposal
from contsuite.algorithms.corrector.types import JacobianFn, ResidualFn
from contsuite.algorithms.linalg.base import nullspace_vector


def _orient(tangent: np.ndarray, t_prev: Optional[np.ndarray], direction: float) -> np.ndarray:
    """Fix the sign of *tangent*.

    With a previous tangent the new one must not point backwards
    (``dot >= 0``). On the first step the sign of the lambda component is
    matched to *direction*; a tangent with no lambda component is kept.
    """
    if t_prev is not None:
        if np.dot(tangent, t_prev) < 0.0:
            return -tangent
        return tangent
    if tangent[-1] * direction < 0.0:
        return -tangent
    return tangent


def _arclength_system(
    u_prev: np.ndarray,
    tangent: np.ndarray,
    ds: float,
    residual_fn: ResidualFn,
    jacobian_fn: JacobianFn,
) -> tuple[ResidualFn, JacobianFn]:
    """Append ``(u - u_prev) . t - ds = 0`` to the residual."""
    u_prev = u_prev.copy()
    tangent = tangent.copy()

    def extended_residual(u: np.ndarray) -> np.ndarray:
        r = np.asarray(residual_fn(u), dtype=float).ravel()
        return np.append(r, np.dot(u - u_prev, tangent) - ds)

    def extended_jacobian(u: np.ndarray) -> np.ndarray:
        return np.vstack([jacobian_fn(u), tangent])

    return extended_residual, extended_jacobian


class _PredictorBase(ABC):
    """Define the protocol for continuation predictors."""

    @abstractmethod
    def predict(
        self,
        u_prev: np.ndarray,
        t_prev: Optional[np.ndarray],
        ds: float,
        direction: float,
        residual_fn: ResidualFn,
        jacobian_fn: JacobianFn,
    ) -> _StepProposal:
        """Generate a prediction for the next solution.

        Parameters
        ----------
        u_prev : np.ndarray
            Last accepted point ``(x, lambda)``.
        t_prev : np.ndarray or None
            Tangent stored after the last accepted step, ``None`` on the first
            step.
        ds : float
            Positive step size.
        direction : float
            ``+1.0`` (forward) or ``-1.0`` (backward); only used when no
            previous tangent exists.
        residual_fn, jacobian_fn : callable
            ``f`` and ``[fx | flambda]`` as functions of ``u``.
        """

    def on_accept(
        self,
        *,
        u_prev: np.ndarray,
        u_new: np.ndarray,
        proposal: _StepProposal,
    ) -> np.ndarray:
        """Return the tangent stored after a successful correction."""
        return proposal.tangent


@dataclass(frozen=True)
class PseudoArcLength(_PredictorBase):
    """Uses pseudo-arclength continuation to predict the next solution.

    From a known solution ``u0`` the prediction is ``u = u0 + t ds``, where
    ``t = (x_s, lambda_s) / ||(x_s, lambda_s)||`` solves

    .. math::

        f_x x_s + f_\\lambda \\lambda_s = 0,

    that is, ``t`` spans the nullspace of the extended Jacobian
    ``[f_x, f_lambda]``. The nullspace is taken from the last column of the
    complete QR factorization of ``[f_x, f_lambda]^T``.

    The previous tangent fixes the sign of ``t``: when their dot product is
    negative, ``t`` is flipped. The corrector then solves ``f = 0`` together
    with the pseudo-arclength equation

    .. math::

        (x - x_0) \\cdot x_s + (\\lambda - \\lambda_0) \\lambda_s - \\Delta s = 0,

    which keeps the system well posed at turning points.
    """

    def predict(self, u_prev, t_prev, ds, direction, residual_fn, jacobian_fn) -> _StepProposal:
        tangent = _orient(nullspace_vector(jacobian_fn(u_prev)), t_prev, direction)
        ext_residual, ext_jacobian = _arclength_system(u_prev, tangent, ds, residual_fn, jacobian_fn)
        return _StepProposal(
            prediction=u_prev + ds * tangent,
            tangent=tangent,
            residual_fn=ext_residual,
            jacobian_fn=ext_jacobian,
            step=ds,
        )


@dataclass(frozen=True)
class Secant(_PredictorBase):
    """Secant predictor with a pseudo-arclength constraint.

    The direction of travel is the normalized difference of the two last
    accepted points, so no Jacobian is needed to predict. The first step has
    a single point available and uses the pseudo-arclength tangent instead.
    """

    def predict(self, u_prev, t_prev, ds, direction, residual_fn, jacobian_fn) -> _StepProposal:
        if t_prev is None:
            tangent = _orient(nullspace_vector(jacobian_fn(u_prev)), None, direction)
        else:
            tangent = np.asarray(t_prev, dtype=float).copy()
        ext_residual, ext_jacobian = _arclength_system(u_prev, tangent, ds, residual_fn, jacobian_fn)
        return _StepProposal(
            prediction=u_prev + ds * tangent,
            tangent=tangent,
            residual_fn=ext_residual,
            jacobian_fn=ext_jacobian,
            step=ds,
        )

    def on_accept(self, *, u_prev, u_new, proposal) -> np.ndarray:
        secant = np.asarray(u_new, dtype=float) - np.asarray(u_prev, dtype=float)
        norm = float(np.linalg.norm(secant))
        if norm == 0.0:
            return proposal.tangent
        return secant / norm


@dataclass(frozen=True)
class NaturalParameter(_PredictorBase):
    """Natural-parameter predictor: lambda itself is stepped by ``ds``.

    The guess keeps ``x`` from the last point and moves ``lambda`` by
    ``direction * ds``; the auxiliary equation pins lambda to that value.
    The extended system is singular at turning points of lambda, so this
    predictor cannot follow a branch around a fold.
    """

    def predict(self, u_prev, t_prev, ds, direction, residual_fn, jacobian_fn) -> _StepProposal:
        sign = direction if t_prev is None else float(np.sign(t_prev[-1]) or direction)
        tangent = np.zeros_like(u_prev, dtype=float)
        tangent[-1] = sign
        lam_target = float(u_prev[-1] + sign * ds)

        def extended_residual(u: np.ndarray) -> np.ndarray:
            r = np.asarray(residual_fn(u), dtype=float).ravel()
            return np.append(r, u[-1] - lam_target)

        def extended_jacobian(u: np.ndarray) -> np.ndarray:
            return np.vstack([jacobian_fn(u), tangent])

        prediction = u_prev.copy()
        prediction[-1] = lam_target
        return _StepProposal(
            prediction=prediction,
            tangent=tangent,
            residual_fn=extended_residual,
            jacobian_fn=extended_jacobian,
            step=ds,
        )
