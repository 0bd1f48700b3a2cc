"""Jacobian providers: analytic, symbolic (SymPy) and finite differences."""

from .base import _make_jacobian_fn, autodiff_jac, finite_diff_jac

__all__ = [
    "autodiff_jac",
    "finite_diff_jac",
    "_make_jacobian_fn",
]
