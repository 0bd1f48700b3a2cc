"""Linear algebra module public API.

Exposes the pluggable linear solvers and the nullspace helper used by the
tangent predictors.
"""

from .base import (GMRESSolver, LinearSolver, LUSolver, QRSolver,
                   nullspace_vector)

__all__ = [
    "LinearSolver",
    "LUSolver",
    "QRSolver",
    "GMRESSolver",
    "nullspace_vector",
]
