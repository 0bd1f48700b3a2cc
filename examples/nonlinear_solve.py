"""Example script: solve a nonlinear system with Newton and Broyden.

Run with
    python examples/nonlinear_solve.py
"""

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

import numpy as np

from contsuite import Broyden, Newton, NonlinearProblem, QRSolver, solve


def main() -> None:
    """Compare the correctors on the intersection of a circle and a line."""
    prob = NonlinearProblem(lambda x, p: [x[0]**2 + x[1]**2 - p, x[0] + x[1] - 1], 1.0)

    for method in (Newton(), Newton(linear_solver=QRSolver()), Broyden()):
        sol = solve(prob, method, [0.25, 0.5])
        print(
            f"{sol.method:8s} x = {np.array2string(sol.x, precision=10)} "
            f"iterations = {sol.iterations} |R| = {sol.residual_norm:.2e}"
        )


if __name__ == "__main__":
    main()
