"""Example script: trace a solution branch through a turning point.

The system

    x1**2 + x2**2 - lam = 0
    x2**2 - 2*x1 + 1   = 0

has a fold at lam = 1/4. Starting from (x, lam) = ([1, -1], 2) the run moves
backward in lam, passes the fold with the pseudo-arclength predictor and
stops when lam leaves [0, 2.5].

Run with
    python examples/branch_through_fold.py
"""

import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from contsuite import (ContinuationParameters, ContinuationProblem, Newton,
                       PseudoArcLength, continuation)


def f(x, lam, p):
    return [x[0]**2 + x[1]**2 - lam, x[1]**2 - 2 * x[0] + 1]


def main() -> None:
    """Trace the branch and print the points found."""
    params = ContinuationParameters(
        lambda_min=0.0,
        lambda_max=2.5,
        ds=0.25,
        direction="backward",
        predictor=PseudoArcLength(),
        corrector=Newton(xtol=1e-10, rtol=1e-10),
        verbose=True,
    )
    sol = continuation(ContinuationProblem(f, params), [1.0, -1.0], 2.0)
    print(sol)


if __name__ == "__main__":
    main()
