"""Provide the configuration of a continuation run.

:class:`ContinuationParameters` gathers the parameter window, the step size,
the direction of travel and the algorithm choices (predictor and corrector)
of a run. It is a frozen dataclass validated on construction, so a single
instance can be reused for several runs.
"""

from dataclasses import dataclass, field
from typing import Union

from contsuite.algorithms.continuation.predictors import (PseudoArcLength,
                                                          _PredictorBase)
from contsuite.algorithms.continuation.types import Direction
from contsuite.algorithms.corrector.config import Newton, _BaseCorrectionConfig
from contsuite.algorithms.types.core import _ContsuiteBaseConfig


def _as_direction(value: Union[str, Direction]) -> Direction:
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction[value.strip().upper()]
        except KeyError:
            pass
    raise ValueError(f"direction must be 'forward' or 'backward', got {value!r}")


@dataclass(frozen=True)
class ContinuationParameters(_ContsuiteBaseConfig):
    """Configuration of a continuation run.

    Parameters
    ----------
    lambda_min, lambda_max : float, default=-1.0, 1.0
        Window of the continuation parameter. A corrected point outside it
        ends the run.
    ds : float, default=0.1
        Step size along the branch (pseudo-arclength) or along lambda
        (natural parameter).
    direction : {"forward", "backward"} or :class:`Direction`, default="forward"
        Initial direction of travel. Forward increases lambda on the first
        step, backward decreases it. Strings are converted to
        :class:`Direction`.
    max_steps : int, default=100
        Number of accepted steps after which the run stops.
    predictor : predictor instance, default=PseudoArcLength()
        One of :class:`PseudoArcLength`, :class:`Secant`,
        :class:`NaturalParameter`.
    corrector : :class:`Newton` or :class:`Broyden`, default=Newton()
        Corrector applied to every prediction.
    verbose : bool, default=False
        Log one line per accepted step at INFO level.
    ncols : int, default=2
        Number of state components shown in progress lines and when printing
        a :class:`~contsuite.system.solution.ContinuationSolution`.
    max_retries : int, default=0
        Number of times a failed step is retried with a smaller ``ds``. With
        the default a failed step ends the run.
    step_reduction : float, default=0.5
        Factor applied to ``ds`` on every retry.
    ds_min : float, default=1e-6
        Smallest step size a retry may use.

    Raises
    ------
    ValueError
        If any field is out of range.

    Examples
    --------
    >>> params = ContinuationParameters(
    ...     lambda_min=0.0, lambda_max=2.5, ds=0.25, direction="backward"
    ... )
    >>> params.merge(ds=0.1).ds
    0.1
    """

    lambda_min: float = -1.0
    lambda_max: float = 1.0
    ds: float = 0.1
    direction: Union[str, Direction] = Direction.FORWARD
    max_steps: int = 100
    predictor: _PredictorBase = field(default_factory=PseudoArcLength)
    corrector: _BaseCorrectionConfig = field(default_factory=Newton)
    verbose: bool = False
    ncols: int = 2
    max_retries: int = 0
    step_reduction: float = 0.5
    ds_min: float = 1e-6

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", _as_direction(self.direction))
        super().__post_init__()

    @property
    def sign(self) -> float:
        """``+1.0`` for forward runs, ``-1.0`` for backward runs."""
        return self.direction.sign

    def _validate(self) -> None:
        """Validate the configuration."""
        if not self.lambda_min < self.lambda_max:
            raise ValueError(
                f"lambda_min must be smaller than lambda_max, got {self.lambda_min} >= {self.lambda_max}"
            )
        if not self.ds > 0:
            raise ValueError(f"ds must be positive, got {self.ds}")
        if int(self.max_steps) != self.max_steps or self.max_steps < 1:
            raise ValueError(f"max_steps must be a positive integer, got {self.max_steps}")
        if int(self.ncols) != self.ncols or self.ncols < 1:
            raise ValueError(f"ncols must be a positive integer, got {self.ncols}")
        if not isinstance(self.predictor, _PredictorBase):
            raise ValueError(f"Unknown predictor: {self.predictor!r}")
        if not isinstance(self.corrector, _BaseCorrectionConfig):
            raise ValueError(f"Unknown corrector: {self.corrector!r}")
        if int(self.max_retries) != self.max_retries or self.max_retries < 0:
            raise ValueError(f"max_retries must be a non-negative integer, got {self.max_retries}")
        if not 0.0 < self.step_reduction < 1.0:
            raise ValueError(f"step_reduction must lie in (0, 1), got {self.step_reduction}")
        if not self.ds_min > 0:
            raise ValueError(f"ds_min must be positive, got {self.ds_min}")
