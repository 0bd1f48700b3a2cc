import pytest

from contsuite import (Broyden, ContinuationParameters, Direction, Newton,
                       PseudoArcLength, Secant)


def test_defaults():
    params = ContinuationParameters()
    assert params.lambda_min == -1.0
    assert params.lambda_max == 1.0
    assert params.ds == 0.1
    assert params.direction is Direction.FORWARD
    assert params.max_steps == 100
    assert params.predictor == PseudoArcLength()
    assert params.corrector == Newton()
    assert params.verbose is False
    assert params.ncols == 2
    assert params.max_retries == 0


@pytest.mark.parametrize(
    "value, expected",
    [("forward", Direction.FORWARD), ("Backward", Direction.BACKWARD), (Direction.BACKWARD, Direction.BACKWARD)],
)
def test_direction_coercion(value, expected):
    params = ContinuationParameters(direction=value)
    assert params.direction is expected
    assert params.sign == float(expected.value)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(lambda_min=1.0, lambda_max=1.0),
        dict(ds=0.0),
        dict(direction="sideways"),
        dict(max_steps=0),
        dict(ncols=0),
        dict(predictor="secant"),
        dict(corrector="newton"),
        dict(max_retries=-1),
        dict(step_reduction=1.0),
        dict(ds_min=0.0),
    ],
)
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        ContinuationParameters(**kwargs)


def test_merge_returns_a_copy():
    params = ContinuationParameters(direction="backward")
    tuned = params.merge(ds=0.05, predictor=Secant(), corrector=Broyden())
    assert tuned.ds == 0.05
    assert isinstance(tuned.predictor, Secant)
    assert tuned.direction is Direction.BACKWARD
    assert params.ds == 0.1
    assert isinstance(params.predictor, PseudoArcLength)


def test_parameters_are_frozen():
    params = ContinuationParameters()
    with pytest.raises(AttributeError):
        params.ds = 1.0
