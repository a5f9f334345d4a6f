#!filepath: tests/training/test_stopping.py
import pytest

from ltr.training.stopping import StoppingPolicy, parse_stopping_condition
from ltr.training.types import StoppingCondition
from ltr.utils.errors import ConfigurationError


@pytest.mark.parametrize(
    "value,expected",
    [
        (0, StoppingCondition.ITERATIONS),
        (1, StoppingCondition.CONVERGENCE),
        ("0", StoppingCondition.ITERATIONS),
        ("convergence", StoppingCondition.CONVERGENCE),
        (" Iterations ", StoppingCondition.ITERATIONS),
    ],
)
def test_parse_stopping_condition(value, expected):
    assert parse_stopping_condition(value) is expected


@pytest.mark.parametrize("value", [2, "7", "never", True])
def test_parse_invalid_stopping_condition(value):
    with pytest.raises(ConfigurationError):
        parse_stopping_condition(value)


def test_iterations_budget():
    policy = StoppingPolicy(StoppingCondition.ITERATIONS, max_iterations=3)
    assert policy.should_continue([])
    assert policy.should_continue([0.1, 0.1])
    assert not policy.should_continue([0.1, 0.1, 0.1])
    assert not policy.converged([0.1, 0.1, 0.1])


def test_convergence_stops_on_small_change():
    policy = StoppingPolicy(StoppingCondition.CONVERGENCE, max_iterations=10, threshold=0.01)
    assert policy.should_continue([0.5])
    assert policy.should_continue([0.5, 0.6])
    assert not policy.should_continue([0.5, 0.6, 0.605])
    assert policy.converged([0.5, 0.6, 0.605])


def test_convergence_still_bounded_by_budget():
    policy = StoppingPolicy(StoppingCondition.CONVERGENCE, max_iterations=2, threshold=0.0)
    assert not policy.should_continue([0.1, 0.9])
    assert not policy.converged([0.1, 0.9])


@pytest.mark.parametrize("kwargs", [dict(max_iterations=0), dict(max_iterations=3, threshold=-1.0)])
def test_invalid_policy(kwargs):
    with pytest.raises(ConfigurationError):
        StoppingPolicy(StoppingCondition.ITERATIONS, **kwargs)
