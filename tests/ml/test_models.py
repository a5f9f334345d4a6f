#!filepath: tests/ml/test_models.py
import numpy as np
import pytest

from ltr.ml.learning_rate import ConstantLearningRate
from ltr.ml.linear_model import LinearModel
from ltr.ml.neural_net import NeuralNetworkModel
from ltr.ml.registry import ModelKind, create_model, model_spec_of, parse_model_spec
from ltr.utils.errors import ConfigurationError


# ============================================================
# Linear
# ============================================================
def test_linear_starts_at_half():
    model = LinearModel(3)
    assert model.score(np.array([1.0, -2.0, 3.0])) == pytest.approx(0.5)


def test_linear_update_then_apply_moves_score_up():
    model = LinearModel(2, learning_rate=ConstantLearningRate(0.1))
    x = np.array([1.0, 0.5])
    before = model.score(x)

    acc = model.new_gradient_accumulator()
    acc.update(x, before, 1.0)
    # w -= delta, delta = -lr * m * y(1-y) * x
    assert np.allclose(acc.deltas["w"], -0.1 * 0.25 * x)

    acc.apply_to()
    assert model.score(x) > before


def test_apply_reset_apply_is_noop():
    model = LinearModel(2)
    acc = model.new_gradient_accumulator()
    acc.update(np.array([1.0, 2.0]), 0.5, 1.0)
    acc.apply_to(model)
    acc.reset()

    assert acc.is_zero()
    before = model.w.tobytes()
    acc.apply_to(model)
    assert model.w.tobytes() == before


@pytest.mark.parametrize("model", [LinearModel(3), NeuralNetworkModel(3, 2)])
def test_reset_matches_fresh_accumulator(model):
    acc = model.new_gradient_accumulator()
    acc.update(np.array([1.0, -2.0, 0.5]), 0.7, -1.5)
    acc.update(np.array([0.0, 3.0, 1.0]), 0.2, 2.0)
    acc.apply_to(model)
    acc.reset()

    fresh = model.new_gradient_accumulator()
    assert acc.deltas.keys() == fresh.deltas.keys()
    for name, delta in fresh.deltas.items():
        assert acc.deltas[name].dtype == delta.dtype
        assert acc.deltas[name].tobytes() == delta.tobytes()
    assert acc.updates == fresh.updates == 0


def test_merge_is_additive():
    model = LinearModel(2)
    a = model.new_gradient_accumulator()
    b = model.new_gradient_accumulator()
    total = model.new_gradient_accumulator()

    x1, x2 = np.array([1.0, 0.0]), np.array([0.0, 1.0])
    a.update(x1, 0.5, 1.0)
    b.update(x2, 0.5, -1.0)
    total.update(x1, 0.5, 1.0)
    total.update(x2, 0.5, -1.0)

    a.merge(b)
    assert np.allclose(a.deltas["w"], total.deltas["w"])
    assert a.updates == 2


def test_merge_rejects_other_model_kind():
    lin = LinearModel(2).new_gradient_accumulator()
    nn = NeuralNetworkModel(2, 3).new_gradient_accumulator()
    with pytest.raises(ValueError):
        lin.merge(nn)


# ============================================================
# Neural net
# ============================================================
def test_nn_zero_hidden_is_rejected():
    with pytest.raises(ConfigurationError):
        NeuralNetworkModel(4, 0)


def test_nn_fixed_seed_is_deterministic():
    a = NeuralNetworkModel(4, 5)
    b = NeuralNetworkModel(4, 5)
    assert np.array_equal(a.w1, b.w1)
    assert np.array_equal(a.wy, b.wy)
    assert np.all((a.w1 >= 0.1) & (a.w1 <= 1.0))


def test_nn_score_batch_matches_score():
    model = NeuralNetworkModel(3, 4)
    X = np.random.default_rng(0).random((6, 3))
    assert np.allclose(model.score_batch(X), [model.score(x) for x in X])


def test_nn_update_matches_numeric_gradient():
    """
    With multiplier m, the accumulated delta equals -lr * m * d(score)/d(param).
    """
    model = NeuralNetworkModel(3, 2, learning_rate=ConstantLearningRate(1.0))
    x = np.array([0.2, -0.4, 0.7])
    y = model.score(x)

    acc = model.new_gradient_accumulator()
    acc.update(x, y, 1.0)

    eps = 1e-6
    for name, param in model.parameters().items():
        numeric = np.zeros_like(param)
        for idx in np.ndindex(param.shape):
            orig = param[idx]
            param[idx] = orig + eps
            up = model.score(x)
            param[idx] = orig - eps
            down = model.score(x)
            param[idx] = orig
            numeric[idx] = (up - down) / (2 * eps)
        assert np.allclose(acc.deltas[name], -numeric, atol=1e-6), name


def test_update_does_not_touch_weights():
    model = NeuralNetworkModel(2, 3)
    before = {k: v.copy() for k, v in model.parameters().items()}
    acc = model.new_gradient_accumulator()
    acc.update(np.array([1.0, 1.0]), model.score(np.array([1.0, 1.0])), 2.0)
    for k, v in model.parameters().items():
        assert np.array_equal(v, before[k])


def test_state_round_trip_and_shape_check():
    model = NeuralNetworkModel(2, 3)
    other = NeuralNetworkModel(2, 3, seed=5)
    other.set_state(model.get_state())
    assert np.array_equal(other.w1, model.w1)

    with pytest.raises(ValueError):
        NeuralNetworkModel(2, 4).set_state(model.get_state())


# ============================================================
# Registry
# ============================================================
@pytest.mark.parametrize("name,hidden", [("nn:20", 20), ("nn_7", 7), ("NN:3", 3)])
def test_parse_nn_spec(name, hidden):
    spec = parse_model_spec(name)
    assert spec.kind is ModelKind.NEURAL_NET
    assert spec.hidden == hidden


@pytest.mark.parametrize("name", ["nn", "nn:0", "nn:-2", "svm", ""])
def test_parse_invalid_model_spec(name):
    with pytest.raises(ConfigurationError):
        parse_model_spec(name)


def test_create_model_from_spec():
    model = create_model(
        spec=parse_model_spec("nn:4"),
        dimensions=3,
        learning_rate=ConstantLearningRate(),
    )
    assert isinstance(model, NeuralNetworkModel)
    assert str(model_spec_of(model)) == "nn:4"

    linear = create_model(
        spec=parse_model_spec("linreg"), dimensions=3, learning_rate=ConstantLearningRate()
    )
    assert str(model_spec_of(linear)) == "linreg"


def test_create_model_requires_dimensions():
    with pytest.raises(ConfigurationError):
        create_model(
            spec=parse_model_spec("linreg"), dimensions=0, learning_rate=ConstantLearningRate()
        )
