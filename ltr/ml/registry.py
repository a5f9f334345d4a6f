# ltr/ml/registry.py
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from ltr.ml.learning_rate import LearningRateSchedule
from ltr.ml.linear_model import LinearModel
from ltr.ml.model import DifferentiableModel
from ltr.ml.neural_net import NeuralNetworkModel
from ltr.utils.errors import ConfigurationError


class ModelKind(str, Enum):
    LINEAR = "linreg"
    NEURAL_NET = "nn"


@dataclass(frozen=True)
class ModelSpec:
    """
    ModelSpec（FROZEN）

    Tagged variant: Linear | NeuralNet(hidden)
    """
    kind: ModelKind
    hidden: Optional[int] = None

    def __str__(self) -> str:
        if self.kind is ModelKind.NEURAL_NET:
            return f"nn:{self.hidden}"
        return self.kind.value


_NN_PATTERN = re.compile(r"^nn[:_]?(-?\d+)?$")


def parse_model_spec(name: str) -> ModelSpec:
    """
    "linreg"          -> Linear
    "nn:20" / "nn_20" -> NeuralNet(20)

    Width must be given and positive; an NN never silently degrades to linear.
    """
    name = (name or "").strip().lower()

    if name == ModelKind.LINEAR.value:
        return ModelSpec(kind=ModelKind.LINEAR)

    match = _NN_PATTERN.match(name)
    if match:
        if match.group(1) is None:
            raise ConfigurationError(
                "The number of neurons must be specified, e.g. nn:20"
            )
        hidden = int(match.group(1))
        if hidden <= 0:
            raise ConfigurationError(
                f"The number of neurons must be positive, got {hidden}"
            )
        return ModelSpec(kind=ModelKind.NEURAL_NET, hidden=hidden)

    raise ConfigurationError(
        f"Model {name!r} is not implemented; select one of linreg, nn:<H>"
    )


_MODEL_REGISTRY: Dict[
    ModelKind,
    Callable[[ModelSpec, int, LearningRateSchedule], DifferentiableModel],
] = {
    ModelKind.LINEAR: lambda spec, dims, lr: LinearModel(dims, learning_rate=lr),
    ModelKind.NEURAL_NET: lambda spec, dims, lr: NeuralNetworkModel(
        dims, spec.hidden, learning_rate=lr
    ),
}


def create_model(
    *, spec: ModelSpec, dimensions: int, learning_rate: LearningRateSchedule
) -> DifferentiableModel:
    if dimensions <= 0:
        raise ConfigurationError(f"Feature dimensionality must be positive, got {dimensions}")

    if spec.kind not in _MODEL_REGISTRY:
        available = ", ".join(k.value for k in _MODEL_REGISTRY)
        raise ConfigurationError(f"No model for {spec}. Available: {available}")

    return _MODEL_REGISTRY[spec.kind](spec, dimensions, learning_rate)


def model_spec_of(model: DifferentiableModel) -> ModelSpec:
    if isinstance(model, NeuralNetworkModel):
        return ModelSpec(kind=ModelKind.NEURAL_NET, hidden=model.hidden_neurons)
    return ModelSpec(kind=ModelKind.LINEAR)
