"""
Differentiable scoring models.

- activation      : logistic Sigma (activation / derivative / logit)
- learning_rate   : step-size schedules + policy-string factory
- model           : DifferentiableModel / GradientAccumulator contracts
- linear_model    : LinearModel
- neural_net      : NeuralNetworkModel (one hidden layer)
- registry        : ModelKind / ModelSpec resolution
- model_artifact  : save_model / load_model
"""
from .activation import Sigma
from .learning_rate import (
    LearningRateSchedule,
    ConstantLearningRate,
    InverseTimeDecay,
    ExponentialDecay,
    create_learning_rate,
)
from .model import DifferentiableModel, GradientAccumulator
from .linear_model import LinearModel, LinearGradient
from .neural_net import NeuralNetworkModel, NeuralNetworkGradient
from .registry import ModelKind, ModelSpec, parse_model_spec, create_model

__all__ = [
    "Sigma",
    "LearningRateSchedule", "ConstantLearningRate", "InverseTimeDecay",
    "ExponentialDecay", "create_learning_rate",
    "DifferentiableModel", "GradientAccumulator",
    "LinearModel", "LinearGradient",
    "NeuralNetworkModel", "NeuralNetworkGradient",
    "ModelKind", "ModelSpec", "parse_model_spec", "create_model",
]
