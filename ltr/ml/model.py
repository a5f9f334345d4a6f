# ltr/ml/model.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

import numpy as np

from ltr.ml.activation import Sigma
from ltr.ml.learning_rate import LearningRateSchedule, ConstantLearningRate


class DifferentiableModel(ABC):
    """
    DifferentiableModel（FINAL / FROZEN）

    Semantics:
    - Owns the trainable parameters (named numpy arrays)
    - score() is a deterministic, side-effect-free forward pass
    - Parameters are mutated ONLY by apply_gradient()
    - One model instance lives for the whole training run

    Precondition (not re-checked per call):
    - len(features) == dimensions
    """

    kind: str = ""

    def __init__(
        self,
        dimensions: int,
        learning_rate: LearningRateSchedule | None = None,
        sigma: Sigma | None = None,
    ):
        self.dimensions = int(dimensions)
        self.schedule = learning_rate or ConstantLearningRate()
        self.sigma = sigma or Sigma()
        self.iteration = 0

    # --------------------------------------------------
    # Forward pass
    # --------------------------------------------------
    @abstractmethod
    def score(self, features: np.ndarray) -> float:
        raise NotImplementedError

    def score_batch(self, X: np.ndarray) -> np.ndarray:
        """Scores every row of X (n x dimensions)."""
        return np.array([self.score(x) for x in X], dtype=np.float64)

    # --------------------------------------------------
    # Parameters
    # --------------------------------------------------
    @abstractmethod
    def parameters(self) -> Dict[str, np.ndarray]:
        """Live parameter arrays, keyed by name. Do not mutate outside apply_gradient."""
        raise NotImplementedError

    @abstractmethod
    def new_gradient_accumulator(self) -> "GradientAccumulator":
        raise NotImplementedError

    def apply_gradient(self, accumulator: "GradientAccumulator") -> None:
        """
        In-place subtraction of the accumulated deltas (gradient descent).
        Only called by a pass running in TRAINING phase.
        """
        params = self.parameters()
        for name, delta in accumulator.deltas.items():
            params[name] -= delta

    # --------------------------------------------------
    # Learning rate
    # --------------------------------------------------
    def set_iteration(self, iteration: int) -> None:
        self.iteration = int(iteration)

    @property
    def learning_rate(self) -> float:
        return self.schedule.rate(self.iteration)

    # --------------------------------------------------
    # Persistence helpers
    # --------------------------------------------------
    def get_state(self) -> Dict[str, np.ndarray]:
        return {name: p.copy() for name, p in self.parameters().items()}

    def set_state(self, state: Dict[str, np.ndarray]) -> None:
        params = self.parameters()
        if set(state) != set(params):
            raise ValueError(
                f"[{self.__class__.__name__}] parameter names mismatch: "
                f"{sorted(state)} != {sorted(params)}"
            )
        for name, value in state.items():
            value = np.asarray(value, dtype=np.float64)
            if value.shape != params[name].shape:
                raise ValueError(
                    f"[{self.__class__.__name__}] shape mismatch for {name}: "
                    f"{value.shape} != {params[name].shape}"
                )
            params[name][...] = value


class GradientAccumulator(ABC):
    """
    GradientAccumulator（transient）

    - Holds partial derivatives shaped like the model parameters
    - Starts zeroed; update() only ADDS signed contributions
    - apply_to(model) subtracts the deltas from the model's weights
    - merge() is a pure additive reduce, so the visitation order of
      documents / shards does not change the result
    """

    def __init__(self, model: DifferentiableModel):
        self.model = model
        self.deltas: Dict[str, np.ndarray] = {
            name: np.zeros_like(p) for name, p in model.parameters().items()
        }
        self.updates = 0

    @abstractmethod
    def update(self, features: np.ndarray, y: float, multiplier: float) -> None:
        """
        Accumulate the contribution of one example.

        y          : the model's output for `features` (already computed)
        multiplier : signed weight of the example; a positive multiplier
                     pushes the score of `features` up once applied
        """
        raise NotImplementedError

    def reset(self) -> None:
        for delta in self.deltas.values():
            delta.fill(0.0)
        self.updates = 0

    def merge(self, other: "GradientAccumulator") -> None:
        if set(other.deltas) != set(self.deltas):
            raise ValueError("Cannot merge accumulators of different models")
        for name, delta in other.deltas.items():
            self.deltas[name] += delta
        self.updates += other.updates

    def apply_to(self, model: DifferentiableModel | None = None) -> None:
        (model if model is not None else self.model).apply_gradient(self)

    def is_zero(self) -> bool:
        return all(not np.any(delta) for delta in self.deltas.values())
