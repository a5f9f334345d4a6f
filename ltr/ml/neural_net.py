# ltr/ml/neural_net.py
from __future__ import annotations

from typing import Dict

import numpy as np

from ltr.ml.model import DifferentiableModel, GradientAccumulator
from ltr.utils.errors import ConfigurationError

INIT_SEED = 1001
INIT_LOW, INIT_HIGH = 0.1, 1.0


class NeuralNetworkModel(DifferentiableModel):
    """
    NeuralNetworkModel（one hidden layer）

    Forward pass:
        hidden[h] = sigma( sum_x features[x] * w1[x][h] )
        y         = sigma( sum_h hidden[h] * wy[h] )

    Weights are drawn uniformly from [0.1, 1.0] with a FIXED seed, so two
    models with the same shape start identical across runs.
    """

    kind = "nn"

    def __init__(
        self,
        dimensions: int,
        hidden_neurons: int,
        learning_rate=None,
        sigma=None,
        seed: int = INIT_SEED,
    ):
        if hidden_neurons is None or int(hidden_neurons) <= 0:
            raise ConfigurationError(
                f"The number of hidden neurons must be positive, got {hidden_neurons}"
            )
        super().__init__(dimensions, learning_rate, sigma)
        self.hidden_neurons = int(hidden_neurons)
        self._initialize_weights(seed)

    def _initialize_weights(self, seed: int) -> None:
        rng = np.random.default_rng(seed)
        self.w1 = rng.uniform(INIT_LOW, INIT_HIGH, size=(self.dimensions, self.hidden_neurons))
        self.wy = rng.uniform(INIT_LOW, INIT_HIGH, size=self.hidden_neurons)

    # --------------------------------------------------
    # Forward pass
    # --------------------------------------------------
    def hidden(self, features: np.ndarray) -> np.ndarray:
        """Hidden-layer outputs for the CURRENT weights."""
        return self.sigma(np.asarray(features, dtype=np.float64) @ self.w1)

    def score(self, features: np.ndarray) -> float:
        return float(self.sigma(np.dot(self.hidden(features), self.wy)))

    def score_batch(self, X: np.ndarray) -> np.ndarray:
        H = self.sigma(np.asarray(X, dtype=np.float64) @ self.w1)
        return self.sigma(H @ self.wy)

    def parameters(self) -> Dict[str, np.ndarray]:
        return {"w1": self.w1, "wy": self.wy}

    def new_gradient_accumulator(self) -> "NeuralNetworkGradient":
        return NeuralNetworkGradient(self)


class NeuralNetworkGradient(GradientAccumulator):

    def update(self, features: np.ndarray, y: float, multiplier: float) -> None:
        model = self.model
        features = np.asarray(features, dtype=np.float64)

        # hidden[] must be re-derived for the current weights on every call
        hidden = model.hidden(features)

        step = model.learning_rate * multiplier
        delta_y = model.sigma.derivative(y)

        # output layer: sgm'(s) * d(s) / d(wy_h)
        self.deltas["wy"] -= step * delta_y * hidden

        # hidden layer
        delta_h = model.sigma.derivative(hidden)
        self.deltas["w1"] -= step * delta_y * np.outer(features, model.wy * delta_h)

        self.updates += 1
