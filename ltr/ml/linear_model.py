# ltr/ml/linear_model.py
from __future__ import annotations

from typing import Dict

import numpy as np

from ltr.ml.model import DifferentiableModel, GradientAccumulator


class LinearModel(DifferentiableModel):
    """
    score = sigma( sum_x features[x] * w[x] )

    Weights start at zero, so every document initially scores sigma(0) = 0.5.
    """

    kind = "linreg"

    def __init__(self, dimensions: int, learning_rate=None, sigma=None):
        super().__init__(dimensions, learning_rate, sigma)
        self.w = np.zeros(self.dimensions, dtype=np.float64)

    def score(self, features: np.ndarray) -> float:
        return float(self.sigma(np.dot(features, self.w)))

    def score_batch(self, X: np.ndarray) -> np.ndarray:
        return self.sigma(np.asarray(X, dtype=np.float64) @ self.w)

    def parameters(self) -> Dict[str, np.ndarray]:
        return {"w": self.w}

    def new_gradient_accumulator(self) -> "LinearGradient":
        return LinearGradient(self)


class LinearGradient(GradientAccumulator):

    def update(self, features: np.ndarray, y: float, multiplier: float) -> None:
        # w[x] -= lr * m * y(1-y) * features[x]
        scale = self.model.learning_rate * multiplier * self.model.sigma.derivative(y)
        self.deltas["w"] -= scale * np.asarray(features, dtype=np.float64)
        self.updates += 1
