# ltr/ml/activation.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.special import expit, logit as _logit

# logit() input is clamped into (eps, 1 - eps)
_EPS = 1e-12


@dataclass(frozen=True)
class Sigma:
    """
    Logistic activation（stateless value type）

    - activation(x) = 1 / (1 + exp(-K * x))
    - derivative(y) takes the ALREADY computed activation y, not x
    - logit(y)      = ln(y) - ln(1 - y), inverse of activation for K == 1

    All three accept scalars or numpy arrays.
    """

    K: float = 1.0

    def activation(self, x):
        return expit(self.K * x)

    def __call__(self, x):
        return self.activation(x)

    @staticmethod
    def derivative(y):
        return y * (1 - y)

    def logit(self, y):
        y = np.clip(y, _EPS, 1 - _EPS)
        return _logit(y) / self.K


SIGMA = Sigma()
