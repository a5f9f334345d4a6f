# ltr/ml/learning_rate.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ltr.utils.errors import ConfigurationError

DEFAULT_RATE = 0.01


class LearningRateSchedule(ABC):
    """
    Step size for iteration t (0-based).

    Contract:
    - rate(t) > 0
    - decaying variants are monotonically non-increasing in t
    - spec() round-trips through create_learning_rate()
    """

    @abstractmethod
    def rate(self, iteration: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def spec(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class ConstantLearningRate(LearningRateSchedule):
    value: float = DEFAULT_RATE

    def rate(self, iteration: int) -> float:
        return self.value

    def spec(self) -> str:
        return f"constant:{self.value!r}"


@dataclass(frozen=True)
class InverseTimeDecay(LearningRateSchedule):
    """r0 / (1 + decay * t)"""

    initial: float
    decay: float = 1.0

    def rate(self, iteration: int) -> float:
        return self.initial / (1.0 + self.decay * max(iteration, 0))

    def spec(self) -> str:
        return f"decay:{self.initial!r}:{self.decay!r}"


@dataclass(frozen=True)
class ExponentialDecay(LearningRateSchedule):
    """r0 * gamma ** t"""

    initial: float
    gamma: float = 0.95

    def rate(self, iteration: int) -> float:
        return self.initial * self.gamma ** max(iteration, 0)

    def spec(self) -> str:
        return f"exp:{self.initial!r}:{self.gamma!r}"


def _parse_floats(name: str, args: list[str]) -> list[float]:
    try:
        return [float(a) for a in args]
    except ValueError as e:
        raise ConfigurationError(
            f"Learning rate '{name}' expects numeric arguments, got {args}"
        ) from e


def create_learning_rate(text: str | None) -> LearningRateSchedule:
    """
    Resolve a learning-rate policy string (once, at startup).

        ""  / "constant"       -> ConstantLearningRate(0.01)
        "constant:0.05"        -> ConstantLearningRate(0.05)
        "decay:0.1[:0.5]"      -> InverseTimeDecay
        "exp:0.1[:0.9]"        -> ExponentialDecay
    """
    text = (text or "").strip()
    if not text:
        return ConstantLearningRate()

    name, *args = text.split(":")
    name = name.strip().lower()
    values = _parse_floats(name, args)

    if name == "constant":
        if len(values) > 1:
            raise ConfigurationError(f"Too many arguments for learning rate: {text}")
        schedule = ConstantLearningRate(*values)
    elif name == "decay":
        if not 1 <= len(values) <= 2:
            raise ConfigurationError(f"Usage: decay:<r0>[:<decay>], got {text}")
        schedule = InverseTimeDecay(*values)
        if schedule.decay < 0:
            raise ConfigurationError(f"Decay must be >= 0: {text}")
    elif name == "exp":
        if not 1 <= len(values) <= 2:
            raise ConfigurationError(f"Usage: exp:<r0>[:<gamma>], got {text}")
        schedule = ExponentialDecay(*values)
        if not 0 < schedule.gamma <= 1:
            raise ConfigurationError(f"Gamma must be in (0, 1]: {text}")
    else:
        raise ConfigurationError(
            f"Unknown learning rate policy '{name}'. Available: constant, decay, exp"
        )

    if schedule.rate(0) <= 0:
        raise ConfigurationError(f"Learning rate must be positive: {text}")

    return schedule
