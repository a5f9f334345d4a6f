# ltr/training/stopping.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from ltr.training.types import StoppingCondition
from ltr.utils.errors import ConfigurationError

# legacy integer codes
_BY_CODE = {
    0: StoppingCondition.ITERATIONS,
    1: StoppingCondition.CONVERGENCE,
}


def parse_stopping_condition(value: Union[int, str]) -> StoppingCondition:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid stopping condition: {value!r}")
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        code = int(value)
        if code not in _BY_CODE:
            raise ConfigurationError(
                f"Unknown stopping condition code {code}; select one of {sorted(_BY_CODE)}"
            )
        return _BY_CODE[code]
    try:
        return StoppingCondition(str(value).strip().lower())
    except ValueError:
        available = ", ".join(c.value for c in StoppingCondition)
        raise ConfigurationError(
            f"Unknown stopping condition {value!r}; select one of {available}"
        ) from None


@dataclass(frozen=True)
class StoppingPolicy:
    """
    StoppingPolicy（immutable per run）

    Consulted by the outer loop after each training pass with the history
    of aggregate metric values (one per finished pass).

    - ITERATIONS  : stop after max_iterations passes
    - CONVERGENCE : additionally stop once |m(t) - m(t-1)| < threshold
    """

    condition: StoppingCondition
    max_iterations: int
    threshold: float = 1e-4

    def __post_init__(self):
        if self.max_iterations <= 0:
            raise ConfigurationError(
                f"Iteration budget must be positive, got {self.max_iterations}"
            )
        if self.threshold < 0:
            raise ConfigurationError(
                f"Convergence threshold must be >= 0, got {self.threshold}"
            )

    def should_continue(self, history: Sequence[float]) -> bool:
        done = len(history)
        if done >= self.max_iterations:
            return False
        if self.condition is StoppingCondition.CONVERGENCE and done >= 2:
            return abs(history[-1] - history[-2]) >= self.threshold
        return True

    def converged(self, history: Sequence[float]) -> bool:
        """True when the run ends before exhausting its budget."""
        return len(history) < self.max_iterations and not self.should_continue(history)
