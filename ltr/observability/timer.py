#!filepath: ltr/observability/timer.py
from time import perf_counter
from typing import Dict


class Timer:
    """
    Named stopwatches.

    end() of a name that is not running (or of a disabled timer) is 0.0.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._running: Dict[str, float] = {}

    def start(self, name: str) -> None:
        if self.enabled:
            self._running[name] = perf_counter()

    def end(self, name: str) -> float:
        began = self._running.pop(name, None)
        if began is None:
            return 0.0
        return perf_counter() - began
