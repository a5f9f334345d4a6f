#!filepath: ltr/observability/instrumentation.py
from __future__ import annotations

from collections import OrderedDict
from contextlib import contextmanager, nullcontext
from typing import Dict, Iterator

from ltr.observability.metrics import MetricRecorder
from ltr.observability.timeline_reporter import TimelineReporter
from ltr.observability.timer import Timer


class Instrumentation:
    """
    Instrumentation（pass-level accounting）

    - timer(name)               : leaf scope, elapsed seconds land in the timeline
    - timer(name, record=False) : parent scope, measured but not recorded
    - metrics                   : MetricRecorder
    Nothing here is called per document or per pair.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self._timer = Timer(enabled=enabled)
        self.metrics = MetricRecorder(enabled=enabled)
        self.timeline: Dict[str, float] = OrderedDict()

    @contextmanager
    def timer(self, name: str, *, record: bool = True) -> Iterator[None]:
        self._timer.start(name)
        try:
            yield
        finally:
            elapsed = self._timer.end(name)
            if self.enabled and record:
                self.timeline[name] = elapsed

    def generate_timeline_report(self, label: str) -> None:
        if self.timeline:
            TimelineReporter(self.timeline, label).print()


class NoOpInstrumentation(Instrumentation):
    """Default for Trainer / TrainingPipeline built without instrumentation."""

    def __init__(self):
        super().__init__(enabled=False)

    def timer(self, name: str, *, record: bool = True):
        return nullcontext()
