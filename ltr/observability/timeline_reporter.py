#!filepath: ltr/observability/timeline_reporter.py
from typing import Dict

from ltr import logs

_RULE = "=" * 52


class TimelineReporter:
    """
    One line per timed pass (training#0, training#1, ..., validation#N),
    with its share of the run's total wall time.
    """

    def __init__(self, timeline: Dict[str, float], label: str):
        self.timeline = timeline
        self.label = label

    def print(self) -> None:
        total = sum(self.timeline.values())

        logs.info(f"[Timeline] Training timeline for {self.label}")
        logs.info(f"[Timeline] {_RULE}")
        for name, sec in self.timeline.items():
            share = sec / total * 100 if total > 0 else 0.0
            logs.info(f"[Timeline] {name:<24} {sec:>9.3f}s {share:>6.1f}%")
        logs.info(f"[Timeline] {'total':<24} {total:>9.3f}s")
