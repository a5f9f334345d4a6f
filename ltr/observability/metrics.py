#!filepath: ltr/observability/metrics.py
from dataclasses import dataclass, field
from typing import Any, Dict

from ltr import logs


@dataclass
class MetricRecorder:
    """
    Pass-level metrics, keyed like "training.ndcg@20#3" / "validation.ndcg@20".
    Re-recording a key overwrites it. Nothing per pair or per document.
    """
    enabled: bool = True
    metrics: Dict[str, Any] = field(default_factory=dict)

    def record(self, name: str, value: Any) -> None:
        if self.enabled:
            self.metrics[name] = value
            logs.debug(f"[Metric] {name}={value}")

    def snapshot(self) -> Dict[str, Any]:
        """Copy, safe to serialise into artifact.json."""
        return dict(self.metrics)
