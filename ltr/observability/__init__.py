from .instrumentation import Instrumentation, NoOpInstrumentation
from .metrics import MetricRecorder
from .timer import Timer

__all__ = ["Instrumentation", "NoOpInstrumentation", "MetricRecorder", "Timer"]
