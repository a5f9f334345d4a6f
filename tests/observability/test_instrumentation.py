#!filepath: tests/observability/test_instrumentation.py

import time

from loguru import logger

from ltr.observability.instrumentation import Instrumentation, NoOpInstrumentation


def test_instrumentation_timer():
    inst = Instrumentation(enabled=True)

    with inst.timer("training#0"):
        time.sleep(0.01)

    assert "training#0" in inst.timeline
    assert inst.timeline["training#0"] > 0


def test_parent_scope_not_recorded():
    inst = Instrumentation(enabled=True)

    with inst.timer("run", record=False):
        with inst.timer("training#0"):
            pass

    assert list(inst.timeline) == ["training#0"]


def test_instrumentation_metrics():
    inst = Instrumentation(enabled=True)
    inst.metrics.record("validation.ndcg@20", 0.8)

    assert inst.metrics.metrics["validation.ndcg@20"] == 0.8


def test_noop_instrumentation():
    inst = NoOpInstrumentation()

    with inst.timer("training#0"):
        pass
    inst.metrics.record("x", 1)
    inst.generate_timeline_report("nothing")

    assert inst.timeline == {}
    assert inst.metrics.snapshot() == {}


def test_generate_timeline_report():
    inst = Instrumentation(enabled=True)

    with inst.timer("training#0"):
        time.sleep(0.005)

    captured = []
    sink_id = logger.add(lambda msg: captured.append(str(msg)))

    inst.generate_timeline_report("20260101-120000")

    logger.remove(sink_id)

    output = "\n".join(captured)

    assert "training#0" in output
    assert "20260101-120000" in output
    assert "Training timeline" in output
