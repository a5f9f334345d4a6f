#!filepath: tests/observability/test_metrics.py

from ltr.observability.metrics import MetricRecorder


def test_metric_record():
    m = MetricRecorder(enabled=True)
    m.record("training.ndcg@10#0", 0.5)
    m.record("training.ndcg@10#0", 0.75)

    # latest value wins
    assert m.metrics["training.ndcg@10#0"] == 0.75


def test_metric_disabled():
    m = MetricRecorder(enabled=False)
    m.record("x", 1)

    # Nothing should be recorded
    assert m.metrics == {}


def test_snapshot_is_a_copy():
    m = MetricRecorder()
    m.record("a", 1)
    snap = m.snapshot()
    snap["b"] = 2
    assert "b" not in m.metrics
