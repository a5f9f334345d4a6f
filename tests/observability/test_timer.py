#!filepath: tests/observability/test_timer.py

import time
from ltr.observability.timer import Timer


def test_timer_basic():
    t = Timer(enabled=True)
    t.start("pass")
    time.sleep(0.01)
    elapsed = t.end("pass")

    assert elapsed > 0
    assert isinstance(elapsed, float)


def test_timer_disabled():
    t = Timer(enabled=False)
    t.start("pass")
    elapsed = t.end("pass")

    assert elapsed == 0.0


def test_timer_unknown_name():
    assert Timer().end("never-started") == 0.0
