# tests/unit/test_tick_driver.py
import threading
import time

from core.clock import monotonic_ms
from core.timing.stopwatch import StopwatchEngine
from core.timing.tick_driver import ManualTickDriver, ThreadTickDriver


def _wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


def test_thread_driver_fires_until_cancelled():
    hits = []
    handle = ThreadTickDriver().schedule(lambda: hits.append(1), interval_ms=5)
    assert _wait_for(lambda: len(hits) >= 3)
    handle.cancel()
    assert not handle.active
    count = len(hits)
    time.sleep(0.05)
    assert len(hits) == count


def test_thread_driver_cancel_from_callback_does_not_deadlock():
    done = threading.Event()
    box = {}

    def cb():
        if "handle" not in box:
            return
        box["handle"].cancel()
        done.set()

    box["handle"] = ThreadTickDriver().schedule(cb, interval_ms=5)
    assert done.wait(2.0)
    assert _wait_for(lambda: not box["handle"].active)


def test_engine_with_thread_driver_freezes_after_stop():
    engine = StopwatchEngine(clock=monotonic_ms, driver=ThreadTickDriver(), tick_interval_ms=10)
    try:
        engine.start()
        assert _wait_for(lambda: engine.snapshot().total_elapsed_ms > 0)
        engine.stop()
        frozen = engine.snapshot()
        time.sleep(0.05)
        assert engine.snapshot() == frozen
        assert frozen.is_running is False
    finally:
        engine.close()


def test_manual_driver_tracks_registrations():
    drv = ManualTickDriver()
    calls = []
    first = drv.schedule(lambda: calls.append("a"), 100)
    drv.schedule(lambda: calls.append("b"), 100)
    assert drv.fire() == 2
    first.cancel()
    assert drv.fire() == 1
    assert calls == ["a", "b", "b"]
    assert len(drv.active_handles) == 1
