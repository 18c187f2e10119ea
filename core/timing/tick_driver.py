"""Periodic tick sources for :class:`~core.timing.stopwatch.StopwatchEngine`.

A driver hands out one :class:`TickHandle` per ``schedule`` call.  The engine
holds at most one handle at a time and cancels it when it leaves the Running
state; ``cancel`` returns only once the callback can no longer fire.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, List, Optional, Protocol


TickCallback = Callable[[], None]


class TickHandle(Protocol):
    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


class TickDriver(Protocol):
    def schedule(self, callback: TickCallback, interval_ms: int) -> TickHandle: ...


# ---------------------------------------------------------------------------
# Background thread driver
# ---------------------------------------------------------------------------


class _ThreadTick:
    """One periodic registration backed by a daemon thread."""

    def __init__(self, callback: TickCallback, interval_ms: int, name: str) -> None:
        self._callback = callback
        self._interval = max(0.001, interval_ms / 1000.0)
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set() and self._thread.is_alive()

    def _run(self) -> None:
        next_at = time.monotonic() + self._interval
        while not self._stop_event.wait(max(0.0, next_at - time.monotonic())):
            self._callback()
            next_at += self._interval
            # fell behind (slow callback); skip missed beats instead of bursting
            now = time.monotonic()
            if next_at < now:
                next_at = now + self._interval

    def cancel(self) -> None:
        self._stop_event.set()
        if threading.current_thread() is not self._thread:
            self._thread.join()


class ThreadTickDriver:
    """Fire callbacks from a background thread at a fixed cadence."""

    def __init__(self, name: str = "stopwatch-tick") -> None:
        self._name = name

    def schedule(self, callback: TickCallback, interval_ms: int) -> _ThreadTick:
        return _ThreadTick(callback, interval_ms, self._name)


# ---------------------------------------------------------------------------
# Manual driver (tests, embedding in an external event loop)
# ---------------------------------------------------------------------------


class _ManualTick:
    def __init__(self, callback: TickCallback, interval_ms: int) -> None:
        self.callback = callback
        self.interval_ms = interval_ms
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        self._active = False


class ManualTickDriver:
    """Driver whose ticks are delivered by calling :meth:`fire`.

    Every registration is remembered in :attr:`handles` so callers can check
    that cancelled ones stay cancelled.
    """

    def __init__(self) -> None:
        self.handles: List[_ManualTick] = []

    def schedule(self, callback: TickCallback, interval_ms: int) -> _ManualTick:
        handle = _ManualTick(callback, interval_ms)
        self.handles.append(handle)
        return handle

    @property
    def active_handles(self) -> List[_ManualTick]:
        return [h for h in self.handles if h.active]

    @property
    def last(self) -> Optional[_ManualTick]:
        return self.handles[-1] if self.handles else None

    def fire(self) -> int:
        """Invoke every active callback once; return how many fired."""
        fired = 0
        for handle in self.active_handles:
            handle.callback()
            fired += 1
        return fired


__all__ = [
    "ManualTickDriver",
    "ThreadTickDriver",
    "TickCallback",
    "TickDriver",
    "TickHandle",
]
