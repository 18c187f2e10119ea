"""Lap stopwatch state machine.

The engine owns a :class:`StopwatchState` and mutates it only through the
five commands (``start``, ``lap``, ``stop``, ``resume``, ``reset``) and
``tick``.  Commands whose precondition does not hold are ignored and return
``False``; callers are expected to gate their buttons on the ``can_*`` flags
of :meth:`StopwatchEngine.snapshot`.

While running, a tick handle obtained from the configured driver calls
``tick`` at a fixed cadence.  The handle is acquired when entering Running
and cancelled (synchronously) when leaving it or when the engine is closed.
"""

from __future__ import annotations

import contextlib
import threading
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional

import ulid
from pydantic import BaseModel

from config.settings import StopwatchConfig, get_config
from core.clock import Clock, now_ts_ms, resolve_clock
from core.event_writer import JsonlWriter
from core.events import Event, EventKind, event_dump
from core.timing.laps import LapInfo, lap_table, total_elapsed_ms
from core.timing.tick_driver import ThreadTickDriver, TickDriver, TickHandle

Phase = Literal["idle", "running", "paused"]

DEFAULT_TICK_INTERVAL_MS = 100


@dataclass
class StopwatchState:
    start_ms: int = 0
    now_ms: int = 0
    lap_times_ms: List[int] = field(default_factory=list)
    running: bool = False

    @property
    def live_ms(self) -> int:
        """Duration of the current running segment (0 unless running)."""
        return self.now_ms - self.start_ms if self.running else 0

    @property
    def phase(self) -> Phase:
        if self.running:
            return "running"
        return "paused" if self.lap_times_ms else "idle"

    @property
    def total_elapsed_ms(self) -> int:
        return total_elapsed_ms(self.lap_times_ms, self.live_ms)


class StopwatchSnapshot(BaseModel):
    total_elapsed_ms: int
    laps: List[LapInfo]
    is_running: bool
    can_lap: bool
    can_start: bool
    can_stop: bool
    can_reset: bool
    state: Phase


class StopwatchEngine:
    """Start/lap/stop/resume/reset stopwatch driven by a periodic tick."""

    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        driver: Optional[TickDriver] = None,
        tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        session: Optional[str] = None,
        events_writer: Optional[JsonlWriter] = None,
    ) -> None:
        if tick_interval_ms <= 0:
            raise ValueError(f"tick_interval_ms must be positive, got {tick_interval_ms}")
        self._clock: Clock = clock or now_ts_ms
        self._driver: TickDriver = driver or ThreadTickDriver()
        self.tick_interval_ms = tick_interval_ms
        self.session = session or str(ulid.new())
        self.events_writer = events_writer

        self._state = StopwatchState()
        self._lock = threading.Lock()
        self._tick_handle: Optional[TickHandle] = None
        self._closed = False
        self._journal_error: Optional[str] = None

        self._emit("meta", status="opened", tick_interval_ms=tick_interval_ms)

    @classmethod
    def from_config(
        cls,
        config: Optional[StopwatchConfig] = None,
        *,
        session: Optional[str] = None,
        driver: Optional[TickDriver] = None,
    ) -> "StopwatchEngine":
        """Build an engine from :class:`StopwatchConfig`, opening its journal if enabled."""

        cfg = config or get_config()
        session = session or str(ulid.new())
        writer: Optional[JsonlWriter] = None
        if cfg.event_log:
            paths = cfg.paths.resolve()
            paths.ensure_all()
            writer = JsonlWriter(paths.session_log_path(session), flush_every=cfg.flush_every)
        return cls(
            clock=resolve_clock(cfg.clock),
            driver=driver,
            tick_interval_ms=cfg.tick_interval_ms,
            session=session,
            events_writer=writer,
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> StopwatchState:
        """A copy of the current state."""
        with self._lock:
            s = self._state
            return StopwatchState(s.start_ms, s.now_ms, list(s.lap_times_ms), s.running)

    @property
    def is_running(self) -> bool:
        return self._state.running

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> StopwatchSnapshot:
        with self._lock:
            s = self._state
            phase = s.phase
            return StopwatchSnapshot(
                total_elapsed_ms=s.total_elapsed_ms,
                laps=lap_table(s.lap_times_ms, s.live_ms),
                is_running=s.running,
                can_lap=phase == "running",
                can_start=phase != "running",
                can_stop=phase == "running",
                can_reset=phase == "paused",
                state=phase,
            )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start(self) -> bool:
        with self._lock:
            if self._closed or self._state.phase != "idle":
                return self._ignored("start")
            t = self._clock()
            self._state = StopwatchState(start_ms=t, now_ms=t, lap_times_ms=[0], running=True)
            self._schedule_ticks()
            self._emit_transition("start")
        return True

    def tick(self) -> bool:
        with self._lock:
            # a tick that raced a stop() is dropped here
            if not self._state.running:
                return False
            self._state.now_ms = self._clock()
        return True

    def lap(self) -> bool:
        with self._lock:
            s = self._state
            if self._closed or not s.running:
                return self._ignored("lap")
            t = self._clock()
            s.now_ms = t
            finished = s.lap_times_ms[0] + (s.now_ms - s.start_ms)
            s.lap_times_ms = [0, finished] + s.lap_times_ms[1:]
            s.start_ms = s.now_ms = t
            self._emit_transition("lap", lap_number=len(s.lap_times_ms) - 1, lap_ms=finished)
        return True

    def stop(self) -> bool:
        handle: Optional[TickHandle] = None
        try:
            with self._lock:
                s = self._state
                if self._closed or not s.running:
                    return self._ignored("stop")
                handle = self._release_ticks()
                s.now_ms = self._clock()
                s.lap_times_ms[0] += s.now_ms - s.start_ms
                s.start_ms = s.now_ms = 0
                s.running = False
                self._emit_transition("stop")
        finally:
            # cancel outside the lock: the tick thread may be waiting on it
            self._cancel(handle)
        return True

    def resume(self) -> bool:
        with self._lock:
            s = self._state
            if self._closed or s.phase != "paused":
                return self._ignored("resume")
            t = self._clock()
            s.start_ms = s.now_ms = t
            s.running = True
            self._schedule_ticks()
            self._emit_transition("resume")
        return True

    def reset(self) -> bool:
        handle: Optional[TickHandle] = None
        try:
            with self._lock:
                if self._closed:
                    return False
                handle = self._release_ticks()
                self._state = StopwatchState()
                self._emit_transition("reset")
        finally:
            self._cancel(handle)
        return True

    def press_start(self) -> bool:
        """Single start button: start when idle, resume when paused."""
        if self._state.phase == "paused":
            return self.resume()
        return self.start()

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def close(self) -> None:
        handle: Optional[TickHandle] = None
        try:
            with self._lock:
                if self._closed:
                    return
                handle = self._release_ticks()
                try:
                    self._emit("meta", status="closed", total_elapsed_ms=self._state.total_elapsed_ms)
                finally:
                    self._closed = True
        finally:
            self._cancel(handle)
            writer, self.events_writer = self.events_writer, None
            if writer is not None:
                try:
                    writer.close()
                except OSError as exc:
                    self._record_journal_error(exc)

    def __enter__(self) -> "StopwatchEngine":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Tick registration (callers hold the lock)
    # ------------------------------------------------------------------
    def _schedule_ticks(self) -> None:
        assert self._tick_handle is None, "tick handle leaked across transitions"
        self._tick_handle = self._driver.schedule(self.tick, self.tick_interval_ms)

    def _release_ticks(self) -> Optional[TickHandle]:
        handle, self._tick_handle = self._tick_handle, None
        return handle

    @staticmethod
    def _cancel(handle: Optional[TickHandle]) -> None:
        if handle is not None:
            handle.cancel()

    # ------------------------------------------------------------------
    # Journal
    # ------------------------------------------------------------------
    @property
    def journal_error(self) -> Optional[str]:
        """Last journal failure; once set, the engine stops journaling."""
        return self._journal_error

    def _emit(self, kind: EventKind, **data: Any) -> None:
        if self.events_writer is None or self._closed:
            return
        try:
            self.events_writer.write(event_dump(Event(kind=kind, session=self.session, data=data)))
        except (OSError, ValueError) as exc:
            # a broken sink must not interrupt a transition
            self._record_journal_error(exc)
            writer, self.events_writer = self.events_writer, None
            with contextlib.suppress(OSError, ValueError):
                writer.close()

    def _record_journal_error(self, exc: Exception) -> None:
        self._journal_error = f"{type(exc).__name__}: {exc}"

    def _emit_transition(self, kind: EventKind, **data: Any) -> None:
        s = self._state
        self._emit(
            kind,
            total_elapsed_ms=s.total_elapsed_ms,
            lap_count=len(s.lap_times_ms),
            **data,
        )

    def _ignored(self, command: str) -> bool:
        self._emit("ignored", command=command, state=self._state.phase)
        return False


__all__ = [
    "DEFAULT_TICK_INTERVAL_MS",
    "Phase",
    "StopwatchEngine",
    "StopwatchSnapshot",
    "StopwatchState",
]
