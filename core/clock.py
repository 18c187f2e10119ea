from __future__ import annotations
import time
from typing import Callable
NS_PER_MS = 1_000_000
Clock = Callable[[], int]
def now_ts_ms() -> int: return time.time_ns() // NS_PER_MS
def monotonic_ms() -> int: return time.monotonic_ns() // NS_PER_MS
CLOCKS: dict[str, Clock] = {"wall": now_ts_ms, "monotonic": monotonic_ms}
def resolve_clock(name: str) -> Clock:
    try:
        return CLOCKS[name]
    except KeyError:
        raise ValueError(f"unknown clock {name!r}, expected one of {sorted(CLOCKS)}") from None
