"""Derived values over the lap list.

``lap_times`` always follows the engine layout: index 0 is the current lap,
indices 1..N are completed laps, most recent first.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel


class LapInfo(BaseModel):
    lap_number: int
    duration_ms: int
    is_fastest: bool = False
    is_slowest: bool = False


def total_elapsed_ms(lap_times: Sequence[int], live_ms: int = 0) -> int:
    return sum(lap_times) + live_ms


def extremes(lap_times: Sequence[int]) -> Optional[Tuple[int, int]]:
    """Return ``(fastest, slowest)`` over completed laps.

    ``None`` when fewer than two laps are completed, since a single lap is
    neither fast nor slow relative to anything.
    """

    completed = lap_times[1:]
    if len(completed) < 2:
        return None
    return min(completed), max(completed)


def lap_table(lap_times: Sequence[int], live_ms: int = 0) -> List[LapInfo]:
    """Build display rows, most recent first.

    The current lap (row 0) shows its live duration and is never marked.
    Completed laps are marked by equality with the extremes, so ties mark
    every matching lap and a lap can be both fastest and slowest.
    """

    marks = extremes(lap_times)
    count = len(lap_times)
    rows: List[LapInfo] = []
    for index, duration in enumerate(lap_times):
        if index == 0:
            rows.append(LapInfo(lap_number=count, duration_ms=duration + live_ms))
            continue
        rows.append(
            LapInfo(
                lap_number=count - index,
                duration_ms=duration,
                is_fastest=marks is not None and duration == marks[0],
                is_slowest=marks is not None and duration == marks[1],
            )
        )
    return rows


__all__ = ["LapInfo", "extremes", "lap_table", "total_elapsed_ms"]
