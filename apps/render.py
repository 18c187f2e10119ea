"""Text rendering for stopwatch snapshots."""

from __future__ import annotations

from typing import List

from core.timing.stopwatch import StopwatchSnapshot


def format_clock(ms: int) -> str:
    """Format a duration as ``MM:SS,CC`` (minutes wrap at the hour)."""
    ms = max(0, int(ms))
    seconds, rem = divmod(ms, 1000)
    minutes = seconds // 60
    return f"{minutes % 60:02}:{seconds % 60:02},{rem // 10:02}"


def render_snapshot(snap: StopwatchSnapshot) -> str:
    lines: List[str] = [format_clock(snap.total_elapsed_ms)]
    for lap in snap.laps:
        marker = ""
        if lap.is_fastest:
            marker += " fastest"
        if lap.is_slowest:
            marker += " slowest"
        lines.append(f"Lap {lap.lap_number:>3}  {format_clock(lap.duration_ms)}{marker}")
    return "\n".join(lines)


def render_controls(snap: StopwatchSnapshot) -> str:
    keys = []
    if snap.can_start:
        keys.append("[s] start" if snap.state == "idle" else "[s] resume")
    if snap.can_lap:
        keys.append("[l] lap")
    if snap.can_stop:
        keys.append("[x] stop")
    if snap.can_reset:
        keys.append("[r] reset")
    keys += ["[p] print", "[q] quit"]
    return "  ".join(keys)


__all__ = ["format_clock", "render_controls", "render_snapshot"]
