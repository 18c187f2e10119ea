# tests/unit/test_render.py
import pytest

from apps.render import format_clock, render_controls, render_snapshot


@pytest.mark.parametrize(
    "ms, text",
    [
        (0, "00:00,00"),
        (9, "00:00,00"),
        (250, "00:00,25"),
        (61_234, "01:01,23"),
        (59 * 60_000 + 59_999, "59:59,99"),
        (3_600_000 + 5_000, "00:05,00"),
        (-40, "00:00,00"),
    ],
)
def test_format_clock(ms, text):
    assert format_clock(ms) == text


def test_render_paused_snapshot(engine, clock):
    engine.start()
    for d in (1_000, 2_000, 1_500):
        clock.advance(d)
        engine.lap()
    clock.advance(700)
    engine.stop()

    snap = engine.snapshot()
    lines = render_snapshot(snap).splitlines()
    assert lines[0] == "00:05,20"
    assert lines[1] == "Lap   4  00:00,70"
    assert lines[2] == "Lap   3  00:01,50"
    assert lines[3] == "Lap   2  00:02,00 slowest"
    assert lines[4] == "Lap   1  00:01,00 fastest"

    controls = render_controls(snap)
    assert "[s] resume" in controls and "[r] reset" in controls
    assert "[l] lap" not in controls


def test_render_idle_controls(engine):
    controls = render_controls(engine.snapshot())
    assert controls.startswith("[s] start")
    assert "[x] stop" not in controls
