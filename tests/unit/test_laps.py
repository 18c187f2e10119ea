# tests/unit/test_laps.py
from core.timing.laps import extremes, lap_table, total_elapsed_ms


def test_total_elapsed_adds_live_segment():
    assert total_elapsed_ms([]) == 0
    assert total_elapsed_ms([400, 300]) == 700
    assert total_elapsed_ms([0, 300], live_ms=200) == 500


def test_extremes_ignore_current_lap():
    assert extremes([5_000, 3_000, 3_000, 9_000]) == (3_000, 9_000)
    # index 0 is smaller than every completed lap but is not considered
    assert extremes([1, 3_000, 9_000]) == (3_000, 9_000)


def test_extremes_need_two_completed_laps():
    assert extremes([]) is None
    assert extremes([100]) is None
    assert extremes([100, 200]) is None
    assert extremes([100, 200, 300]) == (200, 300)


def test_lap_table_numbers_and_live_duration():
    rows = lap_table([0, 300, 250], live_ms=120)
    assert [r.lap_number for r in rows] == [3, 2, 1]
    assert [r.duration_ms for r in rows] == [120, 300, 250]
    assert rows[1].is_slowest and not rows[1].is_fastest
    assert rows[2].is_fastest and not rows[2].is_slowest


def test_current_lap_is_never_marked_even_when_equal():
    rows = lap_table([3_000, 3_000, 9_000])
    assert not rows[0].is_fastest and not rows[0].is_slowest
    assert rows[1].is_fastest
    assert rows[2].is_slowest


def test_empty_table():
    assert lap_table([]) == []
