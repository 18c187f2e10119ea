# tests/unit/conftest.py
import pytest

from core.timing.stopwatch import StopwatchEngine
from core.timing.tick_driver import ManualTickDriver


class FakeClock:
    """Millisecond clock the test moves by hand."""

    def __init__(self, t: int = 0) -> None:
        self.t = t

    def __call__(self) -> int:
        return self.t

    def set(self, t: int) -> None:
        self.t = t

    def advance(self, ms: int) -> None:
        self.t += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def driver():
    return ManualTickDriver()


@pytest.fixture
def engine(clock, driver):
    eng = StopwatchEngine(clock=clock, driver=driver, session="test")
    yield eng
    eng.close()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """
    Point every STOPWATCH_* setting at predictable values and drop the cached
    config so each test builds its own.
    """
    monkeypatch.setenv("STOPWATCH_LOGS_ROOT", str(tmp_path / "logs"))
    monkeypatch.delenv("STOPWATCH_TICK_INTERVAL_MS", raising=False)
    monkeypatch.delenv("STOPWATCH_CLOCK", raising=False)
    monkeypatch.delenv("STOPWATCH_EVENT_LOG", raising=False)

    import config.settings as settings_mod
    monkeypatch.setattr(settings_mod, "_config_singleton", None)
    yield
