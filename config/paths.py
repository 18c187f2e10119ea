# config/paths.py
"""
Cross-platform locations for the lapwatch journal.

- Honors STOPWATCH_LOGS_ROOT
- Sensible OS defaults when the env var is not provided
- Safe directory creation with writeability checks
"""

from __future__ import annotations

import errno
import os
import sys
from dataclasses import dataclass
from pathlib import Path


# ---------- OS defaults (used only if env vars not set) ----------

def _platform_default_base() -> Path:
    """
    Returns an OS-specific base directory for user data:
    - Windows: %LOCALAPPDATA%/Lapwatch
    - macOS:   ~/Library/Application Support/Lapwatch
    - Linux:   ~/.local/share/lapwatch
    """
    if sys.platform.startswith("win"):
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home() / "AppData" / "Local")
        return Path(base) / "Lapwatch"
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Lapwatch"
    else:
        return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share")) / "lapwatch"


def env_or_default_logs_root() -> Path:
    return Path(os.getenv("STOPWATCH_LOGS_ROOT", _platform_default_base() / "logs"))


@dataclass(frozen=True)
class Paths:
    logs_root: Path

    @staticmethod
    def from_env() -> "Paths":
        return Paths(env_or_default_logs_root())

    @property
    def sessions_root(self) -> Path:
        return self.logs_root / "sessions"

    def session_dir(self, name: str) -> Path:
        return self.sessions_root / name

    def session_log_path(self, name: str) -> Path:
        """Journal file for one stopwatch session: <logs>/sessions/<name>/events.jsonl"""
        return self.session_dir(name) / "events.jsonl"

    def ensure_all(self) -> None:
        for p in [self.logs_root, self.sessions_root]:
            p.mkdir(parents=True, exist_ok=True)

    def verify_writeable(self) -> None:
        """
        Raise OSError if the logs root is not writeable.
        """
        p = self.logs_root
        try:
            p.mkdir(parents=True, exist_ok=True)
            test = p / ".write_test"
            test.write_text("ok", encoding="utf-8")
            test.unlink(missing_ok=True)
        except Exception as e:
            raise OSError(errno.EACCES, f"Not writeable: {p}", e)
