from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, IO, List
from threading import Lock


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


class JsonlWriter:
    """
    Append-only JSONL journal with periodic flush.
    Thread-safe within a process; the engine and its tick thread may share one.
    """
    def __init__(self, out_path: Path, flush_every: int = 50):
        ensure_dir(out_path.parent)
        self.path = out_path
        self._f: IO[str] = out_path.open("a", encoding="utf-8")
        self._n = 0
        self._flush_every = max(1, flush_every)
        self._lock = Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, obj: Dict[str, Any]) -> None:
        line = json.dumps(obj, ensure_ascii=False)
        with self._lock:
            if self._closed:
                raise ValueError(f"write to closed journal {self.path}")
            self._f.write(line + "\n")
            self._n += 1
            if self._n % self._flush_every == 0:
                self._f.flush()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._f.flush()
            finally:
                self._f.close()


def read_jsonl(path: Path) -> List[Dict[str, Any]]:
    """Load every record of a journal; used by tooling and tests, never by the engine."""
    lines = path.read_text(encoding="utf-8").splitlines()
    return [json.loads(x) for x in lines if x.strip()]
