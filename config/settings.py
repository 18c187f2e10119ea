from __future__ import annotations
from pathlib import Path
from typing import Literal, Optional
import os

from pydantic import BaseModel, ConfigDict, Field

from config.paths import Paths, env_or_default_logs_root

class PathsConfig(BaseModel):
    logs_root: Path = Field(default_factory=env_or_default_logs_root)

    def resolve(self) -> Paths:
        return Paths(Path(self.logs_root))

class StopwatchConfig(BaseModel):
    # env defaults are strings; validate them like explicit values
    model_config = ConfigDict(validate_default=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    tick_interval_ms: int = Field(default_factory=lambda: os.getenv("STOPWATCH_TICK_INTERVAL_MS", "100"), gt=0)
    clock: Literal["wall", "monotonic"] = Field(default_factory=lambda: os.getenv("STOPWATCH_CLOCK", "wall"))
    event_log: bool = Field(default_factory=lambda: os.getenv("STOPWATCH_EVENT_LOG", "1"))
    flush_every: int = Field(default=25, gt=0)


_config_singleton: Optional[StopwatchConfig] = None

def get_config(force_refresh: bool = False) -> StopwatchConfig:
    """
    Return a cached StopwatchConfig built from the environment.
    """
    global _config_singleton
    if force_refresh or _config_singleton is None:
        _config_singleton = StopwatchConfig()
    return _config_singleton
