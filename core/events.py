"""Journal event models emitted by the stopwatch engine."""

from __future__ import annotations

from typing import Any, Dict, Literal

import ulid
from pydantic import BaseModel, Field

from core.clock import now_ts_ms


EventKind = Literal["meta", "start", "lap", "stop", "resume", "reset", "ignored"]


def new_event_id() -> str:
    """Generate a ULID based identifier for events."""

    return str(ulid.new())


class Event(BaseModel):
    """Canonical journal record for a stopwatch transition."""

    id: str = Field(default_factory=new_event_id)
    ts_ms: int = Field(default_factory=now_ts_ms)
    kind: EventKind
    session: str
    data: Dict[str, Any] = Field(default_factory=dict)


def event_dump(event: Event) -> Dict[str, Any]:
    """Return a serialisable representation of ``event``.

    Call sites hand the result straight to :class:`JsonlWriter`, so this keeps
    the pydantic API choice in one place.
    """

    if hasattr(event, "model_dump"):
        return event.model_dump()  # type: ignore[return-value]
    return event.dict()  # type: ignore[return-value]


__all__ = ["Event", "EventKind", "event_dump", "new_event_id"]
