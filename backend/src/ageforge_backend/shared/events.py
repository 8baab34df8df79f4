"""Event logging primitives shared across the backend."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class LoggedEvent(BaseModel):
    """Represents a single immutable log entry produced by the simulation."""

    model_config = ConfigDict(frozen=True)

    step_index: int = Field(..., ge=0)
    simulated_at: float = Field(default=0.0, ge=0)
    event_type: str = Field(..., min_length=1)
    message: str | None = None
    entity_id: str | None = Field(default=None, min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=_utcnow)


class EventJournal:
    """Bounded, newest-first collection of :class:`LoggedEvent` entries."""

    def __init__(self, capacity: int = 50) -> None:
        if capacity < 1:
            msg = "Journal capacity must be positive."
            raise ValueError(msg)
        self._entries: deque[LoggedEvent] = deque(maxlen=capacity)

    def record(self, event: LoggedEvent) -> None:
        """Push *event* to the front of the journal."""
        self._entries.appendleft(event)

    def extend(self, events: Iterable[LoggedEvent]) -> None:
        """Record *events* in chronological order."""
        for event in events:
            self.record(event)

    def entries(self) -> tuple[LoggedEvent, ...]:
        """Return the stored events, newest first."""
        return tuple(self._entries)

    def of_type(self, event_type: str) -> tuple[LoggedEvent, ...]:
        """Return the stored events tagged with *event_type*, newest first."""
        return tuple(event for event in self._entries if event.event_type == event_type)

    def clear(self) -> None:
        """Drop every stored event."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["EventJournal", "LoggedEvent"]
