"""Pydantic models for the save-slot HTTP contract."""

# ruff: noqa: TC001

from __future__ import annotations

import math

from pydantic import BaseModel, Field, RootModel, field_validator

from ageforge_backend.game_logic.actions import GameAction
from ageforge_backend.game_logic.persistence import GameSnapshot
from ageforge_backend.game_logic.view import FrameView
from ageforge_backend.shared import LoggedEvent, RejectionReason, ResourceKind


class OfflineSummary(BaseModel):
    """Offline catch-up credited when a slot was started."""

    applied: bool
    elapsed_seconds: float
    net_change: dict[ResourceKind, float] = Field(default_factory=dict)


class GameStartResponse(BaseModel):
    slot_id: str
    offline: OfflineSummary
    frame: FrameView


class FrameRequest(BaseModel):
    """Wall-clock seconds elapsed since the previous frame."""

    frame_delta: float

    @field_validator("frame_delta")
    @classmethod
    def validate_frame_delta(cls, value: float) -> float:
        if not math.isfinite(value):
            msg = "frame_delta must be finite"
            raise ValueError(msg)
        return value


class FrameResponse(BaseModel):
    steps_run: int
    frame: FrameView


class ActionRequest(RootModel[GameAction]):
    """Any player command, discriminated by its ``kind`` field."""


class ActionResponse(BaseModel):
    """Outcome of a command together with the refreshed frame."""

    accepted: bool
    reason: RejectionReason | None = None
    spent: dict[ResourceKind, float] = Field(default_factory=dict)
    gained: dict[ResourceKind, float] = Field(default_factory=dict)
    frame: FrameView


class SaveResponse(BaseModel):
    snapshot: GameSnapshot


class EventsResponse(BaseModel):
    events: list[LoggedEvent]


__all__ = [
    "ActionRequest",
    "ActionResponse",
    "EventsResponse",
    "FrameRequest",
    "FrameResponse",
    "GameStartResponse",
    "OfflineSummary",
    "SaveResponse",
]
