"""Models used for API request and response payloads."""

from ageforge_backend.api.models.game import (
    ActionRequest,
    ActionResponse,
    EventsResponse,
    FrameRequest,
    FrameResponse,
    GameStartResponse,
    OfflineSummary,
    SaveResponse,
)

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
