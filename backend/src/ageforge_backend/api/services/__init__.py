"""Service layer for API-specific business logic."""

from ageforge_backend.api.services.game_session import (
    GameSessionService,
    SlotNotStartedError,
)

__all__ = ["GameSessionService", "SlotNotStartedError"]
