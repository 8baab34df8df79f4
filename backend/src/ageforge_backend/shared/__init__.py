"""Shared utilities, shared models and cross-cutting helpers for the backend."""

from ageforge_backend.shared.enums import (
    EntityKind,
    GamePhase,
    ModifierCategory,
    RejectionReason,
)
from ageforge_backend.shared.events import EventJournal, LoggedEvent
from ageforge_backend.shared.value_objects import (
    RESOURCE_ORDER,
    ResourceKind,
    ResourceVector,
)

__all__ = [
    "RESOURCE_ORDER",
    "EntityKind",
    "EventJournal",
    "GamePhase",
    "LoggedEvent",
    "ModifierCategory",
    "RejectionReason",
    "ResourceKind",
    "ResourceVector",
]
