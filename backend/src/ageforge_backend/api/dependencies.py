"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import cache
from typing import Annotated

from fastapi import Depends, HTTPException, Path, status

from ageforge_backend.api.services import GameSessionService
from ageforge_backend.database import DatabaseService, DatabaseSnapshotStore, get_database

SLOT_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


@cache
def _build_game_session_service(database: DatabaseService) -> GameSessionService:
    """Create one service per database so runtimes survive across requests."""
    return GameSessionService(DatabaseSnapshotStore(database))


def get_game_session_service(
    database: Annotated[DatabaseService, Depends(get_database)],
) -> GameSessionService:
    """Return the shared :class:`GameSessionService` instance."""
    return _build_game_session_service(database)


def get_slot_id(
    slot_id: Annotated[str, Path(pattern=SLOT_ID_PATTERN)],
) -> str:
    """Validate the save slot identifier taken from the path."""
    return slot_id


def slot_not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


GameServiceDep = Annotated[GameSessionService, Depends(get_game_session_service)]
SlotIdDep = Annotated[str, Depends(get_slot_id)]

__all__ = [
    "GameServiceDep",
    "SlotIdDep",
    "get_game_session_service",
    "get_slot_id",
    "slot_not_found",
]
