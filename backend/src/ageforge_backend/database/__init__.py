"""Database connectivity helpers and the save-slot storage adapter."""

from ageforge_backend.database.base import BaseSchema
from ageforge_backend.database.dependencies import get_database
from ageforge_backend.database.repositories import SaveSlotRepository
from ageforge_backend.database.schemas import SaveSlotSchema
from ageforge_backend.database.service import DatabaseService
from ageforge_backend.database.store import DatabaseSnapshotStore
from ageforge_backend.settings import BackendSettings, get_settings

__all__ = [
    "BackendSettings",
    "BaseSchema",
    "DatabaseService",
    "DatabaseSnapshotStore",
    "SaveSlotRepository",
    "SaveSlotSchema",
    "get_database",
    "get_settings",
]
