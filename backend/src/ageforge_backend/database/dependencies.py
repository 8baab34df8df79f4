"""FastAPI dependencies for database access."""

from functools import cache
from typing import Annotated

from fastapi import Depends

from ageforge_backend.database.service import DatabaseService
from ageforge_backend.settings import BackendSettings, get_settings

SettingsDep = Annotated[BackendSettings, Depends(get_settings)]


@cache
def _build_database_service(database_url: str) -> DatabaseService:
    """Create a cached :class:`DatabaseService` for the given connection string."""
    service = DatabaseService(database_url)
    service.create_schema()
    return service


def get_database(settings: SettingsDep) -> DatabaseService:
    """Return the cached database service instance."""
    return _build_database_service(settings.database_url)

