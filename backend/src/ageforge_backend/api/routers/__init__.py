"""Route definitions for public HTTP endpoints."""

from ageforge_backend.api.routers.game import router as game_router

__all__ = ["game_router"]
