"""HTTP layer driving save-slot runtimes."""

from ageforge_backend.api.app import create_api

__all__ = ["create_api"]
