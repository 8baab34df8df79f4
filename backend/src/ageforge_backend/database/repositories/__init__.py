"""Repositories wrapping SQLAlchemy sessions."""

from ageforge_backend.database.repositories.save_slot import SaveSlotRepository

__all__ = ["SaveSlotRepository"]
