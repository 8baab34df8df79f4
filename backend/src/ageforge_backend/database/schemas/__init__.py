"""SQLAlchemy schemas."""

from ageforge_backend.database.schemas.save_slot import SaveSlotSchema

__all__ = ["SaveSlotSchema"]
