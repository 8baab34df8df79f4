"""Repository helpers for working with save slots."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ageforge_backend.database.schemas import SaveSlotSchema


class SaveSlotRepository:
    """Encapsulates persistence operations for :class:`SaveSlotSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, slot_id: str) -> SaveSlotSchema | None:
        """Return the save slot row for *slot_id*."""
        return self._session.get(SaveSlotSchema, slot_id)

    def list_slot_ids(self) -> list[str]:
        """Return every stored slot identifier in alphabetical order."""
        stmt = select(SaveSlotSchema.slot_id).order_by(SaveSlotSchema.slot_id)
        return list(self._session.scalars(stmt))

    def upsert(
        self, slot_id: str, *, version: int, payload: str, saved_at: int
    ) -> SaveSlotSchema:
        """Create or overwrite the row for *slot_id*."""
        slot = self.get(slot_id)
        if slot is None:
            slot = SaveSlotSchema(
                slot_id=slot_id, version=version, payload=payload, saved_at=saved_at
            )
            self._session.add(slot)
        else:
            slot.version = version
            slot.payload = payload
            slot.saved_at = saved_at
        self._session.flush()
        return slot

    def delete(self, slot_id: str) -> bool:
        """Remove *slot_id*, returning whether a row existed."""
        slot = self.get(slot_id)
        if slot is None:
            return False
        self._session.delete(slot)
        self._session.flush()
        return True
