"""SQLAlchemy implementation of the game state store."""

from __future__ import annotations

import logging

from ageforge_backend.database.repositories import SaveSlotRepository
from ageforge_backend.database.service import DatabaseService  # noqa: TC001
from ageforge_backend.game_logic.persistence import (
    GameSnapshot,
    decode_snapshot,
    encode_snapshot,
)

logger = logging.getLogger(__name__)


class DatabaseSnapshotStore:
    """Persist save-slot snapshots as JSON rows in the ``save_slots`` table."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def save_snapshot(self, slot_id: str, snapshot: GameSnapshot) -> None:
        """Write *snapshot* as the latest state of *slot_id*."""
        with self._database.session() as session:
            SaveSlotRepository(session).upsert(
                slot_id,
                version=snapshot.version,
                payload=encode_snapshot(snapshot),
                saved_at=snapshot.saved_at_epoch_millis,
            )
        logger.debug("Stored snapshot for slot %s", slot_id)

    def load_snapshot(self, slot_id: str) -> GameSnapshot | None:
        """Return the snapshot stored for *slot_id*, if any.

        Raises :class:`~ageforge_backend.game_logic.persistence.CorruptSnapshotError`
        when the stored payload cannot be decoded.
        """
        with self._database.session() as session:
            slot = SaveSlotRepository(session).get(slot_id)
            payload = slot.payload if slot is not None else None
        if payload is None:
            return None
        return decode_snapshot(payload)

    def delete_snapshot(self, slot_id: str) -> bool:
        """Remove the stored snapshot for *slot_id*."""
        with self._database.session() as session:
            return SaveSlotRepository(session).delete(slot_id)
