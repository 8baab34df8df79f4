"""Persistence abstractions for save-slot snapshots.

The game logic layer only depends on the :class:`GameStateStore` protocol; the
database layer ships the SQLAlchemy adapter and tests use the in-memory one.
Snapshots travel as JSON produced by pydantic, which round-trips floats
exactly.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog  # noqa: TC001
from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.game_logic.state import (
    GameState,
    ProgressionState,
    SimulationClock,
    new_game_state,
)
from ageforge_backend.shared.enums import GamePhase
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector

logger = logging.getLogger(__name__)


class CorruptSnapshotError(ValueError):
    """Raised when a stored snapshot cannot be turned back into a game state."""


class GameSnapshot(BaseModel):
    """Immutable, serializable image of a save slot."""

    model_config = ConfigDict(frozen=True)

    version: int = Field(..., ge=1)
    current: dict[ResourceKind, float] = Field(default_factory=dict)
    lifetime: dict[ResourceKind, float] = Field(default_factory=dict)
    producer_counts: dict[str, int] = Field(default_factory=dict)
    unit_counts: dict[str, int] = Field(default_factory=dict)
    upgrade_ranks: dict[str, int] = Field(default_factory=dict)
    tier_index: int = Field(default=0, ge=0)
    phase: GamePhase = GamePhase.BUILD
    scheduler_elapsed_total: float = Field(default=0.0, ge=0)
    saved_at_epoch_millis: int = Field(..., ge=0)


class RestoredGame(BaseModel):
    """State produced by loading a slot and where the save timestamp came from."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    saved_at_epoch_millis: int | None = None
    fell_back: bool = False


class GameStateStore(Protocol):
    """Protocol describing how save-slot snapshots are persisted."""

    def save_snapshot(self, slot_id: str, snapshot: GameSnapshot) -> None:
        """Persist *snapshot* for *slot_id*, replacing any previous value."""

    def load_snapshot(self, slot_id: str) -> GameSnapshot | None:
        """Return the stored snapshot for *slot_id* or ``None``.

        Implementations raise :class:`CorruptSnapshotError` when stored data
        cannot be decoded.
        """


class InMemoryGameStateStore:
    """Trivial in-memory implementation of :class:`GameStateStore`."""

    def __init__(self) -> None:
        self._snapshots: dict[str, GameSnapshot] = {}

    def save_snapshot(self, slot_id: str, snapshot: GameSnapshot) -> None:
        """Store *snapshot* keyed by *slot_id*."""
        self._snapshots[slot_id] = snapshot

    def load_snapshot(self, slot_id: str) -> GameSnapshot | None:
        """Return the stored snapshot for *slot_id* if available."""
        return self._snapshots.get(slot_id)


def encode_snapshot(snapshot: GameSnapshot) -> str:
    """Serialize *snapshot* to JSON text."""
    return snapshot.model_dump_json()


def decode_snapshot(payload: str | bytes) -> GameSnapshot:
    """Parse JSON *payload* into a snapshot, raising :class:`CorruptSnapshotError`."""
    try:
        return GameSnapshot.model_validate_json(payload)
    except ValidationError as exc:
        msg = "Stored snapshot payload is malformed."
        raise CorruptSnapshotError(msg) from exc


def serialize_snapshot(
    state: GameState,
    configuration: SimulationConfiguration,
    saved_at_epoch_millis: int,
) -> GameSnapshot:
    """Capture *state* as a snapshot stamped with *saved_at_epoch_millis*."""
    return GameSnapshot(
        version=configuration.snapshot_version,
        current=state.ledger.current.as_dict(),
        lifetime=state.ledger.lifetime.as_dict(),
        producer_counts=dict(state.producer_counts),
        unit_counts=dict(state.unit_counts),
        upgrade_ranks=dict(state.upgrade_ranks),
        tier_index=state.tier_index,
        phase=state.phase,
        scheduler_elapsed_total=state.clock.elapsed_total,
        saved_at_epoch_millis=saved_at_epoch_millis,
    )


def _merge_counts(defaults: dict[str, int], stored: dict[str, int]) -> dict[str, int]:
    # Identifiers no longer in the catalog are dropped.
    return {identifier: stored.get(identifier, 0) for identifier in defaults}


def restore_snapshot(
    snapshot: GameSnapshot,
    catalog: GameCatalog,
    configuration: SimulationConfiguration,
) -> GameState:
    """Rebuild a game state from *snapshot*.

    Raises :class:`CorruptSnapshotError` when the snapshot was written by a
    different format version or describes a state this catalog cannot hold.
    """
    if snapshot.version != configuration.snapshot_version:
        msg = (
            f"Snapshot version {snapshot.version} does not match "
            f"expected version {configuration.snapshot_version}."
        )
        raise CorruptSnapshotError(msg)
    if snapshot.tier_index > catalog.final_tier_index:
        msg = f"Snapshot tier {snapshot.tier_index} is beyond the final tier."
        raise CorruptSnapshotError(msg)

    defaults = new_game_state(catalog)
    try:
        ledger = ResourceLedger(
            current=ResourceVector.zero().plus(ResourceVector(amounts=snapshot.current)),
            lifetime=ResourceVector.zero().plus(ResourceVector(amounts=snapshot.lifetime)),
        )
        return GameState(
            ledger=ledger,
            producer_counts=_merge_counts(
                defaults.producer_counts, snapshot.producer_counts
            ),
            unit_counts=_merge_counts(defaults.unit_counts, snapshot.unit_counts),
            upgrade_ranks=_merge_counts(defaults.upgrade_ranks, snapshot.upgrade_ranks),
            progression=ProgressionState(tier_index=snapshot.tier_index),
            phase=snapshot.phase,
            clock=SimulationClock(
                elapsed_total=snapshot.scheduler_elapsed_total,
                step_index=round(
                    snapshot.scheduler_elapsed_total / configuration.fixed_step_seconds
                ),
            ),
        )
    except ValidationError as exc:
        msg = "Snapshot describes an invalid game state."
        raise CorruptSnapshotError(msg) from exc


def load_game_state(
    store: GameStateStore,
    slot_id: str,
    catalog: GameCatalog,
    configuration: SimulationConfiguration,
) -> RestoredGame:
    """Load *slot_id*, falling back to a new game when nothing usable is stored."""
    try:
        snapshot = store.load_snapshot(slot_id)
        if snapshot is None:
            return RestoredGame(state=new_game_state(catalog))
        state = restore_snapshot(snapshot, catalog, configuration)
    except CorruptSnapshotError as exc:
        logger.warning("Discarding snapshot for slot %s: %s", slot_id, exc)
        return RestoredGame(state=new_game_state(catalog), fell_back=True)
    return RestoredGame(
        state=state, saved_at_epoch_millis=snapshot.saved_at_epoch_millis
    )


__all__ = [
    "CorruptSnapshotError",
    "GameSnapshot",
    "GameStateStore",
    "InMemoryGameStateStore",
    "RestoredGame",
    "decode_snapshot",
    "encode_snapshot",
    "load_game_state",
    "restore_snapshot",
    "serialize_snapshot",
]
