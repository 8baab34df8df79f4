"""Game state containers used by the simulation core."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.shared.enums import GamePhase


class SimulationClock(BaseModel):
    """Fixed-step bookkeeping: pending time, simulated total and step count."""

    model_config = ConfigDict(frozen=True)

    accumulator: float = Field(default=0.0, ge=0)
    elapsed_total: float = Field(default=0.0, ge=0)
    step_index: int = Field(default=0, ge=0)
    dirty: bool = False

    def with_pending(self, accumulator: float) -> SimulationClock:
        """Return a clock with *accumulator* seconds waiting to be simulated."""
        return self.model_copy(update={"accumulator": max(accumulator, 0.0)})

    def after_step(self, step_seconds: float) -> SimulationClock:
        """Return the clock after one step of *step_seconds* has run."""
        return self.model_copy(
            update={
                "elapsed_total": self.elapsed_total + step_seconds,
                "step_index": self.step_index + 1,
            }
        )

    def mark_clean(self) -> SimulationClock:
        return self.model_copy(update={"dirty": False})


class ProgressionState(BaseModel):
    """Index of the highest tier reached so far."""

    model_config = ConfigDict(frozen=True)

    tier_index: int = Field(default=0, ge=0)

    def advanced_to(self, tier_index: int) -> ProgressionState:
        """Return a progression at *tier_index*, which may not move backwards."""
        if tier_index < self.tier_index:
            msg = "Tier progression cannot move backwards."
            raise ValueError(msg)
        return ProgressionState(tier_index=tier_index)


class GameState(BaseModel):
    """Aggregate container capturing everything a save slot persists."""

    model_config = ConfigDict(frozen=True)

    ledger: ResourceLedger = Field(default_factory=ResourceLedger.empty)
    producer_counts: dict[str, int] = Field(default_factory=dict)
    unit_counts: dict[str, int] = Field(default_factory=dict)
    upgrade_ranks: dict[str, int] = Field(default_factory=dict)
    progression: ProgressionState = Field(default_factory=ProgressionState)
    phase: GamePhase = GamePhase.BUILD
    clock: SimulationClock = Field(default_factory=SimulationClock)
    revision: int = Field(default=0, ge=0)

    @field_validator("producer_counts", "unit_counts", "upgrade_ranks")
    @classmethod
    def _validate_counts(cls, value: dict[str, int]) -> dict[str, int]:
        """Ensure holdings are non-negative."""
        for identifier, count in value.items():
            if count < 0:
                msg = f"Holding for {identifier} cannot be negative."
                raise ValueError(msg)
        return value

    @property
    def tier_index(self) -> int:
        return self.progression.tier_index

    @property
    def in_battle(self) -> bool:
        return self.phase == GamePhase.BATTLE

    @property
    def dirty(self) -> bool:
        return self.clock.dirty

    @property
    def army_size(self) -> int:
        """Return the total number of units currently held."""
        return sum(self.unit_counts.values())

    def producer_count(self, identifier: str) -> int:
        return self.producer_counts.get(identifier, 0)

    def unit_count(self, identifier: str) -> int:
        return self.unit_counts.get(identifier, 0)

    def upgrade_rank(self, identifier: str) -> int:
        return self.upgrade_ranks.get(identifier, 0)

    def touched(self, **changes: Any) -> GameState:
        """Return a state with *changes* applied, marked dirty, at the next revision."""
        clock = changes.pop("clock", self.clock)
        return self.model_copy(
            update={
                **changes,
                "clock": clock.model_copy(update={"dirty": True}),
                "revision": self.revision + 1,
            }
        )

    def with_clock(self, clock: SimulationClock) -> GameState:
        """Return a state with *clock* swapped in, without a revision bump."""
        return self.model_copy(update={"clock": clock})

    def marked_clean(self) -> GameState:
        """Return a state whose pending changes have been persisted."""
        return self.with_clock(self.clock.mark_clean())


def increment(counts: dict[str, int], identifier: str, delta: int) -> dict[str, int]:
    """Return a copy of *counts* with *delta* applied to *identifier*, floored at zero."""
    updated = dict(counts)
    updated[identifier] = max(updated.get(identifier, 0) + delta, 0)
    return updated


def new_game_state(catalog: GameCatalog) -> GameState:
    """Return a fresh game with the catalog's starting resources granted."""
    ledger = ResourceLedger.empty().apply_gain(catalog.initial_resources)
    return GameState(
        ledger=ledger,
        producer_counts={structure.identifier: 0 for structure in catalog.structures},
        unit_counts={unit.identifier: 0 for unit in catalog.units},
        upgrade_ranks={upgrade.identifier: 0 for upgrade in catalog.upgrades},
    )


__all__ = [
    "GameState",
    "ProgressionState",
    "SimulationClock",
    "increment",
    "new_game_state",
]
