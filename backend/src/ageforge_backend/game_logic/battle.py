"""Boundary between the economy and the external combat resolver.

Combat itself is resolved elsewhere. The economy only exports what the army
looks like, enters the battle phase when a fight starts and, once the resolver
reports back, books casualties and loot and returns to building.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import (
    CONTROL_SECTORS,
    GameCatalog,  # noqa: TC001
    UnitRole,  # noqa: TC001
)
from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from ageforge_backend.game_logic.state import GameState
from ageforge_backend.shared.enums import GamePhase
from ageforge_backend.shared.value_objects import ResourceVector


class BattleResult(BaseModel):
    """Outcome reported by the combat resolver."""

    model_config = ConfigDict(frozen=True)

    victory: bool
    casualties: dict[str, int] = Field(default_factory=dict)
    control_metric: float = Field(default=0.0, ge=0, le=CONTROL_SECTORS)

    @field_validator("casualties")
    @classmethod
    def _validate_casualties(cls, value: dict[str, int]) -> dict[str, int]:
        """Ensure casualty counts are non-negative."""
        for identifier, lost in value.items():
            if lost < 0:
                msg = f"Casualties for {identifier} cannot be negative."
                raise ValueError(msg)
        return value


class RosterEntry(BaseModel):
    """Units of one kind available for battle."""

    model_config = ConfigDict(frozen=True)

    unit_id: str
    name: str
    role: UnitRole
    count: int = Field(..., ge=1)


class BattleRoster(BaseModel):
    """Snapshot of the army and stockpile handed to the combat resolver."""

    model_config = ConfigDict(frozen=True)

    tier_index: int = Field(..., ge=0)
    phase: GamePhase
    resources: ResourceVector
    units: tuple[RosterEntry, ...] = Field(default_factory=tuple)
    army_size: int = Field(default=0, ge=0)
    army_cap: int = Field(default=0, ge=0)


class BattleOutcome(BaseModel):
    """State after a battle was booked and what changed."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    losses: dict[str, int] = Field(default_factory=dict)
    reward: ResourceVector = Field(default_factory=ResourceVector)


def export_battle_roster(
    state: GameState,
    catalog: GameCatalog,
    configuration: SimulationConfiguration,
) -> BattleRoster:
    """Describe *state*'s army in catalog order."""
    units = tuple(
        RosterEntry(
            unit_id=unit.identifier,
            name=unit.name,
            role=unit.role,
            count=state.unit_count(unit.identifier),
        )
        for unit in catalog.units
        if state.unit_count(unit.identifier) > 0
    )
    return BattleRoster(
        tier_index=state.tier_index,
        phase=state.phase,
        resources=state.ledger.current,
        units=units,
        army_size=state.army_size,
        army_cap=configuration.army_cap(state.tier_index),
    )


def apply_battle_result(
    state: GameState, result: BattleResult, catalog: GameCatalog
) -> BattleOutcome:
    """Remove casualties, grant the tier-scaled loot on victory and end the battle.

    Casualties naming unknown units are ignored and losses never push a count
    below zero.
    """
    unit_counts = dict(state.unit_counts)
    losses: dict[str, int] = {}
    for unit_id, lost in result.casualties.items():
        if catalog.unit(unit_id) is None or lost == 0:
            continue
        held = unit_counts.get(unit_id, 0)
        removed = min(held, lost)
        if removed:
            unit_counts[unit_id] = held - removed
            losses[unit_id] = removed

    reward = ResourceVector()
    ledger = state.ledger
    if result.victory:
        reward = catalog.battle_reward.reward_for(state.tier_index, result.control_metric)
        ledger = ledger.apply_gain(reward)

    if not losses and ledger == state.ledger and not state.in_battle:
        return BattleOutcome(state=state)
    return BattleOutcome(
        state=state.touched(
            ledger=ledger, unit_counts=unit_counts, phase=GamePhase.BUILD
        ),
        losses=losses,
        reward=reward,
    )


__all__ = [
    "BattleOutcome",
    "BattleResult",
    "BattleRoster",
    "RosterEntry",
    "apply_battle_result",
    "export_battle_roster",
]
