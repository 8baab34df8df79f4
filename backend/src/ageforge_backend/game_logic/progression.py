"""Forward-only tier progression gated by lifetime totals."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog, TierDefinition
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.shared.value_objects import ResourceVector


class TierTransition(BaseModel):
    """Record of one tier being unlocked."""

    model_config = ConfigDict(frozen=True)

    from_index: int = Field(..., ge=0)
    to_index: int = Field(..., ge=1)
    tier_name: str
    reward: ResourceVector


class ProgressionOutcome(BaseModel):
    """Tier index and ledger after the gate has been evaluated."""

    model_config = ConfigDict(frozen=True)

    tier_index: int = Field(..., ge=0)
    ledger: ResourceLedger
    transitions: tuple[TierTransition, ...] = Field(default_factory=tuple)


def requirements_met(tier: TierDefinition, ledger: ResourceLedger) -> bool:
    """Return whether the lifetime totals satisfy *tier*'s requirements."""
    return all(
        ledger.total(resource) >= amount for resource, amount in tier.requirements.items()
    )


def tier_progress(tier: TierDefinition, ledger: ResourceLedger) -> float:
    """Return the mean fraction of *tier*'s requirements already reached."""
    fractions = [
        min(1.0, ledger.total(resource) / amount) if amount > 0 else 1.0
        for resource, amount in tier.requirements.items()
    ]
    if not fractions:
        return 1.0
    return sum(fractions) / len(fractions)


def advance_tiers(
    tier_index: int, ledger: ResourceLedger, catalog: GameCatalog
) -> ProgressionOutcome:
    """Unlock every tier whose requirements are met, granting rewards in order.

    A reward may itself satisfy the next tier, so requirements are re-checked
    after each unlock.
    """
    transitions: list[TierTransition] = []
    while tier_index < catalog.final_tier_index:
        upcoming = catalog.tiers[tier_index + 1]
        if not requirements_met(upcoming, ledger):
            break
        tier_index += 1
        ledger = ledger.apply_gain(upcoming.reward)
        transitions.append(
            TierTransition(
                from_index=tier_index - 1,
                to_index=tier_index,
                tier_name=upcoming.name,
                reward=upcoming.reward,
            )
        )
    return ProgressionOutcome(
        tier_index=tier_index, ledger=ledger, transitions=tuple(transitions)
    )


__all__ = [
    "ProgressionOutcome",
    "TierTransition",
    "advance_tiers",
    "requirements_met",
    "tier_progress",
]
