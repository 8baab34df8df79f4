"""Fold owned upgrades into production multipliers."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.shared.enums import ModifierCategory
from ageforge_backend.shared.value_objects import ResourceKind


class ModifierAccumulator(BaseModel):
    """Multipliers per category; anything not listed reads as one."""

    model_config = ConfigDict(frozen=True)

    global_output: float = Field(default=1.0, ge=0)
    resource_output: dict[ResourceKind, float] = Field(default_factory=dict)
    producer_output: dict[str, float] = Field(default_factory=dict)
    producer_input: dict[str, float] = Field(default_factory=dict)
    manual_gain: dict[ResourceKind, float] = Field(default_factory=dict)

    def for_resource(self, resource: ResourceKind) -> float:
        return self.resource_output.get(resource, 1.0)

    def for_producer(self, identifier: str) -> float:
        return self.producer_output.get(identifier, 1.0)

    def input_factor(self, identifier: str) -> float:
        return self.producer_input.get(identifier, 1.0)

    def for_manual(self, resource: ResourceKind) -> float:
        return self.manual_gain.get(resource, 1.0)


def accumulate_modifiers(
    catalog: GameCatalog,
    upgrade_ranks: Mapping[str, int],
    *,
    tier_index: int = 0,
    tier_output_bonus: float = 0.0,
) -> ModifierAccumulator:
    """Multiply the effects of every owned upgrade rank, in catalog order.

    The tier output bonus seeds the global multiplier as
    ``1 + tier_index * tier_output_bonus``.
    """
    global_output = 1.0 + tier_index * tier_output_bonus
    buckets: dict[ModifierCategory, dict] = {
        ModifierCategory.RESOURCE_OUTPUT: {},
        ModifierCategory.PRODUCER_OUTPUT: {},
        ModifierCategory.PRODUCER_INPUT: {},
        ModifierCategory.MANUAL_GAIN: {},
    }
    for upgrade in catalog.upgrades:
        rank = upgrade_ranks.get(upgrade.identifier, 0)
        if rank <= 0:
            continue
        for effect in upgrade.effects:
            factor = effect.factor**rank
            if effect.category is ModifierCategory.GLOBAL_OUTPUT:
                global_output *= factor
                continue
            key = effect.target
            if effect.category in {
                ModifierCategory.RESOURCE_OUTPUT,
                ModifierCategory.MANUAL_GAIN,
            }:
                key = ResourceKind(effect.target)
            bucket = buckets[effect.category]
            bucket[key] = bucket.get(key, 1.0) * factor
    return ModifierAccumulator(
        global_output=global_output,
        resource_output=buckets[ModifierCategory.RESOURCE_OUTPUT],
        producer_output=buckets[ModifierCategory.PRODUCER_OUTPUT],
        producer_input=buckets[ModifierCategory.PRODUCER_INPUT],
        manual_gain=buckets[ModifierCategory.MANUAL_GAIN],
    )


__all__ = ["ModifierAccumulator", "accumulate_modifiers"]
