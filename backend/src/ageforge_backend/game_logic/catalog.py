"""Immutable entity definitions describing the content of a game."""

from __future__ import annotations

import math
from enum import StrEnum
from functools import cache

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from ageforge_backend.shared.enums import EntityKind, ModifierCategory
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


def _ensure_non_negative(vector: ResourceVector, label: str, owner: str) -> None:
    for resource, amount in vector.items():
        if amount < 0:
            msg = f"{owner}: {label} for {resource} must be non-negative."
            raise ValueError(msg)


class PurchasableDefinition(BaseModel):
    """Common shape of every entity bought along a geometric cost curve."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    unlock_tier: int = Field(default=0, ge=0)
    base_cost: ResourceVector
    cost_growth: float = Field(..., gt=1)
    description: str = ""

    @model_validator(mode="after")
    def _validate_cost_curve(self) -> PurchasableDefinition:
        """Ensure every priced component grows by at least one unit per purchase."""
        _ensure_non_negative(self.base_cost, "base cost", self.identifier)
        for resource, amount in self.base_cost.items():
            if amount > 0 and amount * (self.cost_growth - 1) < 1:
                msg = (
                    f"{self.identifier}: base cost {amount} for {resource} is too small "
                    f"for growth {self.cost_growth} to raise the price every purchase."
                )
                raise ValueError(msg)
        return self


class ProducerDefinition(PurchasableDefinition):
    """Structure that converts optional inputs into outputs every second."""

    outputs: ResourceVector
    inputs: ResourceVector = Field(default_factory=ResourceVector)

    @model_validator(mode="after")
    def _validate_rates(self) -> ProducerDefinition:
        """Ensure rates are non-negative."""
        _ensure_non_negative(self.outputs, "output rate", self.identifier)
        _ensure_non_negative(self.inputs, "input rate", self.identifier)
        return self


class UpgradeEffect(BaseModel):
    """Single multiplicative effect contributed by each owned upgrade rank."""

    model_config = ConfigDict(frozen=True)

    category: ModifierCategory
    target: str | None = None
    factor: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _validate_target(self) -> UpgradeEffect:
        """Ensure the target matches what the category multiplies."""
        if self.category is ModifierCategory.GLOBAL_OUTPUT:
            if self.target is not None:
                msg = "Global output effects cannot declare a target."
                raise ValueError(msg)
            return self
        if self.target is None:
            msg = f"{self.category} effects require a target."
            raise ValueError(msg)
        if self.category in {
            ModifierCategory.RESOURCE_OUTPUT,
            ModifierCategory.MANUAL_GAIN,
        }:
            ResourceKind(self.target)
        return self


class UpgradeDefinition(PurchasableDefinition):
    """Ranked purchase that feeds multipliers into the production side."""

    max_rank: int = Field(default=1, ge=1)
    effects: tuple[UpgradeEffect, ...] = Field(default_factory=tuple)


class UnitRole(StrEnum):
    """Battlefield roles reported to the combat collaborator."""

    FRONTLINE = "frontline"
    RANGED = "ranged"
    SUPPORT = "support"
    SIEGE = "siege"


class UnitDefinition(PurchasableDefinition):
    """Army unit trained with resources and lost through battle casualties."""

    role: UnitRole


class ManualActionDefinition(BaseModel):
    """Player-triggered action granting resources, optionally for a price."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    unlock_tier: int = Field(default=0, ge=0)
    retire_tier: int | None = Field(default=None, ge=0)
    gain: ResourceVector
    cost: ResourceVector = Field(default_factory=ResourceVector)

    @model_validator(mode="after")
    def _validate_window(self) -> ManualActionDefinition:
        """Ensure the action is available for at least one tier."""
        if self.retire_tier is not None and self.retire_tier < self.unlock_tier:
            msg = f"{self.identifier}: retire tier precedes unlock tier."
            raise ValueError(msg)
        _ensure_non_negative(self.gain, "gain", self.identifier)
        _ensure_non_negative(self.cost, "cost", self.identifier)
        return self

    def available_at(self, tier_index: int) -> bool:
        """Return whether the action can be performed at *tier_index*."""
        if tier_index < self.unlock_tier:
            return False
        return self.retire_tier is None or tier_index <= self.retire_tier


class TierDefinition(BaseModel):
    """Progression stage gated by lifetime thresholds."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    requirements: ResourceVector = Field(default_factory=ResourceVector)
    reward: ResourceVector = Field(default_factory=ResourceVector)


# Battlefield sectors a victory can hold; the control metric counts them.
CONTROL_SECTORS = 3


class BattleRewardPolicy(BaseModel):
    """Tier-scaled loot granted after a victorious battle."""

    model_config = ConfigDict(frozen=True)

    base: float = Field(default=120.0, ge=0)
    per_tier: float = Field(default=65.0, ge=0)
    per_control: float = Field(default=80.0, ge=0)
    max_control: float = Field(default=CONTROL_SECTORS, ge=0)
    shares: dict[ResourceKind, float] = Field(
        default_factory=lambda: {
            ResourceKind.FOOD: 1.0,
            ResourceKind.MATERIALS: 0.9,
            ResourceKind.KNOWLEDGE: 0.55,
            ResourceKind.POWER: 0.35,
            ResourceKind.DATA: 0.2,
        }
    )
    share_min_tier: dict[ResourceKind, int] = Field(
        default_factory=lambda: {ResourceKind.POWER: 4, ResourceKind.DATA: 5}
    )

    def reward_for(self, tier_index: int, control_metric: float) -> ResourceVector:
        """Return the loot vector for a victory at *tier_index*.

        *control_metric* is clamped to ``[0, max_control]``; NaN counts as zero.
        """
        control = 0.0 if math.isnan(control_metric) else control_metric
        control = min(max(control, 0.0), self.max_control)
        amount = self.base + self.per_tier * tier_index + self.per_control * control
        return ResourceVector.of(
            {
                resource: amount * share
                for resource, share in self.shares.items()
                if tier_index >= self.share_min_tier.get(resource, 0)
            }
        )


class GameCatalog(BaseModel):
    """Complete, immutable description of the entities available in a game."""

    model_config = ConfigDict(frozen=True)

    initial_resources: ResourceVector = Field(default_factory=ResourceVector)
    tiers: tuple[TierDefinition, ...] = Field(..., min_length=1)
    structures: tuple[ProducerDefinition, ...] = Field(default_factory=tuple)
    upgrades: tuple[UpgradeDefinition, ...] = Field(default_factory=tuple)
    units: tuple[UnitDefinition, ...] = Field(default_factory=tuple)
    manual_actions: tuple[ManualActionDefinition, ...] = Field(default_factory=tuple)
    resource_unlock_tiers: dict[ResourceKind, int] = Field(default_factory=dict)
    victory_target: ResourceVector = Field(default_factory=ResourceVector)
    battle_reward: BattleRewardPolicy = Field(default_factory=BattleRewardPolicy)

    @model_validator(mode="after")
    def _validate_identifiers(self) -> GameCatalog:
        """Ensure identifiers are unique and modifier targets resolve."""
        purchasable = [
            entity.identifier
            for entity in (*self.structures, *self.upgrades, *self.units)
        ]
        if len(purchasable) != len(set(purchasable)):
            msg = "Purchasable identifiers must be unique across the catalog."
            raise ValueError(msg)
        actions = [action.identifier for action in self.manual_actions]
        if len(actions) != len(set(actions)):
            msg = "Manual action identifiers must be unique."
            raise ValueError(msg)
        structure_ids = {structure.identifier for structure in self.structures}
        for upgrade in self.upgrades:
            for effect in upgrade.effects:
                if (
                    effect.category
                    in {ModifierCategory.PRODUCER_OUTPUT, ModifierCategory.PRODUCER_INPUT}
                    and effect.target not in structure_ids
                ):
                    msg = (
                        f"Upgrade {upgrade.identifier} targets unknown structure "
                        f"'{effect.target}'."
                    )
                    raise ValueError(msg)
        return self

    @property
    def final_tier_index(self) -> int:
        """Return the index of the terminal tier."""
        return len(self.tiers) - 1

    def structure(self, identifier: str) -> ProducerDefinition | None:
        """Return the structure named *identifier* if defined."""
        return next((item for item in self.structures if item.identifier == identifier), None)

    def upgrade(self, identifier: str) -> UpgradeDefinition | None:
        """Return the upgrade named *identifier* if defined."""
        return next((item for item in self.upgrades if item.identifier == identifier), None)

    def unit(self, identifier: str) -> UnitDefinition | None:
        """Return the unit named *identifier* if defined."""
        return next((item for item in self.units if item.identifier == identifier), None)

    def manual_action(self, identifier: str) -> ManualActionDefinition | None:
        """Return the manual action named *identifier* if defined."""
        return next(
            (item for item in self.manual_actions if item.identifier == identifier), None
        )

    def entity_kind(self, identifier: str) -> EntityKind | None:
        """Classify a purchasable identifier."""
        if self.structure(identifier) is not None:
            return EntityKind.STRUCTURE
        if self.upgrade(identifier) is not None:
            return EntityKind.UPGRADE
        if self.unit(identifier) is not None:
            return EntityKind.UNIT
        return None

    def resource_visible(self, resource: ResourceKind, tier_index: int) -> bool:
        """Return whether *resource* is revealed at *tier_index*."""
        return tier_index >= self.resource_unlock_tiers.get(resource, 0)


def _v(**amounts: float) -> ResourceVector:
    return ResourceVector.of(amounts)


def _effect(category: ModifierCategory, factor: float, target: str | None = None) -> UpgradeEffect:
    return UpgradeEffect(category=category, target=target, factor=factor)


_TIERS = (
    TierDefinition(name="Neolithic Age", reward=_v(food=30, materials=20)),
    TierDefinition(
        name="Bronze Age",
        requirements=_v(food=220, materials=260, knowledge=130),
        reward=_v(food=80, materials=80, knowledge=20),
    ),
    TierDefinition(
        name="Classical Age",
        requirements=_v(food=1000, materials=1250, knowledge=520),
        reward=_v(food=130, materials=160, knowledge=70),
    ),
    TierDefinition(
        name="Medieval Age",
        requirements=_v(food=2800, materials=3900, knowledge=1700),
        reward=_v(food=240, materials=250, knowledge=180),
    ),
    TierDefinition(
        name="Industrial Age",
        requirements=_v(food=7600, materials=10800, knowledge=4800),
        reward=_v(food=450, materials=450, power=120),
    ),
    TierDefinition(
        name="Modern Age",
        requirements=_v(food=18000, materials=28000, knowledge=12000, power=4600),
        reward=_v(food=700, materials=900, knowledge=420, power=300),
    ),
    TierDefinition(
        name="Futuristic Age",
        requirements=_v(
            food=36000, materials=62000, knowledge=28000, power=18000, data=7200
        ),
        reward=_v(materials=1500, knowledge=1200, power=900, data=420),
    ),
)

_MANUAL_ACTIONS = (
    ManualActionDefinition(
        identifier="forage", label="Forage", retire_tier=2, gain=_v(food=6)
    ),
    ManualActionDefinition(
        identifier="scavenge", label="Gather Materials", retire_tier=4, gain=_v(materials=5)
    ),
    ManualActionDefinition(
        identifier="study",
        label="Study",
        retire_tier=5,
        gain=_v(knowledge=3),
        cost=_v(food=2),
    ),
    ManualActionDefinition(
        identifier="draft",
        label="Draft Blueprints",
        unlock_tier=2,
        retire_tier=6,
        gain=_v(knowledge=7),
        cost=_v(materials=4),
    ),
    ManualActionDefinition(
        identifier="generator",
        label="Crank Generator",
        unlock_tier=4,
        gain=_v(power=8),
        cost=_v(materials=6),
    ),
    ManualActionDefinition(
        identifier="mine-data",
        label="Harvest Data",
        unlock_tier=5,
        gain=_v(data=8),
        cost=_v(power=5),
    ),
)

_STRUCTURES = (
    ProducerDefinition(
        identifier="hearth",
        name="Hearth Camp",
        base_cost=_v(food=24, materials=18),
        cost_growth=1.15,
        outputs=_v(food=1.1),
    ),
    ProducerDefinition(
        identifier="stoneworks",
        name="Stoneworks",
        base_cost=_v(food=28, materials=25),
        cost_growth=1.15,
        outputs=_v(materials=0.95),
    ),
    ProducerDefinition(
        identifier="council-fire",
        name="Council Fire",
        base_cost=_v(food=34, materials=30, knowledge=18),
        cost_growth=1.16,
        outputs=_v(knowledge=0.23),
        inputs=_v(food=0.34),
    ),
    ProducerDefinition(
        identifier="smelter",
        name="Smelter Yard",
        unlock_tier=1,
        base_cost=_v(food=72, materials=140, knowledge=40),
        cost_growth=1.16,
        outputs=_v(materials=1.85, knowledge=0.14),
        inputs=_v(food=0.2),
    ),
    ProducerDefinition(
        identifier="academy",
        name="Academy",
        unlock_tier=2,
        base_cost=_v(food=150, materials=270, knowledge=120),
        cost_growth=1.16,
        outputs=_v(knowledge=0.9),
        inputs=_v(food=0.4),
    ),
    ProducerDefinition(
        identifier="guild",
        name="Guild Hall",
        unlock_tier=3,
        base_cost=_v(food=340, materials=500, knowledge=290),
        cost_growth=1.16,
        outputs=_v(materials=2.45, knowledge=0.35),
        inputs=_v(food=0.65),
    ),
    ProducerDefinition(
        identifier="steam-plant",
        name="Steam Plant",
        unlock_tier=4,
        base_cost=_v(food=560, materials=1000, knowledge=760),
        cost_growth=1.17,
        outputs=_v(power=2.5),
        inputs=_v(materials=0.9, food=0.3),
    ),
    ProducerDefinition(
        identifier="factory",
        name="Factory",
        unlock_tier=4,
        base_cost=_v(food=500, materials=1300, knowledge=900, power=130),
        cost_growth=1.17,
        outputs=_v(materials=4.3),
        inputs=_v(power=1.1),
    ),
    ProducerDefinition(
        identifier="lab",
        name="Research Lab",
        unlock_tier=5,
        base_cost=_v(food=950, materials=2300, knowledge=1900, power=340),
        cost_growth=1.17,
        outputs=_v(knowledge=2.45, data=0.52),
        inputs=_v(power=1.6),
    ),
    ProducerDefinition(
        identifier="data-center",
        name="Data Center",
        unlock_tier=5,
        base_cost=_v(food=1250, materials=3300, knowledge=2500, power=840),
        cost_growth=1.17,
        outputs=_v(data=2.6),
        inputs=_v(power=2.2, materials=0.82),
    ),
    ProducerDefinition(
        identifier="fusion-core",
        name="Fusion Core",
        unlock_tier=6,
        base_cost=_v(food=2200, materials=6200, knowledge=6400, data=900),
        cost_growth=1.18,
        outputs=_v(power=8.2, data=0.7),
        inputs=_v(materials=1.4),
    ),
    ProducerDefinition(
        identifier="nanoforge",
        name="Nanoforge",
        unlock_tier=6,
        base_cost=_v(food=2600, materials=8200, knowledge=8700, data=1450),
        cost_growth=1.18,
        outputs=_v(materials=9.3, knowledge=1.55, data=1.85),
        inputs=_v(power=3.8),
    ),
    ProducerDefinition(
        identifier="quantum-archive",
        name="Quantum Archive",
        unlock_tier=6,
        base_cost=_v(food=3200, materials=10200, knowledge=12400, data=2600),
        cost_growth=1.18,
        outputs=_v(knowledge=6.2, data=4.25),
        inputs=_v(power=4.6, materials=1.5),
    ),
)

_UPGRADE_GROWTH = 1.6

_UPGRADES = (
    UpgradeDefinition(
        identifier="flint-tools",
        name="Flint Tools",
        base_cost=_v(food=90, materials=95, knowledge=55),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.MANUAL_GAIN, 1.6, "food"),
            _effect(ModifierCategory.MANUAL_GAIN, 1.6, "materials"),
        ),
    ),
    UpgradeDefinition(
        identifier="seed-selection",
        name="Seed Selection",
        unlock_tier=1,
        base_cost=_v(food=280, materials=260, knowledge=170),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.RESOURCE_OUTPUT, 1.55, "food"),),
    ),
    UpgradeDefinition(
        identifier="bronze-craft",
        name="Bronze Craft",
        unlock_tier=1,
        base_cost=_v(food=360, materials=540, knowledge=260),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.PRODUCER_OUTPUT, 1.8, "smelter"),),
    ),
    UpgradeDefinition(
        identifier="natural-philosophy",
        name="Natural Philosophy",
        unlock_tier=2,
        base_cost=_v(food=650, materials=820, knowledge=620),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.MANUAL_GAIN, 2.0, "knowledge"),
            _effect(ModifierCategory.RESOURCE_OUTPUT, 1.25, "knowledge"),
        ),
    ),
    UpgradeDefinition(
        identifier="masonry",
        name="Advanced Masonry",
        unlock_tier=3,
        base_cost=_v(food=1800, materials=2400, knowledge=1400),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.RESOURCE_OUTPUT, 1.45, "materials"),),
    ),
    UpgradeDefinition(
        identifier="merchant-ledgers",
        name="Merchant Ledgers",
        unlock_tier=3,
        base_cost=_v(food=1700, materials=2100, knowledge=1500),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.PRODUCER_OUTPUT, 1.6, "guild"),),
    ),
    UpgradeDefinition(
        identifier="steam-turbines",
        name="Steam Turbines",
        unlock_tier=4,
        base_cost=_v(food=3700, materials=6400, knowledge=4200, power=900),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.PRODUCER_OUTPUT, 2.0, "steam-plant"),
            _effect(ModifierCategory.RESOURCE_OUTPUT, 1.2, "power"),
        ),
    ),
    UpgradeDefinition(
        identifier="electrified-grid",
        name="Electrified Grid",
        unlock_tier=4,
        base_cost=_v(food=4200, materials=7100, knowledge=4900, power=1300),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.PRODUCER_INPUT, 0.72, "factory"),
            _effect(ModifierCategory.PRODUCER_INPUT, 0.85, "lab"),
            _effect(ModifierCategory.PRODUCER_INPUT, 0.85, "data-center"),
        ),
    ),
    UpgradeDefinition(
        identifier="internet-age",
        name="Internet Age",
        unlock_tier=5,
        base_cost=_v(food=7400, materials=12000, knowledge=8400, power=4200),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.RESOURCE_OUTPUT, 1.9, "data"),),
    ),
    UpgradeDefinition(
        identifier="ai-research",
        name="AI Research Assistants",
        unlock_tier=5,
        base_cost=_v(food=9400, materials=14000, knowledge=10200, power=6200, data=850),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.PRODUCER_OUTPUT, 1.9, "lab"),
            _effect(ModifierCategory.PRODUCER_OUTPUT, 1.35, "quantum-archive"),
        ),
    ),
    UpgradeDefinition(
        identifier="fusion-theory",
        name="Fusion Theory",
        unlock_tier=6,
        base_cost=_v(
            food=16000, materials=28000, knowledge=22000, power=14000, data=6400
        ),
        cost_growth=_UPGRADE_GROWTH,
        effects=(
            _effect(ModifierCategory.PRODUCER_OUTPUT, 2.0, "fusion-core"),
            _effect(ModifierCategory.PRODUCER_OUTPUT, 1.35, "nanoforge"),
        ),
    ),
    UpgradeDefinition(
        identifier="nanite-swarm",
        name="Nanite Swarm",
        unlock_tier=6,
        base_cost=_v(
            food=22000, materials=36000, knowledge=32000, power=21000, data=12000
        ),
        cost_growth=_UPGRADE_GROWTH,
        effects=(_effect(ModifierCategory.GLOBAL_OUTPUT, 1.35),),
    ),
)

_UNIT_GROWTH = 1.15

_UNITS = (
    UnitDefinition(
        identifier="militia",
        name="Militia",
        role=UnitRole.FRONTLINE,
        base_cost=_v(food=20, materials=16),
        cost_growth=_UNIT_GROWTH,
    ),
    UnitDefinition(
        identifier="slinger",
        name="Slinger",
        role=UnitRole.RANGED,
        base_cost=_v(food=16, materials=20, knowledge=8),
        cost_growth=_UNIT_GROWTH,
    ),
    UnitDefinition(
        identifier="knight",
        name="Knight",
        unlock_tier=3,
        role=UnitRole.FRONTLINE,
        base_cost=_v(food=38, materials=52, knowledge=24),
        cost_growth=_UNIT_GROWTH,
    ),
    UnitDefinition(
        identifier="artillery",
        name="Artillery",
        unlock_tier=4,
        role=UnitRole.SIEGE,
        base_cost=_v(food=25, materials=90, knowledge=46, power=18),
        cost_growth=_UNIT_GROWTH,
    ),
    UnitDefinition(
        identifier="drone",
        name="Drone Wing",
        unlock_tier=5,
        role=UnitRole.RANGED,
        base_cost=_v(food=18, materials=75, knowledge=55, power=42, data=20),
        cost_growth=_UNIT_GROWTH,
    ),
    UnitDefinition(
        identifier="mech",
        name="Mech",
        unlock_tier=6,
        role=UnitRole.FRONTLINE,
        base_cost=_v(food=30, materials=110, knowledge=85, power=70, data=38),
        cost_growth=_UNIT_GROWTH,
    ),
)


@cache
def get_default_catalog() -> GameCatalog:
    """Return the cached catalog shipped with the game."""
    return GameCatalog(
        initial_resources=_v(food=40, materials=30),
        tiers=_TIERS,
        structures=_STRUCTURES,
        upgrades=_UPGRADES,
        units=_UNITS,
        manual_actions=_MANUAL_ACTIONS,
        resource_unlock_tiers={ResourceKind.POWER: 4, ResourceKind.DATA: 5},
        victory_target=_v(knowledge=90000, data=42000, power=50000),
    )


__all__ = [
    "CONTROL_SECTORS",
    "BattleRewardPolicy",
    "GameCatalog",
    "ManualActionDefinition",
    "ProducerDefinition",
    "PurchasableDefinition",
    "TierDefinition",
    "UnitDefinition",
    "UnitRole",
    "UpgradeDefinition",
    "UpgradeEffect",
    "get_default_catalog",
]
