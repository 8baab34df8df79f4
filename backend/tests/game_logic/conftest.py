"""Small catalogs and configurations shared by the game logic tests."""

from __future__ import annotations

import pytest

from ageforge_backend.game_logic.catalog import (
    GameCatalog,
    ManualActionDefinition,
    ProducerDefinition,
    TierDefinition,
    UnitDefinition,
    UnitRole,
    UpgradeDefinition,
    UpgradeEffect,
)
from ageforge_backend.game_logic.configuration import SimulationConfiguration
from ageforge_backend.game_logic.engine import SimulationEngine
from ageforge_backend.shared.enums import ModifierCategory
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


def vector(**amounts: float) -> ResourceVector:
    return ResourceVector.of(amounts)


@pytest.fixture
def tiny_catalog() -> GameCatalog:
    return GameCatalog(
        initial_resources=vector(food=50),
        tiers=(
            TierDefinition(name="Dawn"),
            TierDefinition(
                name="Dusk", requirements=vector(food=100), reward=vector(food=5)
            ),
        ),
        structures=(
            ProducerDefinition(
                identifier="farm",
                name="Farm",
                base_cost=vector(food=20),
                cost_growth=1.15,
                outputs=vector(food=1),
            ),
            ProducerDefinition(
                identifier="mill",
                name="Mill",
                base_cost=vector(food=10, materials=10),
                cost_growth=1.5,
                outputs=vector(materials=0.5),
            ),
            ProducerDefinition(
                identifier="forge",
                name="Forge",
                unlock_tier=1,
                base_cost=vector(materials=40),
                cost_growth=1.2,
                outputs=vector(knowledge=1),
                inputs=vector(materials=2),
            ),
        ),
        upgrades=(
            UpgradeDefinition(
                identifier="sickles",
                name="Sickles",
                base_cost=vector(food=30),
                cost_growth=2,
                max_rank=2,
                effects=(
                    UpgradeEffect(
                        category=ModifierCategory.PRODUCER_OUTPUT,
                        target="farm",
                        factor=2.0,
                    ),
                ),
            ),
            UpgradeDefinition(
                identifier="hands",
                name="Helping Hands",
                base_cost=vector(food=10),
                cost_growth=2,
                effects=(
                    UpgradeEffect(
                        category=ModifierCategory.MANUAL_GAIN,
                        target="food",
                        factor=3.0,
                    ),
                ),
            ),
        ),
        units=(
            UnitDefinition(
                identifier="scout",
                name="Scout",
                role=UnitRole.RANGED,
                base_cost=vector(food=10),
                cost_growth=1.5,
            ),
        ),
        manual_actions=(
            ManualActionDefinition(identifier="forage", label="Forage", gain=vector(food=6)),
            ManualActionDefinition(
                identifier="study",
                label="Study",
                gain=vector(knowledge=3),
                cost=vector(food=2),
            ),
            ManualActionDefinition(
                identifier="smith",
                label="Smith",
                unlock_tier=1,
                gain=vector(materials=4),
            ),
        ),
        resource_unlock_tiers={ResourceKind.KNOWLEDGE: 1},
        victory_target=vector(food=100),
    )


@pytest.fixture
def flat_configuration() -> SimulationConfiguration:
    """Default timing without tier bonuses, so rates stay round numbers."""
    return SimulationConfiguration(tier_output_bonus=0.0, tier_manual_bonus=0.0)


@pytest.fixture
def engine(
    tiny_catalog: GameCatalog, flat_configuration: SimulationConfiguration
) -> SimulationEngine:
    return SimulationEngine(tiny_catalog, flat_configuration)
