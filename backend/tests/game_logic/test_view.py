from __future__ import annotations

import pytest

from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.game_logic.configuration import SimulationConfiguration
from ageforge_backend.game_logic.state import GameState, ProgressionState, new_game_state
from ageforge_backend.game_logic.view import FrameViewCache, derive_frame
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


@pytest.fixture
def fresh(tiny_catalog: GameCatalog) -> GameState:
    return new_game_state(tiny_catalog)


def test_fresh_frame_lists_only_unlocked_content(
    fresh: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    frame = derive_frame(fresh, tiny_catalog, flat_configuration)

    assert frame.tier_name == "Dawn"
    assert frame.next_tier_name == "Dusk"
    assert frame.next_tier_progress == pytest.approx(0.5)
    assert ResourceKind.KNOWLEDGE not in [view.resource for view in frame.resources]
    assert [view.identifier for view in frame.structures] == ["farm", "mill"]
    assert [view.identifier for view in frame.upgrades] == ["sickles", "hands"]
    assert [view.identifier for view in frame.units] == ["scout"]
    assert [view.identifier for view in frame.manual_actions] == ["forage", "study"]
    assert frame.army_cap == 12
    assert not frame.victory


def test_costs_and_affordability(
    fresh: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    frame = derive_frame(fresh, tiny_catalog, flat_configuration)
    farm, mill = frame.structures

    assert farm.next_cost == {ResourceKind.FOOD: 20}
    assert farm.affordable
    assert mill.next_cost == {ResourceKind.FOOD: 10, ResourceKind.MATERIALS: 10}
    assert not mill.affordable


def test_rates_and_manual_previews_include_modifiers(
    fresh: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    state = fresh.touched(
        producer_counts={**fresh.producer_counts, "farm": 2},
        upgrade_ranks={**fresh.upgrade_ranks, "sickles": 1, "hands": 1},
    )

    frame = derive_frame(state, tiny_catalog, flat_configuration)

    food = next(view for view in frame.resources if view.resource is ResourceKind.FOOD)
    assert food.rate_per_second == pytest.approx(4)
    forage = frame.manual_actions[0]
    assert forage.gain_preview == {ResourceKind.FOOD: pytest.approx(18)}
    assert [view.identifier for view in frame.upgrades] == ["sickles"]
    assert frame.upgrades[0].owned == 1


def test_final_tier_frame_reports_victory(
    fresh: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    state = fresh.touched(
        ledger=fresh.ledger.apply_gain(ResourceVector.of({"food": 60})),
        progression=ProgressionState(tier_index=1),
    )

    frame = derive_frame(state, tiny_catalog, flat_configuration)

    assert frame.next_tier_name is None
    assert frame.next_tier_progress == 1.0
    assert frame.victory
    assert "forge" in [view.identifier for view in frame.structures]
    assert "smith" in [view.identifier for view in frame.manual_actions]
    assert ResourceKind.KNOWLEDGE in [view.resource for view in frame.resources]


def test_cache_recomputes_only_on_a_new_revision(
    fresh: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    cache = FrameViewCache(tiny_catalog, flat_configuration)

    first = cache.frame_for(fresh)
    assert cache.frame_for(fresh.model_copy()) is first

    changed = fresh.touched()
    assert cache.frame_for(changed) is not first
    assert cache.frame_for(changed).revision == changed.revision
