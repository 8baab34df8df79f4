from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from ageforge_backend.game_logic.actions import (
    ActionDispatcher,
    BattleResultCommand,
    DisbandCommand,
    GameAction,
    ManualActionCommand,
    PurchaseCommand,
    ResetCommand,
    StartBattleCommand,
)
from ageforge_backend.game_logic.battle import BattleResult
from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.game_logic.configuration import SimulationConfiguration
from ageforge_backend.game_logic.engine import SimulationEngine
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.game_logic.state import GameState, ProgressionState, new_game_state
from ageforge_backend.shared.enums import GamePhase, RejectionReason
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


@pytest.fixture
def dispatcher(engine: SimulationEngine) -> ActionDispatcher:
    return ActionDispatcher(engine)


@pytest.fixture
def fresh(engine: SimulationEngine) -> GameState:
    return new_game_state(engine.catalog)


def _holding(state: GameState, **amounts: float) -> GameState:
    ledger = ResourceLedger.empty().apply_gain(ResourceVector.of(amounts))
    return state.model_copy(update={"ledger": ledger})


def _at_war(state: GameState, **units: int) -> GameState:
    return state.model_copy(
        update={"unit_counts": {**state.unit_counts, **units}, "phase": GamePhase.BATTLE}
    )


def test_manual_action_grants_its_gain(dispatcher: ActionDispatcher, fresh: GameState) -> None:
    outcome = dispatcher.dispatch(fresh, ManualActionCommand(action_id="forage"))

    assert outcome.accepted
    assert outcome.state.ledger.amount(ResourceKind.FOOD) == 56
    assert outcome.state.ledger.total(ResourceKind.FOOD) == 56
    assert outcome.gained.get(ResourceKind.FOOD) == 6
    assert outcome.state.revision == fresh.revision + 1
    assert outcome.state.dirty
    assert [event.event_type for event in outcome.events] == ["manual_action"]


def test_manual_action_pays_its_cost_first(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    outcome = dispatcher.dispatch(fresh, ManualActionCommand(action_id="study"))

    assert outcome.accepted
    assert outcome.state.ledger.amount(ResourceKind.FOOD) == 48
    assert outcome.state.ledger.amount(ResourceKind.KNOWLEDGE) == 3
    assert outcome.spent.get(ResourceKind.FOOD) == 2


def test_manual_gain_upgrade_multiplies_the_gain(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    upgraded = dispatcher.dispatch(fresh, PurchaseCommand(entity_id="hands")).state
    assert upgraded.ledger.amount(ResourceKind.FOOD) == 40

    outcome = dispatcher.dispatch(upgraded, ManualActionCommand(action_id="forage"))

    assert outcome.state.ledger.amount(ResourceKind.FOOD) == pytest.approx(58)


def test_manual_gain_grows_with_the_tier(
    tiny_catalog: GameCatalog, fresh: GameState
) -> None:
    engine = SimulationEngine(tiny_catalog, SimulationConfiguration())
    tiered = fresh.model_copy(update={"progression": ProgressionState(tier_index=1)})

    outcome = ActionDispatcher(engine).dispatch(
        tiered, ManualActionCommand(action_id="forage")
    )

    assert outcome.gained.get(ResourceKind.FOOD) == pytest.approx(6 * 1.04)


@pytest.mark.parametrize(
    ("action_id", "food", "reason"),
    [
        ("dance", 50, RejectionReason.INVALID_ENTITY),
        ("smith", 50, RejectionReason.TIER_LOCKED),
        ("study", 1, RejectionReason.UNAFFORDABLE),
    ],
)
def test_manual_action_rejections_leave_the_state_untouched(
    dispatcher: ActionDispatcher,
    fresh: GameState,
    action_id: str,
    food: float,
    reason: RejectionReason,
) -> None:
    state = _holding(fresh, food=food)

    outcome = dispatcher.dispatch(state, ManualActionCommand(action_id=action_id))

    assert not outcome.accepted
    assert outcome.reason is reason
    assert outcome.state is state
    assert outcome.events == ()


def test_purchase_spends_the_current_price(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    first = dispatcher.dispatch(fresh, PurchaseCommand(entity_id="farm"))
    second = dispatcher.dispatch(first.state, PurchaseCommand(entity_id="farm"))

    assert first.spent.get(ResourceKind.FOOD) == 20
    assert second.spent.get(ResourceKind.FOOD) == 23
    assert second.state.producer_count("farm") == 2
    assert second.state.ledger.amount(ResourceKind.FOOD) == 7
    assert second.events[0].payload["owned"] == 2


def test_upgrade_ranks_stop_at_the_maximum(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    state = _holding(fresh, food=500)
    for expected_cost in (30, 60):
        outcome = dispatcher.dispatch(state, PurchaseCommand(entity_id="sickles"))
        assert outcome.accepted
        assert outcome.spent.get(ResourceKind.FOOD) == expected_cost
        state = outcome.state

    capped = dispatcher.dispatch(state, PurchaseCommand(entity_id="sickles"))

    assert state.upgrade_rank("sickles") == 2
    assert not capped.accepted
    assert capped.reason is RejectionReason.MAX_RANK


def test_unit_purchases_respect_the_army_cap(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    full = _holding(fresh, food=10_000).model_copy(update={"unit_counts": {"scout": 12}})

    outcome = dispatcher.dispatch(full, PurchaseCommand(entity_id="scout"))

    assert outcome.reason is RejectionReason.ARMY_CAP


@pytest.mark.parametrize(
    ("entity_id", "food", "reason"),
    [
        ("castle", 1000, RejectionReason.INVALID_ENTITY),
        ("forge", 1000, RejectionReason.TIER_LOCKED),
        ("farm", 19, RejectionReason.UNAFFORDABLE),
    ],
)
def test_purchase_rejections(
    dispatcher: ActionDispatcher,
    fresh: GameState,
    entity_id: str,
    food: float,
    reason: RejectionReason,
) -> None:
    state = _holding(fresh, food=food)

    outcome = dispatcher.dispatch(state, PurchaseCommand(entity_id=entity_id))

    assert not outcome.accepted
    assert outcome.reason is reason
    assert outcome.state is state


def test_disband_releases_one_unit_without_refund(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    state = fresh.model_copy(update={"unit_counts": {"scout": 2}})

    outcome = dispatcher.dispatch(state, DisbandCommand(unit_id="scout"))

    assert outcome.accepted
    assert outcome.state.unit_count("scout") == 1
    assert outcome.state.ledger == state.ledger


def test_disband_rejections(dispatcher: ActionDispatcher, fresh: GameState) -> None:
    unknown = dispatcher.dispatch(fresh, DisbandCommand(unit_id="dragon"))
    empty = dispatcher.dispatch(fresh, DisbandCommand(unit_id="scout"))

    assert unknown.reason is RejectionReason.INVALID_ENTITY
    assert empty.reason is RejectionReason.NOTHING_TO_DISBAND


def test_battle_victory_books_casualties_and_loot(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    state = _at_war(fresh, scout=3)
    result = BattleResult(
        victory=True, casualties={"scout": 5, "ghost": 1}, control_metric=1.0
    )

    outcome = dispatcher.dispatch(state, BattleResultCommand(result=result))

    assert outcome.accepted
    assert not outcome.state.in_battle
    assert outcome.state.unit_count("scout") == 0
    assert outcome.gained.as_dict() == pytest.approx(
        {ResourceKind.FOOD: 200, ResourceKind.MATERIALS: 180, ResourceKind.KNOWLEDGE: 110}
    )
    ledger = outcome.state.ledger
    assert ledger.amount(ResourceKind.FOOD) == pytest.approx(250)
    assert ledger.total(ResourceKind.MATERIALS) == pytest.approx(180)
    assert outcome.events[0].payload["losses"] == {"scout": 3}


def test_defeat_without_casualties_only_ends_the_battle(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    state = _at_war(fresh, scout=2)

    outcome = dispatcher.dispatch(
        state, BattleResultCommand(result=BattleResult(victory=False))
    )

    assert outcome.accepted
    assert outcome.state.phase is GamePhase.BUILD
    assert outcome.state.ledger == state.ledger
    assert outcome.state.unit_count("scout") == 2
    assert outcome.gained.is_zero()


def test_battle_starts_only_with_an_army(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    empty = dispatcher.dispatch(fresh, StartBattleCommand())
    armed = fresh.model_copy(update={"unit_counts": {"scout": 1}})
    started = dispatcher.dispatch(armed, StartBattleCommand())
    again = dispatcher.dispatch(started.state, StartBattleCommand())

    assert empty.reason is RejectionReason.NO_ARMY
    assert started.accepted
    assert started.state.in_battle
    assert started.state.revision == armed.revision + 1
    assert [event.event_type for event in started.events] == ["battle_started"]
    assert again.reason is RejectionReason.BATTLE_IN_PROGRESS


def test_results_are_booked_once_per_battle(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    result = BattleResultCommand(result=BattleResult(victory=True, control_metric=3))
    unprompted = dispatcher.dispatch(fresh, result)

    booked = dispatcher.dispatch(_at_war(fresh, scout=1), result)
    repeated = dispatcher.dispatch(booked.state, result)

    assert unprompted.reason is RejectionReason.NO_BATTLE_IN_PROGRESS
    assert unprompted.state is fresh
    assert booked.accepted
    assert not repeated.accepted
    assert repeated.reason is RejectionReason.NO_BATTLE_IN_PROGRESS
    assert repeated.state.ledger == booked.state.ledger


def test_units_cannot_be_disbanded_mid_battle(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    outcome = dispatcher.dispatch(_at_war(fresh, scout=2), DisbandCommand(unit_id="scout"))

    assert outcome.reason is RejectionReason.BATTLE_IN_PROGRESS
    assert outcome.state.unit_count("scout") == 2


def test_control_metric_is_bounded_by_the_sector_count(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    with pytest.raises(ValidationError):
        BattleResult(victory=True, control_metric=1e306)

    capped = BattleResult(victory=True, control_metric=3)
    outcome = dispatcher.dispatch(_at_war(fresh, scout=1), BattleResultCommand(result=capped))

    assert outcome.gained.get(ResourceKind.FOOD) == pytest.approx(360)


def test_reset_starts_over_at_a_newer_revision(
    dispatcher: ActionDispatcher, fresh: GameState
) -> None:
    bought = dispatcher.dispatch(fresh, PurchaseCommand(entity_id="farm")).state

    outcome = dispatcher.dispatch(bought, ResetCommand())

    assert outcome.accepted
    assert outcome.state.producer_count("farm") == 0
    assert outcome.state.ledger.amount(ResourceKind.FOOD) == 50
    assert outcome.state.revision == bought.revision + 1
    assert outcome.state.dirty
    assert outcome.events[0].event_type == "game_reset"


def test_actions_parse_from_their_kind_tag() -> None:
    adapter = TypeAdapter(GameAction)

    action = adapter.validate_python({"kind": "purchase", "entity_id": "farm"})
    battle = adapter.validate_python(
        {"kind": "battle_result", "result": {"victory": True, "control_metric": 0.5}}
    )

    assert action == PurchaseCommand(entity_id="farm")
    assert isinstance(battle, BattleResultCommand)
    assert battle.result.control_metric == 0.5
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "teleport"})
