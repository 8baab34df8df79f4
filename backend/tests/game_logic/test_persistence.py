from __future__ import annotations

import pytest

from ageforge_backend.game_logic.catalog import GameCatalog
from ageforge_backend.game_logic.configuration import SimulationConfiguration
from ageforge_backend.game_logic.ledger import ResourceLedger
from ageforge_backend.game_logic.persistence import (
    CorruptSnapshotError,
    GameSnapshot,
    InMemoryGameStateStore,
    decode_snapshot,
    encode_snapshot,
    load_game_state,
    restore_snapshot,
    serialize_snapshot,
)
from ageforge_backend.game_logic.state import (
    GameState,
    ProgressionState,
    SimulationClock,
    new_game_state,
)
from ageforge_backend.shared.value_objects import ResourceKind, ResourceVector


@pytest.fixture
def played(tiny_catalog: GameCatalog) -> GameState:
    state = new_game_state(tiny_catalog)
    ledger = state.ledger.apply_gain(ResourceVector.of({"food": 73.125, "knowledge": 0.1}))
    return state.touched(
        ledger=ledger,
        producer_counts={**state.producer_counts, "farm": 2, "forge": 1},
        unit_counts={**state.unit_counts, "scout": 3},
        upgrade_ranks={**state.upgrade_ranks, "sickles": 1},
        progression=ProgressionState(tier_index=1),
        clock=SimulationClock(elapsed_total=12.5, step_index=250, accumulator=0.01),
    )


def test_snapshot_round_trip_preserves_the_state(
    played: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    snapshot = serialize_snapshot(played, flat_configuration, 1_700_000_000_000)

    restored = restore_snapshot(
        decode_snapshot(encode_snapshot(snapshot)), tiny_catalog, flat_configuration
    )

    assert restored.ledger == played.ledger
    assert restored.producer_counts == played.producer_counts
    assert restored.unit_counts == played.unit_counts
    assert restored.upgrade_ranks == played.upgrade_ranks
    assert restored.tier_index == 1
    assert restored.clock.elapsed_total == 12.5
    assert restored.clock.step_index == 250
    assert restored.clock.accumulator == 0
    assert not restored.dirty


def test_loading_twice_yields_the_same_state(
    played: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
) -> None:
    store = InMemoryGameStateStore()
    store.save_snapshot("alpha", serialize_snapshot(played, flat_configuration, 42))

    first = load_game_state(store, "alpha", tiny_catalog, flat_configuration)
    second = load_game_state(store, "alpha", tiny_catalog, flat_configuration)

    assert first == second
    assert first.saved_at_epoch_millis == 42
    assert not first.fell_back


def test_empty_slot_starts_a_new_game(
    tiny_catalog: GameCatalog, flat_configuration: SimulationConfiguration
) -> None:
    restored = load_game_state(
        InMemoryGameStateStore(), "missing", tiny_catalog, flat_configuration
    )

    assert restored.saved_at_epoch_millis is None
    assert not restored.fell_back
    assert restored.state == new_game_state(tiny_catalog)


def test_version_mismatch_falls_back_to_a_new_game(
    played: GameState,
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
    caplog: pytest.LogCaptureFixture,
) -> None:
    snapshot = serialize_snapshot(played, flat_configuration, 42).model_copy(
        update={"version": 99}
    )
    store = InMemoryGameStateStore()
    store.save_snapshot("alpha", snapshot)

    with pytest.raises(CorruptSnapshotError):
        restore_snapshot(snapshot, tiny_catalog, flat_configuration)
    with caplog.at_level("WARNING"):
        restored = load_game_state(store, "alpha", tiny_catalog, flat_configuration)

    assert restored.fell_back
    assert restored.state == new_game_state(tiny_catalog)
    assert "Discarding snapshot for slot alpha" in caplog.text


@pytest.mark.parametrize(
    "overrides",
    [{"tier_index": 7}, {"producer_counts": {"farm": -1}}],
)
def test_impossible_snapshots_are_rejected(
    tiny_catalog: GameCatalog,
    flat_configuration: SimulationConfiguration,
    overrides: dict,
) -> None:
    snapshot = GameSnapshot(version=1, saved_at_epoch_millis=0, **overrides)

    with pytest.raises(CorruptSnapshotError):
        restore_snapshot(snapshot, tiny_catalog, flat_configuration)


@pytest.mark.parametrize("payload", ["not json", '{"version": 1}', '{"version": "x"}'])
def test_malformed_payloads_raise_corrupt_snapshot(payload: str) -> None:
    with pytest.raises(CorruptSnapshotError):
        decode_snapshot(payload)


def test_catalog_changes_are_tolerated(
    tiny_catalog: GameCatalog, flat_configuration: SimulationConfiguration
) -> None:
    snapshot = GameSnapshot(
        version=1,
        current={ResourceKind.FOOD: 5.0},
        lifetime={ResourceKind.FOOD: 5.0},
        producer_counts={"farm": 1, "windmill": 4},
        saved_at_epoch_millis=0,
    )

    restored = restore_snapshot(snapshot, tiny_catalog, flat_configuration)

    assert restored.producer_counts == {"farm": 1, "mill": 0, "forge": 0}
    assert restored.unit_counts == {"scout": 0}
    assert restored.ledger == ResourceLedger.empty().apply_gain(
        ResourceVector.of({"food": 5})
    )
