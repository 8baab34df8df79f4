"""High-level façade connecting the simulation to external callers.

A :class:`GameRuntime` owns one save slot: the authoritative state, the engine
and scheduler driving it, the persistence adapter and a bounded event journal.
The API layer talks to the runtime only and never touches the engine directly.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ageforge_backend.game_logic.actions import (
    ActionDispatcher,
    ActionOutcome,
    BattleResultCommand,
    DisbandCommand,
    GameAction,
    ManualActionCommand,
    PurchaseCommand,
    ResetCommand,
    StartBattleCommand,
)
from ageforge_backend.game_logic.battle import (
    BattleResult,
    BattleRoster,
    export_battle_roster,
)
from ageforge_backend.game_logic.catalog import GameCatalog, get_default_catalog
from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,
    get_default_simulation_configuration,
)
from ageforge_backend.game_logic.engine import SimulationEngine
from ageforge_backend.game_logic.offline import (
    OfflineReport,
    apply_offline_catch_up,
    compute_offline_elapsed,
)
from ageforge_backend.game_logic.persistence import (
    GameSnapshot,
    GameStateStore,
    load_game_state,
    serialize_snapshot,
)
from ageforge_backend.game_logic.scheduler import FixedStepScheduler, FrameAdvance
from ageforge_backend.game_logic.state import GameState, new_game_state
from ageforge_backend.game_logic.view import FrameView, FrameViewCache
from ageforge_backend.shared.events import EventJournal, LoggedEvent

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    """Return the wall clock in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


class GameRuntime:
    """Run a single save slot: simulate, accept commands and persist."""

    def __init__(
        self,
        slot_id: str,
        store: GameStateStore,
        *,
        catalog: GameCatalog | None = None,
        configuration: SimulationConfiguration | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._slot_id = slot_id
        self._store = store
        self._catalog = catalog or get_default_catalog()
        self._configuration = configuration or get_default_simulation_configuration()
        self._clock = clock
        self._engine = SimulationEngine(self._catalog, self._configuration)
        self._scheduler = FixedStepScheduler(self._engine)
        self._dispatcher = ActionDispatcher(self._engine)
        self._journal = EventJournal(self._configuration.journal_capacity)
        self._frames = FrameViewCache(self._catalog, self._configuration)
        self._state = new_game_state(self._catalog)
        self._since_save = 0.0

    @property
    def slot_id(self) -> str:
        return self._slot_id

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def catalog(self) -> GameCatalog:
        return self._catalog

    @property
    def configuration(self) -> SimulationConfiguration:
        return self._configuration

    @property
    def journal(self) -> EventJournal:
        return self._journal

    def start(self, now_epoch_millis: int | None = None) -> OfflineReport:
        """Load the slot and credit the time it spent offline.

        An empty slot, or one holding an unusable snapshot, starts a new game.
        """
        now = self._clock() if now_epoch_millis is None else now_epoch_millis
        restored = load_game_state(
            self._store, self._slot_id, self._catalog, self._configuration
        )
        self._journal.clear()
        self._frames.invalidate()
        self._since_save = 0.0
        if restored.fell_back:
            self._journal.record(
                LoggedEvent(
                    step_index=0,
                    event_type="snapshot_rejected",
                    message="Stored snapshot was unusable; started a new game.",
                    entity_id=self._slot_id,
                )
            )

        if restored.saved_at_epoch_millis is None:
            self._state = restored.state
            logger.info("Slot %s started with a new game", self._slot_id)
            return OfflineReport(state=self._state)

        elapsed = compute_offline_elapsed(
            restored.saved_at_epoch_millis, now, self._configuration
        )
        report = apply_offline_catch_up(restored.state, self._engine, elapsed)
        self._state = report.state
        self._journal.extend(report.events)
        logger.info(
            "Slot %s loaded at tier %s after %.1f offline seconds",
            self._slot_id,
            self._state.tier_index,
            elapsed,
        )
        return report

    def advance_frame(
        self, frame_delta: float, now_epoch_millis: int | None = None
    ) -> FrameAdvance:
        """Feed one frame to the scheduler, autosaving when the interval elapses."""
        advance = self._scheduler.advance(self._state, frame_delta)
        self._state = advance.state
        self._journal.extend(advance.events)
        self._since_save += advance.steps_run * self._scheduler.step_seconds
        if self._since_save >= self._configuration.autosave_interval_seconds:
            self._since_save = 0.0
            if self._state.dirty:
                self.save(now_epoch_millis)
        return advance

    def dispatch(self, action: GameAction) -> ActionOutcome:
        """Apply a player command, keeping the state when it is rejected."""
        outcome = self._dispatcher.dispatch(self._state, action)
        if outcome.accepted:
            self._state = outcome.state
            self._journal.extend(outcome.events)
        if isinstance(action, ResetCommand):
            self._since_save = 0.0
        return outcome

    def perform_action(self, action_id: str) -> ActionOutcome:
        return self.dispatch(ManualActionCommand(action_id=action_id))

    def purchase(self, entity_id: str) -> ActionOutcome:
        return self.dispatch(PurchaseCommand(entity_id=entity_id))

    def disband(self, unit_id: str) -> ActionOutcome:
        return self.dispatch(DisbandCommand(unit_id=unit_id))

    def start_battle(self) -> ActionOutcome:
        return self.dispatch(StartBattleCommand())

    def resolve_battle(self, result: BattleResult) -> ActionOutcome:
        return self.dispatch(BattleResultCommand(result=result))

    def reset(self) -> ActionOutcome:
        return self.dispatch(ResetCommand())

    def battle_roster(self) -> BattleRoster:
        return export_battle_roster(self._state, self._catalog, self._configuration)

    def save(self, now_epoch_millis: int | None = None) -> GameSnapshot:
        """Persist the current state and clear the dirty flag."""
        now = self._clock() if now_epoch_millis is None else now_epoch_millis
        snapshot = serialize_snapshot(self._state, self._configuration, now)
        self._store.save_snapshot(self._slot_id, snapshot)
        self._state = self._state.marked_clean()
        self._since_save = 0.0
        self._journal.record(
            LoggedEvent(
                step_index=self._state.clock.step_index,
                simulated_at=self._state.clock.elapsed_total,
                event_type="snapshot_saved",
                entity_id=self._slot_id,
                payload={"saved_at_epoch_millis": now},
            )
        )
        logger.debug("Saved slot %s at %s", self._slot_id, now)
        return snapshot

    def frame(self) -> FrameView:
        """Return the presentation view of the current state."""
        return self._frames.frame_for(self._state)


__all__ = ["GameRuntime", "epoch_millis"]
