"""Save-slot runtime registry exposed to the API layer."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from ageforge_backend.game_logic import (
    ActionOutcome,
    BattleRoster,
    FrameAdvance,
    GameAction,
    GameRuntime,
    GameSnapshot,
    GameStateStore,
    OfflineReport,
    SimulationConfiguration,
    get_default_catalog,
    get_default_simulation_configuration,
)
from ageforge_backend.game_logic.catalog import GameCatalog  # noqa: TC001
from ageforge_backend.game_logic.runtime import epoch_millis
from ageforge_backend.game_logic.view import FrameView  # noqa: TC001
from ageforge_backend.shared import LoggedEvent  # noqa: TC001

logger = logging.getLogger(__name__)


class SlotNotStartedError(LookupError):
    """Raised when a save slot is used before it was started."""


class GameSessionService:
    """Keep one :class:`GameRuntime` per save slot and serialize access to them."""

    def __init__(
        self,
        store: GameStateStore,
        *,
        catalog: GameCatalog | None = None,
        configuration: SimulationConfiguration | None = None,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self._store = store
        self._catalog = catalog or get_default_catalog()
        self._configuration = configuration or get_default_simulation_configuration()
        self._clock = clock
        self._runtimes: dict[str, GameRuntime] = {}
        self._lock = threading.RLock()

    def start(self, slot_id: str) -> tuple[GameRuntime, OfflineReport]:
        """Load *slot_id* unless it is already running."""
        with self._lock:
            runtime = self._runtimes.get(slot_id)
            if runtime is not None:
                return runtime, OfflineReport(state=runtime.state)
            runtime = GameRuntime(
                slot_id,
                self._store,
                catalog=self._catalog,
                configuration=self._configuration,
                clock=self._clock,
            )
            report = runtime.start()
            self._runtimes[slot_id] = runtime
            logger.info("Started runtime for slot %s", slot_id)
            return runtime, report

    def frame(self, slot_id: str) -> FrameView:
        with self._lock:
            return self._require(slot_id).frame()

    def advance(self, slot_id: str, frame_delta: float) -> tuple[FrameAdvance, FrameView]:
        """Feed one frame to the slot's scheduler."""
        with self._lock:
            runtime = self._require(slot_id)
            advance = runtime.advance_frame(frame_delta)
            return advance, runtime.frame()

    def dispatch(self, slot_id: str, action: GameAction) -> tuple[ActionOutcome, FrameView]:
        """Apply a player command to the slot."""
        with self._lock:
            runtime = self._require(slot_id)
            outcome = runtime.dispatch(action)
            return outcome, runtime.frame()

    def save(self, slot_id: str) -> GameSnapshot:
        with self._lock:
            return self._require(slot_id).save()

    def roster(self, slot_id: str) -> BattleRoster:
        with self._lock:
            return self._require(slot_id).battle_roster()

    def events(self, slot_id: str) -> tuple[LoggedEvent, ...]:
        with self._lock:
            return self._require(slot_id).journal.entries()

    def _require(self, slot_id: str) -> GameRuntime:
        runtime = self._runtimes.get(slot_id)
        if runtime is None:
            msg = f"Save slot '{slot_id}' has not been started."
            raise SlotNotStartedError(msg)
        return runtime


__all__ = ["GameSessionService", "SlotNotStartedError"]
