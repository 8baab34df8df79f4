"""Coarse catch-up for the time a save slot spent unloaded.

Catch-up evaluates the per-second net rate once, at load time, and scales it
by the elapsed seconds. Chains whose inputs would have run dry partway through
the offline period therefore over-produce; the fixed-step engine takes over
again as soon as the slot is running.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from ageforge_backend.game_logic.engine import SimulationEngine  # noqa: TC001
from ageforge_backend.game_logic.progression import TierTransition
from ageforge_backend.game_logic.state import GameState
from ageforge_backend.shared.events import LoggedEvent
from ageforge_backend.shared.value_objects import ResourceVector

logger = logging.getLogger(__name__)


class OfflineReport(BaseModel):
    """What offline catch-up credited to a loaded state."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    elapsed_seconds: float = Field(default=0.0, ge=0)
    applied: bool = False
    net_change: ResourceVector = Field(default_factory=ResourceVector)
    transitions: tuple[TierTransition, ...] = Field(default_factory=tuple)
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


def compute_offline_elapsed(
    saved_at_epoch_millis: int,
    now_epoch_millis: int,
    configuration: SimulationConfiguration,
) -> float:
    """Return the offline seconds to credit, clamped to ``[0, max_offline_seconds]``.

    A save timestamp in the future (clock skew) yields zero.
    """
    elapsed = (now_epoch_millis - saved_at_epoch_millis) / 1000.0
    return min(max(elapsed, 0.0), configuration.max_offline_seconds)


def apply_offline_catch_up(
    state: GameState, engine: SimulationEngine, elapsed_seconds: float
) -> OfflineReport:
    """Credit *elapsed_seconds* of production to *state* in a single slice."""
    configuration = engine.configuration
    if elapsed_seconds <= configuration.min_offline_seconds:
        return OfflineReport(state=state, elapsed_seconds=max(elapsed_seconds, 0.0))

    net_change = engine.rates(state).scaled(elapsed_seconds)
    ledger = state.ledger.apply_gain(net_change.positive_part()).apply_cost(
        net_change.negative_part()
    )
    credited = state.touched(ledger=ledger) if ledger != state.ledger else state
    progressed = engine.evaluate_progression(credited)

    summary = LoggedEvent(
        step_index=progressed.state.clock.step_index,
        simulated_at=progressed.state.clock.elapsed_total,
        event_type="offline_progress",
        message=f"Caught up {elapsed_seconds:.0f} seconds of offline production.",
        payload={
            "elapsed_seconds": elapsed_seconds,
            "net_change": {
                resource.value: amount for resource, amount in net_change.items()
            },
        },
    )
    logger.info("Applied %.1f seconds of offline catch-up", elapsed_seconds)
    return OfflineReport(
        state=progressed.state,
        elapsed_seconds=elapsed_seconds,
        applied=True,
        net_change=net_change,
        transitions=progressed.transitions,
        events=(summary, *progressed.events),
    )


__all__ = ["OfflineReport", "apply_offline_catch_up", "compute_offline_elapsed"]
