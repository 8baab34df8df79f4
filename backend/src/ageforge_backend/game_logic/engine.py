"""Simulation engine executing one fixed step of the economy."""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.catalog import GameCatalog  # noqa: TC001
from ageforge_backend.game_logic.configuration import (
    SimulationConfiguration,  # noqa: TC001
)
from ageforge_backend.game_logic.modifiers import (
    ModifierAccumulator,
    accumulate_modifiers,
)
from ageforge_backend.game_logic.production import rates_per_second, run_production
from ageforge_backend.game_logic.progression import TierTransition, advance_tiers
from ageforge_backend.game_logic.state import GameState
from ageforge_backend.shared.events import LoggedEvent
from ageforge_backend.shared.value_objects import ResourceVector  # noqa: TC001

logger = logging.getLogger(__name__)


class StepResult(BaseModel):
    """Outcome of a single engine step."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    utilization: dict[str, float] = Field(default_factory=dict)
    transitions: tuple[TierTransition, ...] = Field(default_factory=tuple)
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


class ProgressionResult(BaseModel):
    """State after the progression gate together with what it unlocked."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    transitions: tuple[TierTransition, ...] = Field(default_factory=tuple)
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


class SimulationEngine:
    """Advance a :class:`GameState` through production and progression."""

    def __init__(
        self, catalog: GameCatalog, configuration: SimulationConfiguration
    ) -> None:
        self._catalog = catalog
        self._configuration = configuration

    @property
    def catalog(self) -> GameCatalog:
        return self._catalog

    @property
    def configuration(self) -> SimulationConfiguration:
        return self._configuration

    def modifiers_for(self, state: GameState) -> ModifierAccumulator:
        """Return the multipliers implied by *state*'s upgrades and tier."""
        return accumulate_modifiers(
            self._catalog,
            state.upgrade_ranks,
            tier_index=state.tier_index,
            tier_output_bonus=self._configuration.tier_output_bonus,
        )

    def rates(self, state: GameState) -> ResourceVector:
        """Return the net per-second change implied by *state*."""
        return rates_per_second(
            state.ledger,
            self._catalog,
            state.producer_counts,
            self.modifiers_for(state),
            tier_index=state.tier_index,
        )

    def run_step(self, state: GameState, dt: float | None = None) -> StepResult:
        """Run production for one slice, then evaluate the progression gate."""
        step_seconds = self._configuration.fixed_step_seconds if dt is None else dt
        production = run_production(
            state.ledger,
            self._catalog,
            state.producer_counts,
            self.modifiers_for(state),
            tier_index=state.tier_index,
            dt=step_seconds,
        )
        clock = state.clock.after_step(step_seconds)
        if production.ledger != state.ledger:
            stepped = state.touched(ledger=production.ledger, clock=clock)
        else:
            stepped = state.with_clock(clock)

        progressed = self.evaluate_progression(stepped)
        return StepResult(
            state=progressed.state,
            utilization=production.utilization,
            transitions=progressed.transitions,
            events=progressed.events,
        )

    def evaluate_progression(self, state: GameState) -> ProgressionResult:
        """Unlock every tier *state* qualifies for and log each transition."""
        outcome = advance_tiers(state.tier_index, state.ledger, self._catalog)
        if not outcome.transitions:
            return ProgressionResult(state=state)

        updated = state.touched(
            ledger=outcome.ledger,
            progression=state.progression.advanced_to(outcome.tier_index),
        )
        events = tuple(
            LoggedEvent(
                step_index=updated.clock.step_index,
                simulated_at=updated.clock.elapsed_total,
                event_type="tier_unlocked",
                message=f"Entered {transition.tier_name}.",
                payload={
                    "from_index": transition.from_index,
                    "to_index": transition.to_index,
                    "reward": {
                        resource.value: amount
                        for resource, amount in transition.reward.items()
                    },
                },
            )
            for transition in outcome.transitions
        )
        for transition in outcome.transitions:
            logger.info(
                "Tier %s unlocked: %s", transition.to_index, transition.tier_name
            )
        return ProgressionResult(
            state=updated, transitions=outcome.transitions, events=events
        )


__all__ = ["ProgressionResult", "SimulationEngine", "StepResult"]
