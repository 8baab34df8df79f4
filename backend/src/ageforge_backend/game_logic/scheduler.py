"""Fixed-step accumulator turning variable frame times into engine steps."""

from __future__ import annotations

import math

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.engine import SimulationEngine  # noqa: TC001
from ageforge_backend.game_logic.progression import TierTransition
from ageforge_backend.game_logic.state import GameState
from ageforge_backend.shared.events import LoggedEvent

# Float drift allowance when comparing the accumulator against the step size.
STEP_TOLERANCE = 1e-9


class FrameAdvance(BaseModel):
    """State after a frame together with what the steps produced."""

    model_config = ConfigDict(frozen=True)

    state: GameState
    steps_run: int = Field(default=0, ge=0)
    transitions: tuple[TierTransition, ...] = Field(default_factory=tuple)
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


class FixedStepScheduler:
    """Run the engine in constant slices regardless of frame timing.

    Frame deltas are clamped to ``[0, max_frame_delta_seconds]`` before being
    added to the accumulator, which keeps one slow frame from triggering an
    unbounded burst of catch-up steps.
    """

    def __init__(self, engine: SimulationEngine) -> None:
        self._engine = engine
        configuration = engine.configuration
        self._step = configuration.fixed_step_seconds
        self._max_frame_delta = configuration.max_frame_delta_seconds

    @property
    def step_seconds(self) -> float:
        return self._step

    def clamp_delta(self, frame_delta: float) -> float:
        """Return the portion of *frame_delta* the scheduler will accept."""
        if not math.isfinite(frame_delta):
            return 0.0
        return min(max(frame_delta, 0.0), self._max_frame_delta)

    def advance(self, state: GameState, frame_delta: float) -> FrameAdvance:
        """Accumulate *frame_delta* and run every whole step now due."""
        accumulator = state.clock.accumulator + self.clamp_delta(frame_delta)
        transitions: list[TierTransition] = []
        events: list[LoggedEvent] = []
        steps_run = 0
        while accumulator + STEP_TOLERANCE >= self._step:
            result = self._engine.run_step(state, self._step)
            state = result.state
            transitions.extend(result.transitions)
            events.extend(result.events)
            accumulator = max(accumulator - self._step, 0.0)
            steps_run += 1
        return FrameAdvance(
            state=state.with_clock(state.clock.with_pending(accumulator)),
            steps_run=steps_run,
            transitions=tuple(transitions),
            events=tuple(events),
        )


__all__ = ["STEP_TOLERANCE", "FixedStepScheduler", "FrameAdvance"]
