"""Player commands and the handlers applying them to a game state."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from ageforge_backend.game_logic.battle import BattleResult, apply_battle_result
from ageforge_backend.game_logic.catalog import PurchasableDefinition
from ageforge_backend.game_logic.costs import purchase_cost
from ageforge_backend.game_logic.engine import SimulationEngine  # noqa: TC001
from ageforge_backend.game_logic.state import GameState, increment, new_game_state
from ageforge_backend.shared.enums import EntityKind, GamePhase, RejectionReason
from ageforge_backend.shared.events import LoggedEvent
from ageforge_backend.shared.value_objects import ResourceVector

logger = logging.getLogger(__name__)


class ManualActionCommand(BaseModel):
    """Perform a manual gathering action once."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["manual_action"] = "manual_action"
    action_id: str = Field(..., min_length=1)


class PurchaseCommand(BaseModel):
    """Buy one structure, unit or upgrade rank."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["purchase"] = "purchase"
    entity_id: str = Field(..., min_length=1)


class DisbandCommand(BaseModel):
    """Release one unit from the army."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["disband"] = "disband"
    unit_id: str = Field(..., min_length=1)


class StartBattleCommand(BaseModel):
    """Send the army into battle."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["start_battle"] = "start_battle"


class BattleResultCommand(BaseModel):
    """Book the outcome of a battle resolved by the combat collaborator."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["battle_result"] = "battle_result"
    result: BattleResult


class ResetCommand(BaseModel):
    """Discard all progress and start over."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["reset"] = "reset"


GameAction = Annotated[
    ManualActionCommand
    | PurchaseCommand
    | DisbandCommand
    | StartBattleCommand
    | BattleResultCommand
    | ResetCommand,
    Field(discriminator="kind"),
]


class ActionOutcome(BaseModel):
    """Result of applying a command; rejected commands leave the state as-is."""

    model_config = ConfigDict(frozen=True)

    accepted: bool
    state: GameState
    reason: RejectionReason | None = None
    spent: ResourceVector = Field(default_factory=ResourceVector)
    gained: ResourceVector = Field(default_factory=ResourceVector)
    events: tuple[LoggedEvent, ...] = Field(default_factory=tuple)


def _reject(state: GameState, reason: RejectionReason, subject: str) -> ActionOutcome:
    logger.debug("Rejected command for %s: %s", subject, reason)
    return ActionOutcome(accepted=False, state=state, reason=reason)


def _event(
    state: GameState,
    event_type: str,
    message: str,
    entity_id: str | None = None,
    payload: dict[str, Any] | None = None,
) -> LoggedEvent:
    return LoggedEvent(
        step_index=state.clock.step_index,
        simulated_at=state.clock.elapsed_total,
        event_type=event_type,
        message=message,
        entity_id=entity_id,
        payload=payload or {},
    )


def _vector_payload(vector: ResourceVector) -> dict[str, float]:
    return {resource.value: amount for resource, amount in vector.items()}


class ActionHandlerModel(BaseModel):
    """Base class for command handlers bound to a simulation engine."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    engine: SimulationEngine


class ManualActionHandler(ActionHandlerModel):
    """Pay the action's cost, then grant its scaled gain."""

    def handle(self, state: GameState, command: ManualActionCommand) -> ActionOutcome:
        catalog = self.engine.catalog
        definition = catalog.manual_action(command.action_id)
        if definition is None:
            return _reject(state, RejectionReason.INVALID_ENTITY, command.action_id)
        if not definition.available_at(state.tier_index):
            return _reject(state, RejectionReason.TIER_LOCKED, command.action_id)
        if not state.ledger.can_afford(definition.cost):
            return _reject(state, RejectionReason.UNAFFORDABLE, command.action_id)

        modifiers = self.engine.modifiers_for(state)
        tier_bonus = 1.0 + state.tier_index * self.engine.configuration.tier_manual_bonus
        gain = ResourceVector(
            amounts={
                resource: amount * modifiers.for_manual(resource) * tier_bonus
                for resource, amount in definition.gain.items()
            }
        )
        ledger = state.ledger.apply_cost(definition.cost).apply_gain(gain)
        updated = state.touched(ledger=ledger)
        event = _event(
            updated,
            "manual_action",
            f"{definition.label} performed.",
            entity_id=definition.identifier,
            payload={
                "spent": _vector_payload(definition.cost),
                "gained": _vector_payload(gain),
            },
        )
        return ActionOutcome(
            accepted=True,
            state=updated,
            spent=definition.cost,
            gained=gain,
            events=(event,),
        )


class PurchaseHandler(ActionHandlerModel):
    """Buy one unit of a structure, unit or upgrade at its current price."""

    def handle(self, state: GameState, command: PurchaseCommand) -> ActionOutcome:
        catalog = self.engine.catalog
        configuration = self.engine.configuration
        entity_id = command.entity_id
        kind = catalog.entity_kind(entity_id)
        if kind is None:
            return _reject(state, RejectionReason.INVALID_ENTITY, entity_id)

        definition: PurchasableDefinition
        if kind is EntityKind.STRUCTURE:
            definition = catalog.structure(entity_id)
            owned = state.producer_count(entity_id)
        elif kind is EntityKind.UPGRADE:
            definition = catalog.upgrade(entity_id)
            owned = state.upgrade_rank(entity_id)
        else:
            definition = catalog.unit(entity_id)
            owned = state.unit_count(entity_id)

        if definition.unlock_tier > state.tier_index:
            return _reject(state, RejectionReason.TIER_LOCKED, entity_id)
        if kind is EntityKind.UPGRADE and owned >= definition.max_rank:
            return _reject(state, RejectionReason.MAX_RANK, entity_id)
        if kind is EntityKind.UNIT and state.army_size >= configuration.army_cap(
            state.tier_index
        ):
            return _reject(state, RejectionReason.ARMY_CAP, entity_id)

        cost = purchase_cost(definition.base_cost, definition.cost_growth, owned)
        if not state.ledger.can_afford(cost):
            return _reject(state, RejectionReason.UNAFFORDABLE, entity_id)

        ledger = state.ledger.apply_cost(cost)
        if kind is EntityKind.STRUCTURE:
            updated = state.touched(
                ledger=ledger,
                producer_counts=increment(state.producer_counts, entity_id, 1),
            )
        elif kind is EntityKind.UPGRADE:
            updated = state.touched(
                ledger=ledger,
                upgrade_ranks=increment(state.upgrade_ranks, entity_id, 1),
            )
        else:
            updated = state.touched(
                ledger=ledger,
                unit_counts=increment(state.unit_counts, entity_id, 1),
            )
        event = _event(
            updated,
            "purchase_completed",
            f"Purchased {definition.name}.",
            entity_id=entity_id,
            payload={
                "kind": kind.value,
                "owned": owned + 1,
                "cost": _vector_payload(cost),
            },
        )
        return ActionOutcome(accepted=True, state=updated, spent=cost, events=(event,))


class DisbandHandler(ActionHandlerModel):
    """Release one unit without a refund."""

    def handle(self, state: GameState, command: DisbandCommand) -> ActionOutcome:
        if self.engine.catalog.unit(command.unit_id) is None:
            return _reject(state, RejectionReason.INVALID_ENTITY, command.unit_id)
        if state.in_battle:
            return _reject(state, RejectionReason.BATTLE_IN_PROGRESS, command.unit_id)
        if state.unit_count(command.unit_id) <= 0:
            return _reject(state, RejectionReason.NOTHING_TO_DISBAND, command.unit_id)
        updated = state.touched(
            unit_counts=increment(state.unit_counts, command.unit_id, -1)
        )
        logger.debug("Disbanded one %s", command.unit_id)
        return ActionOutcome(accepted=True, state=updated)


class StartBattleHandler(ActionHandlerModel):
    """Enter the battle phase with the current army."""

    def handle(self, state: GameState, command: StartBattleCommand) -> ActionOutcome:  # noqa: ARG002
        if state.in_battle:
            return _reject(state, RejectionReason.BATTLE_IN_PROGRESS, "battle")
        if state.army_size <= 0:
            return _reject(state, RejectionReason.NO_ARMY, "battle")
        updated = state.touched(phase=GamePhase.BATTLE)
        event = _event(
            updated,
            "battle_started",
            "Battle phase started.",
            payload={"army_size": state.army_size},
        )
        return ActionOutcome(accepted=True, state=updated, events=(event,))


class BattleResultHandler(ActionHandlerModel):
    """Book casualties and loot reported by the combat collaborator."""

    def handle(self, state: GameState, command: BattleResultCommand) -> ActionOutcome:
        if not state.in_battle:
            return _reject(state, RejectionReason.NO_BATTLE_IN_PROGRESS, "battle")
        outcome = apply_battle_result(state, command.result, self.engine.catalog)
        updated = outcome.state
        verdict = "won" if command.result.victory else "lost"
        event = _event(
            updated,
            "battle_resolved",
            f"Battle {verdict}.",
            payload={
                "victory": command.result.victory,
                "control_metric": command.result.control_metric,
                "losses": outcome.losses,
                "reward": _vector_payload(outcome.reward),
            },
        )
        return ActionOutcome(
            accepted=True, state=updated, gained=outcome.reward, events=(event,)
        )


class ResetHandler(ActionHandlerModel):
    """Replace the state with a fresh game."""

    def handle(self, state: GameState, command: ResetCommand) -> ActionOutcome:  # noqa: ARG002
        fresh = new_game_state(self.engine.catalog)
        updated = fresh.model_copy(update={"revision": state.revision}).touched()
        event = _event(updated, "game_reset", "Progress reset to a new game.")
        logger.info("Game state reset")
        return ActionOutcome(accepted=True, state=updated, events=(event,))


class ActionDispatcher:
    """Route each command variant to its handler."""

    def __init__(self, engine: SimulationEngine) -> None:
        self._handlers: dict[type[BaseModel], ActionHandlerModel] = {
            ManualActionCommand: ManualActionHandler(engine=engine),
            PurchaseCommand: PurchaseHandler(engine=engine),
            DisbandCommand: DisbandHandler(engine=engine),
            StartBattleCommand: StartBattleHandler(engine=engine),
            BattleResultCommand: BattleResultHandler(engine=engine),
            ResetCommand: ResetHandler(engine=engine),
        }

    def dispatch(self, state: GameState, action: GameAction) -> ActionOutcome:
        """Apply *action* to *state* using the handler registered for its type."""
        handler = self._handlers.get(type(action))
        if handler is None:
            msg = f"No handler registered for {type(action).__name__}."
            raise TypeError(msg)
        return handler.handle(state, action)


__all__ = [
    "ActionDispatcher",
    "ActionOutcome",
    "BattleResultCommand",
    "DisbandCommand",
    "GameAction",
    "ManualActionCommand",
    "PurchaseCommand",
    "ResetCommand",
    "StartBattleCommand",
]
