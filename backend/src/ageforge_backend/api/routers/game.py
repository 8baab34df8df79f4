"""HTTP endpoints driving save-slot runtimes."""

from __future__ import annotations

from fastapi import APIRouter, status

from ageforge_backend.api.dependencies import GameServiceDep, SlotIdDep, slot_not_found
from ageforge_backend.api.models import (
    ActionRequest,
    ActionResponse,
    EventsResponse,
    FrameRequest,
    FrameResponse,
    GameStartResponse,
    OfflineSummary,
    SaveResponse,
)
from ageforge_backend.api.services import SlotNotStartedError
from ageforge_backend.game_logic import BattleRoster, FrameView

router = APIRouter(prefix="/games", tags=["games"])


@router.post(
    "/{slot_id}",
    response_model=GameStartResponse,
    status_code=status.HTTP_201_CREATED,
)
def start_game(slot_id: SlotIdDep, service: GameServiceDep) -> GameStartResponse:
    """Load the slot (or start a new game) and credit offline progress."""
    runtime, report = service.start(slot_id)
    return GameStartResponse(
        slot_id=slot_id,
        offline=OfflineSummary(
            applied=report.applied,
            elapsed_seconds=report.elapsed_seconds,
            net_change=report.net_change.as_dict(),
        ),
        frame=runtime.frame(),
    )


@router.get("/{slot_id}", response_model=FrameView)
def get_frame(slot_id: SlotIdDep, service: GameServiceDep) -> FrameView:
    """Return the current frame of a running slot."""
    try:
        return service.frame(slot_id)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc


@router.post("/{slot_id}/frames", response_model=FrameResponse)
def advance_frame(
    slot_id: SlotIdDep, payload: FrameRequest, service: GameServiceDep
) -> FrameResponse:
    """Advance the simulation by one client frame."""
    try:
        advance, frame = service.advance(slot_id, payload.frame_delta)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc
    return FrameResponse(steps_run=advance.steps_run, frame=frame)


@router.post("/{slot_id}/actions", response_model=ActionResponse)
def dispatch_action(
    slot_id: SlotIdDep, payload: ActionRequest, service: GameServiceDep
) -> ActionResponse:
    """Apply a manual action, purchase, disband, battle result or reset."""
    try:
        outcome, frame = service.dispatch(slot_id, payload.root)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc
    return ActionResponse(
        accepted=outcome.accepted,
        reason=outcome.reason,
        spent=outcome.spent.as_dict(),
        gained=outcome.gained.as_dict(),
        frame=frame,
    )


@router.post("/{slot_id}/save", response_model=SaveResponse)
def save_game(slot_id: SlotIdDep, service: GameServiceDep) -> SaveResponse:
    """Persist the slot immediately."""
    try:
        snapshot = service.save(slot_id)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc
    return SaveResponse(snapshot=snapshot)


@router.get("/{slot_id}/battle/roster", response_model=BattleRoster)
def battle_roster(slot_id: SlotIdDep, service: GameServiceDep) -> BattleRoster:
    """Export the army and stockpile for the combat resolver."""
    try:
        return service.roster(slot_id)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc


@router.get("/{slot_id}/events", response_model=EventsResponse)
def list_events(slot_id: SlotIdDep, service: GameServiceDep) -> EventsResponse:
    """Return the slot's recent events, newest first."""
    try:
        events = service.events(slot_id)
    except SlotNotStartedError as exc:
        raise slot_not_found(exc) from exc
    return EventsResponse(events=list(events))
