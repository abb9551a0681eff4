from fastapi import APIRouter, Depends, HTTPException
import logging

from tripboard.dependencies import WorkspaceRegistry, get_workspace_registry, load_workspace
from tripboard.errors import CommitError, DayNotFoundError, DragSessionError, ItemNotFoundError
from tripboard.models.drag import (
    DayNotesRequest,
    DragEndResponse,
    DragHoverRequest,
    DragStartRequest,
    DragStateResponse,
    EditResponse,
    HoverTarget,
    NoticesResponse,
    SwapDaysRequest,
)
from tripboard.models.schedule import ScheduleView

logger = logging.getLogger(__name__)
router = APIRouter(tags=["schedule"])


def _view(workspace) -> ScheduleView:
    return ScheduleView.from_schedule(workspace.store.current, drag_active=workspace.drag.active)


def _drag_state(workspace, intent=None) -> DragStateResponse:
    session = workspace.drag.session
    return DragStateResponse(
        dragActive=workspace.drag.active,
        changed=intent is not None,
        intent=session.intent if session else None,
        schedule=_view(workspace),
    )


@router.get("/trips/{tripId}/schedule", response_model=ScheduleView)
async def get_schedule(tripId: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = await load_workspace(tripId, registry)
    return _view(workspace)


@router.post("/trips/{tripId}/schedule/refresh", response_model=ScheduleView)
async def refresh_schedule(tripId: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    await load_workspace(tripId, registry)
    try:
        workspace = await registry.refresh(tripId)
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CommitError as e:
        raise HTTPException(status_code=502, detail=e.user_message())
    return _view(workspace)


# ---------------------------
# Drag gestures
# ---------------------------
@router.post("/trips/{tripId}/drag/start", response_model=DragStateResponse)
async def drag_start(
    tripId: str,
    body: DragStartRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = await load_workspace(tripId, registry)
    try:
        workspace.drag.start(body.itemId)
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _drag_state(workspace)


@router.post("/trips/{tripId}/drag/hover", response_model=DragStateResponse)
async def drag_hover(
    tripId: str,
    body: DragHoverRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = await load_workspace(tripId, registry)
    if not workspace.drag.active:
        raise HTTPException(status_code=409, detail="No drag session is active")
    intent = workspace.drag.hover(HoverTarget.from_droppable_id(body.overId))
    return _drag_state(workspace, intent)


@router.post("/trips/{tripId}/drag/end", response_model=DragEndResponse)
async def drag_end(tripId: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = await load_workspace(tripId, registry)
    try:
        outcome = await workspace.drag.end()
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))

    message = None
    if isinstance(outcome.error, CommitError):
        message = outcome.error.user_message()
    elif outcome.error is not None:
        message = "Could not save the new order"
    return DragEndResponse(
        ok=outcome.error is None,
        status=outcome.status,
        intent=outcome.intent,
        message=message,
        schedule=_view(workspace),
    )


@router.post("/trips/{tripId}/drag/cancel", response_model=DragEndResponse)
async def drag_cancel(tripId: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = await load_workspace(tripId, registry)
    try:
        outcome = workspace.drag.cancel()
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return DragEndResponse(ok=True, status=outcome.status, schedule=_view(workspace))


# ---------------------------
# Day edits
# ---------------------------
@router.put("/trips/{tripId}/days/exchange", response_model=EditResponse)
async def exchange_days(
    tripId: str,
    body: SwapDaysRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = await load_workspace(tripId, registry)
    try:
        outcome = await workspace.days.swap_day_order(body.aTripDayId, body.bTripDayId)
    except DayNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return EditResponse(
        ok=outcome.ok,
        message=outcome.error.user_message() if isinstance(outcome.error, CommitError) else None,
        schedule=_view(workspace),
    )


@router.put("/trips/{tripId}/days/{dayId}/notes", response_model=EditResponse)
async def update_day_notes(
    tripId: str,
    dayId: str,
    body: DayNotesRequest,
    registry: WorkspaceRegistry = Depends(get_workspace_registry),
):
    workspace = await load_workspace(tripId, registry)
    try:
        outcome = await workspace.days.set_day_notes(dayId, body.notes)
    except DayNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DragSessionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return EditResponse(
        ok=outcome.ok,
        message=outcome.error.user_message() if isinstance(outcome.error, CommitError) else None,
        schedule=_view(workspace),
    )


@router.get("/trips/{tripId}/notices", response_model=NoticesResponse)
async def drain_notices(tripId: str, registry: WorkspaceRegistry = Depends(get_workspace_registry)):
    workspace = registry.peek(tripId)
    if workspace is None:
        return NoticesResponse(notices=[])
    return NoticesResponse(notices=[notice.to_dict() for notice in workspace.notices.drain()])
