import logging
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import HTTPException

from tripboard.errors import CommitError, DragSessionError
from tripboard.services.commit_coordinator import CommitCoordinator
from tripboard.services.drag_session import DragSessionController
from tripboard.services.notifier import NoticeCenter
from tripboard.services.optimistic_edit import DayEditor
from tripboard.services.schedule_store import ScheduleStore
from tripboard.services.trip_api import TripApiClient

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass
class TripWorkspace:
    """Everything the service keeps for one open trip."""
    trip_id: str
    store: ScheduleStore
    notices: NoticeCenter
    drag: DragSessionController
    days: DayEditor


class WorkspaceRegistry:
    """
    Lazily builds one TripWorkspace per trip, loading its schedule from the
    remote on first use. Workspaces live for the lifetime of the process.
    """

    def __init__(self, api: TripApiClient):
        self.api = api
        self._workspaces: Dict[str, TripWorkspace] = {}

    def peek(self, trip_id: str) -> Optional[TripWorkspace]:
        return self._workspaces.get(trip_id)

    async def get(self, trip_id: str) -> TripWorkspace:
        workspace = self._workspaces.get(trip_id)
        if workspace is None:
            schedule = await self.api.load_schedule(trip_id)
            # another request may have loaded it while we awaited
            workspace = self._workspaces.get(trip_id)
            if workspace is None:
                workspace = self._build(trip_id, ScheduleStore(schedule))
                self._workspaces[trip_id] = workspace
                logger.info(f"Opened workspace for trip {trip_id}")
        return workspace

    def _build(self, trip_id: str, store: ScheduleStore) -> TripWorkspace:
        notices = NoticeCenter()
        coordinator = CommitCoordinator(trip_id, store, self.api, notices)
        return TripWorkspace(
            trip_id=trip_id,
            store=store,
            notices=notices,
            drag=DragSessionController(store, coordinator),
            days=DayEditor(trip_id, store, self.api, notices),
        )

    async def refresh(self, trip_id: str) -> TripWorkspace:
        workspace = await self.get(trip_id)
        if workspace.store.locked:
            raise DragSessionError("Cannot refresh the schedule while a drag session is active")
        workspace.store.refresh(await self.api.load_schedule(trip_id))
        return workspace

    def close(self, trip_id: str) -> None:
        self._workspaces.pop(trip_id, None)


# Lazily initialize a single global registry to reuse across requests
_registry = None


def get_workspace_registry() -> WorkspaceRegistry:
    global _registry
    if _registry is None:
        _registry = WorkspaceRegistry(TripApiClient())
    return _registry


# ---------------------------
# FastAPI dependencies
# ---------------------------
async def load_workspace(trip_id: str, registry: WorkspaceRegistry) -> TripWorkspace:
    """
    Resolve the workspace for a route. A trip whose schedule cannot be loaded
    is reported as 502 (remote unreachable or rejecting) or 404 (unknown trip).
    """
    try:
        return await registry.get(trip_id)
    except CommitError as e:
        logger.warning(f"Unable to load schedule for trip {trip_id}: {e.message}")
        status_code = 404 if e.code == 404 else 502
        raise HTTPException(status_code=status_code, detail=e.user_message())
