"""
Drag session state machine: Idle -> Active -> Idle.

Everything a gesture needs (the item being dragged, the schedule as it was
when the drag began, the last resolved intent) lives in one DragSession value
that is created by start() and consumed by end() or cancel(). Hover events
resolve against the displayed schedule and mutate it optimistically; only the
intent in effect at release is ever sent to the remote.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from tripboard.errors import DragSessionError
from tripboard.models.drag import DragOutcome, DragStatus, HoverTarget
from tripboard.models.schedule import MoveIntent, Schedule
from tripboard.services.anchor_resolver import resolve_move
from tripboard.services.commit_coordinator import CommitCoordinator
from tripboard.services.optimistic_mutator import apply_move
from tripboard.services.schedule_store import ScheduleStore, locate

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass(frozen=True)
class DragSession:
    item_id: str
    snapshot: Schedule
    intent: Optional[MoveIntent] = None


class DragSessionController:
    def __init__(self, store: ScheduleStore, coordinator: CommitCoordinator):
        self.store = store
        self.coordinator = coordinator
        self._session: Optional[DragSession] = None

    @property
    def active(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    def start(self, item_id: str) -> DragSession:
        if self._session is not None:
            raise DragSessionError(f"A drag of {self._session.item_id} is already in progress")
        locate(self.store.current, item_id)

        self._session = DragSession(item_id=item_id, snapshot=self.store.current)
        self.store.lock()
        logger.info(f"Drag started for item {item_id}")
        return self._session

    def hover(self, target: HoverTarget) -> Optional[MoveIntent]:
        """
        Process one hover event. Returns the new intent when the displayed
        schedule changed, None when the hover leaves everything as it is.
        """
        if self._session is None:
            logger.debug(f"Hover over {target.target_id} with no active drag, ignoring")
            return None

        intent = resolve_move(self.store.current, self._session.item_id, target)
        if intent is None:
            return None

        self.store.replace(apply_move(self.store.current, intent))
        self._session = replace(self._session, intent=intent)
        logger.debug(
            f"Hover resolved {intent.itemId} -> day {intent.targetDayId} "
            f"(prev={intent.prevItemId}, next={intent.nextItemId})"
        )
        return intent

    def _finish(self) -> DragSession:
        if self._session is None:
            raise DragSessionError("No drag session is active")
        session = self._session
        self._session = None
        self.store.unlock()
        return session

    def cancel(self) -> DragOutcome:
        session = self._finish()
        self.store.replace(session.snapshot)
        logger.info(f"Drag of {session.item_id} cancelled")
        return DragOutcome(status=DragStatus.CANCELLED)

    async def end(self) -> DragOutcome:
        """
        Release the dragged item. The controller is back to Idle before the
        remote call is awaited; the rollback target is the drag-start snapshot.
        """
        session = self._finish()
        if session.intent is None:
            self.store.replace(session.snapshot)
            logger.info(f"Drag of {session.item_id} released without a target, restored")
            return DragOutcome(status=DragStatus.CANCELLED)

        result = await self.coordinator.commit_move(session.intent, session.snapshot)
        if result.ok:
            return DragOutcome(status=DragStatus.COMMITTED, intent=session.intent)
        return DragOutcome(status=DragStatus.ROLLED_BACK, intent=session.intent, error=result.error)
