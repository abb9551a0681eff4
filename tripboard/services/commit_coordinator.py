import logging
from typing import Protocol, Optional

from tripboard.errors import CommitError
from tripboard.models.drag import CommitResult
from tripboard.models.schedule import MoveIntent, Schedule
from tripboard.services.notifier import NoticeCenter
from tripboard.services.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class MoveApi(Protocol):
    async def move_item(
        self,
        trip_id: str,
        item_id: str,
        target_day_id: str,
        prev_item_id: Optional[str],
        next_item_id: Optional[str],
    ) -> None: ...


class CommitCoordinator:
    """
    Persist the final MoveIntent of a drag and reconcile the displayed schedule.

    On success the optimistic arrangement already matches the remote, so
    nothing changes locally. On any failure the displayed schedule goes back to
    the snapshot taken at drag start and an error notice is posted.
    """

    def __init__(self, trip_id: str, store: ScheduleStore, api: MoveApi, notices: NoticeCenter):
        self.trip_id = trip_id
        self.store = store
        self.api = api
        self.notices = notices

    async def commit_move(self, intent: MoveIntent, snapshot: Schedule) -> CommitResult:
        logger.info(
            f"Committing move of {intent.itemId} to day {intent.targetDayId} "
            f"(prev={intent.prevItemId}, next={intent.nextItemId})"
        )
        try:
            await self.api.move_item(
                self.trip_id,
                intent.itemId,
                intent.targetDayId,
                intent.prevItemId,
                intent.nextItemId,
            )
        except CommitError as e:
            logger.warning(f"Move of {intent.itemId} failed ({type(e).__name__}: {e.message}), rolling back")
            self.rollback(snapshot)
            self.notices.error(e.user_message())
            return CommitResult(ok=False, error=e)
        except Exception as e:
            logger.exception(f"Unexpected error while moving {intent.itemId}, rolling back: {e}")
            self.rollback(snapshot)
            self.notices.error("Could not save the new order")
            return CommitResult(ok=False, error=e)

        logger.info(f"Move of {intent.itemId} committed")
        return CommitResult(ok=True)

    def rollback(self, snapshot: Schedule) -> None:
        self.store.replace(snapshot)
