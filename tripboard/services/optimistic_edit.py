"""
Optimistic edits outside of drag gestures: exchanging two days and editing
a day's notes. Both follow the same discipline as a drag commit (apply
locally, await the remote, undo on failure) but with a narrower undo: a swap
only restores the day sequence and a notes edit only restores that one field,
so unrelated changes that landed meanwhile survive the rollback.
"""

import logging
from typing import Awaitable, Callable, Optional, Protocol

from tripboard.errors import CommitError, DayNotFoundError, DragSessionError
from tripboard.models.drag import EditOutcome
from tripboard.models.schedule import Schedule
from tripboard.services.notifier import NoticeCenter
from tripboard.services.schedule_store import ScheduleStore, swap_days, reorder_days, set_day_notes

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class DayApi(Protocol):
    async def swap_day_order(self, trip_id: str, day_id_a: str, day_id_b: str) -> None: ...

    async def set_day_notes(self, trip_id: str, day_id: str, notes: str) -> None: ...


async def optimistic_edit(
    store: ScheduleStore,
    notices: NoticeCenter,
    apply: Callable[[Schedule], Schedule],
    commit: Callable[[], Awaitable[None]],
    undo: Callable[[Schedule], Schedule],
    description: str,
) -> EditOutcome:
    """
    Apply `apply` to the displayed schedule, await `commit`, and on failure
    replace the displayed schedule with `undo(current)`.
    """
    store.replace(apply(store.current))
    try:
        await commit()
    except CommitError as e:
        logger.warning(f"{description} failed ({type(e).__name__}: {e.message}), rolling back")
        store.replace(undo(store.current))
        notices.error(e.user_message())
        return EditOutcome(ok=False, error=e)
    except Exception as e:
        logger.exception(f"Unexpected error during {description}, rolling back: {e}")
        store.replace(undo(store.current))
        notices.error(f"Could not save: {description}")
        return EditOutcome(ok=False, error=e)

    logger.info(f"{description} committed")
    return EditOutcome(ok=True)


class DayEditor:
    def __init__(self, trip_id: str, store: ScheduleStore, api: DayApi, notices: NoticeCenter):
        self.trip_id = trip_id
        self.store = store
        self.api = api
        self.notices = notices

    def _ensure_no_drag(self) -> None:
        # the drag session owns the schedule until it ends
        if self.store.locked:
            raise DragSessionError("Cannot edit days while a drag session is active")

    async def swap_day_order(self, day_id_a: str, day_id_b: str) -> EditOutcome:
        self._ensure_no_drag()
        current = self.store.current
        # validates both ids before anything is shown or sent
        swap_days(current, day_id_a, day_id_b)
        if day_id_a == day_id_b:
            return EditOutcome(ok=True)

        previous_order = current.day_ids()
        return await optimistic_edit(
            self.store,
            self.notices,
            apply=lambda schedule: swap_days(schedule, day_id_a, day_id_b),
            commit=lambda: self.api.swap_day_order(self.trip_id, day_id_a, day_id_b),
            undo=lambda schedule: reorder_days(schedule, previous_order),
            description=f"exchange of days {day_id_a} and {day_id_b}",
        )

    async def set_day_notes(self, day_id: str, notes: str) -> EditOutcome:
        self._ensure_no_drag()
        day = self.store.current.day(day_id)
        if day is None:
            raise DayNotFoundError(day_id)
        previous_notes: Optional[str] = day.notes

        def restore_notes(schedule: Schedule) -> Schedule:
            if schedule.day(day_id) is None:
                return schedule
            return set_day_notes(schedule, day_id, previous_notes)

        return await optimistic_edit(
            self.store,
            self.notices,
            apply=lambda schedule: set_day_notes(schedule, day_id, notes),
            commit=lambda: self.api.set_day_notes(self.trip_id, day_id, notes),
            undo=restore_notes,
            description=f"notes of day {day_id}",
        )
