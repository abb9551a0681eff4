"""
Ordered day partition store.

Pure transforms over Schedule plus the ScheduleStore holder for the schedule
currently displayed to the user. Transforms never touch their input: they
rebuild only the days and arena entries that change, so keeping an old
Schedule reference is enough to restore it later.
"""

import logging
from typing import Tuple, Sequence, Optional

from tripboard.errors import ItemNotFoundError, DayNotFoundError, DragSessionError, DuplicateItemError
from tripboard.models.schedule import Schedule, TripDay, TripDayItem

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


# -------------------------
# Pure transforms
# -------------------------
def locate(schedule: Schedule, item_id: str) -> Tuple[TripDay, int]:
    """Return the owning day and the item's index in it, or raise ItemNotFoundError."""
    item = schedule.items.get(item_id)
    if item is not None:
        day = schedule.day(item.tripDayId)
        if day is not None and item_id in day.itemIds:
            return day, day.itemIds.index(item_id)
    # arena and day order disagree (hand-built schedule); fall back to a scan
    for day in schedule.days:
        if item_id in day.itemIds:
            return day, day.itemIds.index(item_id)
    raise ItemNotFoundError(item_id)


def _replace_day(schedule: Schedule, new_day: TripDay) -> Tuple[TripDay, ...]:
    return tuple(new_day if day.tripDayId == new_day.tripDayId else day for day in schedule.days)


def remove_item(schedule: Schedule, item_id: str) -> Schedule:
    day, index = locate(schedule, item_id)
    new_day = day.model_copy(update={"itemIds": day.itemIds[:index] + day.itemIds[index + 1:]})
    items = dict(schedule.items)
    items.pop(item_id, None)
    return schedule.model_copy(update={"days": _replace_day(schedule, new_day), "items": items})


def insert_item(schedule: Schedule, item: TripDayItem, day_id: str, index: int) -> Schedule:
    """Place an item that is not in any day yet. Moving an existing item means remove_item first."""
    for owner in schedule.days:
        if item.itemId in owner.itemIds:
            raise DuplicateItemError(item.itemId, owner.tripDayId)
    day = schedule.day(day_id)
    if day is None:
        raise DayNotFoundError(day_id)
    index = max(0, min(index, len(day.itemIds)))

    placed = item if item.tripDayId == day_id else item.model_copy(update={"tripDayId": day_id})
    new_day = day.model_copy(update={"itemIds": day.itemIds[:index] + (item.itemId,) + day.itemIds[index:]})
    items = dict(schedule.items)
    items[item.itemId] = placed
    return schedule.model_copy(update={"days": _replace_day(schedule, new_day), "items": items})


def swap_days(schedule: Schedule, day_id_a: str, day_id_b: str) -> Schedule:
    index_a = schedule.day_index(day_id_a)
    if index_a < 0:
        raise DayNotFoundError(day_id_a)
    index_b = schedule.day_index(day_id_b)
    if index_b < 0:
        raise DayNotFoundError(day_id_b)

    days = list(schedule.days)
    days[index_a], days[index_b] = days[index_b], days[index_a]
    return schedule.model_copy(update={"days": tuple(days)})


def reorder_days(schedule: Schedule, day_ids: Sequence[str]) -> Schedule:
    """
    Put the days in the order given by day_ids. Days missing from day_ids keep
    their relative order after the listed ones; unknown ids are skipped.
    """
    by_id = {day.tripDayId: day for day in schedule.days}
    ordered = [by_id[day_id] for day_id in day_ids if day_id in by_id]
    listed = {day.tripDayId for day in ordered}
    ordered.extend(day for day in schedule.days if day.tripDayId not in listed)
    return schedule.model_copy(update={"days": tuple(ordered)})


def set_day_notes(schedule: Schedule, day_id: str, notes: Optional[str]) -> Schedule:
    day = schedule.day(day_id)
    if day is None:
        raise DayNotFoundError(day_id)
    return schedule.model_copy(update={"days": _replace_day(schedule, day.model_copy(update={"notes": notes}))})


# -------------------------
# Holder
# -------------------------
class ScheduleStore:
    """Owns the schedule currently displayed for one trip."""

    def __init__(self, schedule: Schedule):
        self._schedule = schedule
        self._locked = False

    @property
    def current(self) -> Schedule:
        return self._schedule

    @property
    def locked(self) -> bool:
        return self._locked

    def replace(self, schedule: Schedule) -> None:
        """Swap the displayed schedule (optimistic mutation or rollback)."""
        self._schedule = schedule

    def refresh(self, schedule: Schedule) -> None:
        """Replace the model with an externally reloaded schedule. Refused while a drag is active."""
        if self._locked:
            raise DragSessionError("Cannot refresh the schedule while a drag session is active")
        logger.info(f"Schedule for trip {schedule.tripId} refreshed ({len(schedule.days)} days, {len(schedule.items)} items)")
        self._schedule = schedule

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    # convenience wrappers over the pure transforms, read against the current schedule
    def locate(self, item_id: str) -> Tuple[TripDay, int]:
        return locate(self._schedule, item_id)

    def remove_item(self, item_id: str) -> Schedule:
        return remove_item(self._schedule, item_id)

    def insert_item(self, item: TripDayItem, day_id: str, index: int) -> Schedule:
        return insert_item(self._schedule, item, day_id, index)
