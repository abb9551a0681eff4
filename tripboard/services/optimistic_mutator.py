"""Apply a MoveIntent to a schedule before the remote has confirmed it."""

from tripboard.errors import ItemNotFoundError, StaleReferenceError
from tripboard.models.schedule import MoveIntent, Schedule
from tripboard.services.schedule_store import remove_item, insert_item


def apply_move(schedule: Schedule, intent: MoveIntent) -> Schedule:
    """
    Return a new schedule with intent.itemId placed right after intent.prevItemId
    (or first, when there is no previous anchor) in intent.targetDayId.

    Removal is keyed by itemId wherever the item currently is, so applying the
    same intent to its own output yields an equal schedule.
    """
    item = schedule.items.get(intent.itemId)
    if item is None:
        raise ItemNotFoundError(intent.itemId)
    without = remove_item(schedule, intent.itemId)

    target_day = without.day(intent.targetDayId)
    if target_day is None:
        raise StaleReferenceError(f"Target day {intent.targetDayId} no longer exists")

    if intent.prevItemId is None:
        index = 0
    elif intent.prevItemId in target_day.itemIds:
        index = target_day.itemIds.index(intent.prevItemId) + 1
    else:
        raise StaleReferenceError(f"Anchor {intent.prevItemId} is not in day {intent.targetDayId}")

    return insert_item(without, item, intent.targetDayId, index)
