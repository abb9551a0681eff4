"""
Anchor resolution for drag hover events.

Turns "the pointer is over X" into a MoveIntent: the target day plus the ids
of the items that must sit right before and after the dragged item once the
move is final. Anchors, not indices, are what the remote receives, so an
intent stays meaningful even if other items in the day change meanwhile.

resolve_move() is pure. It returns None when the hover would leave the item
where it already is, or when the target cannot be found in the schedule.
"""

import logging
from typing import Optional, Sequence, Tuple

from tripboard.errors import ItemNotFoundError
from tripboard.models.drag import HoverKind, HoverTarget
from tripboard.models.schedule import MoveIntent, Schedule
from tripboard.services.schedule_store import locate

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def array_move(ids: Sequence[str], from_index: int, to_index: int) -> Tuple[str, ...]:
    """Classic list move: remove the element at from_index, reinsert it at to_index."""
    moved = list(ids)
    moved.insert(to_index, moved.pop(from_index))
    return tuple(moved)


def neighbours(ids: Sequence[str], item_id: str) -> Tuple[Optional[str], Optional[str]]:
    index = list(ids).index(item_id)
    prev_id = ids[index - 1] if index > 0 else None
    next_id = ids[index + 1] if index < len(ids) - 1 else None
    return prev_id, next_id


def _end_of_list_intent(schedule: Schedule, item_id: str, day_id: str) -> MoveIntent:
    others = [other for other in schedule.day(day_id).itemIds if other != item_id]
    return MoveIntent(
        itemId=item_id,
        targetDayId=day_id,
        prevItemId=others[-1] if others else None,
        nextItemId=None,
    )


def _is_current_position(schedule: Schedule, intent: MoveIntent, source_day_id: str) -> bool:
    if intent.targetDayId != source_day_id:
        return False
    prev_id, next_id = neighbours(schedule.day(source_day_id).itemIds, intent.itemId)
    return prev_id == intent.prevItemId and next_id == intent.nextItemId


def resolve_move(schedule: Schedule, item_id: str, target: HoverTarget) -> Optional[MoveIntent]:
    """
    Compute where item_id would land if released over target.

    Raises ItemNotFoundError when the dragged item itself is not in the schedule.
    """
    source_day, _ = locate(schedule, item_id)
    source_day_id = source_day.tripDayId

    if target.kind in (HoverKind.EMPTY_DAY, HoverKind.END_OF_LIST):
        target_day = schedule.day(target.target_id)
        if target_day is None:
            logger.debug(f"Hover over unknown day {target.target_id}, ignoring")
            return None
        others = [other for other in target_day.itemIds if other != item_id]
        if target.kind == HoverKind.EMPTY_DAY and not others:
            intent = MoveIntent(itemId=item_id, targetDayId=target_day.tripDayId)
        else:
            # an "empty day" marker over a populated day appends like end-of-list
            intent = _end_of_list_intent(schedule, item_id, target_day.tripDayId)

    else:
        over_id = target.target_id
        if over_id == item_id:
            return None
        try:
            target_day, over_index = locate(schedule, over_id)
        except ItemNotFoundError:
            logger.debug(f"Hover over unknown item {over_id}, ignoring")
            return None

        if target_day.tripDayId == source_day_id:
            # same day: neighbours are read from the post-move order
            active_index = target_day.itemIds.index(item_id)
            moved = array_move(target_day.itemIds, active_index, over_index)
            prev_id, next_id = neighbours(moved, item_id)
        else:
            # cross day: the item lands in front of the hovered one
            prev_id = target_day.itemIds[over_index - 1] if over_index > 0 else None
            next_id = over_id
        intent = MoveIntent(
            itemId=item_id,
            targetDayId=target_day.tripDayId,
            prevItemId=prev_id,
            nextItemId=next_id,
        )

    if _is_current_position(schedule, intent, source_day_id):
        return None
    return intent
