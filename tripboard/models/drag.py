from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field

from tripboard.models.schedule import MoveIntent, ScheduleView


EMPTY_DAY_PREFIX = "empty-day-"
END_OF_DAY_PREFIX = "end-of-day-"


class HoverKind(str, Enum):
    ITEM = "item"
    EMPTY_DAY = "empty_day"
    END_OF_LIST = "end_of_list"


@dataclass(frozen=True)
class HoverTarget:
    """What the pointer is currently over: an item, or a day-level drop marker."""
    kind: HoverKind
    target_id: str   # itemId for ITEM, tripDayId for the markers

    @classmethod
    def item(cls, item_id: str) -> "HoverTarget":
        return cls(HoverKind.ITEM, item_id)

    @classmethod
    def empty_day(cls, day_id: str) -> "HoverTarget":
        return cls(HoverKind.EMPTY_DAY, day_id)

    @classmethod
    def end_of_list(cls, day_id: str) -> "HoverTarget":
        return cls(HoverKind.END_OF_LIST, day_id)

    @classmethod
    def from_droppable_id(cls, over_id: str) -> "HoverTarget":
        """Parse the droppable ids rendered by the view layer ("empty-day-<id>", "end-of-day-<id>", item id)."""
        if over_id.startswith(EMPTY_DAY_PREFIX):
            return cls.empty_day(over_id[len(EMPTY_DAY_PREFIX):])
        if over_id.startswith(END_OF_DAY_PREFIX):
            return cls.end_of_list(over_id[len(END_OF_DAY_PREFIX):])
        return cls.item(over_id)


class DragStatus(str, Enum):
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    CANCELLED = "cancelled"


@dataclass
class CommitResult:
    ok: bool
    error: Optional[Exception] = None


@dataclass
class DragOutcome:
    status: DragStatus
    intent: Optional[MoveIntent] = None
    error: Optional[Exception] = None


@dataclass
class EditOutcome:
    ok: bool
    error: Optional[Exception] = None


# ---------------------------
# Request/Response Models
# ---------------------------

class DragStartRequest(BaseModel):
    itemId: str = Field(..., min_length=1)


class DragHoverRequest(BaseModel):
    overId: str = Field(..., min_length=1, description="Droppable id under the pointer")


class SwapDaysRequest(BaseModel):
    aTripDayId: str
    bTripDayId: str


class DayNotesRequest(BaseModel):
    notes: str = ""


class DragStateResponse(BaseModel):
    ok: bool = True
    dragActive: bool
    changed: bool = False
    intent: Optional[MoveIntent] = None
    schedule: ScheduleView


class DragEndResponse(BaseModel):
    ok: bool
    status: DragStatus
    intent: Optional[MoveIntent] = None
    message: Optional[str] = None
    schedule: ScheduleView


class EditResponse(BaseModel):
    ok: bool
    message: Optional[str] = None
    schedule: ScheduleView


class NoticesResponse(BaseModel):
    ok: bool = True
    notices: List[Dict[str, Any]] = []
