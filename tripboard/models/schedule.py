from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List, Tuple


# ---------------------------
# Core Models
# ---------------------------

class TripDayItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    itemId: str
    tripDayId: str
    entityId: str
    isPoi: bool = True
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    estimatedCost: Optional[float] = None
    transportNotes: Optional[str] = None
    notes: Optional[str] = None
    entity: Optional[Dict[str, Any]] = Field(default=None, exclude=True)  # POI / non-POI record, display only


class TripDay(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    tripDayId: str
    dayDate: Optional[str] = None   # YYYY-MM-DD
    notes: Optional[str] = None
    itemIds: Tuple[str, ...] = ()   # authoritative order within the day


class Schedule(BaseModel):
    """
    Two-level ordered itinerary for one trip.

    Items live in an arena keyed by itemId; each day only holds the ordered
    sequence of keys. Instances are never mutated: every transform in
    schedule_store returns a new Schedule that shares the unchanged days and
    items with its source.
    """
    model_config = ConfigDict(frozen=True)

    tripId: str
    days: Tuple[TripDay, ...] = ()
    items: Dict[str, TripDayItem] = Field(default_factory=dict)

    @classmethod
    def from_trip_days(cls, trip_id: str, trip_days: List[Dict[str, Any]]) -> "Schedule":
        """
        Build a schedule from the remote "list trip days" payload:
        [{"tripDay": {...}, "tripDayItems": [{"item": {...}, "entity": {...}}]}]
        """
        days: List[TripDay] = []
        items: Dict[str, TripDayItem] = {}
        for entry in trip_days or []:
            day_data = entry.get("tripDay") or {}
            day_id = day_data["tripDayId"]
            item_ids = []
            for day_item in entry.get("tripDayItems") or []:
                item_data = dict(day_item.get("item") or {})
                item_data["tripDayId"] = day_id
                item_data["entity"] = day_item.get("entity")
                item = TripDayItem(**item_data)
                items[item.itemId] = item
                item_ids.append(item.itemId)
            days.append(TripDay(
                tripDayId=day_id,
                dayDate=day_data.get("dayDate"),
                notes=day_data.get("notes"),
                itemIds=tuple(item_ids),
            ))
        return cls(tripId=trip_id, days=tuple(days), items=items)

    def day(self, day_id: str) -> Optional[TripDay]:
        for day in self.days:
            if day.tripDayId == day_id:
                return day
        return None

    def day_index(self, day_id: str) -> int:
        for index, day in enumerate(self.days):
            if day.tripDayId == day_id:
                return index
        return -1

    def day_ids(self) -> Tuple[str, ...]:
        return tuple(day.tripDayId for day in self.days)

    def ordered_items(self, day_id: str) -> List[TripDayItem]:
        day = self.day(day_id)
        if day is None:
            return []
        return [self.items[item_id] for item_id in day.itemIds]

    def arrangement(self) -> Dict[str, Tuple[str, ...]]:
        """dayId -> ordered itemIds, the part of the schedule a drag can change."""
        return {day.tripDayId: day.itemIds for day in self.days}


class MoveIntent(BaseModel):
    """
    Final position of a dragged item, expressed by its neighbours in the target day.
    Both anchors empty means the item is the only element of the target day.
    """
    model_config = ConfigDict(frozen=True)

    itemId: str
    targetDayId: str
    prevItemId: Optional[str] = None
    nextItemId: Optional[str] = None


# ---------------------------
# View Models
# ---------------------------

class TripDayItemView(BaseModel):
    item: TripDayItem
    entity: Optional[Dict[str, Any]] = None


class TripDayView(BaseModel):
    tripDay: Dict[str, Any]
    tripDayItems: List[TripDayItemView] = []


class ScheduleView(BaseModel):
    tripId: str
    tripDays: List[TripDayView] = []
    dragActive: bool = False

    @classmethod
    def from_schedule(cls, schedule: Schedule, drag_active: bool = False) -> "ScheduleView":
        trip_days = []
        for day in schedule.days:
            trip_days.append(TripDayView(
                tripDay={
                    "tripDayId": day.tripDayId,
                    "tripId": schedule.tripId,
                    "dayDate": day.dayDate,
                    "notes": day.notes,
                },
                tripDayItems=[
                    TripDayItemView(item=item, entity=item.entity)
                    for item in schedule.ordered_items(day.tripDayId)
                ],
            ))
        return cls(tripId=schedule.tripId, tripDays=trip_days, dragActive=drag_active)
