"""
Exception hierarchy for the schedule core.

Local errors (ScheduleError, DragSessionError) signal programming or gesture
problems and are mapped to HTTP status codes by the routers.

CommitError and its subclasses describe why the remote rejected, or never
received, a change. They are always handled by rolling back the optimistic
state; nothing is retried automatically.
"""

from typing import Optional


class ScheduleError(Exception):
    """Base class for errors raised by the schedule model transforms."""


class ItemNotFoundError(ScheduleError, KeyError):
    def __init__(self, item_id: str):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item {self.item_id} is not in the schedule"


class DayNotFoundError(ScheduleError, KeyError):
    def __init__(self, day_id: str):
        super().__init__(day_id)
        self.day_id = day_id

    def __str__(self) -> str:
        return f"Day {self.day_id} is not in the schedule"


class DuplicateItemError(ScheduleError):
    def __init__(self, item_id: str, day_id: str):
        super().__init__(item_id)
        self.item_id = item_id
        self.day_id = day_id

    def __str__(self) -> str:
        return f"Item {self.item_id} is already placed in day {self.day_id}"


class DragSessionError(Exception):
    """Invalid drag session transition (e.g. start while another drag is active)."""


class CommitError(Exception):
    """A remote change was not applied. The local optimistic state must be rolled back."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code

    def user_message(self) -> str:
        return self.message


class StaleReferenceError(CommitError):
    """An anchor or target names an item/day that no longer exists."""

    def user_message(self) -> str:
        return "The schedule changed elsewhere; please try again"


class TransportError(CommitError):
    """The request never reached the server (connection refused, timeout...)."""

    def user_message(self) -> str:
        return f"Network error: {self.message}"


class RejectionError(CommitError):
    """The server answered with a non-success business code or HTTP status."""
