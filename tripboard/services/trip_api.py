"""
HTTP client for the trip-planning backend.

Only the operations the schedule core needs are wrapped here: moving an item,
exchanging two days, saving day notes and listing the days of a trip. Every
response body is a Result envelope {code, message, data}; only code 200 is a
success. Failures are classified into the CommitError family so callers can
roll back without looking at HTTP details.

The calls are blocking `requests` calls run in a worker thread, so awaiting
them never stalls the event loop that keeps processing drag events.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

import requests

from tripboard.config import settings
from tripboard.errors import RejectionError, StaleReferenceError, TransportError
from tripboard.models.schedule import Schedule

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SUCCESS_CODE = 200
NOT_FOUND_CODE = 404


class TripApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = settings.api_token if token is None else token
        self.timeout = timeout or settings.request_timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    # -------------------------
    # Utility
    # -------------------------
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": self.token} if self.token else {}

    def _request(self, method: str, path: str, params: Dict[str, Any]) -> Any:
        """Send one request and unwrap the Result envelope. Returns the `data` field."""
        # null anchors are omitted, not sent as empty strings
        params = {key: value for key, value in params.items() if value is not None}
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, params=params, headers=self._headers(), timeout=self.timeout)
        except requests.Timeout as e:
            logger.warning(f"{method} {path} timed out: {e}")
            raise TransportError(f"request timed out after {self.timeout}s")
        except requests.RequestException as e:
            logger.warning(f"{method} {path} failed to reach the server: {e}")
            raise TransportError(str(e))

        try:
            body = response.json()
        except ValueError:
            body = None

        message = None
        if isinstance(body, dict):
            message = body.get("message")

        if response.status_code == NOT_FOUND_CODE:
            raise StaleReferenceError(message or "Requested resource does not exist", code=NOT_FOUND_CODE)
        if not response.ok:
            raise RejectionError(message or f"Server error: HTTP {response.status_code}", code=response.status_code)
        if not isinstance(body, dict) or "code" not in body:
            raise RejectionError("Malformed response from server", code=response.status_code)

        code = body.get("code")
        if code == SUCCESS_CODE:
            return body.get("data")

        logger.warning(f"{method} {path} rejected: code={code} message={message}")
        if code == NOT_FOUND_CODE:
            raise StaleReferenceError(message or "Requested resource does not exist", code=code)
        raise RejectionError(message or "Operation failed", code=code)

    async def _call(self, method: str, path: str, params: Dict[str, Any]) -> Any:
        return await asyncio.to_thread(self._request, method, path, params)

    # -------------------------
    # Schedule operations
    # -------------------------
    async def move_item(
        self,
        trip_id: str,
        item_id: str,
        target_day_id: str,
        prev_item_id: Optional[str],
        next_item_id: Optional[str],
    ) -> None:
        await self._call("PUT", "/tripDayItems/move", {
            "tripId": trip_id,
            "currentId": item_id,
            "tripDayId": target_day_id,
            "prevId": prev_item_id,
            "nextId": next_item_id,
        })

    async def swap_day_order(self, trip_id: str, day_id_a: str, day_id_b: str) -> None:
        await self._call("PUT", "/tripDays/exchange", {
            "tripId": trip_id,
            "aTripDayId": day_id_a,
            "bTripDayId": day_id_b,
        })

    async def set_day_notes(self, trip_id: str, day_id: str, notes: str) -> None:
        await self._call("PUT", "/tripDays/note", {
            "tripId": trip_id,
            "tripDayId": day_id,
            "note": notes,
        })

    async def load_schedule(self, trip_id: str) -> Schedule:
        data = await self._call("GET", "/tripDays/list", {"tripId": trip_id})
        schedule = Schedule.from_trip_days(trip_id, data or [])
        logger.info(f"Loaded schedule for trip {trip_id}: {len(schedule.days)} days")
        return schedule
