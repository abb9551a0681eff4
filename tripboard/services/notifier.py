"""
Transient user-visible notices ("toasts").

The view layer polls /notices and renders whatever is pending; each notice
carries its own auto-hide duration. The center only keeps the most recent
max_notices entries so an unattended page cannot grow it without bound.
"""

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Deque, Dict, Any, List, Optional

from tripboard.config import settings

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SEVERITIES = ("success", "info", "warning", "error")


@dataclass
class Notice:
    severity: str
    message: str
    durationMs: int
    noticeId: str = field(default_factory=lambda: f"ntc_{uuid.uuid4().hex[:10]}")
    createdAt: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NoticeCenter:
    def __init__(self, max_notices: Optional[int] = None):
        self._notices: Deque[Notice] = deque(maxlen=max_notices or settings.max_notices)

    def show(self, message: str, severity: str = "error", duration_ms: Optional[int] = None) -> Notice:
        if severity not in SEVERITIES:
            raise ValueError(f"Invalid severity: {severity}. Must be one of {SEVERITIES}")
        if duration_ms is None:
            duration_ms = settings.notice_success_duration_ms if severity in ("success", "info") else settings.notice_error_duration_ms
        notice = Notice(severity=severity, message=message, durationMs=duration_ms)
        self._notices.append(notice)
        logger.info(f"Notice [{severity}]: {message}")
        return notice

    def error(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self.show(message, "error", duration_ms)

    def warning(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self.show(message, "warning", duration_ms)

    def success(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self.show(message, "success", duration_ms)

    def info(self, message: str, duration_ms: Optional[int] = None) -> Notice:
        return self.show(message, "info", duration_ms)

    def pending(self) -> List[Notice]:
        return list(self._notices)

    def drain(self) -> List[Notice]:
        """Return and forget every pending notice."""
        notices = list(self._notices)
        self._notices.clear()
        return notices
