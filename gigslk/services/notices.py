"""Transient, dismissible notices shown alongside an editor."""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    expires_at: float | None  # None: stays until dismissed


class NoticeBoard:
    """At most one live notice per level, each expiring on its own.

    Expiry is evaluated lazily against `clock` (monotonic seconds), so
    an expired notice simply stops showing up in `active()`.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._notices: dict[NoticeLevel, Notice] = {}

    def post(self, level: NoticeLevel, message: str, lifetime: float | None = None) -> Notice:
        """Show a notice, replacing any live notice of the same level."""
        expires_at = self._clock() + lifetime if lifetime is not None else None
        notice = Notice(level=level, message=message, expires_at=expires_at)
        self._notices[level] = notice
        return notice

    def active(self) -> list[Notice]:
        now = self._clock()
        expired = [
            level
            for level, notice in self._notices.items()
            if notice.expires_at is not None and notice.expires_at <= now
        ]
        for level in expired:
            del self._notices[level]
        return list(self._notices.values())

    def get(self, level: NoticeLevel) -> Notice | None:
        for notice in self.active():
            if notice.level is level:
                return notice
        return None

    def dismiss(self, level: NoticeLevel) -> bool:
        return self._notices.pop(level, None) is not None

    def clear(self) -> None:
        self._notices.clear()
