"""
Clock

"Today" for deadline comparisons. Injected into the lifecycle and archive
engines so tests can pin the date.
"""

from datetime import date, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from hr_portal.core.config import settings


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the configured time zone."""

    def __init__(self, timezone: str | None = None):
        self.tz = ZoneInfo(timezone or settings.timezone)

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def now(self) -> datetime:
        return datetime.now(self.tz)


def get_clock() -> Clock:
    """FastAPI dependency returning the system clock."""
    return SystemClock()
