"""
Clock abstraction

Streak and day-boundary logic reads "now" only through a Clock so it can
be pinned in tests. Calendar days are cut at local midnight of the
clock's timezone.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def now(self) -> datetime:
        """Current instant, timezone-aware"""
        ...

    def today(self) -> date:
        """Current calendar date in local time"""
        ...


class SystemClock:
    """Wall clock in a fixed timezone (system local time when tz is None)"""

    def __init__(self, tz: Optional[ZoneInfo] = None):
        self.tz = tz

    def now(self) -> datetime:
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Manually driven clock for tests and replays"""

    def __init__(self, now: datetime):
        self._now = ensure_aware(now)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def set(self, now: datetime) -> None:
        self._now = ensure_aware(now)

    def advance(self, days: int = 0, hours: int = 0, minutes: int = 0) -> datetime:
        self._now += timedelta(days=days, hours=hours, minutes=minutes)
        return self._now


def ensure_aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        logger.debug(f"Received naive datetime, assuming UTC: {dt}")
        return dt.replace(tzinfo=timezone.utc)
    return dt
