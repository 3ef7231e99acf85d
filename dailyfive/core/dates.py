"""Calendar-day helpers.

All day boundaries are computed in one configured timezone
(``DAY_BOUNDARY_TZ``) so every caller agrees on what "today" is.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from dailyfive.core.config import settings
from dailyfive.core.errors import ValidationError


def today(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Return the current calendar date in the day-boundary timezone."""
    zone = ZoneInfo(tz_name or settings.DAY_BOUNDARY_TZ)
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).date()


def iso_day(day: date) -> str:
    return day.isoformat()


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string (a trailing time part is ignored)."""
    try:
        return date.fromisoformat(value.split("T")[0])
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def trailing_days(end: date, count: int) -> List[date]:
    """``count`` consecutive days ending at ``end``, oldest first."""
    return [end - timedelta(days=offset) for offset in range(count - 1, -1, -1)]
