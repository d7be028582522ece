"""Time Utilities for UTC management"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from billmate.config import settings


def get_utc_now() -> datetime:
    """
    Returns a naive UTC datetime.
    Matches the DB schema (TIMESTAMP WITHOUT TIME ZONE).
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def to_local(value: datetime) -> datetime:
    """Convert a naive UTC datetime to an aware datetime in the configured zone."""
    return value.replace(tzinfo=timezone.utc).astimezone(local_zone())


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive input is assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def local_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    Return the [start, end) of a local calendar day as naive UTC datetimes.

    Bills store due dates in UTC but "due on day X" is judged in the
    property's own timezone.
    """
    tz = local_zone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return to_naive_utc(start), to_naive_utc(end)


def local_today(now: Optional[datetime] = None) -> date:
    return to_local(now or get_utc_now()).date()


def local_due_date(year: int, month: int, day: int) -> datetime:
    """Due date at local midnight, stored as naive UTC. Day is clamped to the month length."""
    first_of_next = date(year + month // 12, month % 12 + 1, 1)
    last_day = (first_of_next - timedelta(days=1)).day
    start, _ = local_day_bounds(date(year, month, min(day, last_day)))
    return start


def format_thai_date(value: datetime) -> str:
    """dd/mm/yyyy in local time, the format used in tenant-facing messages."""
    return to_local(value).strftime("%d/%m/%Y")
