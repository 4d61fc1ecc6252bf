# app/core/dates.py
"""
Calendar helpers shared by the resolver, the assembler and the views.

All rotation arithmetic works on plain calendar dates. Timestamps are
normalized to their UTC calendar day before they reach the schedule code,
so the result never depends on the server's local timezone.
"""

import calendar
import datetime
from zoneinfo import ZoneInfo

from app.core.config import DATE_FORMAT_ISO, MONTH_FORMAT_ISO, TIMEZONE, TodayMode


def to_utc_date(value: datetime.date | datetime.datetime) -> datetime.date:
    """Return the UTC calendar date of a date or datetime (naive datetimes count as UTC)."""
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc)
        return value.date()
    return value


def date_key(value: datetime.date | datetime.datetime) -> str:
    """Zero-padded YYYY-MM-DD key built from UTC calendar components."""
    day = to_utc_date(value)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(key: str) -> datetime.date:
    """
    Parse a YYYY-MM-DD key back into a date.

    Raises:
        ValueError: If the key is empty or not a valid calendar date
    """
    if not key:
        raise ValueError("Empty date key")
    return datetime.datetime.strptime(key.strip(), DATE_FORMAT_ISO).date()


def is_valid_date_key(key: str | None) -> bool:
    if not key:
        return False
    try:
        return date_key(parse_date_key(key)) == key
    except ValueError:
        return False


def month_key(value: datetime.date) -> str:
    return value.strftime(MONTH_FORMAT_ISO)


def days_between(start: datetime.date | datetime.datetime, end: datetime.date | datetime.datetime) -> int:
    """Signed number of days from start to end."""
    return (to_utc_date(end) - to_utc_date(start)).days


def get_timezone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or TIMEZONE)


def get_today(tz: ZoneInfo | None = None) -> datetime.date:
    """Today's calendar date in the configured timezone."""
    return datetime.datetime.now(tz or get_timezone()).date()


def is_same_calendar_day(
    day: datetime.date,
    now: datetime.datetime,
    mode: TodayMode = "legacy",
    tz: ZoneInfo | None = None,
) -> bool:
    """
    Check whether a UTC-normalized calendar day is "today".

    Modes:
    - legacy: the day is read as UTC midnight and its local components are
      compared with the local components of `now`. West of UTC this shifts
      the stored day back by one, so "today" is misclassified near midnight.
      Kept as the default for compatibility with existing schedules.
    - local: the day is compared with the calendar date of `now` in `tz`.
    - utc: the day is compared with the calendar date of `now` in UTC.
    """
    tz = tz or get_timezone()
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)

    if mode == "utc":
        return day == now.astimezone(datetime.timezone.utc).date()
    if mode == "local":
        return day == now.astimezone(tz).date()
    if mode == "legacy":
        utc_midnight = datetime.datetime.combine(day, datetime.time.min, tzinfo=datetime.timezone.utc)
        return utc_midnight.astimezone(tz).date() == now.astimezone(tz).date()

    raise ValueError(f"Unsupported today mode: {mode}")


def month_bounds(year: int, month: int) -> tuple[datetime.date, datetime.date]:
    """First and last day of a month."""
    _, days_in_month = calendar.monthrange(year, month)
    return datetime.date(year, month, 1), datetime.date(year, month, days_in_month)


def clamp_to_schedule(
    day: datetime.date,
    schedule_start: datetime.date,
    schedule_end: datetime.date,
) -> datetime.date:
    """Keep a date inside the schedule window (used for the initial month)."""
    if day < schedule_start:
        return schedule_start
    if day > schedule_end:
        return schedule_end
    return day


def get_month_navigation(
    year: int,
    month: int,
    schedule_start: datetime.date,
    schedule_end: datetime.date,
) -> dict[str, tuple[int, int] | None]:
    """
    Previous and next month as (year, month), or None outside the schedule window.

    A month is reachable when any of its days lies inside the window.
    """
    first, last = month_bounds(year, month)

    prev_month = None
    if first > schedule_start:
        prev_last = first - datetime.timedelta(days=1)
        prev_month = (prev_last.year, prev_last.month)

    next_month = None
    if last < schedule_end:
        next_first = last + datetime.timedelta(days=1)
        next_month = (next_first.year, next_first.month)

    return {"prev": prev_month, "next": next_month}
