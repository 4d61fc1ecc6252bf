"""Day-by-day schedule data for ranges, months and the month grid."""

import datetime
from collections.abc import Iterable, Iterator, Mapping, Sequence

from app.core.config import FLOATER_LABEL
from app.core.constants import WEEKDAY_NAMES
from app.core.dates import date_key, month_bounds, month_key
from app.core.holidays import get_holiday_for_date
from app.core.models import CustomHoliday, RotationConfig
from app.core.types import DateKey, DayInfo, StarredNote

from .core import resolve_shift


def iter_dates(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Every calendar date from start to end inclusive."""
    # Counting offsets never steps past date.max
    for offset in range((end - start).days + 1):
        yield start + datetime.timedelta(days=offset)


def is_custom_holiday(key: str, ranges: Iterable[CustomHoliday]) -> bool:
    return any(holiday.contains(key) for holiday in ranges)


def build_day_info(
    date: datetime.date,
    rotation: RotationConfig,
    custom_holidays: Sequence[CustomHoliday] = (),
    floater_dates: Iterable[str] = (),
) -> DayInfo:
    """Merge rotation, holiday table, custom holidays and floaters for one date."""
    key = date_key(date)
    resolution = resolve_shift(date, rotation)

    return {
        "date": date,
        "date_key": DateKey(key),
        "weekday_name": WEEKDAY_NAMES[date.weekday()],
        "shift_category": resolution.category,
        "shift_detail": resolution.detail,
        "holiday_name": get_holiday_for_date(date),
        "is_custom_holiday": is_custom_holiday(key, custom_holidays),
        "special_event": FLOATER_LABEL if key in floater_dates else None,
    }


def generate_period_data(
    start: datetime.date,
    end: datetime.date,
    rotation: RotationConfig,
    custom_holidays: Sequence[CustomHoliday] = (),
    floater_dates: Iterable[str] = (),
) -> list[DayInfo]:
    """
    Build one DayInfo per date in [start, end].

    Args:
        start: First date (inclusive)
        end: Last date (inclusive)
        rotation: Rotation for the selected crew
        custom_holidays: User-defined holiday ranges
        floater_dates: Date keys carrying the floater label

    Returns:
        DayInfo list in date order; empty when start > end
    """
    floaters = frozenset(floater_dates)
    return [build_day_info(d, rotation, custom_holidays, floaters) for d in iter_dates(start, end)]


def generate_month_data(
    year: int,
    month: int,
    rotation: RotationConfig,
    custom_holidays: Sequence[CustomHoliday] = (),
    floater_dates: Iterable[str] = (),
) -> list[DayInfo]:
    first, last = month_bounds(year, month)
    return generate_period_data(first, last, rotation, custom_holidays, floater_dates)


def build_calendar_grid_for_month(
    year: int,
    month: int,
    days: Sequence[DayInfo],
) -> list[list[DayInfo | None]]:
    """
    Arrange a month's days into Sunday-first weeks.

    Cells before the 1st and after the last day are None, as are days
    missing from `days`.
    """
    first, last = month_bounds(year, month)
    by_date = {day["date"]: day for day in days}

    # date.weekday() is Monday-first, the grid is Sunday-first
    leading = (first.weekday() + 1) % 7
    cells: list[DayInfo | None] = [None] * leading
    cells.extend(by_date.get(d) for d in iter_dates(first, last))
    cells.extend([None] * (-len(cells) % 7))

    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def group_days_by_month(days: Iterable[DayInfo]) -> dict[str, list[DayInfo]]:
    """Group days by YYYY-MM key, preserving order within each month."""
    grouped: dict[str, list[DayInfo]] = {}
    for day in days:
        grouped.setdefault(month_key(day["date"]), []).append(day)
    return grouped


def starred_notes_for_month(
    days: Iterable[DayInfo],
    year: int,
    month: int,
    starred: Mapping[str, bool],
    notes: Mapping[str, str],
) -> list[StarredNote]:
    """Starred days of a month that also carry a non-blank note."""
    result: list[StarredNote] = []
    for day in days:
        d = day["date"]
        if d.year != year or d.month != month:
            continue
        key = day["date_key"]
        note = notes.get(key, "")
        if starred.get(key) and note.strip():
            result.append({"day": day, "note": note})
    return result
