"""British Columbia statutory holidays, looked up by exact date key."""

import datetime

from app.core.dates import date_key

HOLIDAYS: dict[str, str] = {
    # 2025
    "2025-01-01": "New Year's Day",
    "2025-02-17": "Family Day",
    "2025-04-18": "Good Friday",
    "2025-05-19": "Victoria Day",
    "2025-07-01": "Canada Day",
    "2025-08-04": "BC Day",
    "2025-09-01": "Labour Day",
    "2025-09-30": "Truth & Rec.",
    "2025-10-13": "Thanksgiving",
    "2025-11-11": "Remembrance Day",
    "2025-12-25": "Christmas Day",
    # 2026
    "2026-01-01": "New Year's Day",
    "2026-02-16": "Family Day",
    "2026-04-03": "Good Friday",
    "2026-05-18": "Victoria Day",
    "2026-07-01": "Canada Day",
    "2026-08-03": "BC Day",
    "2026-09-07": "Labour Day",
    "2026-09-30": "Truth & Rec.",
    "2026-10-12": "Thanksgiving",
    "2026-11-11": "Remembrance Day",
    "2026-12-25": "Christmas Day",
}


def get_holiday_for_date(date: datetime.date) -> str | None:
    """Holiday name for a date, or None when the date is not in the table."""
    return HOLIDAYS.get(date_key(date))


def get_holidays_for_month(year: int, month: int) -> list[tuple[str, str]]:
    """(date_key, name) pairs for one month, in date order."""
    prefix = f"{year:04d}-{month:02d}-"
    return sorted((key, name) for key, name in HOLIDAYS.items() if key.startswith(prefix))
