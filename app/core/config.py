# app/core/config.py

import datetime
import os
from pathlib import Path
from typing import Final, Literal

TodayMode = Literal["legacy", "local", "utc"]
TODAY_MODES: Final[tuple[str, ...]] = ("legacy", "local", "utc")


# ==========================
# Date formats
# ==========================

#: ISO format for date keys ("2025-07-01").
#: Every key in notes, starred-days and custom-holidays uses this format.
DATE_FORMAT_ISO: Final[str] = "%Y-%m-%d"

#: Month key format ("2025-07"), used for grouping and PDF export names.
MONTH_FORMAT_ISO: Final[str] = "%Y-%m"


def _env_date(name: str, default: str) -> datetime.date:
    return datetime.datetime.strptime(os.getenv(name, default), DATE_FORMAT_ISO).date()


# ==========================
# Rotation
# ==========================

#: Day zero of the default rotation. The cycle starts with "N2" on this date.
REFERENCE_DATE: Final[datetime.date] = datetime.date(2025, 7, 1)

#: Default 8-day cycle: two nights, four off, two days.
DEFAULT_SHIFT_CYCLE: Final[tuple[str, ...]] = ("N2", "O1", "O2", "O3", "O4", "D1", "D2", "N1")

#: Phase offset in days per crew when all crews share the default cycle.
DEFAULT_CREW_OFFSETS: Final[dict[str, int]] = {
    "A": 0,
    "B": 2,
    "C": 4,
    "D": 6,
}

#: Label used for a missing or blank cycle position.
OFF_LABEL: Final[str] = "Off"


# ==========================
# Schedule window
# ==========================

#: First and last day the month view navigates to.
SCHEDULE_START: Final[datetime.date] = _env_date("SHIFT_PLANNER_SCHEDULE_START", "2025-07-01")
SCHEDULE_END: Final[datetime.date] = _env_date("SHIFT_PLANNER_SCHEDULE_END", "2026-06-30")

#: Longest range, in days, one request may compute (API, CSV and iCal).
MAX_RANGE_DAYS: Final[int] = 731


# ==========================
# Floater days
# ==========================

FLOATER_LABEL: Final[str] = "Floater"
MAX_FLOATER_DAYS: Final[int] = 2
DEFAULT_FLOATER_DATES: Final[tuple[str, ...]] = ("2025-10-08", "2026-04-08")


# ==========================
# Timezone and "today"
# ==========================

#: Timezone used to decide which calendar day is "today".
TIMEZONE: Final[str] = os.getenv("SHIFT_PLANNER_TIMEZONE", "America/Vancouver")

#: How "today" is compared against a UTC-normalized day.
#: "legacy" keeps the historical behavior (see dates.is_same_calendar_day),
#: "local" and "utc" compare both sides in the same timezone.
TODAY_MODE: Final[TodayMode] = os.getenv("SHIFT_PLANNER_TODAY_MODE", "legacy")  # type: ignore[assignment]


# ==========================
# Database
# ==========================

_DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "database" / "planner.db"

DATABASE_URL: Final[str] = os.getenv("SHIFT_PLANNER_DATABASE_URL", f"sqlite:///{_DEFAULT_DB_PATH}")


# ==========================
# Overtime
# ==========================

#: Number of date keys kept in the "already asked about overtime" history.
OVERTIME_PROMPT_HISTORY: Final[int] = 62
