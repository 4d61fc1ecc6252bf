# app/core/constants.py
from typing import Final

# ==========================
# Crews
# ==========================

#: Crews that can be selected in the planner.
CREW_IDS: Final[tuple[str, ...]] = ("A", "B", "C", "D")

#: Crew selected when nothing has been stored yet.
DEFAULT_CREW: Final[str] = "A"

#: Display names used until the user renames a crew.
DEFAULT_CREW_NAMES: Final[dict[str, str]] = {crew: f"Crew {crew}" for crew in CREW_IDS}


# ==========================
# Weekdays
# ==========================

#: Short weekday names indexed by date.weekday() (Monday = 0).
WEEKDAY_NAMES: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

#: Full weekday names indexed by date.weekday().
WEEKDAY_NAMES_LONG: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

#: Column headers for the month grid, which starts on Sunday.
GRID_WEEKDAYS: Final[tuple[str, ...]] = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

MONTH_NAMES: Final[tuple[str, ...]] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


# ==========================
# Storage keys
# ==========================

NOTES_KEY: Final[str] = "daily-notes"
STARRED_DAYS_KEY: Final[str] = "starred-days"
CUSTOM_HOLIDAYS_KEY: Final[str] = "custom-holidays"
SELECTED_CREW_KEY: Final[str] = "selected-crew"
CREW_NAMES_KEY: Final[str] = "crew-names"
CREW_CONFIGS_KEY: Final[str] = "crew-configs"
FLOATER_DAYS_KEY: Final[str] = "floater-days"
WORK_LOCATION_KEY: Final[str] = "work-location"
OVERTIME_PROMPTS_KEY: Final[str] = "overtime-prompts"


# ==========================
# User-facing messages
# ==========================

INVALID_RANGE_MESSAGE: Final[str] = (
    "Please select a valid date range, ensuring the start date is not after the end date."
)
