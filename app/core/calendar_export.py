"""iCal export of the computed schedule."""

import datetime
from collections.abc import Iterable

from icalendar import Calendar, Event

from app.core.models import ShiftCategory
from app.core.types import DayInfo

# Display names per shift category
SHIFT_NAMES: dict[ShiftCategory, str] = {
    ShiftCategory.DAY: "Day shift",
    ShiftCategory.NIGHT: "Night shift",
    ShiftCategory.OFF: "Off",
}


def _event_summary(day: DayInfo) -> str:
    if day["shift_category"] == ShiftCategory.OFF:
        return day["special_event"] or SHIFT_NAMES[ShiftCategory.OFF]
    summary = f"{SHIFT_NAMES[day['shift_category']]} ({day['shift_detail']})"
    if day["special_event"]:
        summary = f"{day['special_event']} - {summary}"
    return summary


def generate_ical(
    days: Iterable[DayInfo],
    calendar_name: str,
    crew: str = "",
) -> str:
    """
    Build an iCal calendar with one all-day event per working or floater day.

    Args:
        days: Computed days, in any order
        calendar_name: X-WR-CALNAME shown by calendar clients
        crew: Crew id, part of each event UID

    Returns:
        iCal-formatted string
    """
    cal = Calendar()
    cal.add("prodid", "-//Shift Planner//shift-planner//")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", calendar_name)

    for day in days:
        # Off days are skipped unless they carry a special event
        if day["shift_category"] == ShiftCategory.OFF and not day["special_event"]:
            continue
        cal.add_component(_create_day_event(day, crew))

    return cal.to_ical().decode("utf-8")


def _create_day_event(day: DayInfo, crew: str) -> Event:
    event = Event()
    event.add("summary", _event_summary(day))
    event.add("uid", f"{day['date_key']}_{crew}_{day['shift_detail']}@shift-planner")

    event.add("dtstart", day["date"])
    event.add("dtend", day["date"] + datetime.timedelta(days=1))

    description_parts = [f"Shift: {day['shift_detail']}"]
    if day["holiday_name"]:
        description_parts.append(f"Holiday: {day['holiday_name']}")
    if day["is_custom_holiday"]:
        description_parts.append("Personal holiday")
    event.add("description", "\n".join(description_parts))

    event.add("dtstamp", datetime.datetime.now(datetime.timezone.utc))

    return event
