# app/core/types.py

"""
Custom type definitions for the planner.

The DateKey NewType keeps date keys apart from ordinary strings,
and the TypedDicts describe the per-day records handed to views and exports.
"""

from datetime import date
from typing import NamedTuple, NewType, TypedDict

from app.core.models import ShiftCategory

DateKey = NewType("DateKey", str)


class ShiftResolution(NamedTuple):
    """Result of resolving one date against a rotation."""

    detail: str
    category: ShiftCategory


class DayInfo(TypedDict):
    """
    Computed data for one calendar day.

    Never persisted; rebuilt whenever the range, crew, pattern, custom
    holidays or floater dates change.
    """

    date: date
    date_key: DateKey
    weekday_name: str
    shift_category: ShiftCategory
    shift_detail: str
    holiday_name: str | None
    is_custom_holiday: bool
    special_event: str | None


class StarredNote(TypedDict):
    """A starred day with its note, listed under the month grid."""

    day: DayInfo
    note: str
