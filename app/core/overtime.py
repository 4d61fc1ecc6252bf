# app/core/overtime.py
"""
Geofenced overtime check.

On an Off day, a device that reports a position inside the saved work
location is probably working overtime, so the planner asks once per day.
The position comes from the client; failures are reported, never fatal.
"""

import datetime
import enum
import logging
import math
from typing import NamedTuple

from pydantic import BaseModel, Field

from app.core.models import ShiftCategory, WorkLocation
from app.core.types import DayInfo

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000.0

UNAVAILABLE_MESSAGE = "Location is unavailable, so overtime detection is skipped for today."
PROMPT_MESSAGE = "You are at work on a day off. Are you working overtime?"


class OvertimeStatus(str, enum.Enum):
    DISABLED = "disabled"
    UNAVAILABLE = "unavailable"
    STALE = "stale"
    NOT_OFF = "not_off"
    ALREADY_PROMPTED = "already_prompted"
    AWAY = "away"
    PROMPT = "prompt"


class OvertimeCheckRequest(BaseModel):
    """Position report from the client, or the geolocation error it got."""

    date_key: str
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    error: str | None = None


class OvertimeCheckResult(NamedTuple):
    status: OvertimeStatus
    message: str | None = None
    distance_meters: float | None = None


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance between two coordinates."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(a))


def check_overtime(
    request: OvertimeCheckRequest,
    day: DayInfo,
    work_location: WorkLocation | None,
    already_prompted: bool,
    today: datetime.date,
) -> OvertimeCheckResult:
    """
    Decide whether to ask about overtime.

    Args:
        request: Client report for `request.date_key`
        day: Computed schedule for today
        work_location: Saved work location, if any
        already_prompted: Whether today was already prompted
        today: Current calendar date

    Returns:
        OvertimeCheckResult. The caller records PROMPT results so each day
        is prompted at most once.
    """
    if work_location is None or not work_location.enabled:
        return OvertimeCheckResult(OvertimeStatus.DISABLED)

    if request.error or request.lat is None or request.lng is None:
        logger.info("Geolocation unavailable for %s: %s", request.date_key, request.error or "no position")
        return OvertimeCheckResult(OvertimeStatus.UNAVAILABLE, UNAVAILABLE_MESSAGE)

    # A report for another day arrived late; its context is gone
    if request.date_key != day["date_key"] or day["date"] != today:
        return OvertimeCheckResult(OvertimeStatus.STALE)

    if day["shift_category"] != ShiftCategory.OFF:
        return OvertimeCheckResult(OvertimeStatus.NOT_OFF)

    if already_prompted:
        return OvertimeCheckResult(OvertimeStatus.ALREADY_PROMPTED)

    distance = distance_meters(request.lat, request.lng, work_location.lat, work_location.lng)
    if distance > work_location.radius_meters:
        return OvertimeCheckResult(OvertimeStatus.AWAY, distance_meters=distance)

    return OvertimeCheckResult(OvertimeStatus.PROMPT, PROMPT_MESSAGE, distance)
