"""Tests for the geofenced overtime check."""

import datetime
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from app.core.models import WorkLocation
from app.core.overtime import (
    OvertimeCheckRequest,
    OvertimeStatus,
    check_overtime,
    distance_meters,
)
from app.core.schedule import build_day_info, build_rotation_config

OFF_DAY = datetime.date(2025, 7, 2)  # O1 for crew A
WORK_DAY = datetime.date(2025, 7, 6)  # D1 for crew A
WORK = WorkLocation(lat=49.2827, lng=-123.1207, radius_meters=200)


def _day(date):
    return build_day_info(date, build_rotation_config("A"))


def _request(date, lat=WORK.lat, lng=WORK.lng, error=None):
    return OvertimeCheckRequest(date_key=date.isoformat(), lat=lat, lng=lng, error=error)


class TestDistance:
    def test_same_point(self):
        assert distance_meters(49.0, -123.0, 49.0, -123.0) == 0

    def test_one_degree_latitude(self):
        assert distance_meters(49.0, -123.0, 50.0, -123.0) == pytest.approx(111_195, rel=1e-3)


class TestCheckOvertime:
    def test_prompt_at_work_on_off_day(self):
        result = check_overtime(_request(OFF_DAY), _day(OFF_DAY), WORK, False, OFF_DAY)
        assert result.status == OvertimeStatus.PROMPT
        assert result.message
        assert result.distance_meters == pytest.approx(0, abs=1)

    def test_disabled_without_location(self):
        result = check_overtime(_request(OFF_DAY), _day(OFF_DAY), None, False, OFF_DAY)
        assert result.status == OvertimeStatus.DISABLED

    def test_disabled_location(self):
        location = WORK.model_copy(update={"enabled": False})
        result = check_overtime(_request(OFF_DAY), _day(OFF_DAY), location, False, OFF_DAY)
        assert result.status == OvertimeStatus.DISABLED

    def test_geolocation_error_is_reported(self):
        request = _request(OFF_DAY, lat=None, lng=None, error="User denied Geolocation")
        result = check_overtime(request, _day(OFF_DAY), WORK, False, OFF_DAY)
        assert result.status == OvertimeStatus.UNAVAILABLE
        assert result.message

    def test_stale_report_is_ignored(self):
        yesterday = OFF_DAY - datetime.timedelta(days=1)
        result = check_overtime(_request(yesterday), _day(OFF_DAY), WORK, False, OFF_DAY)
        assert result.status == OvertimeStatus.STALE

    def test_working_day(self):
        result = check_overtime(_request(WORK_DAY), _day(WORK_DAY), WORK, False, WORK_DAY)
        assert result.status == OvertimeStatus.NOT_OFF

    def test_prompted_once_per_day(self):
        result = check_overtime(_request(OFF_DAY), _day(OFF_DAY), WORK, True, OFF_DAY)
        assert result.status == OvertimeStatus.ALREADY_PROMPTED

    def test_away_from_work(self):
        request = _request(OFF_DAY, lat=49.30, lng=-123.12)
        result = check_overtime(request, _day(OFF_DAY), WORK, False, OFF_DAY)
        assert result.status == OvertimeStatus.AWAY
        assert result.distance_meters > WORK.radius_meters

    def test_coordinates_are_range_checked(self):
        with pytest.raises(ValueError):
            OvertimeCheckRequest(date_key="2025-07-02", lat=120.0, lng=0.0)
