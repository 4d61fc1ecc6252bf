"""
Integration tests for FastAPI endpoints.

Tests verify the HTML views, the JSON API and the export downloads against
an in-memory database.
"""

import datetime
import sys
from pathlib import Path

from icalendar import Calendar

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from app.core.constants import INVALID_RANGE_MESSAGE
from app.core.schedule import resolve_shift


class TestPublicRoutes:
    """Health check and HTML pages."""

    def test_health_endpoint_returns_ok(self, test_client):
        """GET /health should return 200 OK for monitoring."""
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"

    def test_request_id_header(self, test_client):
        response = test_client.get("/health")
        assert response.headers.get("X-Request-ID")

    def test_root_redirects_to_month_view(self, test_client):
        response = test_client.get("/", follow_redirects=False)

        assert response.status_code in [302, 303, 307]
        assert response.headers["location"] == "/month"

    def test_month_view_renders_grid(self, test_client):
        response = test_client.get("/month?year=2025&month=7")

        assert response.status_code == 200
        assert "text/html" in response.headers.get("content-type", "")
        assert "July 2025" in response.text
        assert "Canada Day" in response.text

    def test_month_view_defaults_to_today(self, test_client, fixed_today):
        response = test_client.get("/month")
        assert "July 2025" in response.text

    def test_month_outside_window_is_clamped(self, test_client):
        response = test_client.get("/month?year=2030&month=1", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "/month?year=2026&month=6"

    def test_invalid_month_returns_400(self, test_client):
        response = test_client.get("/month?year=2025&month=13")
        assert response.status_code == 400

    def test_months_at_calendar_edges_are_clamped(self, test_client):
        last = test_client.get("/month?year=9999&month=12", follow_redirects=False)
        first = test_client.get("/month?year=1&month=1", follow_redirects=False)

        assert last.status_code == 302
        assert last.headers["location"] == "/month?year=2026&month=6"
        assert first.status_code == 302
        assert first.headers["location"] == "/month?year=2025&month=7"

    def test_day_view(self, test_client):
        response = test_client.get("/day/2025-12-25")

        assert response.status_code == 200
        assert "Christmas Day" in response.text

    def test_day_view_rejects_bad_key(self, test_client):
        response = test_client.get("/day/2025-12-32")
        assert response.status_code == 400

    def test_note_form_saves_and_redirects(self, test_client):
        response = test_client.post(
            "/day/2025-07-04/note",
            data={"text": "Fireworks"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/month?year=2025&month=7"
        assert test_client.get("/api/notes").json() == {"2025-07-04": "Fireworks"}

    def test_star_form_toggles(self, test_client):
        test_client.post("/day/2025-07-04/star", follow_redirects=False)
        assert test_client.get("/api/starred").json() == {"2025-07-04": True}

    def test_starred_note_listed_under_month(self, test_client):
        test_client.post("/day/2025-07-04/note", data={"text": "Fireworks"}, follow_redirects=False)
        test_client.post("/day/2025-07-04/star", follow_redirects=False)

        response = test_client.get("/month?year=2025&month=7")
        assert "Fireworks" in response.text

    def test_settings_page(self, test_client):
        response = test_client.get("/settings")
        assert response.status_code == 200
        assert "Crew A" in response.text

    def test_invalid_holiday_form_shows_message(self, test_client):
        response = test_client.post(
            "/settings/holidays/add",
            data={"start": "2025-07-10", "end": "2025-07-04"},
        )

        assert response.status_code == 400
        assert INVALID_RANGE_MESSAGE in response.text

    def test_crew_pattern_form(self, test_client):
        response = test_client.post(
            "/settings/crew-pattern",
            data={"crew": "B", "pattern": "Day, Day, Off, Off", "anchor": "2025-01-01"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        crews = {c["crew"]: c for c in test_client.get("/api/crews").json()}
        assert crews["B"]["rotation"]["kind"] == "independent"
        assert crews["B"]["rotation"]["pattern"] == ["Day", "Day", "Off", "Off"]


class TestScheduleApi:
    def test_days_for_range(self, test_client):
        response = test_client.get("/api/days", params={"start": "2025-07-01", "end": "2025-07-09"})

        assert response.status_code == 200
        data = response.json()
        assert data["crew"] == "A"
        details = [d["shift_detail"] for d in data["days"]]
        assert details == ["N2", "O1", "O2", "O3", "O4", "D1", "D2", "N1", "N2"]
        assert data["days"][0]["shift_category"] == "Night"
        assert data["days"][0]["date"] == "2025-07-01"

    def test_days_for_other_crew(self, test_client):
        response = test_client.get("/api/days", params={"start": "2025-07-01", "end": "2025-07-01", "crew": "B"})
        assert response.json()["days"][0]["shift_detail"] == "O2"

    def test_unknown_crew_returns_404(self, test_client):
        response = test_client.get("/api/days", params={"crew": "E"})
        assert response.status_code == 404

    def test_reversed_range_returns_400(self, test_client):
        response = test_client.get("/api/days", params={"start": "2025-07-09", "end": "2025-07-01"})
        assert response.status_code == 400

    def test_overlong_range_returns_400(self, test_client):
        response = test_client.get("/api/days", params={"start": "2025-01-01", "end": "2027-01-02"})
        assert response.status_code == 400

    def test_last_representable_date(self, test_client):
        response = test_client.get("/api/days", params={"start": "9999-12-31", "end": "9999-12-31", "crew": "A"})

        assert response.status_code == 200
        assert [d["date"] for d in response.json()["days"]] == ["9999-12-31"]
        assert test_client.get("/api/days/9999-12-31").status_code == 200

    def test_single_day(self, test_client):
        test_client.put("/api/notes/2025-10-08", json={"text": "Long weekend"})

        data = test_client.get("/api/days/2025-10-08").json()
        assert data["day"]["special_event"] == "Floater"
        assert data["note"] == "Long weekend"
        assert data["starred"] is False


class TestOverlayApi:
    def test_blank_note_deletes(self, test_client):
        test_client.put("/api/notes/2025-07-04", json={"text": "x"})
        response = test_client.put("/api/notes/2025-07-04", json={"text": " "})

        assert response.json() == {"date_key": "2025-07-04", "text": ""}
        assert test_client.get("/api/notes").json() == {}

    def test_toggle_star(self, test_client):
        assert test_client.post("/api/starred/2025-07-04/toggle").json()["starred"] is True
        assert test_client.post("/api/starred/2025-07-04/toggle").json()["starred"] is False

    def test_custom_holiday_lifecycle(self, test_client):
        response = test_client.post("/api/custom-holidays", json={"start": "2025-07-04", "end": "2025-07-10"})
        assert response.status_code == 201
        assert test_client.get("/api/custom-holidays").json() == [{"start": "2025-07-04", "end": "2025-07-10"}]

        days = test_client.get("/api/days", params={"start": "2025-07-03", "end": "2025-07-11"}).json()["days"]
        assert [d["is_custom_holiday"] for d in days] == [False] + [True] * 7 + [False]

        response = test_client.delete("/api/custom-holidays", params={"start": "2025-07-04", "end": "2025-07-10"})
        assert response.status_code == 204
        assert test_client.get("/api/custom-holidays").json() == []

    def test_invalid_custom_holiday(self, test_client):
        response = test_client.post("/api/custom-holidays", json={"start": "2025-07-10", "end": "2025-07-04"})

        assert response.status_code == 400
        assert response.json()["detail"] == INVALID_RANGE_MESSAGE

    def test_delete_missing_holiday_returns_404(self, test_client):
        response = test_client.delete("/api/custom-holidays", params={"start": "2025-07-04", "end": "2025-07-10"})
        assert response.status_code == 404

    def test_floaters(self, test_client):
        assert test_client.get("/api/floaters").json() == {"dates": ["2025-10-08", "2026-04-08"]}

        response = test_client.put("/api/floaters", json={"dates": ["2025-12-24"]})
        assert response.json() == {"dates": ["2025-12-24"]}

        response = test_client.put("/api/floaters", json={"dates": ["2025-12-24", "2025-12-26", "2025-12-31"]})
        assert response.status_code == 400

    def test_select_crew(self, test_client):
        response = test_client.put("/api/crew", json={"crew": "C"})
        assert response.json() == {"crew": "C", "name": "Crew C"}
        assert test_client.get("/api/crew").json()["crew"] == "C"

        assert test_client.put("/api/crew", json={"crew": "Z"}).status_code == 404

    def test_crew_config_and_name(self, test_client):
        response = test_client.put("/api/crews/D/config", json={"pattern": ["7:30-3", "Off"], "anchor": "2025-07-01"})
        assert response.status_code == 200
        assert response.json()["rotation"]["kind"] == "independent"

        day = test_client.get("/api/days/2025-07-01", params={"crew": "D"}).json()["day"]
        assert day["shift_detail"] == "7:30-3"
        assert day["shift_category"] == "Day"

        response = test_client.delete("/api/crews/D/config")
        assert response.json()["rotation"]["kind"] == "offset"

        response = test_client.put("/api/crews/D/name", json={"name": "Delta"})
        assert response.json() == {"crew": "D", "name": "Delta"}


class TestOvertimeApi:
    WORK = {"lat": 49.2827, "lng": -123.1207, "radius_meters": 200, "enabled": True}

    def test_disabled_without_work_location(self, test_client, fixed_today):
        response = test_client.post("/api/overtime/check", json={"date_key": "2025-07-02", "lat": 49.0, "lng": -123.0})
        assert response.json()["status"] == "disabled"

    def test_prompts_once_per_day(self, test_client, fixed_today):
        test_client.put("/api/work-location", json=self.WORK)
        body = {"date_key": "2025-07-02", "lat": self.WORK["lat"], "lng": self.WORK["lng"]}

        first = test_client.post("/api/overtime/check", json=body).json()
        second = test_client.post("/api/overtime/check", json=body).json()

        assert first["status"] == "prompt"
        assert second["status"] == "already_prompted"

    def test_not_off_on_working_day(self, test_client, fixed_today):
        fixed_today(datetime.date(2025, 7, 6))
        test_client.put("/api/work-location", json=self.WORK)

        body = {"date_key": "2025-07-06", "lat": self.WORK["lat"], "lng": self.WORK["lng"]}
        assert test_client.post("/api/overtime/check", json=body).json()["status"] == "not_off"

    def test_geolocation_error(self, test_client, fixed_today):
        test_client.put("/api/work-location", json=self.WORK)
        response = test_client.post("/api/overtime/check", json={"date_key": "2025-07-02", "error": "timeout"})

        data = response.json()
        assert data["status"] == "unavailable"
        assert data["message"]


class TestExports:
    def test_notes_csv(self, test_client):
        test_client.put("/api/notes/2025-07-04", json={"text": "Fireworks, late"})
        response = test_client.get("/export/notes.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert '2025-07-04,Fri,Off,No,"Fireworks, late"' in response.text

    def test_notes_pdf(self, test_client):
        test_client.put("/api/notes/2025-07-04", json={"text": "Fireworks"})
        response = test_client.get("/export/notes-2025-07.pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_notes_pdf_empty_month(self, test_client):
        response = test_client.get("/export/notes-2025-08.pdf")
        assert response.status_code == 404

    def test_notes_pdf_bad_month(self, test_client):
        assert test_client.get("/export/notes-2025-13.pdf").status_code == 400
        assert test_client.get("/export/notes-july.pdf").status_code == 400

    def test_notes_pdf_at_calendar_edges(self, test_client):
        assert test_client.get("/export/notes-9999-12.pdf").status_code == 404
        assert test_client.get("/export/notes-0001-01.pdf").status_code == 404

    def test_oversized_export_ranges_return_400(self, test_client):
        params = {"start": "1000-01-01", "end": "2999-12-31"}

        assert test_client.get("/export/notes.csv", params=params).status_code == 400
        assert test_client.get("/export/calendar.ics", params=params).status_code == 400
        assert resolve_shift.cache_info().currsize == 0

    def test_calendar_ics(self, test_client):
        response = test_client.get("/export/calendar.ics", params={"start": "2025-07-01", "end": "2025-07-08"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/calendar")
        cal = Calendar.from_ical(response.text)
        # N2, D1, D2, N1 for crew A
        assert len(cal.walk("VEVENT")) == 4
