# app/routes/calendar.py
"""
HTML views: month grid, day editor and settings.
"""

import datetime
import re

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.config import MAX_FLOATER_DAYS, SCHEDULE_END, SCHEDULE_START
from app.core.constants import MONTH_NAMES, WEEKDAY_NAMES_LONG
from app.core.dates import clamp_to_schedule, get_month_navigation, month_bounds, parse_date_key
from app.core.helpers import render_template
from app.core.holidays import get_holidays_for_month
from app.core.logging_config import get_logger
from app.core.models import CrewConfig, WorkLocation
from app.core.overlays import OverlayValidationError, PlannerState
from app.core.schedule import (
    build_calendar_grid_for_month,
    build_day_info,
    generate_month_data,
    starred_notes_for_month,
)
from app.core.validators import validate_date_key, validate_date_params

from .shared import current_date, get_state, templates

logger = get_logger(__name__)

router = APIRouter(tags=["calendar"])

# Entries in the pattern textarea are separated by commas or newlines
_PATTERN_SEPARATOR = re.compile(r"[,\n]")


def _month_url(year: int, month: int) -> str:
    return f"/month?year={year}&month={month}"


def _settings_page(request: Request, state: PlannerState, error: str | None = None, status_code: int = 200):
    crew_configs = state.get_crew_configs()
    return render_template(
        templates,
        "settings.html",
        request,
        {
            "selected_crew": state.get_selected_crew(),
            "crew_names": state.get_crew_names(),
            "crew_patterns": {crew: ", ".join(config.pattern) for crew, config in crew_configs.items()},
            "crew_anchors": {crew: config.anchor for crew, config in crew_configs.items()},
            "custom_holidays": state.get_custom_holidays(),
            "floater_dates": state.get_floater_dates(),
            "max_floater_days": MAX_FLOATER_DAYS,
            "work_location": state.get_work_location(),
            "error": error,
        },
        status_code=status_code,
    )


# ============ Calendar ============


@router.get("/", response_class=HTMLResponse)
async def read_root():
    return RedirectResponse(url="/month", status_code=302)


@router.get("/month", response_class=HTMLResponse, name="month_view")
async def month_view(
    request: Request,
    year: int | None = Query(None),
    month: int | None = Query(None),
    state: PlannerState = Depends(get_state),
    today: datetime.date = Depends(current_date),
):
    """Month grid for the selected crew, with starred notes and holidays."""
    if year is None or month is None:
        initial = clamp_to_schedule(today, SCHEDULE_START, SCHEDULE_END)
        year, month = initial.year, initial.month

    validate_date_params(year, month, None)

    # Months outside the schedule window snap to its nearest edge
    first, last = month_bounds(year, month)
    if last < SCHEDULE_START or first > SCHEDULE_END:
        target = clamp_to_schedule(first, SCHEDULE_START, SCHEDULE_END)
        return RedirectResponse(url=_month_url(target.year, target.month), status_code=302)

    crew = state.get_selected_crew()
    days = generate_month_data(
        year,
        month,
        state.rotation_for(crew),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )
    notes = state.get_notes()
    starred = state.get_starred()

    return render_template(
        templates,
        "month.html",
        request,
        {
            "year": year,
            "month": month,
            "month_name": MONTH_NAMES[month - 1],
            "crew": crew,
            "crew_name": state.get_crew_names()[crew],
            "weeks": build_calendar_grid_for_month(year, month, days),
            "notes": notes,
            "starred": starred,
            "starred_notes": starred_notes_for_month(days, year, month, starred, notes),
            "holidays": get_holidays_for_month(year, month),
            "navigation": get_month_navigation(year, month, SCHEDULE_START, SCHEDULE_END),
        },
    )


@router.get("/day/{date_key}", response_class=HTMLResponse, name="day_view")
async def day_view(
    request: Request,
    date_key: str,
    state: PlannerState = Depends(get_state),
):
    """Day editor: shift details, note and star."""
    date = validate_date_key(date_key)
    day = build_day_info(
        date,
        state.rotation_for(),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )

    return render_template(
        templates,
        "day.html",
        request,
        {
            "day": day,
            "weekday_long": WEEKDAY_NAMES_LONG[date.weekday()],
            "note": state.get_note(date_key),
            "is_starred": state.is_starred(date_key),
            "back_url": _month_url(date.year, date.month),
        },
    )


@router.post("/day/{date_key}/note")
async def save_note(
    date_key: str,
    text: str = Form(""),
    state: PlannerState = Depends(get_state),
):
    date = validate_date_key(date_key)
    state.set_note(date_key, text)
    return RedirectResponse(url=_month_url(date.year, date.month), status_code=303)


@router.post("/day/{date_key}/star")
async def toggle_star(
    date_key: str,
    state: PlannerState = Depends(get_state),
):
    validate_date_key(date_key)
    state.toggle_star(date_key)
    return RedirectResponse(url=f"/day/{date_key}", status_code=303)


# ============ Settings ============


@router.get("/settings", response_class=HTMLResponse, name="settings")
async def settings_page(request: Request, state: PlannerState = Depends(get_state)):
    return _settings_page(request, state)


@router.post("/settings/crew")
async def select_crew(
    request: Request,
    crew: str = Form(...),
    state: PlannerState = Depends(get_state),
):
    try:
        state.set_selected_crew(crew)
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)
    return RedirectResponse(url="/month", status_code=303)


@router.post("/settings/crew-name")
async def rename_crew(
    request: Request,
    crew: str = Form(...),
    name: str = Form(""),
    state: PlannerState = Depends(get_state),
):
    try:
        state.set_crew_name(crew, name)
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/crew-pattern")
async def save_crew_pattern(
    request: Request,
    crew: str = Form(...),
    pattern: str = Form(""),
    anchor: str = Form(""),
    state: PlannerState = Depends(get_state),
):
    """Save a custom rotation; an all-blank pattern removes the override."""
    labels = [label.strip() for label in _PATTERN_SEPARATOR.split(pattern)]

    try:
        anchor_date = parse_date_key(anchor) if anchor.strip() else None
    except ValueError:
        return _settings_page(request, state, f"Invalid anchor date: {anchor!r}", status_code=400)

    config = CrewConfig(pattern=labels, anchor=anchor_date)
    try:
        if config.has_entries():
            state.set_crew_config(crew, config)
        else:
            state.clear_crew_config(crew)
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)

    logger.info(f"Saved rotation pattern for crew {crew} ({len(labels)} entries)")
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/crew-pattern/reset")
async def reset_crew_pattern(
    request: Request,
    crew: str = Form(...),
    state: PlannerState = Depends(get_state),
):
    try:
        state.clear_crew_config(crew)
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/holidays/add")
async def add_custom_holiday(
    request: Request,
    start: str | None = Form(None),
    end: str | None = Form(None),
    state: PlannerState = Depends(get_state),
):
    try:
        state.add_custom_holiday(start, end)
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/holidays/delete")
async def delete_custom_holiday(
    start: str = Form(...),
    end: str = Form(...),
    state: PlannerState = Depends(get_state),
):
    state.delete_custom_holiday(start, end)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/floaters")
async def save_floaters(
    request: Request,
    floater_1: str = Form(""),
    floater_2: str = Form(""),
    state: PlannerState = Depends(get_state),
):
    try:
        state.set_floater_dates([floater_1, floater_2])
    except OverlayValidationError as e:
        return _settings_page(request, state, str(e), status_code=400)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/work-location")
async def save_work_location(
    request: Request,
    lat: str = Form(""),
    lng: str = Form(""),
    radius_meters: str = Form("200"),
    enabled: bool = Form(False),
    state: PlannerState = Depends(get_state),
):
    """Save the work site; leaving both coordinates empty removes it."""
    if not lat.strip() and not lng.strip():
        state.set_work_location(None)
        return RedirectResponse(url="/settings", status_code=303)

    try:
        location = WorkLocation(
            lat=float(lat),
            lng=float(lng),
            radius_meters=float(radius_meters or 200),
            enabled=enabled,
        )
    except ValueError:
        # pydantic.ValidationError is a ValueError too
        return _settings_page(request, state, "Please enter a valid latitude, longitude and radius.", status_code=400)

    state.set_work_location(location)
    return RedirectResponse(url="/settings", status_code=303)
