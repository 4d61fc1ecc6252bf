# app/routes/export.py
"""
File downloads: notes as CSV and PDF, schedule as iCal.
"""

import re

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.core.calendar_export import generate_ical
from app.core.config import SCHEDULE_END, SCHEDULE_START
from app.core.logging_config import get_logger
from app.core.notes_export import EmptyExportError, generate_notes_csv, generate_notes_pdf
from app.core.overlays import PlannerState
from app.core.schedule import generate_month_data, generate_period_data
from app.core.validators import validate_date_params, validate_date_range

from .shared import get_state

logger = get_logger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


@router.get("/notes.csv")
async def export_notes_csv(
    start: str = Query(SCHEDULE_START.isoformat()),
    end: str = Query(SCHEDULE_END.isoformat()),
    state: PlannerState = Depends(get_state),
) -> Response:
    """All notes in the range, one row per noted day."""
    start_date, end_date = validate_date_range(start, end)
    days = generate_period_data(
        start_date,
        end_date,
        state.rotation_for(),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )

    content = generate_notes_csv(days, state.get_notes(), state.get_starred())
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="shift-notes.csv"'},
    )


@router.get("/notes-{month}.pdf")
async def export_notes_pdf(month: str, state: PlannerState = Depends(get_state)) -> Response:
    """Notes summary for one month (YYYY-MM)."""
    match = _MONTH_PATTERN.match(month)
    if not match:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid month")
    year, month_number = int(match.group(1)), int(match.group(2))
    validate_date_params(year, month_number, None)

    days = generate_month_data(
        year,
        month_number,
        state.rotation_for(),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )

    try:
        content = generate_notes_pdf(month, days, state.get_notes())
    except EmptyExportError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    logger.info(f"Generated notes PDF for {month}")
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="notes-summary-{month}.pdf"'},
    )


@router.get("/calendar.ics")
async def export_calendar(
    start: str = Query(SCHEDULE_START.isoformat()),
    end: str = Query(SCHEDULE_END.isoformat()),
    state: PlannerState = Depends(get_state),
) -> Response:
    """
    The selected crew's schedule as an iCal file.

    Covers the schedule window unless start/end are given.
    """
    start_date, end_date = validate_date_range(start, end)
    crew = state.get_selected_crew()
    days = generate_period_data(
        start_date,
        end_date,
        state.rotation_for(crew),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )

    ical_content = generate_ical(days, calendar_name=f"Shifts - {state.get_crew_names()[crew]}", crew=crew)

    return Response(
        content=ical_content,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="shifts-crew-{crew.lower()}.ics"',
        },
    )
