# app/routes/api.py
"""
JSON API for schedule data and planner settings.
"""

import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.core.config import SCHEDULE_END, SCHEDULE_START
from app.core.dates import date_key as make_date_key
from app.core.logging_config import get_logger
from app.core.models import CrewConfig, WorkLocation
from app.core.overlays import OverlayValidationError, PlannerState
from app.core.overtime import OvertimeCheckRequest, OvertimeStatus, check_overtime
from app.core.schedule import build_day_info, generate_period_data
from app.core.validators import validate_crew_param, validate_date_key, validate_date_range

from .shared import (
    CrewNameUpdate,
    CrewSelection,
    CustomHolidayCreate,
    FloaterUpdate,
    NoteUpdate,
    current_date,
    get_state,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


# ============ Schedule ============


@router.get("/days")
async def get_days(
    start: str = Query(SCHEDULE_START.isoformat()),
    end: str = Query(SCHEDULE_END.isoformat()),
    crew: str | None = Query(None),
    state: PlannerState = Depends(get_state),
):
    """Computed days for a range, defaulting to the whole schedule window."""
    start_date, end_date = validate_date_range(start, end)

    crew = validate_crew_param(crew) if crew else state.get_selected_crew()
    days = generate_period_data(
        start_date,
        end_date,
        state.rotation_for(crew),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )
    return {"crew": crew, "start": start, "end": end, "days": days}


@router.get("/days/{date_key}")
async def get_day(
    date_key: str,
    crew: str | None = Query(None),
    state: PlannerState = Depends(get_state),
):
    date = validate_date_key(date_key)
    crew = validate_crew_param(crew) if crew else state.get_selected_crew()
    day = build_day_info(
        date,
        state.rotation_for(crew),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )
    return {
        "crew": crew,
        "day": day,
        "note": state.get_note(date_key),
        "starred": state.is_starred(date_key),
    }


# ============ Notes and stars ============


@router.get("/notes")
async def get_notes(state: PlannerState = Depends(get_state)):
    return state.get_notes()


@router.put("/notes/{date_key}")
async def put_note(date_key: str, body: NoteUpdate, state: PlannerState = Depends(get_state)):
    """Save a note; blank text deletes it."""
    validate_date_key(date_key)
    state.set_note(date_key, body.text)
    return {"date_key": date_key, "text": state.get_note(date_key)}


@router.get("/starred")
async def get_starred(state: PlannerState = Depends(get_state)):
    return state.get_starred()


@router.post("/starred/{date_key}/toggle")
async def toggle_starred(date_key: str, state: PlannerState = Depends(get_state)):
    validate_date_key(date_key)
    return {"date_key": date_key, "starred": state.toggle_star(date_key)}


# ============ Custom holidays and floaters ============


@router.get("/custom-holidays")
async def get_custom_holidays(state: PlannerState = Depends(get_state)):
    return state.get_custom_holidays()


@router.post("/custom-holidays", status_code=status.HTTP_201_CREATED)
async def create_custom_holiday(body: CustomHolidayCreate, state: PlannerState = Depends(get_state)):
    try:
        return state.add_custom_holiday(body.start, body.end)
    except OverlayValidationError as e:
        raise _bad_request(e) from e


@router.delete("/custom-holidays", status_code=status.HTTP_204_NO_CONTENT)
async def delete_custom_holiday(
    start: str = Query(...),
    end: str = Query(...),
    state: PlannerState = Depends(get_state),
):
    if not state.delete_custom_holiday(start, end):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Custom holiday not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/floaters")
async def get_floaters(state: PlannerState = Depends(get_state)):
    return {"dates": state.get_floater_dates()}


@router.put("/floaters")
async def put_floaters(body: FloaterUpdate, state: PlannerState = Depends(get_state)):
    try:
        return {"dates": state.set_floater_dates(body.dates)}
    except OverlayValidationError as e:
        raise _bad_request(e) from e


# ============ Crews ============


@router.get("/crew")
async def get_selected_crew(state: PlannerState = Depends(get_state)):
    crew = state.get_selected_crew()
    return {"crew": crew, "name": state.get_crew_names()[crew]}


@router.put("/crew")
async def put_selected_crew(body: CrewSelection, state: PlannerState = Depends(get_state)):
    crew = validate_crew_param(body.crew)
    state.set_selected_crew(crew)
    return {"crew": crew, "name": state.get_crew_names()[crew]}


@router.get("/crews")
async def get_crews(state: PlannerState = Depends(get_state)):
    """Every crew with its display name, stored override and effective rotation."""
    names = state.get_crew_names()
    configs = state.get_crew_configs()
    return [
        {
            "crew": crew,
            "name": name,
            "config": configs.get(crew),
            "rotation": state.rotation_for(crew),
        }
        for crew, name in names.items()
    ]


@router.put("/crews/{crew}/config")
async def put_crew_config(crew: str, body: CrewConfig, state: PlannerState = Depends(get_state)):
    """Save a custom pattern; an all-blank pattern clears the override."""
    crew = validate_crew_param(crew)
    if body.has_entries():
        state.set_crew_config(crew, body)
    else:
        state.clear_crew_config(crew)
    return {"crew": crew, "config": state.get_crew_config(crew), "rotation": state.rotation_for(crew)}


@router.delete("/crews/{crew}/config")
async def delete_crew_config(crew: str, state: PlannerState = Depends(get_state)):
    crew = validate_crew_param(crew)
    state.clear_crew_config(crew)
    return {"crew": crew, "config": None, "rotation": state.rotation_for(crew)}


@router.put("/crews/{crew}/name")
async def put_crew_name(crew: str, body: CrewNameUpdate, state: PlannerState = Depends(get_state)):
    crew = validate_crew_param(crew)
    state.set_crew_name(crew, body.name)
    return {"crew": crew, "name": state.get_crew_names()[crew]}


# ============ Work location and overtime ============


@router.get("/work-location")
async def get_work_location(state: PlannerState = Depends(get_state)):
    return state.get_work_location()


@router.put("/work-location")
async def put_work_location(body: WorkLocation | None = None, state: PlannerState = Depends(get_state)):
    """Save the work site; an empty body removes it."""
    state.set_work_location(body)
    return state.get_work_location()


@router.post("/overtime/check")
async def overtime_check(
    body: OvertimeCheckRequest,
    state: PlannerState = Depends(get_state),
    today: datetime.date = Depends(current_date),
):
    """Ask about overtime when the device is at work on an Off day, once per day."""
    today_key = make_date_key(today)
    day = build_day_info(
        today,
        state.rotation_for(),
        state.get_custom_holidays(),
        state.get_floater_dates(),
    )

    result = check_overtime(
        body,
        day,
        state.get_work_location(),
        state.has_prompted_overtime(today_key),
        today,
    )

    if result.status == OvertimeStatus.PROMPT:
        state.mark_overtime_prompted(today_key)
        logger.info(f"Overtime prompt issued for {today_key}")

    return result._asdict()
