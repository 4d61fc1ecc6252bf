# app/routes/shared.py
"""
Shared utilities, dependencies and templates for route modules.
"""

import datetime
from pathlib import Path

from fastapi import Depends
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.constants import CREW_IDS, GRID_WEEKDAYS, MONTH_NAMES
from app.core.dates import get_today
from app.core.helpers import is_today, shift_css_class
from app.core.overlays import PlannerState
from app.core.storage import DatabaseBackend
from app.database.database import get_db

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# Shared Jinja2 templates instance
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

templates.env.filters["shift_class"] = shift_css_class
templates.env.filters["date_format"] = lambda v: v.strftime("%Y-%m-%d") if v else ""
templates.env.tests["today"] = is_today

templates.env.globals["crew_ids"] = CREW_IDS
templates.env.globals["grid_weekdays"] = GRID_WEEKDAYS
templates.env.globals["month_names"] = MONTH_NAMES


def get_state(db: Session = Depends(get_db)) -> PlannerState:
    """Planner stores bound to the request's database session."""
    return PlannerState(DatabaseBackend(db))


def current_date() -> datetime.date:
    """Today in the configured timezone; overridden in tests."""
    return get_today()


# ============ Pydantic schemas ============


class NoteUpdate(BaseModel):
    text: str = ""


class CustomHolidayCreate(BaseModel):
    start: str | None = None
    end: str | None = None


class FloaterUpdate(BaseModel):
    dates: list[str] = Field(default_factory=list)


class CrewSelection(BaseModel):
    crew: str


class CrewNameUpdate(BaseModel):
    name: str = ""
