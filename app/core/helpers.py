# app/core/helpers.py
"""
Shared helper functions for templates and route handlers.
"""

import datetime

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.core.config import TODAY_MODE
from app.core.dates import get_timezone, get_today, is_same_calendar_day
from app.core.models import ShiftCategory

# CSS class per shift category, used by the month grid and day view
SHIFT_CSS_CLASSES = {
    ShiftCategory.DAY: "shift-day",
    ShiftCategory.NIGHT: "shift-night",
    ShiftCategory.OFF: "shift-off",
}


def shift_css_class(category: ShiftCategory | str | None) -> str:
    if category is None:
        return ""
    return SHIFT_CSS_CLASSES.get(ShiftCategory(category), "")


def is_today(day: datetime.date, now: datetime.datetime | None = None) -> bool:
    """Highlight check for the month grid, honoring the configured today mode."""
    tz = get_timezone()
    return is_same_calendar_day(day, now or datetime.datetime.now(tz), TODAY_MODE, tz)


def render_template(
    templates: Jinja2Templates,
    template_name: str,
    request: Request,
    context: dict,
    status_code: int = 200,
):
    """
    Render template with the current date automatically included.
    """
    ctx = {"now": get_today()}
    ctx.update(context)
    return templates.TemplateResponse(request, template_name, ctx, status_code=status_code)
