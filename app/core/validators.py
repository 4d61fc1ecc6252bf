import datetime

from fastapi import HTTPException, status

from app.core.config import MAX_RANGE_DAYS
from app.core.constants import CREW_IDS
from app.core.dates import is_valid_date_key, parse_date_key


def validate_crew_param(crew: str) -> str:
    """
    Make sure crew is one of the known crew ids.

    Returns the crew if valid, otherwise raises 404.
    """
    if crew not in CREW_IDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Crew not found",
        )
    return crew


def validate_date_key(key: str) -> datetime.date:
    """
    Parse a YYYY-MM-DD path or query parameter.

    Malformed keys and impossible dates give HTTP 400.
    """
    if not is_valid_date_key(key):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date",
        )
    return parse_date_key(key)


def validate_date_params(
    year: int,
    month: int | None,
    day: int | None,
) -> datetime.date | None:
    """
    Validate that a given date is valid.

    - If both month and day are set: validate by building the date and return it.
    - If only year + month: validate by building day 1 and return None.
    - If only year: nothing to validate, return None.
    - Invalid combinations or values give HTTP 400.
    """
    try:
        if month is not None and day is not None:
            return datetime.date(year, month, day)

        if month is not None and day is None:
            datetime.date(year, month, 1)
            return None

        if month is None and day is None:
            return None

        # day without month
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date parameter combination",
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date",
        )


def validate_date_range(start: str, end: str) -> tuple[datetime.date, datetime.date]:
    """
    Parse both bounds of a range.

    Start after end, or a span of MAX_RANGE_DAYS or more, gives HTTP 400.
    """
    start_date = validate_date_key(start)
    end_date = validate_date_key(end)
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date is after end date",
        )
    if (end_date - start_date).days >= MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Range too long (max {MAX_RANGE_DAYS} days)",
        )
    return start_date, end_date
