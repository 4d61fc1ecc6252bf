"""Rotation resolution: which shift applies to a given date."""

import datetime
import logging
import re
from collections.abc import Sequence
from functools import lru_cache

from pydantic import TypeAdapter

from app.core.config import DEFAULT_CREW_OFFSETS, DEFAULT_SHIFT_CYCLE, OFF_LABEL, REFERENCE_DATE
from app.core.dates import days_between
from app.core.models import CrewConfig, IndependentRotation, OffsetRotation, RotationConfig, ShiftCategory
from app.core.types import ShiftResolution

logger = logging.getLogger(__name__)

_rotation_adapter: TypeAdapter[RotationConfig] = TypeAdapter(RotationConfig)

# Off-day codes in the default cycle ("O1".."O4")
_OFF_CODE = re.compile(r"^o\d+$")
_NIGHT_MARKERS = ("night", "n1", "n2")


def effective_length(pattern: Sequence[str]) -> int:
    """
    Cycle length of a pattern: everything up to the last non-blank entry.

    Trailing blank entries are not part of the cycle. Returns 0 when the
    pattern has no non-blank entry at all.
    """
    for index in range(len(pattern) - 1, -1, -1):
        label = pattern[index]
        if label and label.strip():
            return index + 1
    return 0


def cycle_index(day_offset: int, length: int) -> int:
    """Position in a cycle of `length` days, always in [0, length)."""
    if length <= 0:
        raise ValueError("Cycle length must be positive")
    # Python's % already returns a non-negative result for a positive divisor
    return day_offset % length


def classify_shift(label: str | None) -> ShiftCategory:
    """
    Map a shift-detail label to Day, Night or Off.

    Blank labels, "off" and off-day codes ("O1") are Off. Labels starting
    with "N" or containing a night marker are Night. Everything else that
    is populated ("D1", "Day", "7:30-3") is Day.
    """
    if label is None:
        return ShiftCategory.OFF

    lowered = label.strip().lower()
    if not lowered or lowered == "off" or _OFF_CODE.match(lowered):
        return ShiftCategory.OFF
    if lowered.startswith("n") or any(marker in lowered for marker in _NIGHT_MARKERS):
        return ShiftCategory.NIGHT
    return ShiftCategory.DAY


def default_rotation(crew: str) -> OffsetRotation:
    """Shared default cycle, shifted by the crew's offset."""
    return OffsetRotation(
        base_pattern=DEFAULT_SHIFT_CYCLE,
        anchor=REFERENCE_DATE,
        offset_days=DEFAULT_CREW_OFFSETS.get(crew, 0),
    )


def build_rotation_config(crew: str, crew_config: CrewConfig | None = None) -> RotationConfig:
    """
    Pick the rotation that applies to a crew.

    A custom pattern with at least one non-blank entry overrides the default;
    trailing blanks are cut off and a missing anchor falls back to the
    default reference date. An empty override means "use the default".
    """
    if crew_config is None or not crew_config.has_entries():
        return default_rotation(crew)

    length = effective_length(crew_config.pattern)
    return IndependentRotation(
        pattern=tuple(crew_config.pattern[:length]),
        anchor=crew_config.anchor or REFERENCE_DATE,
    )


def parse_rotation_config(data: dict) -> RotationConfig:
    """Validate a tagged rotation dict ({"kind": "offset", ...})."""
    return _rotation_adapter.validate_python(data)


def _pattern_anchor_offset(rotation: RotationConfig) -> tuple[Sequence[str], datetime.date, int]:
    if isinstance(rotation, OffsetRotation):
        return rotation.base_pattern, rotation.anchor, rotation.offset_days
    return rotation.pattern, rotation.anchor, 0


@lru_cache(maxsize=4096)
def resolve_shift(date: datetime.date, rotation: RotationConfig) -> ShiftResolution:
    """
    Resolve the shift for a date.

    Args:
        date: Calendar date to resolve
        rotation: Offset or independent rotation configuration

    Returns:
        ShiftResolution(detail, category). Degenerate rotations resolve to Off.
    """
    pattern, anchor, offset = _pattern_anchor_offset(rotation)
    length = effective_length(pattern)
    if length == 0:
        logger.warning("Rotation without entries (%s), resolving %s as Off", rotation.kind, date)
        return ShiftResolution(OFF_LABEL, ShiftCategory.OFF)

    index = cycle_index(days_between(anchor, date) + offset, length)
    label = pattern[index]
    if not label or not label.strip():
        label = OFF_LABEL

    return ShiftResolution(label.strip(), classify_shift(label))


def determine_shift_for_date(
    date: datetime.date,
    crew: str,
    crew_config: CrewConfig | None = None,
) -> ShiftResolution:
    """Resolve a date for a crew, honoring the crew's custom override."""
    return resolve_shift(date, build_rotation_config(crew, crew_config))


def clear_schedule_cache() -> None:
    """Drop memoized resolutions."""
    resolve_shift.cache_clear()
