# app/core/overlays.py
"""
User overlays on top of the computed schedule.

Notes, starred days, custom holiday ranges, floater days, crew selection and
crew overrides, work location and the overtime prompt history. Every
collection is its own JSON store, so a corrupt entry only resets that one
collection to its default.
"""

import logging

from app.core.config import DEFAULT_FLOATER_DATES, MAX_FLOATER_DAYS, OVERTIME_PROMPT_HISTORY
from app.core.constants import (
    CREW_CONFIGS_KEY,
    CREW_IDS,
    CREW_NAMES_KEY,
    CUSTOM_HOLIDAYS_KEY,
    DEFAULT_CREW,
    DEFAULT_CREW_NAMES,
    FLOATER_DAYS_KEY,
    INVALID_RANGE_MESSAGE,
    NOTES_KEY,
    OVERTIME_PROMPTS_KEY,
    SELECTED_CREW_KEY,
    STARRED_DAYS_KEY,
    WORK_LOCATION_KEY,
)
from app.core.dates import is_valid_date_key
from app.core.models import CrewConfig, CustomHoliday, RotationConfig, WorkLocation
from app.core.schedule import build_rotation_config
from app.core.storage import JsonStore, SettingsBackend

logger = logging.getLogger(__name__)


class OverlayValidationError(ValueError):
    """User input rejected by an overlay store; the message is shown to the user."""


class InvalidDateRangeError(OverlayValidationError):
    def __init__(self, message: str = INVALID_RANGE_MESSAGE):
        super().__init__(message)


def validate_crew(crew: str) -> str:
    if crew not in CREW_IDS:
        raise OverlayValidationError(f"Unknown crew: {crew!r}")
    return crew


class PlannerState:
    """All persisted planner stores on one backend."""

    def __init__(self, backend: SettingsBackend):
        self.notes = JsonStore(backend, NOTES_KEY, dict[str, str], dict)
        self.starred = JsonStore(backend, STARRED_DAYS_KEY, dict[str, bool], dict)
        self.custom_holidays = JsonStore(backend, CUSTOM_HOLIDAYS_KEY, list[CustomHoliday], list)
        self.selected_crew = JsonStore(backend, SELECTED_CREW_KEY, str, lambda: DEFAULT_CREW)
        self.crew_names = JsonStore(backend, CREW_NAMES_KEY, dict[str, str], dict)
        self.crew_configs = JsonStore(backend, CREW_CONFIGS_KEY, dict[str, CrewConfig], dict)
        self.floater_days = JsonStore(backend, FLOATER_DAYS_KEY, list[str], lambda: list(DEFAULT_FLOATER_DATES))
        self.work_location = JsonStore(backend, WORK_LOCATION_KEY, WorkLocation | None, lambda: None)
        self.overtime_prompts = JsonStore(backend, OVERTIME_PROMPTS_KEY, list[str], list)

    # ---- notes ----

    def get_notes(self) -> dict[str, str]:
        return self.notes.get()

    def get_note(self, key: str) -> str:
        return self.notes.get().get(key, "")

    def set_note(self, key: str, text: str) -> None:
        """Save a note; blank text removes it."""
        if not is_valid_date_key(key):
            raise OverlayValidationError(f"Invalid date: {key!r}")

        notes = self.notes.get()
        if text.strip():
            notes[key] = text
        else:
            notes.pop(key, None)
        self.notes.set(notes)

    # ---- starred days ----

    def get_starred(self) -> dict[str, bool]:
        return self.starred.get()

    def is_starred(self, key: str) -> bool:
        return bool(self.starred.get().get(key, False))

    def toggle_star(self, key: str) -> bool:
        """Flip the star for a day and return the new state."""
        if not is_valid_date_key(key):
            raise OverlayValidationError(f"Invalid date: {key!r}")

        starred = self.starred.get()
        new_state = not starred.get(key, False)
        if new_state:
            starred[key] = True
        else:
            starred.pop(key, None)
        self.starred.set(starred)
        return new_state

    # ---- custom holidays ----

    def get_custom_holidays(self) -> list[CustomHoliday]:
        return self.custom_holidays.get()

    def add_custom_holiday(self, start: str | None, end: str | None) -> CustomHoliday:
        """
        Add an inclusive holiday range.

        Raises:
            InvalidDateRangeError: If a bound is missing or malformed, or start is after end
        """
        start = (start or "").strip()
        end = (end or "").strip()
        if not is_valid_date_key(start) or not is_valid_date_key(end) or start > end:
            raise InvalidDateRangeError()

        holiday = CustomHoliday(start=start, end=end)
        self.custom_holidays.set([*self.custom_holidays.get(), holiday])
        logger.info("Added custom holiday %s to %s", start, end)
        return holiday

    def delete_custom_holiday(self, start: str, end: str) -> bool:
        """Remove every range matching both bounds; returns True if any was removed."""
        current = self.custom_holidays.get()
        remaining = [h for h in current if h.start != start or h.end != end]
        if len(remaining) == len(current):
            return False
        self.custom_holidays.set(remaining)
        logger.info("Deleted custom holiday %s to %s", start, end)
        return True

    # ---- floater days ----

    def get_floater_dates(self) -> list[str]:
        return self.floater_days.get()

    def set_floater_dates(self, keys: list[str]) -> list[str]:
        """Replace the floater days; blank entries are ignored."""
        cleaned = sorted({k.strip() for k in keys if k and k.strip()})
        invalid = [k for k in cleaned if not is_valid_date_key(k)]
        if invalid:
            raise OverlayValidationError(f"Invalid floater date: {invalid[0]!r}")
        if len(cleaned) > MAX_FLOATER_DAYS:
            raise OverlayValidationError(f"At most {MAX_FLOATER_DAYS} floater days can be set")

        self.floater_days.set(cleaned)
        return cleaned

    # ---- crews ----

    def get_selected_crew(self) -> str:
        crew = self.selected_crew.get()
        return crew if crew in CREW_IDS else DEFAULT_CREW

    def set_selected_crew(self, crew: str) -> None:
        self.selected_crew.set(validate_crew(crew))

    def get_crew_names(self) -> dict[str, str]:
        stored = self.crew_names.get()
        return {crew: (stored.get(crew) or "").strip() or DEFAULT_CREW_NAMES[crew] for crew in CREW_IDS}

    def set_crew_name(self, crew: str, name: str) -> None:
        """Rename a crew; a blank name restores the default."""
        validate_crew(crew)
        names = self.crew_names.get()
        if name.strip():
            names[crew] = name.strip()
        else:
            names.pop(crew, None)
        self.crew_names.set(names)

    def get_crew_configs(self) -> dict[str, CrewConfig]:
        return {crew: config for crew, config in self.crew_configs.get().items() if crew in CREW_IDS}

    def get_crew_config(self, crew: str) -> CrewConfig | None:
        return self.get_crew_configs().get(crew)

    def set_crew_config(self, crew: str, config: CrewConfig) -> None:
        validate_crew(crew)
        configs = self.crew_configs.get()
        configs[crew] = config
        self.crew_configs.set(configs)

    def clear_crew_config(self, crew: str) -> None:
        validate_crew(crew)
        configs = self.crew_configs.get()
        if configs.pop(crew, None) is not None:
            self.crew_configs.set(configs)

    def rotation_for(self, crew: str | None = None) -> RotationConfig:
        """Rotation for a crew (the selected crew by default)."""
        crew = validate_crew(crew) if crew else self.get_selected_crew()
        return build_rotation_config(crew, self.get_crew_config(crew))

    # ---- work location ----

    def get_work_location(self) -> WorkLocation | None:
        return self.work_location.get()

    def set_work_location(self, location: WorkLocation | None) -> None:
        self.work_location.set(location)

    # ---- overtime prompts ----

    def has_prompted_overtime(self, key: str) -> bool:
        return key in self.overtime_prompts.get()

    def mark_overtime_prompted(self, key: str) -> None:
        prompts = [k for k in self.overtime_prompts.get() if k != key]
        prompts.append(key)
        self.overtime_prompts.set(prompts[-OVERTIME_PROMPT_HISTORY:])
