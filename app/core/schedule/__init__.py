"""
Schedule module - rotation resolution and per-day schedule data.

Re-exports the public functions of the submodules.
"""

from .core import (
    build_rotation_config,
    classify_shift,
    clear_schedule_cache,
    cycle_index,
    default_rotation,
    determine_shift_for_date,
    effective_length,
    parse_rotation_config,
    resolve_shift,
)
from .period import (
    build_calendar_grid_for_month,
    build_day_info,
    generate_month_data,
    generate_period_data,
    group_days_by_month,
    is_custom_holiday,
    iter_dates,
    starred_notes_for_month,
)

__all__ = [
    # core
    "build_rotation_config",
    "classify_shift",
    "clear_schedule_cache",
    "cycle_index",
    "default_rotation",
    "determine_shift_for_date",
    "effective_length",
    "parse_rotation_config",
    "resolve_shift",
    # period
    "build_calendar_grid_for_month",
    "build_day_info",
    "generate_month_data",
    "generate_period_data",
    "group_days_by_month",
    "is_custom_holiday",
    "iter_dates",
    "starred_notes_for_month",
]
