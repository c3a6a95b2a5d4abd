"""
Domain layer - Pure business logic without external dependencies.
"""

from .aggregation import summarize_dates
from .calendar_grid import CalendarGridCalculator, grid_bounds
from .interval_planner import IntervalChangeSet, IntervalPlanner, is_canonical
from .models import (
    AvailabilityInterval,
    CalendarMonth,
    DateAvailability,
    DateRange,
    DayCell,
    GroupRoster,
    Holiday,
    is_weekend,
)

__all__ = [
    "AvailabilityInterval",
    "CalendarGridCalculator",
    "CalendarMonth",
    "DateAvailability",
    "DateRange",
    "DayCell",
    "GroupRoster",
    "Holiday",
    "IntervalChangeSet",
    "IntervalPlanner",
    "grid_bounds",
    "is_canonical",
    "is_weekend",
    "summarize_dates",
]
