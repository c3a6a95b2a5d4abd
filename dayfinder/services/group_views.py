"""
Read-only views over a group's availability.

Both engines load the group's intervals with a single store query and hand
them to the pure domain functions; neither writes anything.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Dict, List, Optional

import pendulum

from ..adapters.interval_store import SqlIntervalStore
from ..domain.aggregation import summarize_dates
from ..domain.calendar_grid import CalendarGridCalculator, grid_bounds
from ..domain.models import CalendarMonth, DateAvailability, Holiday
from .protocols import GroupRosterProtocol, HolidayLookupProtocol

logger = logging.getLogger(__name__)


class AggregationEngine:
    """
    Computes the "best dates first" list of a group.
    """

    def __init__(
        self,
        store: SqlIntervalStore,
        roster_provider: GroupRosterProtocol,
        holiday_lookup: HolidayLookupProtocol,
        country_code: str = "BR",
    ) -> None:
        self._store = store
        self._roster_provider = roster_provider
        self._holiday_lookup = holiday_lookup
        self._country_code = country_code

    def results(self, group_id: str) -> List[DateAvailability]:
        """
        Per-date participation for the group, ordered by descending count,
        then ascending date.
        """
        roster = self._roster_provider.get_roster(group_id)
        intervals = self._store.intervals_for_group(group_id)

        cache: Dict[date, Optional[Holiday]] = {}

        def holiday_for(day: date) -> Optional[Holiday]:
            if day not in cache:
                cache[day] = self._holiday_lookup.on(self._country_code, day)
            return cache[day]

        rows = summarize_dates(intervals, roster, holiday_for)
        logger.debug("Aggregated %d interval(s) into %d date(s) for group=%s",
                     len(intervals), len(rows), group_id)
        return rows


class CalendarGridBuilder:
    """
    Builds the month calendar grid of a group for one viewer.
    """

    def __init__(
        self,
        store: SqlIntervalStore,
        roster_provider: GroupRosterProtocol,
        holiday_lookup: HolidayLookupProtocol,
        country_code: str = "BR",
        timezone: str = "America/Sao_Paulo",
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self._store = store
        self._roster_provider = roster_provider
        self._holiday_lookup = holiday_lookup
        self._country_code = country_code
        self._today = today or (lambda: pendulum.today(timezone).date())

    def grid(self, group_id: str, month: date, viewer_id: str) -> CalendarMonth:
        """
        Build the grid for the month containing ``month``.

        Args:
            group_id: Group to display
            month: Any date within the target month
            viewer_id: User requesting the grid

        Returns:
            CalendarMonth covering full weeks, Sunday first
        """
        roster = self._roster_provider.get_roster(group_id)
        intervals = self._store.intervals_for_group(group_id)

        start, end = grid_bounds(month)
        holidays = {
            holiday.date: holiday
            for holiday in self._holiday_lookup.between(self._country_code, start, end)
        }

        calculator = CalendarGridCalculator(roster=roster, holidays=holidays, today=self._today())
        return calculator.build(month, intervals, viewer_id)
