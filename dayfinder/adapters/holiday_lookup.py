"""
Public holiday lookups.

``WorkalendarHolidayLookup`` resolves country calendars through the
workalendar registry.
"""

from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from workalendar.registry import registry

from ..domain.exceptions import HolidayLookupError
from ..domain.models import Holiday

logger = logging.getLogger(__name__)


class WorkalendarHolidayLookup:
    """
    Country public holidays backed by workalendar.

    Holidays are computed per (country, year) and cached, so repeated
    lookups for the same year are cheap and deterministic.
    """

    def on(self, country_code: str, day: date) -> Optional[Holiday]:
        """Return the holiday on ``day``, or None."""
        for holiday in self._holidays_year(country_code.upper(), day.year):
            if holiday.date == day:
                return holiday
        return None

    def between(self, country_code: str, start: date, end: date) -> List[Holiday]:
        """All holidays in [start, end], ordered by date."""
        found: List[Holiday] = []
        for year in range(start.year, end.year + 1):
            found.extend(
                h for h in self._holidays_year(country_code.upper(), year)
                if start <= h.date <= end
            )
        return found

    @staticmethod
    @lru_cache(maxsize=256)
    def _holidays_year(country_code: str, year: int) -> Tuple[Holiday, ...]:
        calendar_class = registry.get(country_code)
        if calendar_class is None:
            raise HolidayLookupError(f"Unknown or unsupported country code: {country_code!r}")

        logger.debug("Computing %s holidays for %d", country_code, year)
        # workalendar returns (date, label) pairs; keep the first label per date
        by_date: Dict[date, str] = {}
        for holiday_date, label in calendar_class().holidays(year):
            by_date.setdefault(holiday_date, label)
        return tuple(
            Holiday(date=holiday_date, name=name)
            for holiday_date, name in sorted(by_date.items())
        )
