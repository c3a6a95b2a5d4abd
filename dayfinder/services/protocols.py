"""
Protocols for the collaborators the services depend on.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..domain.models import GroupRoster, Holiday


class HolidayLookupProtocol(Protocol):
    """Public holiday source. Must be deterministic for a given (country, date)."""

    def on(self, country_code: str, day: date) -> Optional[Holiday]:
        """Return the holiday on ``day``, or None."""

    def between(self, country_code: str, start: date, end: date) -> List[Holiday]:
        """Return every holiday in [start, end], ordered by date."""


class GroupRosterProtocol(Protocol):
    """Source of group membership and the weekends-only flag."""

    def get_roster(self, group_id: str) -> GroupRoster:
        """Return the roster, raising UnknownGroupError for unknown groups."""
