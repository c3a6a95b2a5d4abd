"""
Shared fixtures: an in-memory interval store, a fixed holiday table and a
static roster provider.
"""

from datetime import date
from typing import Dict, Iterable, List, Optional

import pytest

from dayfinder.adapters.database import create_db_engine, create_session_factory, init_db
from dayfinder.adapters.interval_store import SqlIntervalStore
from dayfinder.domain.exceptions import UnknownGroupError
from dayfinder.domain.models import GroupRoster, Holiday
from dayfinder.services.availability import AvailabilityService


class StaticRoster:
    """Minimal stub matching GroupRosterProtocol."""

    def __init__(self, *rosters: GroupRoster):
        self._rosters: Dict[str, GroupRoster] = {r.group_id: r for r in rosters}

    def add(self, roster: GroupRoster) -> None:
        self._rosters[roster.group_id] = roster

    def get_roster(self, group_id: str) -> GroupRoster:
        try:
            return self._rosters[group_id]
        except KeyError:
            raise UnknownGroupError(f"Unknown group: '{group_id}'") from None


class StaticHolidayLookup:
    """Stub matching HolidayLookupProtocol, serving a fixed table for one country."""

    def __init__(self, holidays: Iterable[Holiday] = (), country_code: str = "BR"):
        self.country_code = country_code.upper()
        self._holidays: Dict[date, Holiday] = {h.date: h for h in holidays}

    def on(self, country_code: str, day: date) -> Optional[Holiday]:
        if country_code.upper() != self.country_code:
            return None
        return self._holidays.get(day)

    def between(self, country_code: str, start: date, end: date) -> List[Holiday]:
        if country_code.upper() != self.country_code:
            return []
        return sorted(
            (h for h in self._holidays.values() if start <= h.date <= end),
            key=lambda h: h.date
        )


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine) -> SqlIntervalStore:
    return SqlIntervalStore(create_session_factory(engine))


@pytest.fixture
def holiday_lookup() -> StaticHolidayLookup:
    return StaticHolidayLookup(
        [
            Holiday(date=date(2025, 1, 1), name="New Year's Day"),
            Holiday(date=date(2025, 4, 21), name="Tiradentes"),
            Holiday(date=date(2025, 5, 1), name="Labour Day"),
            Holiday(date=date(2025, 12, 25), name="Christmas Day"),
        ],
        country_code="BR",
    )


@pytest.fixture
def service(store, holiday_lookup) -> AvailabilityService:
    return AvailabilityService(store, holiday_lookup=holiday_lookup, country_code="BR")


@pytest.fixture
def roster() -> StaticRoster:
    return StaticRoster()
