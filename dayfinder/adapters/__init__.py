"""
Adapters layer - Persistence, holiday calendars and group rosters.
"""

from .database import Base, IntervalRow, create_db_engine, create_session_factory, init_db
from .holiday_lookup import WorkalendarHolidayLookup
from .interval_store import IntervalUnitOfWork, SqlIntervalStore
from .roster import ConfigGroupRoster

__all__ = [
    "Base",
    "ConfigGroupRoster",
    "IntervalRow",
    "IntervalUnitOfWork",
    "SqlIntervalStore",
    "WorkalendarHolidayLookup",
    "create_db_engine",
    "create_session_factory",
    "init_db",
]
