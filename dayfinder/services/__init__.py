"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, MergeEngine, SplitEngine
from .group_views import AggregationEngine, CalendarGridBuilder
from .locks import KeyedLock
from .protocols import GroupRosterProtocol, HolidayLookupProtocol

__all__ = [
    "AggregationEngine",
    "AvailabilityService",
    "CalendarGridBuilder",
    "GroupRosterProtocol",
    "HolidayLookupProtocol",
    "KeyedLock",
    "MergeEngine",
    "SplitEngine",
]
