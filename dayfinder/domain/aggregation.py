"""
Aggregation of many members' intervals into per-date participation statistics.
"""

from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Set

from .models import (
    AvailabilityInterval,
    DateAvailability,
    GroupRoster,
    Holiday,
    is_weekend,
    iter_days,
    percentage_of,
)

HolidayResolver = Callable[[date], Optional[Holiday]]


def collect_available_users(intervals: Iterable[AvailabilityInterval]) -> Dict[date, Set[str]]:
    """Map every covered date to the distinct users available on it."""
    users_by_date: Dict[date, Set[str]] = {}
    for interval in intervals:
        for day in iter_days(interval.start_date, interval.end_date):
            users_by_date.setdefault(day, set()).add(interval.user_id)
    return users_by_date


def summarize_dates(
    intervals: Iterable[AvailabilityInterval],
    roster: GroupRoster,
    holiday_for: HolidayResolver
) -> List[DateAvailability]:
    """
    Build the "best dates first" list for a group.

    Dates of a weekends-only group that are neither a weekend day nor a
    holiday are left out. Rows are ordered by descending count, then by date.
    """
    total_members = roster.total_members
    rows: List[DateAvailability] = []

    for day, users in collect_available_users(intervals).items():
        holiday = holiday_for(day)
        if not roster.is_relevant(day, is_holiday=holiday is not None):
            continue

        count = len(users)
        rows.append(
            DateAvailability(
                date=day,
                users=sorted(users),
                count=count,
                percentage=float(percentage_of(count, total_members, places=1)),
                is_full=count == total_members,
                is_weekend=is_weekend(day),
                is_holiday=holiday is not None,
                holiday_name=holiday.name if holiday else None,
            )
        )

    rows.sort(key=lambda row: (-row.count, row.date))
    return rows
