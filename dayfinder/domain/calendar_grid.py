"""
Month calendar grid built from a group's intervals.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Tuple

import pendulum

from .models import (
    AvailabilityInterval,
    CalendarMonth,
    DayCell,
    GroupRoster,
    Holiday,
    is_weekend,
    iter_days,
    percentage_of,
)


def grid_bounds(month: date) -> Tuple[date, date]:
    """
    First and last day of the grid for the month containing ``month``.

    The grid starts on the Sunday on or before the 1st and ends on the
    Saturday on or after the last day of the month.
    """
    first = pendulum.date(month.year, month.month, 1)
    last = first.end_of("month")

    # date.weekday(): Monday=0 ... Sunday=6
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=(5 - last.weekday()) % 7)
    return date(start.year, start.month, start.day), date(end.year, end.month, end.day)


class CalendarGridCalculator:
    """
    Lays out a month in full weeks and fills each day with availability data.
    """

    def __init__(self, roster: GroupRoster, holidays: Dict[date, Holiday], today: date):
        self.roster = roster
        self.holidays = holidays
        self.today = today

    def build(
        self,
        month: date,
        intervals: Iterable[AvailabilityInterval],
        viewer_id: str
    ) -> CalendarMonth:
        """
        Build the grid for the month containing ``month``.

        Args:
            month: Any date within the target month
            intervals: All intervals of the group
            viewer_id: User requesting the grid

        Returns:
            CalendarMonth with one DayCell per grid day
        """
        first = pendulum.date(month.year, month.month, 1)
        start, end = grid_bounds(first)
        interval_list = list(intervals)

        days = [
            self._build_day(day, first, interval_list, viewer_id)
            for day in iter_days(start, end)
        ]

        return CalendarMonth(
            year=first.year,
            month=first.month,
            month_name=first.format("MMMM YYYY"),
            prev_month=first.subtract(months=1),
            next_month=first.add(months=1),
            days=days,
        )

    def _build_day(
        self,
        day: date,
        first: date,
        intervals: List[AvailabilityInterval],
        viewer_id: str
    ) -> DayCell:
        users = sorted({i.user_id for i in intervals if i.contains(day)})
        holiday = self.holidays.get(day)
        weekend = is_weekend(day)
        total_members = self.roster.total_members

        return DayCell(
            date=day,
            day_number=day.day,
            is_in_month=(day.year, day.month) == (first.year, first.month),
            is_weekend=weekend,
            is_holiday=holiday is not None,
            holiday_name=holiday.name if holiday else None,
            is_today=day == self.today,
            disabled=self.roster.weekends_only and not (weekend or holiday is not None),
            users=users,
            user_count=len(users),
            total_members=total_members,
            viewer_available=viewer_id in users,
            percentage=int(percentage_of(len(users), total_members)),
        )
