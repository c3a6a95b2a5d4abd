"""
Domain models for availability intervals and their aggregated views.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import FrozenSet, List, Optional

from .exceptions import InvalidRange

ONE_DAY = timedelta(days=1)

# Friday, Saturday and Sunday (date.weekday() numbering, 0=Monday).
WEEKEND_WEEKDAYS = frozenset({4, 5, 6})


def is_weekend(day: date) -> bool:
    """Check if a date falls on a weekend day (Friday, Saturday or Sunday)."""
    return day.weekday() in WEEKEND_WEEKDAYS


def shift_day(day: date, days: int) -> date:
    """Move a date by whole days, saturating at date.min and date.max."""
    try:
        return day + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def iter_days(start: date, end: date):
    """Yield every date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        if current == end:
            return
        current = current + ONE_DAY


def percentage_of(count: int, total: int, places: int = 0) -> Decimal:
    """
    Share of ``count`` in ``total`` as a percentage, rounded half up.

    Returns zero when ``total`` is zero.
    """
    if total <= 0:
        return Decimal(0)
    exact = Decimal(count) * 100 / Decimal(total)
    return exact.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class DateRange:
    """
    Immutable inclusive range of calendar dates.

    Invariant: start must not be after end.
    """
    start: date
    end: date

    def __post_init__(self):
        if self.start is None or self.end is None:
            raise InvalidRange("Start date and end date are required")
        if self.end < self.start:
            raise InvalidRange("End date must be after or equal to start date")

    @classmethod
    def from_bounds(cls, start: Optional[date], end: Optional[date]) -> "DateRange":
        """Build a range from possibly missing bounds, raising InvalidRange on bad input."""
        return cls(start=start, end=end)

    def days(self) -> int:
        """Number of days covered, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, other: "DateRange") -> bool:
        """Check if the two ranges share at least one date."""
        return self.start <= other.end and self.end >= other.start

    def touches(self, other: "DateRange") -> bool:
        """Check if the two ranges overlap or are adjacent (no gap day between them)."""
        return self.start <= shift_day(other.end, 1) and self.end >= shift_day(other.start, -1)

    def __str__(self) -> str:
        if self.start == self.end:
            return self.start.isoformat()
        return f"{self.start.isoformat()} - {self.end.isoformat()}"


@dataclass(frozen=True)
class AvailabilityInterval:
    """
    One contiguous block of a user's declared availability within a group.
    """
    id: int
    user_id: str
    group_id: str
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise InvalidRange(
                f"Interval {self.id} ends ({self.end_date}) before it starts ({self.start_date})"
            )

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def single_day(self) -> bool:
        return self.start_date == self.end_date

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def days(self) -> int:
        """Number of days covered, both ends included."""
        return self.date_range.days()


@dataclass(frozen=True)
class GroupRoster:
    """
    Membership snapshot of a group, used as the percentage denominator.
    """
    group_id: str
    member_ids: FrozenSet[str]
    weekends_only: bool = False

    @property
    def total_members(self) -> int:
        return len(self.member_ids)

    def is_relevant(self, day: date, is_holiday: bool) -> bool:
        """Weekends-only groups only care about weekend days and holidays."""
        if not self.weekends_only:
            return True
        return is_weekend(day) or is_holiday


@dataclass(frozen=True)
class Holiday:
    """A public holiday on a given date."""
    date: date
    name: str


@dataclass
class DateAvailability:
    """
    Participation statistics for one date of a group.
    """
    date: date
    users: List[str]
    count: int
    percentage: float  # one decimal place
    is_full: bool
    is_weekend: bool = False
    is_holiday: bool = False
    holiday_name: Optional[str] = None

    def format_display(self) -> str:
        """
        Format the row for display.
        Format: Weekday, DD.MM.YYYY | count (percentage%)
        """
        weekday = self.date.strftime("%A")
        return f"{weekday}, {self.date.strftime('%d.%m.%Y')} | {self.count} ({self.percentage}%)"


@dataclass
class DayCell:
    """
    One cell of the month calendar grid.
    """
    date: date
    day_number: int
    is_in_month: bool
    is_weekend: bool
    is_holiday: bool
    holiday_name: Optional[str]
    is_today: bool
    disabled: bool
    users: List[str]
    user_count: int
    total_members: int
    viewer_available: bool
    percentage: int  # rounded to a whole number

    @property
    def coverage_level(self) -> str:
        """Coverage tier of the day: full, high, medium or low."""
        if self.percentage == 100:
            return "full"
        if self.percentage >= 75:
            return "high"
        if self.percentage >= 50:
            return "medium"
        return "low"


@dataclass
class CalendarMonth:
    """
    A month laid out in full weeks, Sunday first.
    """
    year: int
    month: int
    month_name: str
    prev_month: date
    next_month: date
    days: List[DayCell] = field(default_factory=list)

    def weeks(self) -> List[List[DayCell]]:
        """Split the grid into rows of seven days."""
        return [self.days[i:i + 7] for i in range(0, len(self.days), 7)]
