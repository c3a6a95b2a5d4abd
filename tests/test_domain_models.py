"""
Tests for domain models.
"""

from datetime import date
from decimal import Decimal

import pytest

from dayfinder.domain.exceptions import InvalidRange
from dayfinder.domain.models import (
    AvailabilityInterval,
    CalendarMonth,
    DateRange,
    DayCell,
    GroupRoster,
    is_weekend,
    iter_days,
    percentage_of,
    shift_day,
)


class TestDateRange:
    """Tests for DateRange model."""

    def test_create_valid_range(self):
        """Test creating a valid range, single days included."""
        dr = DateRange(start=date(2025, 1, 10), end=date(2025, 1, 12))

        assert dr.days() == 3
        assert DateRange(start=date(2025, 1, 10), end=date(2025, 1, 10)).days() == 1

    def test_end_before_start_raises_invalid_range(self):
        """Test that a reversed range is rejected."""
        with pytest.raises(InvalidRange, match="End date must be after or equal to start date"):
            DateRange(start=date(2025, 1, 12), end=date(2025, 1, 10))

    @pytest.mark.parametrize("start,end", [(None, date(2025, 1, 1)), (date(2025, 1, 1), None), (None, None)])
    def test_missing_bound_raises_invalid_range(self, start, end):
        """Test that both bounds are required."""
        with pytest.raises(InvalidRange, match="Start date and end date are required"):
            DateRange.from_bounds(start, end)

    def test_overlaps_and_touches(self):
        """Adjacent ranges touch without overlapping."""
        first = DateRange(start=date(2025, 1, 10), end=date(2025, 1, 12))
        adjacent = DateRange(start=date(2025, 1, 13), end=date(2025, 1, 15))
        overlapping = DateRange(start=date(2025, 1, 12), end=date(2025, 1, 20))
        apart = DateRange(start=date(2025, 1, 14), end=date(2025, 1, 20))

        assert not first.overlaps(adjacent)
        assert first.touches(adjacent)
        assert adjacent.touches(first)
        assert first.overlaps(overlapping)
        assert not first.touches(apart)

    def test_touches_at_calendar_limits(self):
        """Ranges at date.min or date.max compare without overflowing."""
        first = DateRange(start=date.min, end=date(1, 1, 3))
        last = DateRange(start=date(9999, 12, 30), end=date.max)

        assert first.touches(DateRange(start=date(1, 1, 4), end=date(1, 1, 4)))
        assert last.touches(DateRange(start=date(9999, 12, 29), end=date(9999, 12, 29)))
        assert not first.touches(last)

    def test_str(self):
        assert str(DateRange(start=date(2025, 1, 10), end=date(2025, 1, 10))) == "2025-01-10"
        assert str(DateRange(start=date(2025, 1, 10), end=date(2025, 1, 12))) == "2025-01-10 - 2025-01-12"


class TestAvailabilityInterval:
    """Tests for AvailabilityInterval model."""

    def test_contains_and_days(self):
        interval = AvailabilityInterval(
            id=1, user_id="ana", group_id="trip",
            start_date=date(2025, 1, 10), end_date=date(2025, 1, 12)
        )

        assert interval.contains(date(2025, 1, 10))
        assert interval.contains(date(2025, 1, 12))
        assert not interval.contains(date(2025, 1, 13))
        assert interval.days() == 3
        assert not interval.single_day

    def test_reversed_interval_is_rejected(self):
        with pytest.raises(InvalidRange):
            AvailabilityInterval(
                id=1, user_id="ana", group_id="trip",
                start_date=date(2025, 1, 12), end_date=date(2025, 1, 10)
            )


class TestWeekend:
    """Weekend days are Friday, Saturday and Sunday."""

    def test_friday_is_weekend(self):
        assert is_weekend(date(2025, 4, 25))  # Friday

    def test_saturday_and_sunday_are_weekend(self):
        assert is_weekend(date(2025, 4, 26))
        assert is_weekend(date(2025, 4, 27))

    def test_monday_to_thursday_are_not(self):
        for day in iter_days(date(2025, 4, 21), date(2025, 4, 24)):
            assert not is_weekend(day)


class TestPercentage:
    """Tests for percentage rounding."""

    def test_one_decimal(self):
        assert percentage_of(3, 5, places=1) == Decimal("60.0")
        assert percentage_of(2, 3, places=1) == Decimal("66.7")
        assert percentage_of(1, 3, places=1) == Decimal("33.3")

    def test_whole_number_rounds_half_up(self):
        assert percentage_of(1, 8) == Decimal("13")  # 12.5
        assert percentage_of(2, 3) == Decimal("67")

    def test_zero_members(self):
        assert percentage_of(0, 0) == 0


class TestGroupRoster:
    """Tests for GroupRoster relevance filtering."""

    def test_every_date_is_relevant_without_filter(self):
        roster = GroupRoster(group_id="trip", member_ids=frozenset({"ana"}))
        assert roster.is_relevant(date(2025, 4, 22), is_holiday=False)

    def test_weekends_only_keeps_weekends_and_holidays(self):
        roster = GroupRoster(group_id="trip", member_ids=frozenset({"ana"}), weekends_only=True)

        assert not roster.is_relevant(date(2025, 4, 22), is_holiday=False)  # Tuesday
        assert roster.is_relevant(date(2025, 4, 21), is_holiday=True)       # Monday holiday
        assert roster.is_relevant(date(2025, 4, 25), is_holiday=False)      # Friday


class TestCalendarMonth:
    """Tests for DayCell tiers and week splitting."""

    @staticmethod
    def _cell(day: int, percentage: int) -> DayCell:
        return DayCell(
            date=date(2025, 1, day), day_number=day, is_in_month=True,
            is_weekend=False, is_holiday=False, holiday_name=None, is_today=False,
            disabled=False, users=[], user_count=0, total_members=4,
            viewer_available=False, percentage=percentage,
        )

    def test_coverage_levels(self):
        assert self._cell(1, 100).coverage_level == "full"
        assert self._cell(1, 75).coverage_level == "high"
        assert self._cell(1, 50).coverage_level == "medium"
        assert self._cell(1, 49).coverage_level == "low"

    def test_weeks(self):
        month = CalendarMonth(
            year=2025, month=1, month_name="January 2025",
            prev_month=date(2024, 12, 1), next_month=date(2025, 2, 1),
            days=[self._cell(d, 0) for d in range(1, 15)],
        )

        weeks = month.weeks()

        assert len(weeks) == 2
        assert [c.day_number for c in weeks[1]] == list(range(8, 15))


class TestCalendarLimits:
    """Day arithmetic saturates instead of overflowing."""

    def test_shift_day(self):
        assert shift_day(date(2025, 1, 31), 1) == date(2025, 2, 1)
        assert shift_day(date.min, -1) == date.min
        assert shift_day(date.max, 1) == date.max

    def test_iter_days_up_to_date_max(self):
        assert list(iter_days(date(9999, 12, 30), date.max)) == [date(9999, 12, 30), date.max]
