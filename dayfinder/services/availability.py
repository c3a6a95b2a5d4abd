"""
Application services that mutate a member's availability.

``MergeEngine`` and ``SplitEngine`` ask the domain-level ``IntervalPlanner``
what has to change and apply the result through the store's unit of work,
while holding the (user, group) lock. ``AvailabilityService`` is the facade
callers use; it adds the single-interval and bulk operations around them.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Sequence

from ..adapters.interval_store import SqlIntervalStore
from ..domain.exceptions import IntervalNotFound, InvalidSelection
from ..domain.interval_planner import IntervalPlanner
from ..domain.models import AvailabilityInterval, DateRange, Holiday, shift_day
from .locks import KeyedLock
from .protocols import HolidayLookupProtocol

logger = logging.getLogger(__name__)


class MergeEngine:
    """
    Adds a date range to a member's availability, merging it with every
    overlapping or adjacent interval so the pair stays canonical.
    """

    def __init__(
        self,
        store: SqlIntervalStore,
        locks: KeyedLock,
        planner: Optional[IntervalPlanner] = None,
    ) -> None:
        self._store = store
        self._locks = locks
        self._planner = planner or IntervalPlanner()

    def add(
        self,
        user_id: str,
        group_id: str,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> AvailabilityInterval:
        """
        Add [start_date, end_date] for the member.

        Returns:
            The interval now covering the requested range

        Raises:
            InvalidRange: If a bound is missing or end_date < start_date
            PersistenceFailure: If the change could not be committed
        """
        requested = DateRange.from_bounds(start_date, end_date)

        with self._locks.hold((user_id, group_id)):
            with self._store.unit_of_work() as uow:
                # Widen by a day on both sides to catch adjacent intervals
                existing = uow.find_in_window(
                    user_id,
                    group_id,
                    shift_day(requested.start, -1),
                    shift_day(requested.end, 1),
                )
                changes = self._planner.plan_merge(existing, requested)
                inserted = uow.apply(user_id, group_id, changes)

        result = inserted[0]
        if changes.deleted_ids:
            logger.info(
                "Merged %s with %d interval(s) into %s for user=%s group=%s",
                requested, len(changes.deleted_ids), result.date_range, user_id, group_id,
            )
        else:
            logger.info("Added %s for user=%s group=%s", requested, user_id, group_id)
        return result


class SplitEngine:
    """
    Removes a date range from a member's availability, trimming, deleting
    or splitting the intervals it overlaps.
    """

    def __init__(
        self,
        store: SqlIntervalStore,
        locks: KeyedLock,
        planner: Optional[IntervalPlanner] = None,
    ) -> None:
        self._store = store
        self._locks = locks
        self._planner = planner or IntervalPlanner()

    def remove(
        self,
        user_id: str,
        group_id: str,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> None:
        """
        Remove [start_date, end_date] from the member's availability.

        Removing a range nothing overlaps is a successful no-op.

        Raises:
            InvalidRange: If a bound is missing or end_date < start_date
            PersistenceFailure: If the change could not be committed
        """
        requested = DateRange.from_bounds(start_date, end_date)

        with self._locks.hold((user_id, group_id)):
            with self._store.unit_of_work() as uow:
                existing = uow.find_in_window(user_id, group_id, requested.start, requested.end)
                changes = self._planner.plan_split(existing, requested)
                if changes.is_empty():
                    logger.debug("Nothing to remove in %s for user=%s group=%s", requested, user_id, group_id)
                    return
                uow.apply(user_id, group_id, changes)

        logger.info(
            "Removed %s for user=%s group=%s (%d deleted, %d trimmed, %d split off)",
            requested, user_id, group_id,
            len(changes.deleted_ids), len(changes.updated), len(changes.inserted),
        )


class AvailabilityService:
    """
    Entry point for everything that changes a member's availability.
    """

    def __init__(
        self,
        store: SqlIntervalStore,
        locks: Optional[KeyedLock] = None,
        holiday_lookup: Optional[HolidayLookupProtocol] = None,
        country_code: str = "BR",
    ) -> None:
        self._store = store
        self._locks = locks or KeyedLock()
        self._holiday_lookup = holiday_lookup
        self._country_code = country_code
        self.merge_engine = MergeEngine(store, self._locks)
        self.split_engine = SplitEngine(store, self._locks)

    def add(
        self,
        user_id: str,
        group_id: str,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> AvailabilityInterval:
        return self.merge_engine.add(user_id, group_id, start_date, end_date)

    def remove(
        self,
        user_id: str,
        group_id: str,
        start_date: Optional[date],
        end_date: Optional[date],
    ) -> None:
        self.split_engine.remove(user_id, group_id, start_date, end_date)

    def list_intervals(self, user_id: str, group_id: str) -> List[AvailabilityInterval]:
        """The member's intervals in the group, ordered by start date."""
        return self._store.intervals_for_member(user_id, group_id)

    def member_availability_days(self, user_id: str, group_id: str) -> int:
        """Total number of days the member declared in the group."""
        return sum(interval.days() for interval in self.list_intervals(user_id, group_id))

    def delete_interval(self, user_id: str, group_id: str, interval_id: int) -> None:
        """
        Delete one of the member's own intervals.

        Raises:
            IntervalNotFound: If the id is not one of the member's intervals in the group
        """
        with self._locks.hold((user_id, group_id)):
            with self._store.unit_of_work() as uow:
                if uow.get(user_id, group_id, interval_id) is None:
                    raise IntervalNotFound(
                        f"Interval {interval_id} not found for user {user_id} in group {group_id}"
                    )
                uow.delete(user_id, group_id, [interval_id])

        logger.info("Deleted interval %d for user=%s group=%s", interval_id, user_id, group_id)

    def batch_delete(self, user_id: str, group_id: str, interval_ids: Sequence[int]) -> int:
        """
        Delete the member's own intervals among ``interval_ids``.

        Ids belonging to other members or groups are ignored.

        Returns:
            Number of intervals deleted
        """
        if not interval_ids:
            raise InvalidSelection("No availabilities selected")

        with self._locks.hold((user_id, group_id)):
            with self._store.unit_of_work() as uow:
                deleted = uow.delete(user_id, group_id, interval_ids)

        logger.info("Deleted %d of %d selected interval(s) for user=%s group=%s",
                    deleted, len(interval_ids), user_id, group_id)
        return deleted

    def remove_member(self, user_id: str, group_id: str) -> int:
        """
        Delete all of a member's intervals in a group.

        Called by group management when a member leaves or is removed,
        before the membership itself goes away.
        """
        with self._locks.hold((user_id, group_id)):
            with self._store.unit_of_work() as uow:
                deleted = uow.delete_member(user_id, group_id)

        logger.info("Removed %d interval(s) of departing user=%s group=%s", deleted, user_id, group_id)
        return deleted

    def holidays_for_year(self, year: int) -> List[Holiday]:
        """Public holidays of the configured country in ``year``."""
        lookup = self._require_holiday_lookup()
        return lookup.between(self._country_code, date(year, 1, 1), date(year, 12, 31))

    def add_holidays(self, user_id: str, group_id: str, year: int) -> int:
        """
        Mark the member available on every public holiday of ``year``.

        Each holiday is merged on its own, so earlier holidays stay added
        if a later one fails.

        Returns:
            Number of holidays added
        """
        added = 0
        for holiday in self.holidays_for_year(year):
            self.merge_engine.add(user_id, group_id, holiday.date, holiday.date)
            added += 1

        logger.info("Added %d holiday(s) of %d for user=%s group=%s", added, year, user_id, group_id)
        return added

    def _require_holiday_lookup(self) -> HolidayLookupProtocol:
        if self._holiday_lookup is None:
            raise RuntimeError("AvailabilityService was created without a holiday lookup")
        return self._holiday_lookup
