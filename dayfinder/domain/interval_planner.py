"""
Core business logic for keeping a member's availability canonical.

Pure domain logic: the planner looks at the intervals a member already has
and describes the changes an add or a remove requires. Applying the changes
is the job of the service layer, inside one unit of work.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .models import ONE_DAY, AvailabilityInterval, DateRange, shift_day


@dataclass
class IntervalChangeSet:
    """
    Changes to apply to one (user, group) pair's intervals.

    Deletions are applied first, then updates, then inserts.
    """
    deleted_ids: List[int] = field(default_factory=list)
    updated: List[Tuple[int, DateRange]] = field(default_factory=list)
    inserted: List[DateRange] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.deleted_ids or self.updated or self.inserted)


class IntervalPlanner:
    """
    Plans merges and splits over one member's canonical intervals.

    Canonical form: the intervals of a (user, group) pair never overlap and
    are never adjacent, so every interval can be processed independently.
    """

    def plan_merge(
        self,
        existing: Sequence[AvailabilityInterval],
        requested: DateRange
    ) -> IntervalChangeSet:
        """
        Plan the insertion of ``requested``.

        Algorithm:
        1. Collect every interval that overlaps the request or is adjacent to it
        2. No match: insert the request as is
        3. Otherwise: delete the matches and insert one interval spanning
           the request and all matches
        """
        touching = [
            interval for interval in existing
            if interval.date_range.touches(requested)
        ]

        if not touching:
            return IntervalChangeSet(inserted=[requested])

        merged = DateRange(
            start=min([requested.start] + [i.start_date for i in touching]),
            end=max([requested.end] + [i.end_date for i in touching])
        )

        return IntervalChangeSet(
            deleted_ids=[interval.id for interval in touching],
            inserted=[merged]
        )

    def plan_split(
        self,
        existing: Sequence[AvailabilityInterval],
        requested: DateRange
    ) -> IntervalChangeSet:
        """
        Plan the removal of ``requested``.

        Only intervals sharing at least one date with the request are touched;
        an adjacent interval stays as it is.
        """
        changes = IntervalChangeSet()
        start, end = requested.start, requested.end

        for interval in existing:
            if not interval.date_range.overlaps(requested):
                continue

            # Removal covers the whole interval
            if start <= interval.start_date and end >= interval.end_date:
                changes.deleted_ids.append(interval.id)

            # Removal sits strictly inside: keep the head, add the tail
            elif start > interval.start_date and end < interval.end_date:
                changes.updated.append(
                    (interval.id, DateRange(start=interval.start_date, end=start - ONE_DAY))
                )
                changes.inserted.append(
                    DateRange(start=end + ONE_DAY, end=interval.end_date)
                )

            # Removal overlaps the head
            elif start <= interval.start_date and end < interval.end_date:
                changes.updated.append(
                    (interval.id, DateRange(start=end + ONE_DAY, end=interval.end_date))
                )

            # Removal overlaps the tail
            else:
                changes.updated.append(
                    (interval.id, DateRange(start=interval.start_date, end=start - ONE_DAY))
                )

        return changes


def is_canonical(intervals: Sequence[AvailabilityInterval]) -> bool:
    """
    Check that intervals are pairwise non-overlapping and non-adjacent.
    """
    ordered = sorted(intervals, key=lambda i: i.start_date)
    for previous, current in zip(ordered, ordered[1:]):
        if current.start_date <= shift_day(previous.end_date, 1):
            return False
    return True
