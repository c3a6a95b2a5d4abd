"""
SQL-backed store of availability intervals.

Mutations go through an explicit unit of work: everything done inside
``unit_of_work()`` is committed together, or rolled back together.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..domain.exceptions import PersistenceFailure
from ..domain.interval_planner import IntervalChangeSet
from ..domain.models import AvailabilityInterval, DateRange
from .database import IntervalRow

logger = logging.getLogger(__name__)


def _to_domain(row: IntervalRow) -> AvailabilityInterval:
    return AvailabilityInterval(
        id=row.id,
        user_id=row.user_id,
        group_id=row.group_id,
        start_date=row.start_date,
        end_date=row.end_date,
    )


class IntervalUnitOfWork:
    """
    Interval operations scoped to one open transaction.

    Every query filters on both user and group, so one pair's work never
    reaches another pair's rows.
    """

    def __init__(self, session: Session):
        self.session = session

    def find_in_window(
        self,
        user_id: str,
        group_id: str,
        start: date,
        end: date
    ) -> List[AvailabilityInterval]:
        """
        Intervals of the pair sharing at least one date with [start, end].

        This is the read a merge or split is planned from, so it locks the
        pair until the unit of work ends. Rows found are selected FOR UPDATE;
        on PostgreSQL a transaction-scoped advisory lock on the pair also
        covers the case where no row exists yet. SQLite ignores both because
        its transactions already hold the write lock (see ``create_db_engine``).
        """
        self._lock_pair(user_id, group_id)
        rows = self.session.scalars(
            select(IntervalRow)
            .where(
                IntervalRow.user_id == user_id,
                IntervalRow.group_id == group_id,
                IntervalRow.start_date <= end,
                IntervalRow.end_date >= start,
            )
            .order_by(IntervalRow.start_date)
            .with_for_update()
        ).all()
        return [_to_domain(row) for row in rows]

    def get(self, user_id: str, group_id: str, interval_id: int) -> Optional[AvailabilityInterval]:
        row = self._get_row(user_id, group_id, interval_id)
        return _to_domain(row) if row is not None else None

    def insert(self, user_id: str, group_id: str, date_range: DateRange) -> AvailabilityInterval:
        """Insert an interval and return it with its assigned id."""
        row = IntervalRow(
            user_id=user_id,
            group_id=group_id,
            start_date=date_range.start,
            end_date=date_range.end,
        )
        self.session.add(row)
        self.session.flush()
        return _to_domain(row)

    def update(self, user_id: str, group_id: str, interval_id: int, date_range: DateRange) -> None:
        row = self._get_row(user_id, group_id, interval_id)
        if row is None:
            raise PersistenceFailure(
                f"Interval {interval_id} disappeared while user {user_id} was editing group {group_id}"
            )
        row.start_date = date_range.start
        row.end_date = date_range.end
        self.session.flush()

    def delete(self, user_id: str, group_id: str, interval_ids: Iterable[int]) -> int:
        """Delete the pair's intervals among ``interval_ids``. Returns the number deleted."""
        ids = list(interval_ids)
        if not ids:
            return 0
        result = self.session.execute(
            delete(IntervalRow).where(
                IntervalRow.user_id == user_id,
                IntervalRow.group_id == group_id,
                IntervalRow.id.in_(ids),
            )
        )
        return result.rowcount or 0

    def delete_member(self, user_id: str, group_id: str) -> int:
        """Delete every interval of the pair."""
        result = self.session.execute(
            delete(IntervalRow).where(
                IntervalRow.user_id == user_id,
                IntervalRow.group_id == group_id,
            )
        )
        return result.rowcount or 0

    def apply(
        self,
        user_id: str,
        group_id: str,
        changes: IntervalChangeSet
    ) -> List[AvailabilityInterval]:
        """
        Apply a planned change set: deletions, then updates, then inserts.

        Returns the inserted intervals.
        """
        self.delete(user_id, group_id, changes.deleted_ids)
        for interval_id, date_range in changes.updated:
            self.update(user_id, group_id, interval_id, date_range)
        return [
            self.insert(user_id, group_id, date_range)
            for date_range in changes.inserted
        ]

    def _get_row(self, user_id: str, group_id: str, interval_id: int) -> Optional[IntervalRow]:
        return self.session.scalars(
            select(IntervalRow).where(
                IntervalRow.id == interval_id,
                IntervalRow.user_id == user_id,
                IntervalRow.group_id == group_id,
            )
        ).first()

    def _lock_pair(self, user_id: str, group_id: str) -> None:
        if self.session.get_bind().dialect.name != "postgresql":
            return
        key = f"{group_id}\x1f{user_id}"
        self.session.execute(select(func.pg_advisory_xact_lock(func.hashtext(key))))


class SqlIntervalStore:
    """
    Durable interval store on top of a SQLAlchemy session factory.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def unit_of_work(self) -> Iterator[IntervalUnitOfWork]:
        """
        Open a transaction and yield a unit of work bound to it.

        Commits when the block exits normally and rolls back on any exception.
        Database errors surface as PersistenceFailure.
        """
        session = self._session_factory()
        try:
            with session.begin():
                yield IntervalUnitOfWork(session)
        except SQLAlchemyError as exc:
            logger.warning("Rolled back interval changes: %s", exc)
            raise PersistenceFailure(f"Could not commit availability changes: {exc}") from exc
        finally:
            session.close()

    def intervals_for_group(self, group_id: str) -> List[AvailabilityInterval]:
        """All intervals of a group, read with a single query."""
        with self._session_factory() as session:
            rows = session.scalars(
                select(IntervalRow)
                .where(IntervalRow.group_id == group_id)
                .order_by(IntervalRow.start_date, IntervalRow.user_id)
            ).all()
            return [_to_domain(row) for row in rows]

    def intervals_for_member(self, user_id: str, group_id: str) -> List[AvailabilityInterval]:
        """A member's intervals in a group, ordered by start date."""
        with self._session_factory() as session:
            rows = session.scalars(
                select(IntervalRow)
                .where(
                    IntervalRow.user_id == user_id,
                    IntervalRow.group_id == group_id,
                )
                .order_by(IntervalRow.start_date)
            ).all()
            return [_to_domain(row) for row in rows]
