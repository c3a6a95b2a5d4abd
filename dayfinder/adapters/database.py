"""
Database models and engine setup for the interval store.

This module defines the SQLAlchemy model backing availability intervals and
the engine/session factory helpers.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    String,
    create_engine,
    event,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class IntervalRow(Base):
    """
    One availability interval of a user within a group.

    Both dates are inclusive.
    """
    __tablename__ = "availabilities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False)
    group_id = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_availabilities_date_order"),
        Index("ix_availabilities_group_user", "group_id", "user_id"),
        Index("ix_availabilities_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<IntervalRow id={self.id} user={self.user_id} group={self.group_id} "
            f"{self.start_date}..{self.end_date}>"
        )


# Seconds a SQLite writer waits for another process to commit.
SQLITE_BUSY_TIMEOUT = 30


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections are shared across request threads; an in-memory
    SQLite database keeps a single connection so every session sees it.

    Every SQLite transaction starts with ``BEGIN IMMEDIATE``, which takes the
    database write lock before the first read. Two processes changing the
    same member's intervals therefore run one after the other.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)
        _begin_immediate(engine)
        return engine

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def _begin_immediate(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN, and make it IMMEDIATE."""

    @event.listens_for(engine, "connect")
    def disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def emit_begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory used by the interval store."""
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


def init_db(engine: Engine) -> None:
    """
    Initialize database tables.

    Creates all tables defined in the models if they don't exist.
    """
    Base.metadata.create_all(engine)

