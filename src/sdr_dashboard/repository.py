from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from sqlalchemy import Column, Date, DateTime, Integer, MetaData, Table, create_engine, select
from sqlalchemy.engine import Engine, Row, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .configuration import StoreConfig
from .models import ActivityQuery, DailyActivityRecord
from .sample_data import SAMPLE_ACTIVITY

logger = logging.getLogger(__name__)


class ActivityStoreError(RuntimeError):
    pass


class DuplicateActivityError(ActivityStoreError):
    """Raised when a record for the same day is already stored."""


class ActivityRepository:
    """
    Interface for the daily activity store.

    ``list`` returns records inside the query bounds ordered by day ascending;
    ``append`` stores a new record and returns it. Days are unique, so
    appending a day that already exists raises ``ActivityStoreError``.
    """

    def list(self, query: Optional[ActivityQuery] = None) -> Sequence[DailyActivityRecord]:
        raise NotImplementedError

    def append(self, record: DailyActivityRecord) -> DailyActivityRecord:
        raise NotImplementedError


class InMemoryActivityRepository(ActivityRepository):
    def __init__(self, records: Iterable[DailyActivityRecord] = ()):
        self._records: dict = {}
        for record in records:
            self.append(record)

    def list(self, query: Optional[ActivityQuery] = None) -> Sequence[DailyActivityRecord]:
        query = query or ActivityQuery()
        return tuple(
            self._records[day] for day in sorted(self._records) if query.matches(day)
        )

    def append(self, record: DailyActivityRecord) -> DailyActivityRecord:
        if record.day in self._records:
            raise DuplicateActivityError(f"Activity for {record.day.isoformat()} already exists.")
        self._records[record.day] = record
        return record


class SQLActivityRepository(ActivityRepository):
    """
    Persist daily activity in a single relational table.

    Expected table (created on first use):
      - daily_activity(id, day UNIQUE, dials, conversations, calls, emails,
        linked_in, meetings, created_at)
    """

    def __init__(self, engine: Engine, table_name: str = "daily_activity"):
        self.engine = engine
        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("day", Date, unique=True, nullable=False),
            Column("dials", Integer, nullable=False, default=0),
            Column("conversations", Integer, nullable=False, default=0),
            Column("calls", Integer, nullable=False, default=0),
            Column("emails", Integer, nullable=False, default=0),
            Column("linked_in", Integer, nullable=False, default=0),
            Column("meetings", Integer, nullable=False, default=0),
            Column("created_at", DateTime(timezone=True), nullable=False),
        )
        self.metadata.create_all(self.engine, checkfirst=True)

    def list(self, query: Optional[ActivityQuery] = None) -> Sequence[DailyActivityRecord]:
        query = query or ActivityQuery()
        statement = select(self.table).order_by(self.table.c.day.asc())
        if query.start is not None:
            statement = statement.where(self.table.c.day >= query.start)
        if query.end is not None:
            statement = statement.where(self.table.c.day <= query.end)
        try:
            with self.engine.connect() as connection:
                rows = connection.execute(statement).fetchall()
        except SQLAlchemyError as exc:
            raise ActivityStoreError(f"Failed to load activity: {exc}") from exc
        return tuple(self._row_to_record(row) for row in rows)

    def append(self, record: DailyActivityRecord) -> DailyActivityRecord:
        values = {
            "day": record.day,
            "dials": record.dials,
            "conversations": record.conversations,
            "calls": record.calls,
            "emails": record.emails,
            "linked_in": record.linked_in,
            "meetings": record.meetings,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            with self.engine.begin() as connection:
                connection.execute(self.table.insert().values(**values))
        except IntegrityError as exc:
            raise DuplicateActivityError(f"Activity for {record.day.isoformat()} already exists.") from exc
        except SQLAlchemyError as exc:
            raise ActivityStoreError(f"Failed to store activity: {exc}") from exc
        return record

    def is_empty(self) -> bool:
        statement = select(self.table.c.id).limit(1)
        try:
            with self.engine.connect() as connection:
                return connection.execute(statement).first() is None
        except SQLAlchemyError as exc:
            raise ActivityStoreError(f"Failed to inspect activity store: {exc}") from exc

    @staticmethod
    def _row_to_record(row: Row) -> DailyActivityRecord:
        return DailyActivityRecord(
            day=row.day,
            dials=int(row.dials or 0),
            conversations=int(row.conversations or 0),
            calls=int(row.calls or 0),
            emails=int(row.emails or 0),
            linked_in=int(row.linked_in or 0),
            meetings=int(row.meetings or 0),
        )


def _create_engine(database_url: str) -> Engine:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        # One shared connection, otherwise every checkout sees an empty database.
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.get_backend_name() == "sqlite":
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url)


def seed(repository: ActivityRepository, records: Iterable[DailyActivityRecord] = SAMPLE_ACTIVITY) -> List[DailyActivityRecord]:
    stored: List[DailyActivityRecord] = []
    for record in records:
        try:
            stored.append(repository.append(record))
        except ActivityStoreError as exc:
            logger.debug("Skipping seed record: %s", exc)
    return stored


def build_repository_from_env(config: Optional[StoreConfig] = None) -> ActivityRepository:
    cfg = config or StoreConfig.from_env()
    if cfg.database_url:
        repository = SQLActivityRepository(_create_engine(cfg.database_url), table_name=cfg.table_name)
        if cfg.seed_sample_data and repository.is_empty():
            seed(repository)
        logger.info("Using SQL activity store (table=%s)", cfg.table_name)
        return repository

    logger.info("Using in-memory activity store (seeded=%s)", cfg.seed_sample_data)
    return InMemoryActivityRepository(SAMPLE_ACTIVITY if cfg.seed_sample_data else ())
