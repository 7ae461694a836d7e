"""Database engine, session factory and transaction boundary.

Services never look up a global engine. They receive a ``sessionmaker`` and
open one unit of work per operation:

    with unit_of_work(session_factory) as session:
        ledger = OccupancyLedger(session)
        ledger.reserve_bed(room_id)

The unit of work commits when the block exits normally and rolls back on every
exception path, so a multi-step mutation is either fully applied or not at all.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hostel.models import Base
from hostel.services.errors import AppError, InternalError

logger = logging.getLogger(__name__)


def _is_in_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///") or ":memory:" in database_url


def _enable_sqlite_write_locking(engine: Engine) -> None:
    """Make every SQLite transaction take the database write lock up front.

    SQLite has no row locks, so ``SELECT ... FOR UPDATE`` is a no-op there.
    ``BEGIN IMMEDIATE`` serializes concurrent writers instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Disable pysqlite's implicit BEGIN so the "begin" hook below owns it
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL (e.g., "sqlite:///./hostel.db")
        echo: Log emitted SQL

    Returns:
        Configured Engine. In-memory SQLite uses StaticPool so every session
        sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if _is_in_memory_sqlite(database_url):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        _enable_sqlite_write_locking(engine)
        return engine

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory handed to every service."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=engine)


@contextmanager
def unit_of_work(session_factory: sessionmaker) -> Iterator[Session]:
    """
    Scoped transaction: commit on success, rollback on any failure.

    Args:
        session_factory: Factory producing sessions bound to the store

    Yields:
        Session for the duration of the unit

    Raises:
        AppError: Domain errors raised inside the block, after rollback
        InternalError: Any storage failure (including a failed commit), after rollback
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except AppError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Transaction rolled back after storage failure: {e}")
        raise InternalError("Storage failure; no changes were applied") from e
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = [
    "create_db_engine",
    "create_session_factory",
    "init_db",
    "unit_of_work",
]
