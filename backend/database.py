"""Database setup and session management."""

import logging
from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def configure_sqlite_transactions(engine) -> None:
    """Let SQLAlchemy own BEGIN on pysqlite connections.

    The pysqlite driver defers BEGIN until the first DML statement, which
    breaks SAVEPOINT handling (the snapshot store creates each row inside a
    savepoint so a duplicate account-day only discards that row).
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_conn, connection_record):
        dbapi_conn.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


@lru_cache
def get_engine():
    """Get or create the database engine (cached).

    SQLite engines get :func:`configure_sqlite_transactions` applied.
    """
    connect_args = {}
    database_url = settings.DATABASE_URL

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
    )
    if database_url.startswith("sqlite"):
        configure_sqlite_transactions(engine)
    logger.debug("Database engine created for %s", engine.url.render_as_string(hide_password=True))
    return engine


def get_session_local():
    """Get a sessionmaker bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db():
    """Dependency that provides a database session.

    Transaction conventions:
    - ``AccountService``/``UserService`` commit each write themselves;
      ``transfer()`` applies both balance updates in one commit
    - ``SnapshotService`` writes go through the snapshot store: one savepoint
      per row, committed once per run (in batches for historical backfills)
    - The session is rolled back if the request raises
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
