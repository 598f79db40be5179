from __future__ import annotations

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from buildstock.core.config import settings
from buildstock.services.errors import StorageError

logger = logging.getLogger(__name__)


def _enable_sqlite_transactions(engine: Engine) -> None:
    """
    pysqlite n'émet pas BEGIN lui-même : on le fait à la main pour que
    SAVEPOINT / ROLLBACK se comportent comme sur Postgres.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, *, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.endswith("://"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        _enable_sqlite_transactions(engine)
        return engine

    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = build_engine(settings.database_url, echo=settings.database_echo)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def commit_or_rollback(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Commit failed, transaction rolled back")
        raise StorageError("Database write failed") from exc
