"""
core/db.py -- Shared SQLAlchemy engine factory and error translation.

Both repositories (auth/store.py and tasks/store.py) open their engine through
make_engine() so SQLite-specific connection setup lives in one place, and wrap
every statement in translate_errors() so driver failures reach callers as
StorageError and never as raw SQLAlchemy exceptions.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or tasks/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.errors import StorageError

logger = logging.getLogger("tasklist.db")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str) -> Engine:
    """Create an engine for db_url with SQLite thread and journal settings applied.

    check_same_thread=False is required because FastAPI runs sync route
    handlers in a thread pool; a pooled connection may be reused by a thread
    other than the one that opened it.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Convert any SQLAlchemyError raised inside the block into StorageError.

    The original exception is logged with its traceback and chained onto the
    StorageError, but the message callers see is always the generic one.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageError() from exc


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
