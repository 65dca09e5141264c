"""Async SQLite engine for the use-case store.

The collection and the autosaved draft live in a single key-value table in
$DATA_DIR/use_cases.db (default ~/.use-case-assessment). The engine is created
lazily on first use so importing the server never touches the filesystem.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.expanduser("~/.use-case-assessment")
DB_FILENAME = "use_cases.db"

_engine = None
_session_factory = None


def db_path() -> Path:
    """Location of the database file; the data directory is created on demand."""
    data_dir = Path(os.environ.get("DATA_DIR", DEFAULT_DATA_DIR))
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / DB_FILENAME


def _configure_connection(dbapi_connection, connection_record):
    # The autosave task and tool calls share the file.
    cursor = dbapi_connection.cursor()
    for pragma in ("journal_mode=WAL", "synchronous=NORMAL", "busy_timeout=5000"):
        cursor.execute(f"PRAGMA {pragma}")
    cursor.close()


def get_engine():
    global _engine
    if _engine is None:
        path = db_path()
        _engine = create_async_engine(f"sqlite+aiosqlite:///{path}", echo=False)
        event.listen(_engine.sync_engine, "connect", _configure_connection)
        logger.debug("Opened use-case database at %s", path)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def init_db():
    """Create the kv_entries table on first start."""
    from .sqlmodels import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Use-case store ready at %s", db_path())


async def close_db():
    """Dispose of the engine; the next access reopens it, e.g. after DATA_DIR changes."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
