"""Key-value persistence for the use-case collection and the autosave draft.

The core never talks to storage directly. The service reads and writes whole
JSON documents through one of these stores.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from .db import get_session_factory
from .sqlmodels import KeyValueEntry

logger = logging.getLogger(__name__)

USE_CASES_KEY = "useCases"
AUTOSAVE_KEY = "autoSaveData"


class StoreError(RuntimeError):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class SQLiteStore:
    """Store backed by the ``kv_entries`` table. Call ``db.init_db()`` first."""

    async def get(self, key: str) -> Optional[str]:
        try:
            async with get_session_factory()() as session:
                result = await session.execute(select(KeyValueEntry.value).where(KeyValueEntry.key == key))
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not read {key!r}: {exc}") from exc

    async def set(self, key: str, value: str) -> None:
        try:
            async with get_session_factory()() as session:
                row = await session.get(KeyValueEntry, key)
                if row:
                    row.value = value
                else:
                    session.add(KeyValueEntry(key=key, value=value))
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not write {key!r}: {exc}") from exc
        logger.debug("Stored %s (%d bytes)", key, len(value))

    async def remove(self, key: str) -> None:
        try:
            async with get_session_factory()() as session:
                await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                await session.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not remove {key!r}: {exc}") from exc


class MemoryStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)
