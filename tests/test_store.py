"""Tests for the SQLite-backed key-value store."""

import asyncio

import pytest

from use_case_assessment import db
from use_case_assessment.store import SQLiteStore


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    return tmp_path


async def _with_db(fn):
    await db.init_db()
    try:
        return await fn(SQLiteStore())
    finally:
        await db.close_db()


class TestSQLiteStore:
    def test_missing_key(self, data_dir):
        async def scenario(store):
            return await store.get("useCases")

        assert asyncio.run(_with_db(scenario)) is None

    def test_set_get_overwrite_remove(self, data_dir):
        async def scenario(store):
            await store.set("useCases", "[]")
            first = await store.get("useCases")
            await store.set("useCases", '[{"title": "A"}]')
            second = await store.get("useCases")
            await store.remove("useCases")
            return first, second, await store.get("useCases")

        assert asyncio.run(_with_db(scenario)) == ("[]", '[{"title": "A"}]', None)

    def test_remove_missing_key(self, data_dir):
        async def scenario(store):
            await store.remove("autoSaveData")
            return await store.get("autoSaveData")

        assert asyncio.run(_with_db(scenario)) is None

    def test_persists_across_connections(self, data_dir):
        async def write(store):
            await store.set("autoSaveData", '{"title": "Draft"}')

        async def read(store):
            return await store.get("autoSaveData")

        asyncio.run(_with_db(write))
        assert asyncio.run(_with_db(read)) == '{"title": "Draft"}'
        assert (data_dir / db.DB_FILENAME).exists()
