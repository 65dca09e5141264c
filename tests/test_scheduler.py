"""Tests for the autosave scheduler."""

import asyncio
import json

from use_case_assessment.scheduler import DEFAULT_AUTOSAVE_INTERVAL_SECONDS, AutosaveScheduler
from use_case_assessment.store import AUTOSAVE_KEY


class TestAutosaveScheduler:
    def test_interval_from_environment(self, service, monkeypatch):
        monkeypatch.setenv("AUTOSAVE_INTERVAL_SECONDS", "5")
        assert AutosaveScheduler(service)._interval_seconds == 5.0

    def test_default_interval(self, service, monkeypatch):
        monkeypatch.delenv("AUTOSAVE_INTERVAL_SECONDS", raising=False)
        assert AutosaveScheduler(service)._interval_seconds == DEFAULT_AUTOSAVE_INTERVAL_SECONDS

    def test_tick_writes_dirty_draft(self, service, store, make_form):
        service.update_draft(make_form("Draft"))
        assert asyncio.run(AutosaveScheduler(service, 60).tick()) is True
        assert json.loads(store.data[AUTOSAVE_KEY])["title"] == "Draft"

    def test_tick_swallows_store_errors(self, broken_service, make_form):
        broken_service.update_draft(make_form("Draft"))
        assert asyncio.run(AutosaveScheduler(broken_service, 60).tick()) is False

    def test_loop_runs_until_stopped(self, service, store, make_form):
        service.update_draft(make_form("Draft"))
        scheduler = AutosaveScheduler(service, 0.01)

        async def scenario():
            await scheduler.start()
            await asyncio.sleep(0.1)
            await scheduler.stop()

        asyncio.run(scenario())
        assert not scheduler.running
        assert AUTOSAVE_KEY in store.data
