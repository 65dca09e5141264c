"""Autosave scheduler.

Periodically snapshots the unsaved entry form so it survives a restart.
Uses asyncio tasks; no external scheduler dependency.
"""

from __future__ import annotations

import asyncio
import logging
import os

from .service import UseCaseService

logger = logging.getLogger(__name__)

DEFAULT_AUTOSAVE_INTERVAL_SECONDS = 30


class AutosaveScheduler:
    """Writes the draft snapshot every interval while the form is dirty."""

    def __init__(self, service: UseCaseService, interval_seconds: float | None = None):
        self.service = service
        self._task: asyncio.Task | None = None
        self._running = False
        if interval_seconds is None:
            interval_seconds = float(os.environ.get(
                "AUTOSAVE_INTERVAL_SECONDS",
                str(DEFAULT_AUTOSAVE_INTERVAL_SECONDS),
            ))
        self._interval_seconds = interval_seconds

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Autosave scheduler started (interval: %gs)", self._interval_seconds)

    async def stop(self):
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Autosave scheduler stopped")

    async def tick(self) -> bool:
        """Run one autosave check. Failures are logged, never raised."""
        try:
            return await self.service.autosave()
        except Exception as exc:
            logger.error("Autosave failed: %s", exc, exc_info=True)
            return False

    async def _run_loop(self):
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
                if not self._running:
                    break
                await self.tick()
            except asyncio.CancelledError:
                break
