"""Single-flight rebuild coordination."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class RebuildScheduler:
    """Runs at most one rebuild at a time.

    Requests that arrive while a rebuild is running collapse into a
    single pending rebuild, started as soon as the running one ends.
    Must be used from inside a running event loop.
    """

    def __init__(self, rebuild: Callable[[], Awaitable[None]]) -> None:
        self._rebuild = rebuild
        self._task: asyncio.Task[None] | None = None
        self._pending = False
        self.completed = 0
        self.failed = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> bool:
        return self._pending

    def request(self) -> bool:
        """Ask for a rebuild.

        Returns:
            True when a rebuild started now, False when it was queued
        """
        if self.running:
            if not self._pending:
                logger.debug("Build in progress; queueing one rebuild")
            self._pending = True
            return False

        self._task = asyncio.create_task(self._drain())
        return True

    async def wait_idle(self) -> None:
        """Wait until no rebuild is running or pending."""
        while self._task is not None and not self._task.done():
            await asyncio.shield(self._task)

    async def _drain(self) -> None:
        while True:
            self._pending = False
            try:
                await self._rebuild()
            except Exception:
                self.failed += 1
                logger.exception("Rebuild failed; waiting for further changes")
            else:
                self.completed += 1
            if not self._pending:
                return
