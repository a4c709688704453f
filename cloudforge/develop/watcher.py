"""Filesystem change subscriptions."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from watchfiles import Change, DefaultFilter, awatch

logger = logging.getLogger(__name__)

ChangeSet = set[tuple[Change, str]]


class WatchSubscription:
    """Invokes ``callback`` with each batch of changes until cancelled.

    Args:
        directories: Directories watched recursively; missing ones are skipped
        callback: Called from the event loop with the change set
        debounce_ms: Window in which changes are grouped into one batch
        ignore_paths: Paths whose changes are ignored (e.g. build output)
    """

    def __init__(
        self,
        directories: Iterable[Path],
        callback: Callable[[ChangeSet], object],
        *,
        debounce_ms: int = 1250,
        ignore_paths: Sequence[Path] = (),
    ) -> None:
        self.directories = [d for d in dict.fromkeys(directories) if d.exists()]
        self.callback = callback
        self.debounce_ms = debounce_ms
        self.watch_filter = DefaultFilter(ignore_paths=[p.resolve() for p in ignore_paths])
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    def start(self) -> "WatchSubscription":
        if not self.directories:
            logger.warning("No existing directories to watch")
            return self
        logger.debug(f"Watching {', '.join(map(str, self.directories))}")
        self._task = asyncio.create_task(self._run())
        return self

    def cancel(self) -> None:
        self._stop.set()

    async def wait_closed(self) -> None:
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        async for changes in awatch(
            *self.directories,
            watch_filter=self.watch_filter,
            debounce=self.debounce_ms,
            stop_event=self._stop,
        ):
            logger.info(f"Changes found ({len(changes)} path(s))")
            self.callback(changes)
