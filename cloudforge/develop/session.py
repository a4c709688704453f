"""Development session wiring: build, serve, watch, rebuild."""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from typing import TYPE_CHECKING

import uvicorn

from ..core.errors import ConfigurationError
from .scheduler import RebuildScheduler
from .server import ReloadNotifier, create_app
from .watcher import WatchSubscription

if TYPE_CHECKING:
    from ..pipeline import CloudForge

logger = logging.getLogger(__name__)


def open_browser(browser: str, url: str) -> None:
    try:
        webbrowser.get(None if browser == "default" else browser).open(url)
    except webbrowser.Error as exc:
        logger.warning(f"Could not open browser {browser!r}: {exc}")


async def run_development_session(forge: "CloudForge") -> None:
    config = forge.config.develop
    if config is None:
        raise ConfigurationError.missing("start the development server", ["develop"])

    await forge.build()

    notifier = ReloadNotifier()

    async def rebuild() -> None:
        await forge.build()
        logger.info("Refreshing browser. Waiting for changes...")
        notifier.publish()

    scheduler = RebuildScheduler(rebuild)
    subscription = WatchSubscription(
        forge.watch_directories(),
        lambda changes: scheduler.request(),
        debounce_ms=config.debounce_ms,
        ignore_paths=forge.config.build_directories(),
    ).start()

    server = uvicorn.Server(
        uvicorn.Config(
            create_app(config.directory, notifier),
            host=config.host,
            port=config.port,
            log_level="warning",
            timeout_graceful_shutdown=1,
        )
    )
    url = f"http://{config.host}:{config.port}/"
    serving = asyncio.create_task(server.serve())
    try:
        while not server.started and not serving.done():
            await asyncio.sleep(0.05)
        if server.started:
            logger.info(f"Serving {config.directory} at {url}. Waiting for changes...")
            if config.browser:
                open_browser(config.browser, url)
        await serving
    finally:
        subscription.cancel()
        await subscription.wait_closed()
        await scheduler.wait_idle()
