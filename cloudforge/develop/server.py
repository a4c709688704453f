"""Static development server with live reload."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse, HTMLResponse, Response, StreamingResponse

from ..rendering.io import read_text

logger = logging.getLogger(__name__)

RELOAD_PATH = "/__cloudforge/livereload"
RELOAD_SCRIPT = (
    "<script>"
    f'new EventSource("{RELOAD_PATH}")'
    '.addEventListener("reload", function () { location.reload(); });'
    "</script>"
)
_BODY_CLOSE = re.compile(r"</body\s*>", re.IGNORECASE)
_NO_CACHE = {"Cache-Control": "no-cache"}


class ReloadNotifier:
    """Fans reload events out to every connected browser."""

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[str]] = set()
        self.published = 0

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self) -> None:
        self.published += 1
        for queue in list(self._subscribers):
            queue.put_nowait("reload")
        logger.debug(f"Reload sent to {len(self._subscribers)} browser(s)")

    async def events(self) -> AsyncIterator[str]:
        """Server-sent-event stream for one browser."""
        queue: asyncio.Queue[str] = asyncio.Queue()
        self._subscribers.add(queue)
        try:
            yield ": connected\n\n"
            while True:
                event = await queue.get()
                yield f"event: {event}\ndata: {event}\n\n"
        finally:
            self._subscribers.discard(queue)


def inject_reload_script(html: str) -> str:
    """Insert the live-reload script before the last ``</body>``."""
    matches = list(_BODY_CLOSE.finditer(html))
    if not matches:
        return html + RELOAD_SCRIPT
    position = matches[-1].start()
    return html[:position] + RELOAD_SCRIPT + html[position:]


def resolve_request_path(root: Path, requested: str) -> Path | None:
    """Map a URL path to a file under ``root``; directories serve index.html."""
    base = root.resolve()
    candidate = (base / requested.lstrip("/")).resolve()
    if candidate != base and base not in candidate.parents:
        return None
    if candidate.is_dir():
        candidate = candidate / "index.html"
    return candidate if candidate.is_file() else None


def create_app(root: Path, notifier: ReloadNotifier) -> FastAPI:
    app = FastAPI(
        title="CloudForge development server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get(RELOAD_PATH)
    async def livereload() -> StreamingResponse:
        return StreamingResponse(
            notifier.events(), media_type="text/event-stream", headers=_NO_CACHE
        )

    @app.get("/{requested:path}")
    async def serve(requested: str) -> Response:
        path = resolve_request_path(root, requested)
        if path is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
        if path.suffix.lower() in (".html", ".htm"):
            return HTMLResponse(inject_reload_script(read_text(path)), headers=_NO_CACHE)
        return FileResponse(path, headers=_NO_CACHE)

    return app
