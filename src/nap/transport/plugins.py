"""Request logging plugin for the HTTP transport.

Installs httpx event hooks that log method, URL, status and duration of
every request.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import httpx

    from nap.telemetry import NapLogger

_START_KEY = "nap.request_start"


class RequestLogger:
    """Logs every request sent through an httpx client.

    Example:
        >>> plugin = RequestLogger(get_logger("nap.http"))
        >>> client = httpx.AsyncClient(event_hooks=plugin.event_hooks())
    """

    def __init__(self, logger: NapLogger) -> None:
        self._logger = logger

    async def on_request(self, request: httpx.Request) -> None:
        request.extensions[_START_KEY] = time.perf_counter()
        self._logger.debug(
            "request started", method=request.method, url=str(request.url)
        )

    async def on_response(self, response: httpx.Response) -> None:
        request = response.request
        started = request.extensions.get(_START_KEY)
        duration_ms = (time.perf_counter() - started) * 1000 if started else None
        self._logger.info(
            "request completed",
            method=request.method,
            url=str(request.url),
            status=response.status_code,
            duration_ms=round(duration_ms, 2) if duration_ms is not None else None,
        )

    def event_hooks(self) -> dict[str, list[Callable[[Any], Awaitable[None]]]]:
        """Hooks in the shape ``httpx.AsyncClient(event_hooks=...)`` expects."""
        return {"request": [self.on_request], "response": [self.on_response]}


def merge_event_hooks(
    *hook_sets: dict[str, list[Callable[[Any], Awaitable[None]]]] | None,
) -> dict[str, list[Callable[[Any], Awaitable[None]]]]:
    """Combine event hook mappings, keeping registration order."""
    merged: dict[str, list[Callable[[Any], Awaitable[None]]]] = {
        "request": [],
        "response": [],
    }
    for hooks in hook_sets:
        for event, callbacks in (hooks or {}).items():
            merged.setdefault(event, []).extend(callbacks)
    return merged
