"""Transport protocol.

A transport sends a request and hands back the response unread. The caller
owns the response and must close it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx


@runtime_checkable
class Transport(Protocol):
    """Network dispatch used by NapClient.

    Implementations raise ``nap.errors.TransportError`` on failure, setting
    ``response`` when a response was obtained anyway.
    """

    async def get(self, url: str, headers: httpx.Headers | None = None) -> httpx.Response:
        """Send a GET request."""
        ...

    async def post(
        self,
        url: str,
        body: bytes,
        headers: httpx.Headers | None = None,
    ) -> httpx.Response:
        """Send a POST request with ``body``."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...
