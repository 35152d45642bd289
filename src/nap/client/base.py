"""Client protocol.

Code that depends on a client should accept ``Client`` so tests can pass a
stub in place of a NapClient.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import MutableMapping

    import httpx

    from nap.client.cancel import CancelToken
    from nap.client.response import ApiResponse
    from nap.codec import BodyProvider

T = TypeVar("T")


@runtime_checkable
class Client(Protocol):
    """GET/POST against a base host."""

    async def get(
        self,
        path: str,
        query: Any = None,
        headers: httpx.Headers | MutableMapping[str, str] | None = None,
        out: type[T] | None = None,
        *,
        cancel_token: CancelToken | None = None,
    ) -> ApiResponse[T]: ...

    async def post(
        self,
        path: str,
        body: BodyProvider,
        headers: httpx.Headers | MutableMapping[str, str] | None = None,
        out: type[T] | None = None,
        *,
        cancel_token: CancelToken | None = None,
    ) -> ApiResponse[T]: ...
