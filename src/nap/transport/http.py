"""HTTP 传输层：基于 httpx 的异步 HTTP 客户端，支持代理与请求日志。

HTTP transport using httpx for async requests.

Provides:
- Configurable timeouts
- Proxy support
- Request logging through httpx event hooks
- Pass-through of any other httpx.AsyncClient option
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from nap.config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_TIMEOUT, trust_env_enabled
from nap.errors import TransportError
from nap.telemetry import get_logger
from nap.transport.plugins import RequestLogger, merge_event_hooks

if TYPE_CHECKING:
    from nap.telemetry import NapLogger


_UA_VERSION: str | None = None


def _get_ua_version() -> str:
    """Get package version for User-Agent (cached)."""
    global _UA_VERSION
    if _UA_VERSION is None:
        try:
            from importlib.metadata import PackageNotFoundError, version

            _UA_VERSION = version("nap-python")
        except PackageNotFoundError:
            _UA_VERSION = "0.1.0"
    return _UA_VERSION


class HttpTransport:
    """HTTP transport backed by ``httpx.AsyncClient``.

    Responses are returned in streaming mode: the body is not read and the
    caller must close the response.

    Example:
        >>> transport = HttpTransport(proxy="http://proxy:3128", timeout=5.0)
        >>> response = await transport.get("http://h/orders/status?app_id=1")
        >>> try:
        ...     body = await response.aread()
        ... finally:
        ...     await response.aclose()
    """

    def __init__(
        self,
        *,
        proxy: str | None = None,
        timeout: float | None = None,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        trust_env: bool | None = None,
        user_agent: str | None = None,
        logger: NapLogger | None = None,
        request_logging: bool = True,
        **client_options: Any,
    ) -> None:
        """Initialize HTTP transport.

        Args:
            proxy: Proxy URL; None or empty for a direct connection
            timeout: Request timeout in seconds
            connect_timeout: Connect timeout in seconds
            trust_env: Let httpx read proxy/SSL settings from the environment
            user_agent: User-Agent header value
            logger: Logger for the request logging plugin
            request_logging: Install the request logging plugin
            **client_options: Extra ``httpx.AsyncClient`` keyword arguments
        """
        self._proxy = proxy or None
        self._timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self._connect_timeout = connect_timeout
        self._trust_env = trust_env if trust_env is not None else trust_env_enabled()
        self._user_agent = user_agent or f"nap-python/{_get_ua_version()}"
        self._logger = logger or get_logger("nap.http")

        hooks = [client_options.pop("event_hooks", None)]
        if request_logging:
            hooks.insert(0, RequestLogger(self._logger).event_hooks())
        self._event_hooks = merge_event_hooks(*hooks)
        self._client_options = client_options

        # Client instance (lazy initialization)
        self._client: httpx.AsyncClient | None = None

    @property
    def proxy(self) -> str | None:
        return self._proxy

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            options = {
                "timeout": httpx.Timeout(self._timeout, connect=self._connect_timeout),
                "proxy": self._proxy,
                "trust_env": self._trust_env,
                "event_hooks": self._event_hooks,
            }
            options.update(self._client_options)
            self._client = httpx.AsyncClient(**options)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, extra_headers: httpx.Headers | None = None) -> httpx.Headers:
        headers = httpx.Headers({"User-Agent": self._user_agent})
        if extra_headers:
            headers.update(extra_headers)
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        headers: httpx.Headers | None = None,
    ) -> httpx.Response:
        """Send a request and return the unread response.

        Args:
            method: HTTP method
            url: Absolute request URL
            content: Request body
            headers: Request headers

        Returns:
            HTTP response (streaming; caller closes it)

        Raises:
            TransportError: On invalid URLs, network/connection errors,
                timeouts, or failures raised by response hooks
        """
        client = self._get_client()

        try:
            request = client.build_request(
                method, url, content=content, headers=self._build_headers(headers)
            )
            return await client.send(request, stream=True)
        except httpx.InvalidURL as e:
            raise TransportError(str(e), url=url, cause=e) from e
        except httpx.HTTPStatusError as e:
            # Raised by a response hook; the response exists
            raise TransportError(str(e), url=url, response=e.response, cause=e) from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, url=url, cause=e) from e

    async def get(self, url: str, headers: httpx.Headers | None = None) -> httpx.Response:
        """Send a GET request."""
        return await self.request("GET", url, headers=headers)

    async def post(
        self,
        url: str,
        body: bytes,
        headers: httpx.Headers | None = None,
    ) -> httpx.Response:
        """Send a POST request."""
        return await self.request("POST", url, content=body, headers=headers)

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
