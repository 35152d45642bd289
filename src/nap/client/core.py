"""核心客户端实现：构建请求、经由传输层发送并解码响应。

Core NapClient implementation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import httpx

from nap.client.response import ApiResponse
from nap.codec import JsonDecoder, build_query_url
from nap.errors import DecodingError, NapError, TransportError, classify_failure
from nap.telemetry import get_logger
from nap.transport import HttpTransport

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, MutableMapping

    from nap.client.cancel import CancelToken
    from nap.codec import BodyProvider, ResponseDecoder
    from nap.config import ClientConfig
    from nap.telemetry import NapLogger
    from nap.transport import Transport

    HeadersInput = httpx.Headers | MutableMapping[str, str] | None

T = TypeVar("T")
R = TypeVar("R")

_CONTENT_TYPE = "Content-Type"


class NapClient:
    """HTTP API client for a single base host.

    Builds GET requests with query strings encoded from records and POST
    requests with bodies from a BodyProvider, sends them through a
    Transport, and decodes responses into caller-supplied types.

    A call either returns an ApiResponse or raises a NapError; the error's
    ``status_code`` tells where it failed:

    - 400: the request could not be built (bad URL, non-record input, encoding)
    - 502: the transport failed without a response
    - anything else: the status of the response that came back

    The client holds no per-call state, so one instance can serve
    concurrent calls.

    Example:
        >>> client = NapClient.new("https://sb-openapi.zalopay.vn")
        >>> resp = await client.get("/v2/query", OrderQuery(app_id=1), out=OrderStatus)
        >>> resp.status_code, resp.data.return_code
        (200, 1)

        >>> resp = await client.post("/v2/create", FormBodyProvider(order))
    """

    def __init__(
        self,
        base_host: str,
        transport: Transport,
        *,
        decoder: ResponseDecoder | None = None,
        logger: NapLogger | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_host: Scheme and host prepended to every path
            transport: Network dispatch
            decoder: Response decoder (JSON by default)
            logger: Logger (``nap.client`` bound to ``base_host`` by default)
        """
        self._base_host = base_host
        self._transport = transport
        self._decoder = decoder or JsonDecoder()
        self._logger = logger or get_logger("nap.client").bind(base_host=base_host)

    @classmethod
    def new(
        cls,
        base_host: str,
        proxy_url: str = "",
        logger: NapLogger | None = None,
        *,
        decoder: ResponseDecoder | None = None,
        **transport_options: Any,
    ) -> NapClient:
        """Create a client with an httpx transport.

        Args:
            base_host: Scheme and host prepended to every path
            proxy_url: Route every request through this proxy; empty for none
            logger: Logger for the client and its request logging
            decoder: Response decoder (JSON by default)
            **transport_options: Passed to HttpTransport (and on to httpx)

        Returns:
            Configured NapClient
        """
        transport = HttpTransport(proxy=proxy_url or None, logger=logger, **transport_options)
        return cls(base_host, transport, decoder=decoder, logger=logger)

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        logger: NapLogger | None = None,
        **transport_options: Any,
    ) -> NapClient:
        """Create a client from a ClientConfig."""
        options: dict[str, Any] = {
            "timeout": config.timeout,
            "connect_timeout": config.connect_timeout,
            "trust_env": config.trust_env,
            "user_agent": config.user_agent,
        }
        options.update(transport_options)
        return cls.new(config.base_host, config.proxy_url, logger, **options)

    @property
    def base_host(self) -> str:
        return self._base_host

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def logger(self) -> NapLogger:
        return self._logger

    def build_full_url(self, path: str) -> str:
        """Join base host and path (plain concatenation)."""
        return self._base_host + path

    async def get(
        self,
        path: str,
        query: Any = None,
        headers: HeadersInput = None,
        out: type[T] | None = None,
        *,
        cancel_token: CancelToken | None = None,
    ) -> ApiResponse[T]:
        """Send a GET request.

        Args:
            path: Path appended to the base host
            query: Record encoded into the query string (replaces any query on path)
            headers: Request headers
            out: Output type to decode the body into; None skips decoding
            cancel_token: Cancels the in-flight request when triggered

        Returns:
            ApiResponse with status code and decoded data

        Raises:
            InvalidURL: Base host + path does not parse (status 400)
            InvalidQueryInput: ``query`` is not a record (status 400)
            TransportError: Sending failed (response status, or 502)
            DecodingError: Body does not fit ``out`` (response status)
        """
        url = build_query_url(self.build_full_url(path), query)
        request_headers = _to_headers(headers)

        return await self._execute(
            lambda: self._transport.get(url, request_headers), url, out, cancel_token
        )

    async def post(
        self,
        path: str,
        body: BodyProvider,
        headers: HeadersInput = None,
        out: type[T] | None = None,
        *,
        cancel_token: CancelToken | None = None,
    ) -> ApiResponse[T]:
        """Send a POST request.

        Sets ``Content-Type`` to ``body.content_type()`` on ``headers`` in
        place (replacing any existing value); pass a copy to keep yours intact.

        Args:
            path: Path appended to the base host
            body: Body provider (JSON, form, ...)
            headers: Request headers (mutated)
            out: Output type to decode the body into; None skips decoding
            cancel_token: Cancels the in-flight request when triggered

        Returns:
            ApiResponse with status code and decoded data

        Raises:
            InvalidBodyInput: Form payload is not a record (status 400)
            EncodingError: Payload could not be serialized (status 400)
            TransportError: Sending failed (response status, or 502)
            DecodingError: Body does not fit ``out`` (response status)
        """
        url = self.build_full_url(path)
        content = body.body()

        if headers is None:
            headers = httpx.Headers()
        _set_content_type(headers, body.content_type())
        request_headers = _to_headers(headers)

        return await self._execute(
            lambda: self._transport.post(url, content, request_headers), url, out, cancel_token
        )

    async def _execute(
        self,
        send: Callable[[], Awaitable[httpx.Response]],
        url: str,
        out: type[T] | None,
        cancel_token: CancelToken | None,
    ) -> ApiResponse[T]:
        try:
            response = await self._run_cancellable(
                lambda: self._send(send, url), url, cancel_token
            )
            return await self._handle_response(response, url, out, cancel_token)
        except NapError as e:
            e.with_status(classify_failure(e))
            self._logger.warning(
                "request failed", url=url, status=e.status_code, err=e.message
            )
            raise

    async def _send(
        self, send: Callable[[], Awaitable[httpx.Response]], url: str
    ) -> httpx.Response:
        try:
            return await send()
        except NapError:
            raise
        except Exception as e:
            # Custom transports may leak their own errors
            raise TransportError(str(e) or type(e).__name__, url=url, cause=e) from e

    async def _run_cancellable(
        self,
        work: Callable[[], Awaitable[R]],
        url: str,
        cancel_token: CancelToken | None,
    ) -> R:
        """Await ``work()``, aborting it when ``cancel_token`` fires first."""
        if cancel_token is None:
            return await work()
        if cancel_token.is_cancelled:
            raise _cancelled_error(url, cancel_token)

        work_task = asyncio.ensure_future(work())
        cancel_task = asyncio.ensure_future(cancel_token.wait())
        try:
            await asyncio.wait(
                {work_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            work_task.cancel()
            cancel_task.cancel()
            raise

        cancel_task.cancel()
        if work_task.done():
            return work_task.result()

        work_task.cancel()
        try:
            result = await work_task
        except (asyncio.CancelledError, NapError, httpx.HTTPError):
            pass
        else:
            # Finished before the cancel landed; nobody will read it
            if isinstance(result, httpx.Response):
                await self._release(result)
        raise _cancelled_error(url, cancel_token)

    async def _handle_response(
        self,
        response: httpx.Response,
        url: str,
        out: type[T] | None,
        cancel_token: CancelToken | None,
    ) -> ApiResponse[T]:
        status_code = response.status_code
        try:
            if out is None:
                return ApiResponse(status_code=status_code, headers=response.headers)

            try:
                await self._run_cancellable(response.aread, url, cancel_token)
            except httpx.HTTPError as e:
                raise TransportError(
                    str(e) or type(e).__name__, url=url, response=response, cause=e
                ) from e

            try:
                data = self._decoder.decode(response, out)
            except DecodingError as e:
                e.with_status(status_code)
                raise
            except Exception as e:
                raise DecodingError(str(e), status_code=status_code, cause=e) from e

            return ApiResponse(status_code=status_code, data=data, headers=response.headers)
        finally:
            await self._release(response)

    async def _release(self, response: httpx.Response) -> None:
        try:
            await response.aclose()
        except Exception as e:
            self._logger.error("failed to close body", err=str(e))

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self) -> NapClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _cancelled_error(url: str, cancel_token: CancelToken) -> TransportError:
    reason = cancel_token.reason
    return TransportError(
        f"Request cancelled: {reason.value if reason else 'unknown'}",
        url=url,
        cancelled=True,
    )


def _to_headers(headers: HeadersInput) -> httpx.Headers | None:
    if headers is None or isinstance(headers, httpx.Headers):
        return headers
    return httpx.Headers(headers)


def _set_content_type(headers: httpx.Headers | MutableMapping[str, str], value: str) -> None:
    if not isinstance(headers, httpx.Headers) and isinstance(headers, Mapping):
        for key in [k for k in headers if k.lower() == _CONTENT_TYPE.lower()]:
            del headers[key]
    headers[_CONTENT_TYPE] = value

