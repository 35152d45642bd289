"""错误基类：提供分层错误体系和结构化错误上下文。

Base error classes for nap.

Provides a layered error hierarchy:
- NapError: Base class for all library errors
- InvalidURL: Base host + path did not parse as a URL
- InvalidQueryInput / InvalidBodyInput: Caller passed a non-record value
- EncodingError: A valid payload could not be serialized
- DecodingError: Response body did not fit the requested output type
- TransportError: Network/connection/protocol failure

Every error carries the HTTP status code the client reports for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    field_path: str | None = None
    """Path to the problematic field (e.g., 'query.app_id')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'query', 'body', 'transport')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class NapError(Exception):
    """Base class for all nap errors.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
        status_code: HTTP status reported to the caller for this failure
    """

    default_status: int = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        self.status_code = int(status_code if status_code is not None else self.default_status)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> NapError:
        """Add a hint to this error."""
        self.context.hint = hint
        return self

    def with_status(self, status_code: int) -> NapError:
        """Set the reported status code, returning self."""
        self.status_code = int(status_code)
        return self


class InvalidURL(NapError):
    """The composed request URL could not be parsed.

    Raised when base host + path is not a valid URL, e.g. an invalid port.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="url")
        if url:
            ctx.details["url"] = url
        super().__init__(message, ctx)
        self.url = url
        self.__cause__ = cause


class _RecordInputError(NapError):
    """A record (model, dataclass or mapping) was required but not given."""

    source = "input"

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        actual_type: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source=self.source)
        if actual_type:
            ctx.details["actual_type"] = actual_type
        super().__init__(message, ctx)
        self.actual_type = actual_type


class InvalidQueryInput(_RecordInputError):
    """Query parameters were not given as a record."""

    source = "query"


class InvalidBodyInput(_RecordInputError):
    """A form body payload was not given as a record."""

    source = "body"


class EncodingError(NapError):
    """A payload could not be serialized (unsupported values, cycles)."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        content_type: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="body")
        if content_type:
            ctx.details["content_type"] = content_type
        super().__init__(message, ctx)
        self.content_type = content_type
        self.__cause__ = cause


class DecodingError(NapError):
    """Response body could not be parsed into the requested output type.

    The status code is the one the server responded with.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        status_code: int | None = None,
        output_type: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="decoder")
        if output_type:
            ctx.details["output_type"] = output_type
        super().__init__(message, ctx, status_code=status_code)
        self.output_type = output_type
        self.__cause__ = cause


class TransportError(NapError):
    """Error during HTTP transport.

    Raised when:
    - Network connection failure
    - Timeout or cancellation
    - Unsupported protocol scheme / unparseable request URL
    - A transport hook rejected the response

    When a response object was obtained alongside the failure it is kept in
    ``response`` and its status becomes the reported status; otherwise the
    status is 502 Bad Gateway.
    """

    default_status = HTTPStatus.BAD_GATEWAY

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        url: str | None = None,
        response: httpx.Response | None = None,
        cancelled: bool = False,
        cause: Exception | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="transport")
        if url:
            ctx.details["url"] = url
        status_code = response.status_code if response is not None else None
        if status_code:
            ctx.details["status_code"] = status_code
        super().__init__(message, ctx, status_code=status_code)
        self.url = url
        self.response = response
        self.cancelled = cancelled
        self.__cause__ = cause
