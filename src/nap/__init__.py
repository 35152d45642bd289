"""nap：面向 HTTP API 的轻量客户端，负责请求构建、发送与响应解码。

nap: a minimal HTTP API client.

Builds GET/POST requests against a base host from tagged records, sends
them through an httpx transport and decodes the responses.
"""
from __future__ import annotations

from nap.client import (
    ApiResponse,
    CancelReason,
    CancelToken,
    Client,
    NapClient,
)
from nap.codec import (
    BodyProvider,
    FormBodyProvider,
    JsonDecoder,
    JSONBodyProvider,
    ResponseDecoder,
    query_field,
)
from nap.config import ClientConfig
from nap.errors import (
    DecodingError,
    EncodingError,
    InvalidBodyInput,
    InvalidQueryInput,
    InvalidURL,
    NapError,
    TransportError,
)
from nap.transport import HttpTransport, Transport

__version__ = "0.1.0"

__all__ = [
    # Client
    "ApiResponse",
    "CancelReason",
    "CancelToken",
    "Client",
    "ClientConfig",
    "NapClient",
    # Codecs
    "BodyProvider",
    "FormBodyProvider",
    "JSONBodyProvider",
    "JsonDecoder",
    "ResponseDecoder",
    "query_field",
    # Errors
    "DecodingError",
    "EncodingError",
    "InvalidBodyInput",
    "InvalidQueryInput",
    "InvalidURL",
    "NapError",
    "TransportError",
    # Transport
    "HttpTransport",
    "Transport",
    # Version
    "__version__",
]
