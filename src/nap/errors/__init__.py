"""错误体系：提供请求构建、传输与解码阶段的结构化错误类型。

Error hierarchy for nap.

Every error carries the HTTP status code the client reports for it.
"""

from nap.errors.base import (
    DecodingError,
    EncodingError,
    ErrorContext,
    InvalidBodyInput,
    InvalidQueryInput,
    InvalidURL,
    NapError,
    TransportError,
)
from nap.errors.status import classify_failure, is_client_error

__all__ = [
    "DecodingError",
    "EncodingError",
    "ErrorContext",
    "InvalidBodyInput",
    "InvalidQueryInput",
    "InvalidURL",
    "NapError",
    "TransportError",
    "classify_failure",
    "is_client_error",
]
