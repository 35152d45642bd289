"""Request body providers.

A BodyProvider turns a payload into request bytes plus the Content-Type
that labels them. The client always attaches ``content_type()`` as the
``Content-Type`` header of the body it sends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import pydantic_core

from nap.codec.query import encode_query, encode_values
from nap.errors import EncodingError, InvalidBodyInput

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@runtime_checkable
class BodyProvider(Protocol):
    """Provides body content for a request."""

    def content_type(self) -> str:
        """Return the Content-Type of the body."""
        ...

    def body(self) -> bytes:
        """Return the encoded body.

        Raises:
            NapError: If the payload cannot be encoded
        """
        ...


@dataclass(frozen=True)
class JSONBodyProvider:
    """Encodes a payload as a JSON body.

    Pydantic models are dumped by alias; dataclasses, mappings, sequences and
    the usual scalar types (datetime, UUID, Enum...) are supported.
    """

    payload: Any

    def content_type(self) -> str:
        return JSON_CONTENT_TYPE

    def body(self) -> bytes:
        try:
            return pydantic_core.to_json(self.payload, by_alias=True)
        except (pydantic_core.PydanticSerializationError, ValueError, TypeError) as e:
            raise EncodingError(
                f"Failed to encode JSON body: {e}",
                content_type=JSON_CONTENT_TYPE,
                cause=e,
            ) from e


@dataclass(frozen=True)
class FormBodyProvider:
    """Encodes a record payload as an ``application/x-www-form-urlencoded`` body.

    Uses the same key/value extraction and encoding as query strings.
    """

    payload: Any

    def content_type(self) -> str:
        return FORM_CONTENT_TYPE

    def body(self) -> bytes:
        pairs = encode_values(self.payload, error_type=InvalidBodyInput)
        return encode_query(pairs).encode("ascii")
