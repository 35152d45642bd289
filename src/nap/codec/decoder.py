"""Response decoders.

Decoders parse a response body into a caller-supplied output type.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from nap.errors import DecodingError

if TYPE_CHECKING:
    import httpx

T = TypeVar("T")


@runtime_checkable
class ResponseDecoder(Protocol):
    """Decodes responses into values of a requested type."""

    def decode(self, response: httpx.Response, out: type[T]) -> T:
        """Decode the (already read) response body into an ``out`` value.

        Args:
            response: Response whose body has been read
            out: Output type

        Returns:
            The decoded value

        Raises:
            DecodingError: If the body does not fit ``out``
        """
        ...


@lru_cache(maxsize=128)
def _adapter(out: Any) -> TypeAdapter[Any]:
    return TypeAdapter(out)


def _type_name(out: Any) -> str:
    return getattr(out, "__name__", None) or repr(out)


class JsonDecoder:
    """Decodes JSON bodies with pydantic validation.

    ``out`` may be anything ``pydantic.TypeAdapter`` accepts: models,
    dataclasses, TypedDicts, ``dict[str, Any]``, ``list[int]`` and so on.
    """

    def decode(self, response: httpx.Response, out: type[T]) -> T:
        try:
            adapter = _adapter(out)
        except TypeError:
            # Unhashable generic aliases cannot be cached
            adapter = TypeAdapter(out)

        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise DecodingError(
                f"Failed to decode response into {_type_name(out)}: {e}",
                status_code=response.status_code,
                output_type=_type_name(out),
                cause=e,
            ) from e
