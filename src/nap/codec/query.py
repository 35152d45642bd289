"""Query string encoding for tagged records.

Turns a record into sorted, percent-encoded ``key=value`` pairs and merges
them onto a URL.

A record is one of:
- a pydantic model: the field alias (or name) is the key
- a dataclass instance: the key comes from ``query_field(...)``
- a mapping of string keys
- ``None``, which encodes to nothing

Example:
    >>> @dataclass
    ... class OrderStatus:
    ...     app_id: int = query_field("app_id")
    ...     app_trans_id: str = query_field("app_trans_id")
    >>> build_query_url("http://h/orders/status", OrderStatus(1, "t1"))
    'http://h/orders/status?app_id=1&app_trans_id=t1'
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from operator import itemgetter
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from nap.errors import InvalidQueryInput, InvalidURL

if TYPE_CHECKING:
    from collections.abc import Iterator

    from nap.errors.base import _RecordInputError

QUERY_METADATA_KEY = "query"


@dataclasses.dataclass(frozen=True)
class QueryOptions:
    """Per-field query encoding options.

    Usable as dataclass field metadata (via ``query_field``) or as an
    ``Annotated`` marker on pydantic model fields.

    Attributes:
        name: Query key, defaults to the field alias/name. ``"-"`` skips the field.
        omitempty: Drop the pair when the value is a zero value
        int_bool: Encode booleans as ``1``/``0``
        brackets: Append ``[]`` to the key of sequence values
    """

    name: str | None = None
    omitempty: bool = False
    int_bool: bool = False
    brackets: bool = False

    @property
    def skip(self) -> bool:
        return self.name == "-"


_DEFAULT_OPTIONS = QueryOptions()


def query_field(
    name: str | None = None,
    *,
    omitempty: bool = False,
    int_bool: bool = False,
    brackets: bool = False,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field with query encoding options.

    Args:
        name: Query key for the field
        omitempty: Drop zero values
        int_bool: Encode booleans as 1/0
        brackets: Use ``key[]`` for sequence values
        **kwargs: Passed through to ``dataclasses.field``

    Returns:
        A dataclass field
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[QUERY_METADATA_KEY] = QueryOptions(
        name=name, omitempty=omitempty, int_bool=int_bool, brackets=brackets
    )
    return dataclasses.field(metadata=metadata, **kwargs)


def is_record(value: Any) -> bool:
    """Check whether ``value`` can be flattened into named key/value pairs."""
    if isinstance(value, (BaseModel, Mapping)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _model_fields(record: BaseModel) -> Iterator[tuple[str, Any, QueryOptions]]:
    for name, info in type(record).model_fields.items():
        options = next(
            (m for m in info.metadata if isinstance(m, QueryOptions)), _DEFAULT_OPTIONS
        )
        key = options.name or info.serialization_alias or info.alias or name
        yield key, getattr(record, name), options


def _dataclass_fields(record: Any) -> Iterator[tuple[str, Any, QueryOptions]]:
    for f in dataclasses.fields(record):
        options = f.metadata.get(QUERY_METADATA_KEY, _DEFAULT_OPTIONS)
        yield options.name or f.name, getattr(record, f.name), options


def _fields(record: Any) -> Iterator[tuple[str, Any, QueryOptions]]:
    if isinstance(record, BaseModel):
        return _model_fields(record)
    if isinstance(record, Mapping):
        return ((str(k), v, _DEFAULT_OPTIONS) for k, v in record.items())
    return _dataclass_fields(record)


def _is_empty(value: Any) -> bool:
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    return False


def format_value(value: Any, options: QueryOptions = _DEFAULT_OPTIONS) -> str | bytes:
    """Format a scalar the way it appears in a query string (before escaping).

    Bytes are returned as-is and percent-encoded byte by byte.
    """
    if isinstance(value, bool):
        if options.int_bool:
            return "1" if value else "0"
        return "true" if value else "false"
    if isinstance(value, Enum):
        return format_value(value.value, options)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value
    return str(value)


def _flatten(record: Any, scope: str, pairs: list[tuple[str, str | bytes]]) -> None:
    for name, value, options in _fields(record):
        if options.skip or value is None:
            continue
        if options.omitempty and _is_empty(value):
            continue

        key = f"{scope}[{name}]" if scope else name

        if is_record(value):
            _flatten(value, key, pairs)
        elif isinstance(value, (list, tuple, set, frozenset)):
            items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
            item_key = f"{key}[]" if options.brackets else key
            pairs.extend((item_key, format_value(item, options)) for item in items)
        else:
            pairs.append((key, format_value(value, options)))


def encode_values(
    record: Any,
    *,
    error_type: type[_RecordInputError] = InvalidQueryInput,
) -> list[tuple[str, str | bytes]]:
    """Flatten a record into (key, value) pairs in field order.

    Args:
        record: Tagged record (pydantic model, dataclass, mapping) or None
        error_type: Error raised for non-record input

    Returns:
        List of key/value string pairs

    Raises:
        InvalidQueryInput: If ``record`` is not a record (or ``error_type``)
    """
    if record is None:
        return []
    if not is_record(record):
        actual = type(record).__name__
        raise error_type(
            f"{error_type.source}: expects a record input. Got {actual}",
            actual_type=actual,
        )
    pairs: list[tuple[str, str | bytes]] = []
    _flatten(record, "", pairs)
    return pairs


def encode_query(pairs: list[tuple[str, str | bytes]]) -> str:
    """Encode pairs as ``key=value&...`` sorted by key.

    Sorting is stable, so repeated keys keep their order. Values are escaped
    with form encoding (space becomes ``+``).
    """
    return urlencode(sorted(pairs, key=itemgetter(0)))


def build_query_url(full_url: str, query: Any) -> str:
    """Merge the encoded ``query`` record onto ``full_url``.

    Any query string already on ``full_url`` is replaced. The path is not
    normalized, so an empty path stays empty.

    Args:
        full_url: Absolute URL (base host + path)
        query: Tagged record with the query parameters

    Returns:
        The full URL with its query string

    Raises:
        InvalidURL: If ``full_url`` does not parse
        InvalidQueryInput: If ``query`` is not a record
    """
    try:
        url = httpx.URL(full_url)
    except httpx.InvalidURL as e:
        raise InvalidURL(str(e), url=full_url, cause=e) from e

    encoded = encode_query(encode_values(query)).encode("ascii")
    if encoded:
        # Empty paths stay empty
        return str(url.copy_with(query=encoded))
    if url.query:
        return str(url.copy_with(raw_path=url.raw_path.partition(b"?")[0]))
    return str(url)
