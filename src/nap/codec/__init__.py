"""
Codec layer - request encoding and response decoding.

Provides:
- Query string encoding for tagged records
- Body providers (JSON, form-urlencoded)
- Response decoders (JSON)
"""

from nap.codec.body import (
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    BodyProvider,
    FormBodyProvider,
    JSONBodyProvider,
)
from nap.codec.decoder import JsonDecoder, ResponseDecoder
from nap.codec.query import (
    QueryOptions,
    build_query_url,
    encode_query,
    encode_values,
    format_value,
    is_record,
    query_field,
)

__all__ = [
    "FORM_CONTENT_TYPE",
    "JSON_CONTENT_TYPE",
    "BodyProvider",
    "FormBodyProvider",
    "JSONBodyProvider",
    "JsonDecoder",
    "QueryOptions",
    "ResponseDecoder",
    "build_query_url",
    "encode_query",
    "encode_values",
    "format_value",
    "is_record",
    "query_field",
]
