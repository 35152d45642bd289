"""Tests for response decoders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
import pytest
from typing_extensions import TypedDict

from nap.codec import JsonDecoder, ResponseDecoder
from nap.errors import DecodingError


@dataclass
class Ack:
    ok: bool


class AckDict(TypedDict):
    ok: bool


def _response(content: bytes, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=content)


class TestJsonDecoder:
    """Tests for JsonDecoder."""

    def test_is_response_decoder(self) -> None:
        """Test JsonDecoder satisfies the protocol."""
        assert isinstance(JsonDecoder(), ResponseDecoder)

    def test_decode_model(self, order_status_type, expected_order_status) -> None:
        """Test decoding into a pydantic model."""
        body = (
            b'{ "return_code": 1, "return_message" :  "Giao d\xe1\xbb\x8bch th\xc3\xa0nh '
            b'c\xc3\xb4ng", "zp_trans_id" : "zp_001_001"}'
        )
        out = JsonDecoder().decode(_response(body), order_status_type)
        assert out == expected_order_status

    @pytest.mark.parametrize(
        ("out", "expected"),
        [
            (Ack, Ack(ok=True)),
            (AckDict, {"ok": True}),
            (dict[str, Any], {"ok": True}),
        ],
    )
    def test_decode_other_types(self, out, expected) -> None:
        """Test dataclasses, TypedDicts and builtins are supported."""
        assert JsonDecoder().decode(_response(b'{"ok": true}'), out) == expected

    def test_malformed_json(self, order_status_type) -> None:
        """Test malformed JSON raises DecodingError with the response status."""
        with pytest.raises(DecodingError) as exc_info:
            JsonDecoder().decode(_response(b"{not json", 201), order_status_type)
        assert exc_info.value.status_code == 201
        assert exc_info.value.output_type == "OrderStatus"

    def test_empty_body(self, order_status_type) -> None:
        """Test an empty body is a decoding error."""
        with pytest.raises(DecodingError):
            JsonDecoder().decode(_response(b""), order_status_type)

    def test_structural_mismatch(self, order_status_type) -> None:
        """Test a body with the wrong shape raises DecodingError."""
        with pytest.raises(DecodingError):
            JsonDecoder().decode(_response(b'{"return_code": "x"}'), order_status_type)
