"""
End-to-end tests for NapClient over a mocked HTTP layer.

These go through the real HttpTransport and httpx; only the network is
replaced by pytest-httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from pytest_httpx import HTTPXMock

from nap.client import NapClient
from nap.codec import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE, FormBodyProvider, JSONBodyProvider
from nap.errors import InvalidBodyInput, InvalidQueryInput, InvalidURL, TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

pytestmark = pytest.mark.integration

BASE_HOST = "http://sandbox.test"
BAD_HOST = "http://127.0.0.1:8080"
BAD_PATH = "%zzzzz"


def order_status_response(
    return_code: int = 1,
    return_message: str = "Giao dịch thành công",
    zp_trans_id: str = "zp_001_001",
) -> dict:
    """Create a mock order status body."""
    return {
        "return_code": return_code,
        "return_message": return_message,
        "zp_trans_id": zp_trans_id,
    }


@pytest_asyncio.fixture
async def client() -> AsyncIterator[NapClient]:
    """Client against the mocked sandbox host."""
    async with NapClient.new(BASE_HOST) as nap_client:
        yield nap_client


class TestGet:
    """GET round trips."""

    @pytest.mark.asyncio
    async def test_query_and_decode(
        self, httpx_mock: HTTPXMock, client: NapClient, order_status_type
    ) -> None:
        """Test query encoding and decoding of a 200 response."""
        httpx_mock.add_response(
            url=f"{BASE_HOST}/orders/status?app_id=1&app_trans_id=t1&mac=m",
            json=order_status_response(),
        )

        resp = await client.get(
            "/orders/status", {"mac": "m", "app_id": 1, "app_trans_id": "t1"}, out=order_status_type
        )

        assert resp.status_code == 200
        assert resp.data.return_code == 1
        assert resp.data.zp_trans_id == "zp_001_001"
        assert str(httpx_mock.get_request().url).endswith("?app_id=1&app_trans_id=t1&mac=m")

    @pytest.mark.asyncio
    async def test_tagged_record(
        self, httpx_mock: HTTPXMock, client: NapClient, order_query, order_status_type,
        expected_order_status,
    ) -> None:
        """Test a tagged dataclass query."""
        httpx_mock.add_response(json=order_status_response())

        resp = await client.get("/orders/status", order_query, out=order_status_type)

        assert resp.data == expected_order_status
        params = httpx_mock.get_request().url.params
        assert params["app_trans_id"] == "mmf_transid_210822001"

    @pytest.mark.asyncio
    async def test_custom_headers(self, httpx_mock: HTTPXMock, client: NapClient) -> None:
        """Test caller headers are sent as-is."""
        httpx_mock.add_response()

        await client.get("/ping", headers={"Content-Type": "application/json", "X-Trace": "t1"})

        request = httpx_mock.get_request()
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["X-Trace"] == "t1"

    @pytest.mark.asyncio
    async def test_server_error_returned(self, httpx_mock: HTTPXMock, client: NapClient) -> None:
        """Test a 500 response is a result, not an error, without an output type."""
        httpx_mock.add_response(status_code=500, text="boom")

        resp = await client.get("/orders/status")

        assert resp.status_code == 500
        assert resp.data is None


class TestPost:
    """POST round trips."""

    @pytest.mark.asyncio
    async def test_json_body(
        self, httpx_mock: HTTPXMock, client: NapClient, order_status_type
    ) -> None:
        """Test a JSON body and its content type."""
        httpx_mock.add_response(method="POST", json=order_status_response())

        resp = await client.post("/orders/create", JSONBodyProvider({"app_id": 1}), {}, order_status_type)

        assert resp.status_code == 200
        request = httpx_mock.get_request()
        assert request.content == b'{"app_id":1}'
        assert request.headers["Content-Type"] == JSON_CONTENT_TYPE

    @pytest.mark.asyncio
    async def test_form_body(self, httpx_mock: HTTPXMock, client: NapClient) -> None:
        """Test a form body and its content type."""
        httpx_mock.add_response(method="POST")

        resp = await client.post(
            "/orders/create", FormBodyProvider({"app_trans_id": "t1", "app_id": 1})
        )

        assert resp.status_code == 200
        request = httpx_mock.get_request()
        assert request.content == b"app_id=1&app_trans_id=t1"
        assert request.headers["Content-Type"] == FORM_CONTENT_TYPE

    @pytest.mark.asyncio
    async def test_empty_response_without_output(
        self, httpx_mock: HTTPXMock, client: NapClient, order_request
    ) -> None:
        """Test an empty body is fine when nothing is decoded."""
        httpx_mock.add_response(method="POST", status_code=204)

        resp = await client.post("/orders/refund", JSONBodyProvider(order_request))

        assert resp.status_code == 204
        assert resp.data is None
        assert httpx_mock.get_request().content.startswith(b'{"app_id":1,')


class TestFailures:
    """Failure classification through the real transport."""

    @pytest.mark.asyncio
    async def test_get_invalid_path(self) -> None:
        """Test GET with an unparseable URL is a 400."""
        async with NapClient.new(BAD_HOST) as client:
            with pytest.raises(InvalidURL) as exc_info:
                await client.get(BAD_PATH, {"app_id": 1})

        assert exc_info.value.status_code == 400
        assert "invalid port" in str(exc_info.value).lower()

    @pytest.mark.asyncio
    async def test_post_invalid_path(self) -> None:
        """Test POST with an unparseable URL fails in the transport with 502."""
        async with NapClient.new(BAD_HOST) as client:
            with pytest.raises(TransportError) as exc_info:
                await client.post(BAD_PATH, JSONBodyProvider({"app_id": 1}))

        assert exc_info.value.status_code == 502
        assert "invalid port" in str(exc_info.value).lower()

    @pytest.mark.asyncio
    async def test_query_not_a_record(self) -> None:
        """Test a scalar query is a 400."""
        async with NapClient.new(BASE_HOST) as client:
            with pytest.raises(InvalidQueryInput) as exc_info:
                await client.get("/orders/status", 10)

        assert exc_info.value.status_code == 400
        assert "Got int" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_form_not_a_record(self) -> None:
        """Test a scalar form payload is a 400."""
        async with NapClient.new(BASE_HOST) as client:
            with pytest.raises(InvalidBodyInput) as exc_info:
                await client.post("/orders/create", FormBodyProvider("vinhha_test"))

        assert exc_info.value.status_code == 400
        assert "Got str" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_scheme(self) -> None:
        """Test a base host without a scheme is a 502."""
        async with NapClient.new("localhost") as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get("/orders/status", {"app_id": 1})

        assert exc_info.value.status_code == 502


class TestProxy:
    """Requests through a configured proxy."""

    @pytest.mark.asyncio
    async def test_proxied_get(self, httpx_mock: HTTPXMock, order_status_type) -> None:
        """Test a proxied client still reaches the target URL."""
        httpx_mock.add_response(url=f"{BASE_HOST}/orders/status?app_id=1", json=order_status_response())

        async with NapClient.new(BASE_HOST, "http://proxy.test:3128") as client:
            resp = await client.get("/orders/status", {"app_id": 1}, out=order_status_type)

        assert resp.status_code == 200
        assert resp.data.return_code == 1
