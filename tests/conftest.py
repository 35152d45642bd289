"""Root pytest fixtures for nap tests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pytest
from pydantic import BaseModel, Field

from nap.codec import query_field

ORDER_STATUS_BODY = {
    "return_code": 1,
    "return_message": "Giao dịch thành công",
    "zp_trans_id": "zp_001_001",
}


@dataclass
class OrderQuery:
    """Query record tagged through dataclass metadata."""

    app_id: int = query_field("app_id")
    app_trans_id: str = query_field("app_trans_id")
    mac: str = query_field("mac")


class OrderRequest(BaseModel):
    """Same record as a pydantic model tagged through aliases."""

    app_id: int = Field(alias="app_id")
    app_trans_id: str = Field(alias="app_trans_id")
    mac: str = Field(alias="mac")


class OrderStatus(BaseModel):
    return_code: int
    return_message: str
    zp_trans_id: str


@pytest.fixture
def order_query() -> OrderQuery:
    return OrderQuery(
        app_id=1,
        app_trans_id="mmf_transid_210822001",
        mac="MFwwDQYJKoZIhvcNAQEBBQADSwAwSAJBAPl9eHJltu48w1P",
    )


@pytest.fixture
def order_request() -> OrderRequest:
    return OrderRequest(
        app_id=1,
        app_trans_id="mmf_transid_210822001",
        mac="MFwwDQYJKoZIhvcNAQEBBQADSwAwSAJBAPl9eHJltu48w1P",
    )


@pytest.fixture
def order_status_type() -> type[OrderStatus]:
    return OrderStatus


@pytest.fixture
def order_status_body() -> dict[str, Any]:
    return dict(ORDER_STATUS_BODY)


@pytest.fixture
def expected_order_status() -> OrderStatus:
    return OrderStatus(**ORDER_STATUS_BODY)


class RecordingLogger:
    """Logger stand-in that keeps (level, message, fields) tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.records.append(("debug", msg, kwargs))

    def info(self, msg: str, **kwargs: Any) -> None:
        self.records.append(("info", msg, kwargs))

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.records.append(("warning", msg, kwargs))

    def error(self, msg: str, exc_info: bool = False, **kwargs: Any) -> None:
        self.records.append(("error", msg, kwargs))

    def messages(self, level: str) -> list[str]:
        return [msg for lvl, msg, _ in self.records if lvl == level]


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()
