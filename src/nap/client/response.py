"""
Response types for client operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import httpx

T = TypeVar("T")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Result of a successful client call.

    Attributes:
        status_code: Status returned by the server (any status, 4xx/5xx included)
        data: Decoded body, or None when no output type was requested
        headers: Response headers
    """

    status_code: int
    data: T | None = None
    headers: httpx.Headers = field(default_factory=httpx.Headers)

    @property
    def ok(self) -> bool:
        """Check for a 2xx status."""
        return 200 <= self.status_code < 300
