"""
Client layer - User-facing API.

This module provides:
- NapClient: GET/POST against a base host
- Client: protocol for code that takes any client
- ApiResponse: call result
- Cancellation: per-call cancel tokens and deadlines
"""

from nap.client.base import Client
from nap.client.cancel import (
    CancelHandle,
    CancelReason,
    CancelState,
    CancelToken,
    create_cancel_pair,
)
from nap.client.core import NapClient
from nap.client.response import ApiResponse

__all__ = [
    "ApiResponse",
    "CancelHandle",
    "CancelReason",
    "CancelState",
    "CancelToken",
    "Client",
    "NapClient",
    "create_cancel_pair",
]
