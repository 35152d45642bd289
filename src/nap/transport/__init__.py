"""
Transport layer - HTTP dispatch for the client.

Provides:
- Transport protocol (what NapClient needs)
- httpx-based HttpTransport with proxy and timeout configuration
- Request logging plugin
"""

from nap.transport.base import Transport
from nap.transport.http import HttpTransport
from nap.transport.plugins import RequestLogger, merge_event_hooks

__all__ = [
    "HttpTransport",
    "RequestLogger",
    "Transport",
    "merge_event_hooks",
]
