"""
Client configuration.

Settings can be given explicitly or read from the environment:

- NAP_BASE_HOST: Base host for requests
- NAP_HTTP_TIMEOUT_SECS: Request timeout in seconds
- NAP_HTTP_TRUST_ENV: Set to "1" to honour NAP_PROXY_URL and httpx env proxies
- NAP_PROXY_URL: Proxy URL (only with NAP_HTTP_TRUST_ENV=1)
"""

from __future__ import annotations

import os
from contextlib import suppress

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TIMEOUT = 30.0
DEFAULT_CONNECT_TIMEOUT = 10.0


def trust_env_enabled() -> bool:
    """Use env proxy settings only when explicitly enabled."""
    return os.getenv("NAP_HTTP_TRUST_ENV", "0") == "1"


class ClientConfig(BaseModel):
    """Configuration for a NapClient and its HTTP transport."""

    model_config = ConfigDict(frozen=True)

    base_host: str = Field(description="Scheme and host prepended to every path")
    proxy_url: str = Field(default="", description="Proxy URL; empty for a direct connection")
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Request timeout in seconds")
    connect_timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, description="Connect timeout in seconds"
    )
    trust_env: bool = Field(default=False, description="Let httpx read proxy/SSL env vars")
    user_agent: str | None = Field(default=None, description="User-Agent override")

    @classmethod
    def from_env(cls, base_host: str | None = None) -> ClientConfig:
        """Build a config from NAP_* environment variables.

        Args:
            base_host: Explicit base host (overrides NAP_BASE_HOST)

        Returns:
            ClientConfig
        """
        timeout = DEFAULT_TIMEOUT
        if env_timeout := os.getenv("NAP_HTTP_TIMEOUT_SECS"):
            with suppress(ValueError):
                timeout = float(env_timeout)

        trust_env = trust_env_enabled()
        return cls(
            base_host=base_host or os.getenv("NAP_BASE_HOST", ""),
            proxy_url=os.getenv("NAP_PROXY_URL", "") if trust_env else "",
            timeout=timeout,
            trust_env=trust_env,
        )
