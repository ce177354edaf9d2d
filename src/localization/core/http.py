"""HTTP client utilities with built-in timeout support.

Provides pre-configured HTTP clients for external service calls, ensuring
consistent timeout handling across the application.
"""

from typing import Any

import httpx

from localization.core.config import settings


def provider_timeout(seconds: float | None = None) -> httpx.Timeout:
    """Timeout applied to every outbound translation call.

    A single budget covers connect, read, write and pool so a slow provider
    fails fast and the caller degrades that chunk instead of waiting.
    """
    return httpx.Timeout(seconds if seconds is not None else settings.TRANSLATOR_TIMEOUT_SECONDS)


def create_http_client(
    base_url: str,
    timeout: httpx.Timeout | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an async HTTP client with sensible defaults.

    Args:
        base_url: Base URL for every request made with the client
        timeout: Custom timeout configuration. Defaults to provider_timeout().
        transport: Optional transport (httpx.MockTransport in tests)
        **kwargs: Additional arguments passed to AsyncClient.

    Usage:
        async with create_http_client(settings.TRANSLATOR_ENDPOINT) as client:
            response = await client.post("/translate", json=[{"text": "Hi"}])
    """
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout or provider_timeout(),
        transport=transport,
        follow_redirects=True,
        headers={"Content-Type": "application/json"},
        **kwargs,
    )
