"""Shared httpx client for calls to the upstream marketplace backend."""

import logging
from typing import Any

import httpx

from gigslk.core.config import get_settings

logger = logging.getLogger(__name__)

_http_client: httpx.AsyncClient | None = None


def create_http_client() -> httpx.AsyncClient:
    """Create an AsyncClient bound to the upstream base URL.

    Returns:
        httpx.AsyncClient: Fresh client instance.
    """
    settings = get_settings()
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.upstream_timeout_seconds,
    )


def get_http_client() -> httpx.AsyncClient:
    """Get or create the global upstream client.

    The client holds a connection pool, so it is shared for the lifetime
    of the process and closed in the application lifespan.
    """
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = create_http_client()
    return _http_client


async def init_http_client() -> httpx.AsyncClient:
    """Create the upstream client. Call at app startup."""
    return get_http_client()


async def shutdown_http_client() -> None:
    """Close the upstream client. Call at app shutdown."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


async def check_upstream_connection() -> dict[str, Any]:
    """Check whether the upstream backend answers at all.

    Any HTTP response counts as reachable; only transport failures are
    reported as unhealthy.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        await get_http_client().get("/")
        return {"healthy": True}
    except httpx.HTTPError as e:
        logger.warning("Upstream health check failed: %s", e)
        return {"healthy": False, "error": str(e)}
