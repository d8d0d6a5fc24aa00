"""
HTTP Client Module

Provides a globally shared httpx.AsyncClient with:
- Connection pooling
- Automatic retries with exponential backoff
- Configurable timeouts

Used for fetching remote branding assets (the platform logo) that are
embedded into generated certificates.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx


logger = logging.getLogger(__name__)


# ============== Configuration ==============

# Connection pool limits
MAX_CONNECTIONS = 20
MAX_KEEPALIVE_CONNECTIONS = 5
KEEPALIVE_EXPIRY = 30  # seconds

# Asset fetches sit on the certificate download path, keep them short
DEFAULT_TIMEOUT = 10.0  # seconds

# Retry configuration
MAX_RETRIES = 2
RETRY_BACKOFF_BASE = 0.5  # seconds


# ============== Global Client Instance ==============

_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """
    Get or create the global async HTTP client.

    Returns:
        httpx.AsyncClient: Shared client instance.
    """
    global _http_client
    if _http_client is None:
        limits = httpx.Limits(
            max_connections=MAX_CONNECTIONS,
            max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS,
            keepalive_expiry=KEEPALIVE_EXPIRY,
        )
        _http_client = httpx.AsyncClient(
            limits=limits,
            timeout=httpx.Timeout(DEFAULT_TIMEOUT),
            follow_redirects=True,
            http2=True,
        )
    return _http_client


async def close_http_client() -> None:
    """
    Close the global HTTP client.

    Called during application shutdown.
    """
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


# ============== Request Helpers with Retry ==============

async def request_with_retry(
    method: str,
    url: str,
    max_retries: int = MAX_RETRIES,
    **kwargs: Any,
) -> httpx.Response:
    """
    Make an HTTP request, retrying 5xx responses and connection failures.

    Args:
        method: HTTP method (GET, POST, etc.)
        url: Request URL
        max_retries: Maximum number of retry attempts
        **kwargs: Additional arguments passed to httpx request

    Returns:
        httpx.Response: The last response received.

    Raises:
        httpx.HTTPError: If every attempt failed to connect.
    """
    client = get_http_client()

    for attempt in range(max_retries + 1):
        try:
            response = await client.request(method, url, **kwargs)
        except (httpx.ConnectError, httpx.ReadTimeout, httpx.WriteTimeout) as exc:
            if attempt >= max_retries:
                raise
            wait_time = RETRY_BACKOFF_BASE * (2 ** attempt)
            logger.warning("Connection error for %s, retrying in %ss: %s", url, wait_time, exc)
            await asyncio.sleep(wait_time)
            continue

        if response.status_code >= 500 and attempt < max_retries:
            wait_time = RETRY_BACKOFF_BASE * (2 ** attempt)
            logger.warning(
                "Server error %s for %s, retrying in %ss",
                response.status_code, url, wait_time,
            )
            await asyncio.sleep(wait_time)
            continue

        return response

    raise httpx.HTTPError(f"Request to {url} failed after {max_retries} retries")


async def get_with_retry(url: str, **kwargs: Any) -> httpx.Response:
    """Convenience wrapper for GET requests with retry."""
    return await request_with_retry("GET", url, **kwargs)
