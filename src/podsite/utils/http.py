"""Helpers shared by the outbound HTTP callers (feed fetcher, audio proxy)."""

import httpx

from podsite.utils.errors import (
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
)


def classify_transport_error(error: httpx.RequestError, url: str) -> NetworkError:
    """Translate an httpx transport failure into a Podsite network error.

    Args:
        error: Exception raised by httpx before a response arrived
        url: URL that was requested

    Returns:
        Appropriate NetworkError instance (not raised)

    Example:
        try:
            response = await client.get(url)
        except httpx.RequestError as e:
            raise classify_transport_error(e, url) from e
    """
    if isinstance(error, httpx.TimeoutException):
        return NetworkTimeoutError(f"Request to {url} timed out: {error}")

    if isinstance(error, (httpx.ConnectError, httpx.NetworkError)):
        return NetworkConnectionError(f"Could not connect to {url}: {error}")

    return NetworkError(f"Request to {url} failed: {type(error).__name__}: {error}")
