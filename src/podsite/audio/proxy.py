"""Streaming audio proxy with byte-range forwarding."""

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from typing import Literal

import httpx

from podsite.utils.errors import UpstreamHTTPError
from podsite.utils.http import classify_transport_error

logger = logging.getLogger(__name__)

ProxyMethod = Literal["GET", "HEAD"]

GET_FORWARDED_HEADERS = ("content-type", "content-length", "accept-ranges", "content-range")
HEAD_FORWARDED_HEADERS = ("content-type", "content-length", "accept-ranges")

GET_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, HEAD, OPTIONS",
    "Access-Control-Allow-Headers": "Range",
}
HEAD_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
}

DEFAULT_CHUNK_SIZE = 64 * 1024


def build_target_url(path: str | Sequence[str], query: str = "") -> str:
    """Rebuild the upstream audio URL from the proxied path.

    Args:
        path: ``host/segment/...`` string or its segments
        query: Optional query string (without ``?``)

    Returns:
        ``https://host/segment/...`` with the query appended when present
    """
    if not isinstance(path, str):
        path = "/".join(path)
    url = "https://" + path.lstrip("/")
    if query:
        url = f"{url}?{query}"
    return url


@dataclass
class ProxiedAudio:
    """An open upstream audio response ready to be relayed."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    response: httpx.Response | None = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield the upstream body chunk by chunk, closing it afterwards.

        The body is relayed as received (no content decoding), so the
        forwarded ``content-length`` stays accurate.
        """
        if self.response is None:
            return
        try:
            async for chunk in self.response.aiter_raw(self.chunk_size):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Release the upstream connection. Safe to call more than once."""
        if self.response is not None:
            await self.response.aclose()


class AudioProxy:
    """Relays remote audio through the server.

    GET requests forward the inbound ``Range`` header so browsers can seek.
    Only an allow-list of upstream headers is copied back, plus CORS headers.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str = "Mozilla/5.0 (compatible; PodcastSite/1.0)",
        timeout: float = 30.0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Initialize the proxy.

        Args:
            client: Shared HTTP client
            user_agent: User-Agent header sent upstream
            timeout: Connect/read timeout in seconds
            chunk_size: Size of relayed body chunks in bytes
        """
        self.client = client
        self.user_agent = user_agent
        self.timeout = timeout
        self.chunk_size = chunk_size

    async def open(
        self,
        url: str,
        method: ProxyMethod = "GET",
        range_header: str | None = None,
    ) -> ProxiedAudio:
        """Open the upstream audio resource.

        For GET the body is left unread; relay it with ``iter_bytes``.

        Args:
            url: Upstream audio URL
            method: ``GET`` or ``HEAD``
            range_header: Inbound ``Range`` header value (GET only)

        Returns:
            ProxiedAudio carrying the upstream status and filtered headers

        Raises:
            UpstreamHTTPError: If the audio host answers non-2xx
            NetworkError: On transport failure
        """
        logger.info(f"Proxying audio {method} request to: {url}")

        headers = {
            "User-Agent": self.user_agent,
            # Relay bytes untouched; content-length must match what we send
            "Accept-Encoding": "identity",
        }
        if method == "GET" and range_header:
            headers["Range"] = range_header

        request = self.client.build_request(method, url, headers=headers, timeout=self.timeout)
        try:
            response = await self.client.send(request, stream=True, follow_redirects=True)
        except httpx.RequestError as e:
            logger.error(f"Audio proxy error: {e}")
            raise classify_transport_error(e, url) from e

        if not response.is_success:
            logger.error(f"Audio proxy failed: {response.status_code} {response.reason_phrase}")
            await response.aclose()
            raise UpstreamHTTPError(response.status_code, url)

        if method == "HEAD":
            await response.aclose()
            return ProxiedAudio(
                status_code=response.status_code,
                headers=self._filter_headers(response, HEAD_FORWARDED_HEADERS, HEAD_CORS_HEADERS),
            )

        return ProxiedAudio(
            status_code=response.status_code,
            headers=self._filter_headers(response, GET_FORWARDED_HEADERS, GET_CORS_HEADERS),
            response=response,
            chunk_size=self.chunk_size,
        )

    def _filter_headers(
        self,
        response: httpx.Response,
        allowed: tuple[str, ...],
        cors: dict[str, str],
    ) -> dict[str, str]:
        headers = {name: response.headers[name] for name in allowed if response.headers.get(name)}
        headers.update(cors)
        return headers
