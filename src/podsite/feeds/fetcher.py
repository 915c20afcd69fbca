"""Fetches the raw RSS document from the upstream host."""

import logging

import httpx

from podsite.utils.errors import UpstreamHTTPError
from podsite.utils.http import classify_transport_error

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Downloads the podcast RSS feed as text.

    A single attempt is made per call; failures propagate to the caller.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     fetcher = FeedFetcher(client, "https://example.com/feed.rss")
        ...     xml_text = await fetcher.fetch()
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        user_agent: str = "Mozilla/5.0 (compatible; PodcastSite/1.0)",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Shared HTTP client
            url: RSS feed URL
            user_agent: User-Agent header sent upstream
            timeout: Request timeout in seconds
        """
        self.client = client
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch(self) -> str:
        """Fetch the feed body.

        Returns:
            Response body as text

        Raises:
            UpstreamHTTPError: If the feed host answers with a non-2xx status
            NetworkError: On DNS, TLS, connection or timeout failures
        """
        logger.info(f"Fetching RSS feed from: {self.url}")

        try:
            response = await self.client.get(
                self.url,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
                follow_redirects=True,
            )
        except httpx.RequestError as e:
            raise classify_transport_error(e, self.url) from e

        if not response.is_success:
            logger.error(f"RSS feed request failed with HTTP {response.status_code}")
            raise UpstreamHTTPError(response.status_code, self.url)

        return response.text
