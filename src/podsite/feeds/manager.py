"""Feed ingestion pipeline: fetch, parse, normalize, sort and cache."""

import logging

from podsite.cache import ResultCache
from podsite.feeds.fetcher import FeedFetcher
from podsite.feeds.models import PodcastData
from podsite.feeds.normalizer import (
    DEFAULT_REDIRECTOR_PREFIXES,
    normalize_episodes,
    sort_episodes,
)
from podsite.feeds.parser import RSSParser

logger = logging.getLogger(__name__)

CACHE_KEY = "podcast-data"


class FeedManager:
    """Serves podcast data from the cache, refreshing it from the feed on miss."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        cache: ResultCache,
        parser: RSSParser | None = None,
        redirector_prefixes: tuple[str, ...] = DEFAULT_REDIRECTOR_PREFIXES,
        cache_key: str = CACHE_KEY,
        ttl_minutes: float = ResultCache.DEFAULT_TTL_MINUTES,
    ) -> None:
        """Initialize the feed manager.

        Args:
            fetcher: Feed fetcher for the upstream RSS document
            cache: Result cache shared across requests
            parser: RSS parser (default: new RSSParser)
            redirector_prefixes: Redirector prefixes stripped from audio URLs
            cache_key: Key the podcast data is cached under
            ttl_minutes: Cache TTL in minutes (60 = one hour)
        """
        self.fetcher = fetcher
        self.cache = cache
        self.parser = parser or RSSParser()
        self.redirector_prefixes = tuple(redirector_prefixes)
        self.cache_key = cache_key
        self.ttl_minutes = ttl_minutes

    async def fetch_podcast_data(self) -> PodcastData:
        """Fetch and parse the feed, bypassing the cache.

        Returns:
            Fresh PodcastData with episodes sorted newest first

        Raises:
            NetworkError: If the feed cannot be downloaded
            UpstreamHTTPError: If the feed host answers non-2xx
            MalformedFeedError: If the document has no channel
        """
        xml_text = await self.fetcher.fetch()
        parsed = self.parser.parse(xml_text)
        episodes = sort_episodes(normalize_episodes(parsed.items, self.redirector_prefixes))

        logger.info(f"Parsed {len(episodes)} episodes from RSS feed")
        return PodcastData(channel=parsed.channel, episodes=episodes)

    async def get_podcast_data(self) -> PodcastData:
        """Return cached podcast data, loading it once per TTL window."""
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            logger.info("Cache hit - returning cached RSS data")
            return cached

        logger.info("Cache miss - fetching fresh RSS data")
        return await self.cache.get_or_load(
            self.cache_key, self.fetch_podcast_data, self.ttl_minutes
        )
