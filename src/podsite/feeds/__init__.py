"""Feed fetching, RSS parsing and episode normalization for Podsite."""

from podsite.feeds.fetcher import FeedFetcher
from podsite.feeds.manager import FeedManager
from podsite.feeds.models import PodcastChannel, PodcastData, PodcastEpisode
from podsite.feeds.parser import ParsedFeed, RSSParser

__all__ = [
    "FeedFetcher",
    "FeedManager",
    "ParsedFeed",
    "PodcastChannel",
    "PodcastData",
    "PodcastEpisode",
    "RSSParser",
]
