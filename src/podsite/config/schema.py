"""Configuration schema models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, HttpUrl

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

DEFAULT_FEED_URL = "https://hanselminutes.com/subscribe"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; PodcastSite/1.0)"


class FeedSettings(BaseModel):
    """Upstream RSS feed configuration."""

    url: HttpUrl = HttpUrl(DEFAULT_FEED_URL)
    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = Field(default=30.0, gt=0)
    # Tracking redirectors wrapping the real enclosure host
    redirector_prefixes: list[str] = Field(
        default_factory=lambda: ["https://r.zen.ai/r/"]
    )


class CacheSettings(BaseModel):
    """Feed result cache configuration."""

    key: str = "podcast-data"
    ttl_minutes: float = Field(default=60, gt=0)


class ProxySettings(BaseModel):
    """Audio proxy configuration."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float = Field(default=30.0, gt=0)
    chunk_size: int = Field(default=64 * 1024, gt=0)


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class GlobalConfig(BaseModel):
    """Global Podsite configuration."""

    version: str = "1"
    log_level: LogLevel = "INFO"

    feed: FeedSettings = Field(default_factory=FeedSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
