"""Shared test fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import httpx
import pytest

RSS_NAMESPACES = (
    'xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd" '
    'xmlns:content="http://purl.org/rss/1.0/modules/content/"'
)

CHANNEL_HEADER = """
    <title>Hanselminutes</title>
    <description>Fresh air for developers.</description>
    <language>en-us</language>
    <link>https://hanselminutes.com</link>
    <lastBuildDate>Fri, 01 Mar 2024 08:00:00 GMT</lastBuildDate>
    <copyright>Scott Hanselman</copyright>
    <itunes:author>Scott Hanselman</itunes:author>
    <itunes:image href="https://image.simplecastcdn.com/show.jpg"/>
"""


def make_rss(items: str = "", channel: str = CHANNEL_HEADER) -> str:
    """Wrap channel metadata and item XML into an RSS document."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<rss version="2.0" {RSS_NAMESPACES}>'
        f"<channel>{channel}{items}</channel>"
        "</rss>"
    )


def make_item(
    title: str = "Episode One",
    guid: str | None = "guid-001",
    pub_date: str = "Mon, 01 Jan 2024 12:00:00 GMT",
    audio_url: str = "https://cdn.simplecast.com/audio/ep1.mp3",
    extra: str = "",
) -> str:
    """Build one <item> element."""
    guid_xml = f'<guid isPermaLink="false">{guid}</guid>' if guid is not None else ""
    return (
        "<item>"
        f"<title>{title}</title>"
        f"{guid_xml}"
        f"<pubDate>{pub_date}</pubDate>"
        f'<enclosure url="{audio_url}" length="1000" type="audio/mpeg"/>'
        f"{extra}"
        "</item>"
    )



class ChunkedByteStream(httpx.AsyncByteStream):
    """Upstream body that is produced lazily, like a network response."""

    def __init__(self, body: bytes, chunk_size: int = 64) -> None:
        self.body = body
        self.chunk_size = chunk_size

    async def __aiter__(self) -> AsyncIterator[bytes]:
        for start in range(0, len(self.body), self.chunk_size):
            yield self.body[start : start + self.chunk_size]


def make_audio_response(
    status_code: int = 200, body: bytes = b"", headers: dict[str, str] | None = None
) -> httpx.Response:
    """Build an upstream audio response whose body has not been read yet."""
    headers = {"Content-Length": str(len(body)), **(headers or {})}
    return httpx.Response(status_code, headers=headers, stream=ChunkedByteStream(body))

@pytest.fixture
def sample_feed_xml() -> str:
    """Three-episode feed, deliberately out of date order."""
    items = "".join(
        [
            make_item(
                title="New Year Show",
                guid="guid-jan",
                pub_date="Mon, 01 Jan 2024 12:00:00 GMT",
                audio_url="https://r.zen.ai/r/cdn.simplecast.com/audio/jan.mp3",
                extra=(
                    "<description>January episode</description>"
                    "<itunes:duration>00:45:10</itunes:duration>"
                    "<itunes:episode>900</itunes:episode>"
                    "<itunes:season>1</itunes:season>"
                    "<itunes:episodeType>full</itunes:episodeType>"
                ),
            ),
            make_item(
                title="Spring Show",
                guid="guid-mar",
                pub_date="Fri, 01 Mar 2024 12:00:00 GMT",
                audio_url="https://cdn.simplecast.com/audio/mar.mp3",
                extra="<itunes:subtitle>Talking Azure</itunes:subtitle>",
            ),
            make_item(
                title="Winter Show",
                guid="guid-feb",
                pub_date="Thu, 01 Feb 2024 12:00:00 GMT",
                audio_url="https://cdn.simplecast.com/audio/feb.mp3",
                extra="<itunes:episodeType>bonus</itunes:episodeType>",
            ),
        ]
    )
    return make_rss(items)


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration dictionary."""
    return {
        "version": "1",
        "log_level": "INFO",
        "feed": {
            "url": "https://example.com/feed.rss",
            "user_agent": "TestAgent/1.0",
            "timeout_seconds": 5,
        },
        "cache": {"ttl_minutes": 30},
        "server": {"host": "0.0.0.0", "port": 9000},
    }


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point PODSITE_CONFIG_DIR at a temporary directory."""
    directory = tmp_path / "config"
    monkeypatch.setenv("PODSITE_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture
def build_rss():
    """Factory fixture wrapping items into an RSS document."""
    return make_rss


@pytest.fixture
def build_item():
    """Factory fixture building a single <item>."""
    return make_item


@pytest.fixture
def audio_response():
    """Factory fixture building streamed upstream audio responses."""
    return make_audio_response
