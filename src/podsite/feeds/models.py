"""Data models for the podcast channel and its episodes."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EpisodeType = Literal["full", "trailer", "bonus"]
EPISODE_TYPES: tuple[str, ...] = ("full", "trailer", "bonus")


class _FeedModel(BaseModel):
    # The browser UI reads camelCase keys (pubDate, audioUrl, ...)
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class PodcastChannel(_FeedModel):
    """Feed-level metadata, replaced wholesale on each refresh."""

    title: str = "Unknown Podcast"
    description: str = ""
    image: str = ""
    language: str = "en"
    link: str = ""
    last_build_date: str = ""
    copyright: str = ""
    author: str = ""


class PodcastEpisode(_FeedModel):
    """A single normalized podcast episode."""

    id: str
    title: str = "Untitled Episode"
    description: str = ""
    pub_date: str = ""
    duration: str = "00:00:00"
    audio_url: str = ""
    image: str | None = None
    episode_number: int | None = None
    season: int | None = None
    episode_type: EpisodeType = "full"
    subtitle: str | None = None
    summary: str | None = None
    show_notes: str | None = None


class PodcastData(_FeedModel):
    """Channel plus episodes sorted newest first; the cached unit."""

    channel: PodcastChannel
    episodes: list[PodcastEpisode] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
