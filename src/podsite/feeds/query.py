"""Lookups over an episode list: search, by-id lookup, related episodes."""

from collections.abc import Sequence

from podsite.feeds.models import PodcastEpisode

AUDIO_PROXY_PREFIX = "/api/audio"


def search_episodes(episodes: Sequence[PodcastEpisode], query: str) -> list[PodcastEpisode]:
    """Filter episodes whose title, description or subtitle contains ``query``.

    Matching is case-insensitive. A blank query returns every episode.
    """
    needle = query.strip().lower()
    if not needle:
        return list(episodes)

    return [
        episode
        for episode in episodes
        if needle in episode.title.lower()
        or needle in episode.description.lower()
        or (episode.subtitle is not None and needle in episode.subtitle.lower())
    ]


def find_episode(episodes: Sequence[PodcastEpisode], episode_id: str) -> PodcastEpisode | None:
    """Return the first episode with the given id."""
    return next((episode for episode in episodes if episode.id == episode_id), None)


def more_episodes(
    episodes: Sequence[PodcastEpisode], episode_id: str, limit: int = 4
) -> list[PodcastEpisode]:
    """Other episodes to suggest next to ``episode_id``, in list order."""
    return [episode for episode in episodes if episode.id != episode_id][:limit]


def proxy_path_for(audio_url: str, prefix: str = AUDIO_PROXY_PREFIX) -> str:
    """Rewrite an ``https://`` audio URL to its audio proxy route.

    ``https://cdn.example.com/ep.mp3`` becomes ``/api/audio/cdn.example.com/ep.mp3``.
    Other schemes are returned unchanged.
    """
    if audio_url.startswith("https://"):
        return f"{prefix.rstrip('/')}/{audio_url[len('https://'):]}"
    return audio_url
