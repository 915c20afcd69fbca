"""Tests for episode list queries."""

import pytest

from podsite.feeds.models import PodcastEpisode
from podsite.feeds.query import find_episode, more_episodes, proxy_path_for, search_episodes


@pytest.fixture
def episodes() -> list[PodcastEpisode]:
    """Small episode list."""
    return [
        PodcastEpisode(id="e1", title="Azure Functions", description="Serverless talk"),
        PodcastEpisode(id="e2", title="Rust for .NET devs", subtitle="Memory safety"),
        PodcastEpisode(id="e3", title="Accessibility", description="Screen readers and AZURE"),
        PodcastEpisode(id="e4", title="Career Advice"),
        PodcastEpisode(id="e5", title="Hardware Hacking"),
        PodcastEpisode(id="e6", title="Open Source"),
    ]


class TestSearchEpisodes:
    """Tests for search_episodes."""

    def test_matches_title_and_description_case_insensitive(self, episodes) -> None:
        """Test title and description matches ignore case."""
        assert [e.id for e in search_episodes(episodes, "azure")] == ["e1", "e3"]

    def test_matches_subtitle(self, episodes) -> None:
        """Test subtitles are searched too."""
        assert [e.id for e in search_episodes(episodes, "MEMORY")] == ["e2"]

    def test_blank_query_returns_all(self, episodes) -> None:
        """Test an empty query does not filter."""
        assert len(search_episodes(episodes, "   ")) == len(episodes)

    def test_no_match(self, episodes) -> None:
        """Test unmatched queries return an empty list."""
        assert search_episodes(episodes, "kubernetes") == []


class TestFindEpisode:
    """Tests for find_episode."""

    def test_found(self, episodes) -> None:
        """Test lookup by id."""
        assert find_episode(episodes, "e4").title == "Career Advice"

    def test_missing(self, episodes) -> None:
        """Test unknown ids return None."""
        assert find_episode(episodes, "nope") is None


class TestMoreEpisodes:
    """Tests for more_episodes."""

    def test_excludes_current_and_limits(self, episodes) -> None:
        """Test the current episode is skipped and four are returned."""
        assert [e.id for e in more_episodes(episodes, "e2")] == ["e1", "e3", "e4", "e5"]

    def test_custom_limit(self, episodes) -> None:
        """Test the limit is configurable."""
        assert len(more_episodes(episodes, "e1", limit=2)) == 2


class TestProxyPathFor:
    """Tests for proxy_path_for."""

    def test_https_url(self) -> None:
        """Test https URLs map onto the proxy route."""
        assert (
            proxy_path_for("https://cdn.simplecast.com/audio/ep.mp3")
            == "/api/audio/cdn.simplecast.com/audio/ep.mp3"
        )

    def test_other_scheme_unchanged(self) -> None:
        """Test non-https URLs are left alone."""
        assert proxy_path_for("http://example.com/a.mp3") == "http://example.com/a.mp3"

    def test_custom_prefix(self) -> None:
        """Test a trailing slash on the prefix is tolerated."""
        assert proxy_path_for("https://h/a.mp3", prefix="/proxy/") == "/proxy/h/a.mp3"
