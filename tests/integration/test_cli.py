"""Integration tests for CLI commands."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from podsite.cli import app
from podsite.feeds.models import PodcastChannel, PodcastData, PodcastEpisode
from podsite.utils.errors import UpstreamHTTPError

runner = CliRunner()

FETCH_TARGET = "podsite.feeds.manager.FeedManager.fetch_podcast_data"


@pytest.fixture
def podcast_data() -> PodcastData:
    """Small already-normalized feed."""
    episodes = [
        PodcastEpisode(
            id=f"ep-{n}",
            title=f"Show {n}",
            pub_date=f"Mon, 0{n} Jan 2024 12:00:00 GMT",
            audio_url=f"https://cdn.simplecast.com/audio/{n}.mp3",
            description="Azure talk" if n == 2 else "",
        )
        for n in range(6, 0, -1)
    ]
    return PodcastData(channel=PodcastChannel(title="Hanselminutes"), episodes=episodes)


class TestCLIVersion:
    """Tests for version command."""

    def test_version_command(self) -> None:
        """Test version command displays version."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Podsite" in result.stdout
        assert "0.1.0" in result.stdout


class TestCLIConfig:
    """Tests for config command."""

    def test_config_creates_default(self, config_dir: Path) -> None:
        """Test the first run writes a default config file."""
        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert (config_dir / "config.yaml").exists()
        assert "hanselminutes.com/subscribe" in result.stdout
        assert "ttl_minutes: 60" in result.stdout

    def test_invalid_config_exits(self, config_dir: Path) -> None:
        """Test a broken config file is reported."""
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text(yaml.safe_dump({"server": {"port": 0}}))

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.stdout


class TestCLIEpisodes:
    """Tests for episodes command."""

    def test_lists_episodes(self, config_dir: Path, podcast_data: PodcastData) -> None:
        """Test the table lists episodes with a count."""
        with patch(FETCH_TARGET, new=AsyncMock(return_value=podcast_data)):
            result = runner.invoke(app, ["episodes", "--limit", "3"])

        assert result.exit_code == 0
        assert "Show 6" in result.stdout
        assert "Show 1" not in result.stdout
        assert "Showing 3 of 6 episode(s)" in result.stdout

    def test_search(self, config_dir: Path, podcast_data: PodcastData) -> None:
        """Test --search filters episodes."""
        with patch(FETCH_TARGET, new=AsyncMock(return_value=podcast_data)):
            result = runner.invoke(app, ["episodes", "--search", "azure"])

        assert result.exit_code == 0
        assert "Show 2" in result.stdout
        assert "Showing 1 of 1 episode(s)" in result.stdout

    def test_search_no_results(self, config_dir: Path, podcast_data: PodcastData) -> None:
        """Test an unmatched search prints a hint."""
        with patch(FETCH_TARGET, new=AsyncMock(return_value=podcast_data)):
            result = runner.invoke(app, ["episodes", "-s", "kubernetes"])

        assert result.exit_code == 0
        assert "No episodes found." in result.stdout
        assert "Try adjusting your search terms" in result.stdout

    def test_fetch_failure(self, config_dir: Path) -> None:
        """Test feed errors exit with status 1."""
        with patch(FETCH_TARGET, new=AsyncMock(side_effect=UpstreamHTTPError(503))):
            result = runner.invoke(app, ["episodes"])

        assert result.exit_code == 1
        assert "Failed to fetch episodes" in result.stdout


class TestCLIShow:
    """Tests for show command."""

    def test_show_episode(self, config_dir: Path, podcast_data: PodcastData) -> None:
        """Test episode details and suggestions are printed."""
        with patch(FETCH_TARGET, new=AsyncMock(return_value=podcast_data)):
            result = runner.invoke(app, ["show", "ep-2"])

        assert result.exit_code == 0
        assert "Show 2" in result.stdout
        assert "/api/audio/cdn.simplecast.com/audio/2.mp3" in result.stdout
        assert "More Episodes" in result.stdout
        assert "(ep-6)" in result.stdout

    def test_show_missing(self, config_dir: Path, podcast_data: PodcastData) -> None:
        """Test unknown ids exit with status 1."""
        with patch(FETCH_TARGET, new=AsyncMock(return_value=podcast_data)):
            result = runner.invoke(app, ["show", "nope"])

        assert result.exit_code == 1
        assert "Episode 'nope' not found" in result.stdout


class TestCLIServe:
    """Tests for serve command."""

    def test_serve_passes_host_and_port(self, config_dir: Path) -> None:
        """Test --host and --port reach the server runner."""
        with patch("podsite.api.server.run_server") as run_server:
            result = runner.invoke(app, ["serve", "--host", "0.0.0.0", "--port", "9001"])

        assert result.exit_code == 0
        config = run_server.call_args.args[0]
        assert config.server.port == 8000
        assert run_server.call_args.kwargs == {"host": "0.0.0.0", "port": 9001}

    def test_serve_rejects_reload(self, config_dir: Path) -> None:
        """Test only the documented options are accepted."""
        with patch("podsite.api.server.run_server") as run_server:
            result = runner.invoke(app, ["serve", "--reload"])

        assert result.exit_code != 0
        run_server.assert_not_called()
