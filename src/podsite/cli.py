"""CLI entry point for Podsite."""

import asyncio
import sys
from pathlib import Path

import httpx
import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podsite.cache import ResultCache
from podsite.config.logging import setup_logging
from podsite.config.manager import ConfigManager
from podsite.config.schema import GlobalConfig
from podsite.feeds.fetcher import FeedFetcher
from podsite.feeds.manager import FeedManager
from podsite.feeds.models import PodcastData
from podsite.feeds.query import find_episode, more_episodes, proxy_path_for, search_episodes
from podsite.utils.errors import ConfigError, PodsiteError

app = typer.Typer(
    name="podsite",
    help="Podcast website backend: cached episode feed and audio proxy",
    no_args_is_help=True,
)
console = Console()


def _load_config() -> GlobalConfig:
    try:
        return ConfigManager().load_config()
    except ConfigError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        sys.exit(1)


async def _fetch_podcast_data(config: GlobalConfig) -> PodcastData:
    async with httpx.AsyncClient() as client:
        fetcher = FeedFetcher(
            client,
            str(config.feed.url),
            user_agent=config.feed.user_agent,
            timeout=config.feed.timeout_seconds,
        )
        manager = FeedManager(
            fetcher,
            ResultCache(),
            redirector_prefixes=tuple(config.feed.redirector_prefixes),
        )
        return await manager.fetch_podcast_data()


def _podcast_data(config: GlobalConfig) -> PodcastData:
    try:
        with console.status("[dim]Fetching feed...[/dim]"):
            return asyncio.run(_fetch_podcast_data(config))
    except PodsiteError as e:
        console.print(f"[red]✗[/red] Failed to fetch episodes: {escape(str(e))}")
        sys.exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (DEBUG) logging"
    ),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Write logs to file"
    ),
) -> None:
    """Podsite - serve a podcast feed and proxy its audio."""
    ctx.obj = {"verbose": verbose, "log_file": log_file}
    setup_logging(verbose=verbose, log_file=log_file)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    from podsite import __version__

    console.print(f"[bold cyan]Podsite[/bold cyan] v{__version__}")


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
) -> None:
    """Run the HTTP server.

    Examples:
        podsite serve

        podsite serve --host 0.0.0.0 --port 8080
    """
    from podsite.api.server import run_server

    config = _load_config()
    # Re-apply logging with the configured level
    setup_logging(level=config.log_level, **(ctx.obj or {}))
    run_server(config, host=host, port=port)


@app.command("episodes")
def list_episodes(
    search: str = typer.Option("", "--search", "-s", help="Filter by title, description or subtitle"),
    limit: int = typer.Option(20, "--limit", "-l", help="Maximum episodes to show"),
) -> None:
    """List episodes from the feed, newest first."""
    config = _load_config()
    data = _podcast_data(config)
    episodes = search_episodes(data.episodes, search)

    if not episodes:
        console.print("[yellow]No episodes found.[/yellow]")
        if search:
            console.print("[dim]Try adjusting your search terms[/dim]")
        return

    table = Table(title=f"[bold]{escape(data.channel.title)}[/bold]")
    table.add_column("ID", style="cyan", overflow="fold")
    table.add_column("Title", style="bold")
    table.add_column("Published", style="magenta")
    table.add_column("Duration", justify="right", style="green")
    table.add_column("Type", style="yellow")

    for episode in episodes[:limit]:
        table.add_row(
            escape(episode.id),
            escape(episode.title),
            episode.pub_date or "-",
            episode.duration,
            episode.episode_type,
        )

    console.print(table)
    shown = min(limit, len(episodes))
    console.print(f"\n[dim]Showing {shown} of {len(episodes)} episode(s)[/dim]")


@app.command("show")
def show_episode(
    episode_id: str = typer.Argument(..., help="Episode id (GUID or derived slug)"),
) -> None:
    """Show one episode and a few others to listen to next."""
    config = _load_config()
    data = _podcast_data(config)

    episode = find_episode(data.episodes, episode_id)
    if episode is None:
        console.print(f"[red]✗[/red] Episode '{escape(episode_id)}' not found")
        sys.exit(1)

    console.print(f"\n[bold cyan]{escape(episode.title)}[/bold cyan]")
    if episode.subtitle:
        console.print(f"[dim]{escape(episode.subtitle)}[/dim]")
    console.print(f"Published: {episode.pub_date or '-'}")
    console.print(f"Duration:  {episode.duration}")
    if episode.season is not None or episode.episode_number is not None:
        console.print(f"Season {episode.season or '-'}, episode {episode.episode_number or '-'}")
    console.print(f"Audio:     {episode.audio_url}")
    console.print(f"Proxy:     {proxy_path_for(episode.audio_url)}")
    if episode.description:
        console.print(f"\n{episode.description}", markup=False)

    others = more_episodes(data.episodes, episode.id)
    if others:
        console.print("\n[bold]More Episodes[/bold]")
        for other in others:
            console.print(f"  • {escape(other.title)} [dim]({escape(other.id)})[/dim]")


@app.command("config")
def show_config() -> None:
    """Show the config file location and effective settings."""
    manager = ConfigManager()
    config = _load_config()

    console.print(f"[bold]Config file:[/bold] {manager.config_file}\n")
    console.print(
        yaml.safe_dump(config.model_dump(mode="json"), default_flow_style=False, sort_keys=False),
        markup=False,
    )


if __name__ == "__main__":
    app()
