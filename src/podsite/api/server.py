"""
FastAPI server for the podcast site

Builds the application, wires the feed pipeline and audio proxy onto a
shared HTTP client, and runs it under uvicorn.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from podsite import __version__
from podsite.api.endpoints import register_endpoints
from podsite.audio.proxy import AudioProxy
from podsite.cache import ResultCache
from podsite.config.schema import GlobalConfig
from podsite.feeds.fetcher import FeedFetcher
from podsite.feeds.manager import FeedManager

logger = logging.getLogger(__name__)


def create_app(
    config: GlobalConfig | None = None,
    cache: ResultCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create the FastAPI application

    Args:
        config: Podsite configuration (defaults when omitted)
        cache: Result cache; one is created per app when omitted
        transport: Optional httpx transport for the outbound client

    Returns:
        FastAPI: Configured application instance
    """
    config = config or GlobalConfig()
    # The cache outlives the HTTP client so it survives lifespan restarts
    if cache is None:
        cache = ResultCache(default_ttl_minutes=config.cache.ttl_minutes)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(transport=transport) as client:
            app.state.feed_manager = FeedManager(
                fetcher=FeedFetcher(
                    client,
                    str(config.feed.url),
                    user_agent=config.feed.user_agent,
                    timeout=config.feed.timeout_seconds,
                ),
                cache=cache,
                redirector_prefixes=tuple(config.feed.redirector_prefixes),
                cache_key=config.cache.key,
                ttl_minutes=config.cache.ttl_minutes,
            )
            app.state.audio_proxy = AudioProxy(
                client,
                user_agent=config.proxy.user_agent,
                timeout=config.proxy.timeout_seconds,
                chunk_size=config.proxy.chunk_size,
            )
            logger.info(f"Serving feed {config.feed.url}")
            yield
        logger.info("HTTP client closed")

    app = FastAPI(
        title="Podsite",
        description="Podcast episodes API and audio streaming proxy",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "HEAD", "OPTIONS"],
        allow_headers=["Range"],
    )

    app.state.config = config
    app.state.cache = cache

    register_endpoints(app)

    return app


def run_server(
    config: GlobalConfig,
    host: str | None = None,
    port: int | None = None,
) -> None:
    """
    Run the API server with a single worker

    The result cache is per process; more workers would each fetch the feed.

    Args:
        config: Podsite configuration
        host: Host to bind to (default: config.server.host)
        port: Port to bind to (default: config.server.port)
    """
    app = create_app(config)
    host = host or config.server.host
    port = port or config.server.port

    logger.info(f"Starting API server on {host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        workers=1,
    )
