"""
HTTP endpoints for the podcast site

Exposes the cached episode list and the streaming audio proxy consumed by
the browser UI.
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from podsite.audio.proxy import GET_CORS_HEADERS, AudioProxy, build_target_url
from podsite.feeds.manager import FeedManager
from podsite.utils.errors import PodsiteError, UpstreamHTTPError

logger = logging.getLogger(__name__)

AUDIO_ROUTE = "/api/audio/{path:path}"


def get_feed_manager(request: Request) -> FeedManager:
    """Dependency returning the app's FeedManager"""
    return request.app.state.feed_manager


def get_audio_proxy(request: Request) -> AudioProxy:
    """Dependency returning the app's AudioProxy"""
    return request.app.state.audio_proxy


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_endpoints(app: FastAPI) -> None:
    """Register all API endpoints"""

    @app.get("/api/episodes")
    async def get_episodes(manager: FeedManager = Depends(get_feed_manager)) -> Response:
        """Channel metadata and episodes, newest first"""
        try:
            data = await manager.get_podcast_data()
        except PodsiteError as e:
            logger.error(f"Failed to fetch episodes: {e}")
            return _error("Failed to fetch episodes", 500)

        return JSONResponse(data.to_json_dict())

    # HEAD is registered first so GET never answers it
    @app.head(AUDIO_ROUTE)
    async def head_audio(
        path: str, request: Request, proxy: AudioProxy = Depends(get_audio_proxy)
    ) -> Response:
        """Upstream audio headers without a body"""
        url = build_target_url(path, request.url.query)
        try:
            proxied = await proxy.open(url, method="HEAD")
        except UpstreamHTTPError as e:
            return _error("Failed to fetch audio", e.status_code)
        except PodsiteError as e:
            logger.error(f"Audio HEAD proxy error: {e}")
            return _error("Failed to proxy audio", 500)

        return Response(status_code=proxied.status_code, headers=proxied.headers)

    @app.get(AUDIO_ROUTE)
    async def get_audio(
        path: str, request: Request, proxy: AudioProxy = Depends(get_audio_proxy)
    ) -> Response:
        """Stream upstream audio, forwarding Range for seeking"""
        url = build_target_url(path, request.url.query)
        try:
            proxied = await proxy.open(
                url, method="GET", range_header=request.headers.get("range")
            )
        except UpstreamHTTPError as e:
            return _error("Failed to fetch audio", e.status_code)
        except PodsiteError as e:
            logger.error(f"Audio proxy error: {e}")
            return _error("Failed to proxy audio", 500)

        # The background close also runs when the client disconnects mid-stream
        return StreamingResponse(
            proxied.iter_bytes(),
            status_code=proxied.status_code,
            headers=proxied.headers,
            background=BackgroundTask(proxied.aclose),
        )

    @app.options(AUDIO_ROUTE)
    async def audio_preflight(path: str) -> Response:
        """CORS preflight for the audio element"""
        return Response(status_code=204, headers=GET_CORS_HEADERS)
