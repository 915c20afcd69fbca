"""Custom exceptions for Podsite."""


class PodsiteError(Exception):
    """Base exception for all Podsite errors."""

    pass


class ConfigError(PodsiteError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class FeedError(PodsiteError):
    """Feed ingestion errors."""

    pass


class MalformedFeedError(FeedError):
    """RSS document has no recognizable channel element."""

    pass


class NetworkError(PodsiteError):
    """Network-related errors."""

    pass


class NetworkConnectionError(NetworkError):
    """Connection failures (DNS, TLS, refused connection)."""

    pass


class NetworkTimeoutError(NetworkError):
    """Request timeout."""

    pass


class UpstreamHTTPError(NetworkError):
    """Upstream host answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        message = f"Upstream returned HTTP {status_code}"
        if url:
            message += f" for {url}"
        super().__init__(message)
