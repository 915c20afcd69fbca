"""Utility functions and helpers for Podsite."""

from podsite.utils.errors import (
    ConfigError,
    FeedError,
    InvalidConfigError,
    MalformedFeedError,
    NetworkConnectionError,
    NetworkError,
    NetworkTimeoutError,
    PodsiteError,
    UpstreamHTTPError,
)
from podsite.utils.paths import get_config_dir

__all__ = [
    # Errors
    "PodsiteError",
    "ConfigError",
    "InvalidConfigError",
    "FeedError",
    "MalformedFeedError",
    "NetworkError",
    "NetworkConnectionError",
    "NetworkTimeoutError",
    "UpstreamHTTPError",
    # Paths
    "get_config_dir",
]
