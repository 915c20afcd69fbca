"""Configuration loading and logging setup."""

from podsite.config.logging import setup_logging
from podsite.config.manager import ConfigManager
from podsite.config.schema import (
    CacheSettings,
    FeedSettings,
    GlobalConfig,
    ProxySettings,
    ServerSettings,
)

__all__ = [
    "ConfigManager",
    "GlobalConfig",
    "FeedSettings",
    "CacheSettings",
    "ProxySettings",
    "ServerSettings",
    "setup_logging",
]
