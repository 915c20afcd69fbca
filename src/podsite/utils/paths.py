"""Filesystem locations used by Podsite."""

import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "podsite"
CONFIG_DIR_ENV = "PODSITE_CONFIG_DIR"


def get_config_dir() -> Path:
    """Return the configuration directory.

    ``PODSITE_CONFIG_DIR`` overrides the platform default.
    """
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME))

