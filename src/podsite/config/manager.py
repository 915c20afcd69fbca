"""Configuration manager for loading and saving Podsite config."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from podsite.config.schema import GlobalConfig
from podsite.utils.errors import InvalidConfigError
from podsite.utils.paths import get_config_dir


class ConfigManager:
    """Manages the Podsite configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the
                platform config dir (or ``PODSITE_CONFIG_DIR``).
        """
        self.config_dir = config_dir or get_config_dir()
        self.config_file = self.config_dir / "config.yaml"

    def load_config(self) -> GlobalConfig:
        """Load and validate global configuration.

        A default config file is written when none exists yet.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If config is unreadable or invalid
        """
        if not self.config_file.exists():
            config = GlobalConfig()
            self.save_config(config)
            return config

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise InvalidConfigError(
                f"Could not read configuration in {self.config_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: expected a mapping"
            )

        try:
            return GlobalConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save global configuration.

        Args:
            config: GlobalConfig instance to save
        """
        # mode="json" turns HttpUrl into plain strings for YAML
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
