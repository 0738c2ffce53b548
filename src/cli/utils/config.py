"""Configuration file management for CLI."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class CliConfig:
    """Player configuration loaded from config file."""

    server_url: str
    user_id: str
    channel_id: Optional[str] = None


class ConfigError(Exception):
    """Configuration file error."""

    pass


class ConfigManager:
    """Manages player configuration in ~/.turnkeeper/config.yaml."""

    DEFAULT_DIR = Path.home() / ".turnkeeper"
    CONFIG_FILE = "config.yaml"

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self._config_dir = config_dir or self.DEFAULT_DIR
        self._config_path = self._config_dir / self.CONFIG_FILE

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def config_path(self) -> Path:
        return self._config_path

    def exists(self) -> bool:
        """Check if configuration exists."""
        return self._config_path.exists()

    def load(self) -> CliConfig:
        """Load configuration from file. Raises ConfigError if not found."""
        if not self._config_path.exists():
            raise ConfigError(
                f"Config not found at {self._config_path}. Run 'turnkeeper init' first."
            )

        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file: {e}") from e

        if not isinstance(data, dict) or "server_url" not in data or "user_id" not in data:
            raise ConfigError("Invalid config: missing server_url or user_id")

        return CliConfig(
            server_url=data["server_url"],
            user_id=str(data["user_id"]),
            channel_id=str(data["channel_id"]) if data.get("channel_id") else None,
        )

    def save(self, server_url: str, user_id: str, channel_id: Optional[str] = None) -> None:
        """Save configuration to file."""
        self._config_dir.mkdir(parents=True, exist_ok=True)

        config_data = {"server_url": server_url, "user_id": user_id}
        if channel_id:
            config_data["channel_id"] = channel_id

        with open(self._config_path, "w") as f:
            yaml.safe_dump(config_data, f, default_flow_style=False)
