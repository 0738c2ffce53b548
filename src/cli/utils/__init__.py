"""CLI utilities."""

from .config import CliConfig, ConfigError, ConfigManager
from .validation import validate_channel_id, validate_move_content, validate_server_url, validate_user_id

__all__ = [
    "ConfigManager",
    "CliConfig",
    "ConfigError",
    "validate_user_id",
    "validate_channel_id",
    "validate_server_url",
    "validate_move_content",
]
