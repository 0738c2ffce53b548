"""Input validation utilities for CLI commands."""

import re

_ID_RE = re.compile(r"^[A-Za-z0-9_.:-]+$")


def validate_user_id(user_id: str, label: str = "User ID") -> str:
    """Validate and return a user or channel ID. Raises ValueError if invalid."""
    if not user_id or not user_id.strip():
        raise ValueError(f"{label} cannot be empty")
    user_id = user_id.strip()
    if len(user_id) > 64:
        raise ValueError(f"{label} cannot exceed 64 characters")
    if not _ID_RE.match(user_id):
        raise ValueError(
            f"{label} can only contain letters, numbers, underscores, dots, colons, and hyphens"
        )
    return user_id


def validate_channel_id(channel_id: str) -> str:
    return validate_user_id(channel_id, label="Channel ID")


def validate_server_url(server_url: str) -> str:
    """Validate and return server URL. Raises ValueError if invalid."""
    if not server_url or not server_url.strip():
        raise ValueError("Server URL cannot be empty")
    server_url = server_url.strip().rstrip("/")
    if not server_url.startswith(("http://", "https://")):
        raise ValueError("Server URL must start with http:// or https://")
    if len(server_url) > 2048:
        raise ValueError("Server URL cannot exceed 2048 characters")
    return server_url


def validate_move_content(content: str | None) -> str | None:
    """Validate optional move text. Raises ValueError if too long."""
    if content is not None and len(content) > 4000:
        raise ValueError("Move content cannot exceed 4000 characters")
    return content
