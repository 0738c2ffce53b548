"""Required-channel settings for command gating.

One instance is created per app and injected into the routes that gate on
it. The value is persisted to a small YAML file so it survives restarts.
"""
import logging
import os
import threading
from pathlib import Path
from typing import Optional, Protocol

import yaml

logger = logging.getLogger(__name__)


class ChannelResolver(Protocol):
    """What the command layer needs to gate requests by channel."""

    def required_channel(self) -> Optional[str]: ...

    def is_correct_channel(self, channel_id: Optional[str]) -> bool: ...


class ChannelSettingsError(Exception):
    """The channel file could not be read or written."""


class ChannelSettings:
    """Holds the single channel commands must be issued from."""

    def __init__(self, channel_file: Path) -> None:
        self._path = channel_file
        self._lock = threading.Lock()
        self._required: Optional[str] = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[str]:
        """Read the stored channel, if any. A missing file means no channel."""
        with self._lock:
            if not self._path.exists():
                self._required = None
                return None
            try:
                data = yaml.safe_load(self._path.read_text()) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ChannelSettingsError(f"Failed to read {self._path}: {e}") from e
            if not isinstance(data, dict):
                raise ChannelSettingsError(f"Invalid channel file {self._path}: expected a mapping")
            value = data.get("required_channel")
            self._required = str(value) if value else None
            logger.info("Loaded required channel %s from %s", self._required, self._path)
            return self._required

    def required_channel(self) -> Optional[str]:
        return self._required

    def is_correct_channel(self, channel_id: Optional[str]) -> bool:
        required = self._required
        return required is not None and channel_id == required

    def set_channel(self, channel_id: str) -> bool:
        """Make ``channel_id`` the required channel.

        Returns False if it already is.
        """
        if not channel_id:
            raise ValueError("Channel ID cannot be empty")
        with self._lock:
            if self._required == channel_id:
                return False
            self._write(channel_id)
            self._required = channel_id
        logger.info("Required channel set to %s", channel_id)
        return True

    def clear_channel(self, channel_id: str) -> bool:
        """Remove ``channel_id`` as the required channel.

        Returns False if it is not the configured channel.
        """
        with self._lock:
            if self._required is None or self._required != channel_id:
                return False
            self._write(None)
            self._required = None
        logger.info("Required channel %s removed", channel_id)
        return True

    def _write(self, channel_id: Optional[str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with open(tmp, "w") as f:
                yaml.safe_dump({"required_channel": channel_id}, f, default_flow_style=False)
            os.replace(tmp, self._path)
        except OSError as e:
            raise ChannelSettingsError(f"Failed to save {self._path}: {e}") from e
