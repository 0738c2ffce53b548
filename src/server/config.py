"""Server configuration."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import os

from src.lobby.models import DEFAULT_TIME_LIMIT
from src.lobby.scheduler import DEFAULT_TICK_INTERVAL

logger = logging.getLogger(__name__)

_RECOGNISED_BOOL_VALUES = frozenset(
    ("1", "true", "yes", "0", "false", "no")
)


@dataclass(frozen=True)
class SessionConfig:
    time_limit: float = DEFAULT_TIME_LIMIT
    tick_interval: float = DEFAULT_TICK_INTERVAL
    turn_seed: Optional[int] = None


@dataclass(frozen=True)
class CooldownConfig:
    """Per-command, per-user cooldown. ``seconds=0`` disables it."""

    seconds: float = 3.0


@dataclass(frozen=True)
class NotifyConfig:
    """Where lifecycle notifications are delivered.

    With no ``webhook_url`` notifications are only written to the log.
    """

    webhook_url: str = ""
    timeout: float = 5.0
    queue_size: int = 1000


@dataclass(frozen=True)
class ChannelConfig:
    """Required-channel store and the secret guarding its admin endpoints.

    An empty ``admin_secret`` rejects every admin call.
    """

    channel_file: Path = field(default_factory=lambda: Path("data/channel.yaml"))
    admin_secret: str = ""


@dataclass(frozen=True)
class ServerConfig:
    session: SessionConfig = field(default_factory=SessionConfig)
    cooldown: CooldownConfig = field(default_factory=CooldownConfig)
    notify: NotifyConfig = field(default_factory=NotifyConfig)
    channel: ChannelConfig = field(default_factory=ChannelConfig)
    version: str = "0.1.0"


def _parse_bool(value: str, default: bool) -> bool:
    """Parse a boolean environment variable with explicit default.

    Recognises ``true/1/yes`` and ``false/0/no`` (case-insensitive).
    Returns *default* when the value is empty or unset.
    Logs a warning and returns *default* for unrecognised values
    (e.g. typos like ``ture``).
    """
    if not value:
        return default
    normalised = value.lower()
    if normalised not in _RECOGNISED_BOOL_VALUES:
        logger.warning(
            "Unrecognised boolean value %r, using default %s. "
            "Expected one of: true/1/yes or false/0/no.",
            value,
            default,
        )
        return default
    return normalised in ("1", "true", "yes")


def load_config_from_env() -> ServerConfig:
    time_limit = float(os.environ.get("SESSION_TIME_LIMIT", str(DEFAULT_TIME_LIMIT)))
    if time_limit <= 0:
        raise ValueError("SESSION_TIME_LIMIT must be positive")
    tick_interval = float(os.environ.get("SESSION_TICK_INTERVAL", str(DEFAULT_TICK_INTERVAL)))
    if tick_interval <= 0:
        raise ValueError("SESSION_TICK_INTERVAL must be positive")
    if tick_interval > time_limit:
        logger.warning(
            "SESSION_TICK_INTERVAL (%s) exceeds SESSION_TIME_LIMIT (%s); "
            "sessions may expire up to one tick late.",
            tick_interval,
            time_limit,
        )

    seed_raw = os.environ.get("TURN_SEED")
    turn_seed = int(seed_raw) if seed_raw else None

    cooldown_enabled = _parse_bool(os.environ.get("COOLDOWN_ENABLED", ""), default=True)
    cooldown_seconds = float(os.environ.get("COOLDOWN_SECONDS", "3")) if cooldown_enabled else 0.0

    queue_size = int(os.environ.get("NOTIFY_QUEUE_SIZE", "1000"))
    if queue_size <= 0:
        raise ValueError("NOTIFY_QUEUE_SIZE must be positive")

    admin_secret = os.environ.get("ADMIN_SECRET", "")
    if not admin_secret:
        logger.warning(
            "No ADMIN_SECRET set -- channel configuration endpoints will "
            "reject every request."
        )

    return ServerConfig(
        session=SessionConfig(
            time_limit=time_limit,
            tick_interval=tick_interval,
            turn_seed=turn_seed,
        ),
        cooldown=CooldownConfig(seconds=max(0.0, cooldown_seconds)),
        notify=NotifyConfig(
            webhook_url=os.environ.get("NOTIFY_WEBHOOK_URL", ""),
            timeout=float(os.environ.get("NOTIFY_TIMEOUT", "5.0")),
            queue_size=queue_size,
        ),
        channel=ChannelConfig(
            channel_file=Path(os.environ.get("CHANNEL_FILE", "data/channel.yaml")),
            admin_secret=admin_secret,
        ),
    )
