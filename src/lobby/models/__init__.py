"""Lobby data models."""
from src.lobby.models.invite import Invite
from src.lobby.models.session import (
    DEFAULT_TIME_LIMIT,
    EndReason,
    Session,
    SessionOutcome,
    SessionState,
)

__all__ = [
    "DEFAULT_TIME_LIMIT",
    "EndReason",
    "Invite",
    "Session",
    "SessionOutcome",
    "SessionState",
]
