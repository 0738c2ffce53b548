"""CLI commands."""

from . import (
    accept,
    cancel,
    channel,
    decline,
    end,
    init,
    invite,
    move,
    status,
)

__all__ = [
    "accept",
    "cancel",
    "channel",
    "decline",
    "end",
    "init",
    "invite",
    "move",
    "status",
]
