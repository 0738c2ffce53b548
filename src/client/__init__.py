"""Turnkeeper Python Client Library."""

from .client import TurnkeeperClient
from .exceptions import CooldownError, TransportError, TurnkeeperAPIError, TurnkeeperClientError
from .transport import Transport

__all__ = [
    "TurnkeeperClient", "Transport",
    "TurnkeeperClientError", "TransportError", "TurnkeeperAPIError", "CooldownError",
]

__version__ = "0.1.0"
