"""Exception types for the Turnkeeper client library."""
from typing import Any


class TurnkeeperClientError(Exception):
    """Base exception for all client errors."""
    pass


class TransportError(TurnkeeperClientError):
    """Network communication error."""
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TurnkeeperAPIError(TurnkeeperClientError):
    """The server rejected a command with a structured error."""
    def __init__(self, message: str, status_code: int, error_code: str = "INTERNAL_ERROR",
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class CooldownError(TurnkeeperAPIError):
    """The same command was repeated too quickly."""
    def __init__(self, message: str, retry_after: float | None = None,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message, 429, "COOLDOWN", details)
        self.retry_after = retry_after
