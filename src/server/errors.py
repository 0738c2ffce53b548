"""Custom exception types for the server."""
from typing import Optional, Any

from src.lobby.errors import LobbyError

# HTTP status for each core lobby error; anything unlisted is a conflict.
LOBBY_ERROR_STATUS: dict[str, int] = {
    "SELF_INVITE": 400,
    "NO_PENDING_INVITE": 404,
    "ALREADY_IN_SESSION": 409,
    "DUPLICATE_INVITE": 409,
    "INVITER_NOW_BUSY": 409,
}


class TurnkeeperError(Exception):
    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotAuthorizedError(TurnkeeperError):
    status_code = 403
    error_code = "NOT_AUTHORIZED"


class MissingIdentityError(TurnkeeperError):
    status_code = 400
    error_code = "MISSING_IDENTITY"


class ChannelNotConfiguredError(TurnkeeperError):
    status_code = 409
    error_code = "CHANNEL_NOT_CONFIGURED"

    def __init__(self) -> None:
        super().__init__(
            "The game is not set up. Ask an admin to configure its channel first."
        )


class WrongChannelError(TurnkeeperError):
    status_code = 403
    error_code = "WRONG_CHANNEL"

    def __init__(self, required_channel: str) -> None:
        super().__init__(
            f"This game only works in channel {required_channel}",
            {"required_channel": required_channel},
        )
        self.required_channel = required_channel


class ChannelConflictError(TurnkeeperError):
    status_code = 409
    error_code = "CHANNEL_CONFLICT"


class CooldownError(TurnkeeperError):
    status_code = 429
    error_code = "COOLDOWN"

    def __init__(self, message: str = "Command is on cooldown", retry_after: Optional[float] = None) -> None:
        details = {"retry_after": retry_after} if retry_after else None
        super().__init__(message, details)
        self.retry_after = retry_after


class NotInSessionError(TurnkeeperError):
    status_code = 404
    error_code = "NOT_IN_SESSION"


class SessionNotFoundError(TurnkeeperError):
    status_code = 404
    error_code = "SESSION_NOT_FOUND"


class NotYourTurnError(TurnkeeperError):
    status_code = 409
    error_code = "NOT_YOUR_TURN"


class InvalidWinnerError(TurnkeeperError):
    status_code = 400
    error_code = "INVALID_WINNER"


def lobby_status(exc: LobbyError) -> int:
    return LOBBY_ERROR_STATUS.get(exc.error_code, 409)
