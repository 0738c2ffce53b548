"""Expected, caller-facing conditions raised by the lobby core."""
from typing import Any, Hashable, Optional


class LobbyError(Exception):
    """Base class for invite and session lifecycle errors."""

    error_code: str = "LOBBY_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class SelfInviteError(LobbyError):
    error_code = "SELF_INVITE"

    def __init__(self, identity: Hashable) -> None:
        super().__init__("Cannot invite yourself", {"identity": str(identity)})
        self.identity = identity


class AlreadyInSessionError(LobbyError):
    """One of the parties is already a member of an active session."""

    error_code = "ALREADY_IN_SESSION"

    def __init__(self, identity: Hashable) -> None:
        super().__init__(f"{identity} is already in a session", {"identity": str(identity)})
        self.identity = identity


class DuplicateInviteError(LobbyError):
    error_code = "DUPLICATE_INVITE"

    def __init__(self, invitee: Hashable, inviter: Hashable) -> None:
        super().__init__(
            f"{invitee} already has a pending invite",
            {"invitee": str(invitee), "inviter": str(inviter)},
        )
        self.invitee = invitee
        self.inviter = inviter


class NoPendingInviteError(LobbyError):
    error_code = "NO_PENDING_INVITE"

    def __init__(self, identity: Hashable) -> None:
        super().__init__(f"No pending invite for {identity}", {"identity": str(identity)})
        self.identity = identity


class InviterNowBusyError(LobbyError):
    """The inviter joined another session between invite and accept."""

    error_code = "INVITER_NOW_BUSY"

    def __init__(self, inviter: Hashable) -> None:
        super().__init__(
            f"{inviter} is already in a session, wait until it is finished",
            {"inviter": str(inviter)},
        )
        self.inviter = inviter
