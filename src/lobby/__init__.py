"""Invite and session lifecycle for two-party, turn-based play."""
from src.lobby.errors import (
    AlreadyInSessionError,
    DuplicateInviteError,
    InviterNowBusyError,
    LobbyError,
    NoPendingInviteError,
    SelfInviteError,
)
from src.lobby.events import EventSink, SessionAction, SessionEvent
from src.lobby.ledger import InviteLedger
from src.lobby.models import (
    DEFAULT_TIME_LIMIT,
    EndReason,
    Invite,
    Session,
    SessionOutcome,
    SessionState,
)
from src.lobby.registry import SessionRegistry
from src.lobby.scheduler import DEFAULT_TICK_INTERVAL, TimeoutScheduler, Watch
from src.lobby.turns import RandomTurnPicker, TurnPicker

__all__ = [
    "LobbyError", "SelfInviteError", "AlreadyInSessionError", "DuplicateInviteError",
    "NoPendingInviteError", "InviterNowBusyError",
    "EventSink", "SessionAction", "SessionEvent",
    "InviteLedger", "SessionRegistry",
    "DEFAULT_TIME_LIMIT", "EndReason", "Invite", "Session", "SessionOutcome", "SessionState",
    "DEFAULT_TICK_INTERVAL", "TimeoutScheduler", "Watch",
    "RandomTurnPicker", "TurnPicker",
]
