"""Lifecycle events emitted by the registry after each committed transition.

Delivery is fire-and-forget: an event sink must not block and whatever it
raises is logged and dropped by the registry.

A Session keeps changing after its event is queued, so events carrying a
session also carry the turn holder and state as they were at emit time.
Renderers read those fields, never the live session.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Hashable, Optional

from src.lobby.models import Invite, Session, SessionOutcome, SessionState


class SessionAction(Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELED = "canceled"
    TURN_PASSED = "turn_passed"
    ENDED = "ended"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class SessionEvent:
    action: SessionAction
    invite: Optional[Invite] = None
    session: Optional[Session] = None
    outcome: Optional[SessionOutcome] = None
    turn_holder: Optional[Hashable] = None
    state: Optional[SessionState] = None

    @classmethod
    def for_session(cls, action: SessionAction, session: Session, **kwargs) -> "SessionEvent":
        """Build an event that snapshots ``session``'s turn holder and state.

        Call with the session lock held so the snapshot matches the
        transition being announced.
        """
        return cls(
            action=action,
            session=session,
            turn_holder=session.current_turn(),
            state=session.state,
            **kwargs,
        )


EventSink = Callable[[SessionEvent], None]
