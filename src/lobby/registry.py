"""Process-wide authority over invites and active sessions."""
import logging
import threading
import time
from functools import partial
from typing import Callable, Hashable, Optional

from src.lobby.errors import AlreadyInSessionError, InviterNowBusyError, NoPendingInviteError
from src.lobby.events import EventSink, SessionAction, SessionEvent
from src.lobby.ledger import InviteLedger
from src.lobby.models import DEFAULT_TIME_LIMIT, EndReason, Invite, Session
from src.lobby.scheduler import TimeoutScheduler
from src.lobby.turns import RandomTurnPicker, TurnPicker

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Maps identities to their active session and owns the invite ledger.

    Enforces one active session per participant. Every mutation runs under
    a single re-entrant lock that is shared with the ledger and with every
    Session the registry creates. Lifecycle events go to ``on_event`` after
    the transition is committed; the sink must not block.
    """

    def __init__(
        self,
        time_limit: float = DEFAULT_TIME_LIMIT,
        scheduler: Optional[TimeoutScheduler] = None,
        turn_picker: Optional[TurnPicker] = None,
        clock: Callable[[], float] = time.monotonic,
        on_event: Optional[EventSink] = None,
    ) -> None:
        if time_limit <= 0:
            raise ValueError("time_limit must be positive")
        self._lock = threading.RLock()
        self._time_limit = float(time_limit)
        self._clock = clock
        self._scheduler = scheduler or TimeoutScheduler(clock=clock)
        self._turn_picker = turn_picker or RandomTurnPicker()
        self._on_event = on_event
        self._by_identity: dict[Hashable, Session] = {}
        self._by_id: dict[str, Session] = {}
        self._ledger = InviteLedger(is_busy=self.is_active, lock=self._lock)

    @property
    def time_limit(self) -> float:
        return self._time_limit

    @property
    def scheduler(self) -> TimeoutScheduler:
        return self._scheduler

    def is_active(self, identity: Hashable) -> bool:
        with self._lock:
            return identity in self._by_identity

    def session_of(self, identity: Hashable) -> Optional[Session]:
        with self._lock:
            return self._by_identity.get(identity)

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._by_id.get(session_id)

    def active_sessions(self) -> list[Session]:
        with self._lock:
            return list(self._by_id.values())

    def pending_invites(self) -> list[Invite]:
        return self._ledger.snapshot()

    def pending_count(self) -> int:
        return len(self._ledger)

    def pending_for(self, invitee: Hashable) -> Optional[Invite]:
        """The invite waiting on ``invitee``, if any."""
        return self._ledger.resolve(invitee)

    def outgoing_from(self, inviter: Hashable) -> list[Invite]:
        """Invites sent by ``inviter`` that are still pending, oldest first."""
        return self._ledger.outgoing(inviter)

    def invite_player(self, inviter: Hashable, invitee: Hashable) -> Invite:
        with self._lock:
            invite = self._ledger.invite(inviter, invitee)
            logger.info("Invite issued: %s -> %s", inviter, invitee)
            self._emit(SessionAction.INVITED, invite=invite)
        return invite

    def accept_invite(self, invitee: Hashable) -> Session:
        """Turn the pending invite for ``invitee`` into an active session.

        Both parties are re-validated here: the inviter may have started
        another session after sending the invite.
        """
        with self._lock:
            invite = self._ledger.take(invitee)
            if invite is None:
                raise NoPendingInviteError(invitee)
            if self.is_active(invite.inviter):
                logger.info("Accept rejected: inviter %s is now busy", invite.inviter)
                raise InviterNowBusyError(invite.inviter)
            if self.is_active(invitee):
                raise AlreadyInSessionError(invitee)

            session = Session(
                invite.inviter,
                invitee,
                lock=self._lock,
                turn_picker=self._turn_picker,
                time_limit=self._time_limit,
                clock=self._clock,
                on_turn=self._turn_passed,
                on_end=self._release,
            )
            self._by_identity[invite.inviter] = session
            self._by_identity[invitee] = session
            self._by_id[session.session_id] = session
            session.attach_watch(
                self._scheduler.arm(
                    session.session_id,
                    session.deadline,
                    partial(self.end_session, session, EndReason.TIMEOUT),
                )
            )
            stale = self._ledger.purge(invite.inviter) + self._ledger.purge(invitee)
            logger.info(
                "Session %s started: %s vs %s, %s moves first",
                session.session_id, invite.inviter, invitee, session.starting_turn,
            )
            self._emit_session(SessionAction.ACCEPTED, session, invite=invite)
            for dropped in stale:
                self._emit(SessionAction.CANCELED, invite=dropped)
        return session

    def decline_invite(self, invitee: Hashable) -> Invite:
        with self._lock:
            invite = self._ledger.take(invitee)
            if invite is None:
                raise NoPendingInviteError(invitee)
            logger.info("Invite declined: %s -> %s", invite.inviter, invitee)
            self._emit(SessionAction.DECLINED, invite=invite)
        return invite

    def cancel_invite(self, inviter: Hashable, invitee: Optional[Hashable] = None) -> Invite:
        with self._lock:
            invite = self._ledger.cancel(inviter, invitee)
            if invite is None:
                raise NoPendingInviteError(inviter)
            logger.info("Invite canceled: %s -> %s", inviter, invite.invitee)
            self._emit(SessionAction.CANCELED, invite=invite)
        return invite

    def end_session(
        self, session: Session, reason: EndReason = EndReason.MANUAL, winner: Optional[Hashable] = None,
    ) -> bool:
        """End ``session``. Idempotent.

        Whichever caller wins (manual end, expiration, shutdown) cancels the
        watch, deregisters both participants and emits the notification;
        every other caller gets False and causes no side effects.
        """
        with self._lock:
            if not session.end(reason, winner):
                return False
            if reason is EndReason.TIMEOUT:
                self._emit_session(SessionAction.TIMED_OUT, session, outcome=session.outcome)
            elif reason is EndReason.MANUAL:
                self._emit_session(SessionAction.ENDED, session, outcome=session.outcome)
        return True

    def close(self) -> int:
        """End every active session and drop all invites."""
        with self._lock:
            sessions = list(self._by_id.values())
            for session in sessions:
                self.end_session(session, EndReason.SHUTDOWN)
            dropped = self._ledger.clear()
        if sessions or dropped:
            logger.info("Registry closed: %d session(s) ended, %d invite(s) dropped", len(sessions), dropped)
        return len(sessions)

    def _release(self, session: Session) -> None:
        for identity in session.participants:
            if self._by_identity.get(identity) is session:
                del self._by_identity[identity]
        self._by_id.pop(session.session_id, None)
        outcome = session.outcome
        logger.info(
            "Session %s ended: reason=%s winner=%s elapsed=%.1fs",
            session.session_id,
            outcome.reason.value if outcome else "unknown",
            outcome.winner if outcome else None,
            session.elapsed(),
        )

    def _turn_passed(self, session: Session) -> None:
        self._emit_session(SessionAction.TURN_PASSED, session)

    def _emit(self, action: SessionAction, **kwargs) -> None:
        if self._on_event is None:
            return
        self._publish(SessionEvent(action=action, **kwargs))

    def _emit_session(self, action: SessionAction, session: Session, **kwargs) -> None:
        # caller holds the lock, so the snapshot matches this transition
        if self._on_event is None:
            return
        self._publish(SessionEvent.for_session(action, session, **kwargs))

    def _publish(self, event: SessionEvent) -> None:
        try:
            self._on_event(event)
        except Exception:
            logger.exception("Event sink failed for %s", event.action.value)
