"""Two-party session model.

A Session is created only by :class:`~src.lobby.registry.SessionRegistry`,
which hands it the registry-wide lock, the clock, and the hooks it calls
when the turn passes or the session ends. State only ever moves from
ACTIVE to ENDED.
"""
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Callable, Hashable, Optional

if TYPE_CHECKING:
    from src.lobby.scheduler import Watch
    from src.lobby.turns import TurnPicker

DEFAULT_TIME_LIMIT = 300.0

Clock = Callable[[], float]


class SessionState(Enum):
    ACTIVE = "active"
    ENDED = "ended"


class EndReason(Enum):
    """Why a session ended."""

    MANUAL = "manual"
    TIMEOUT = "timeout"
    SHUTDOWN = "shutdown"


@dataclass(frozen=True)
class SessionOutcome:
    """Result recorded by the call that ended the session.

    ``winner`` is None when nobody won (timeouts, draws, abandoned games).
    """

    reason: EndReason
    winner: Optional[Hashable] = None
    ended_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Session:
    """An active interaction between two participants with an alternating turn."""

    def __init__(
        self,
        participant_a: Hashable,
        participant_b: Hashable,
        *,
        lock: threading.RLock,
        turn_picker: "TurnPicker",
        time_limit: float = DEFAULT_TIME_LIMIT,
        clock: Clock = time.monotonic,
        on_turn: Optional[Callable[["Session"], None]] = None,
        on_end: Optional[Callable[["Session"], None]] = None,
    ) -> None:
        if participant_a == participant_b:
            raise ValueError("A session needs two distinct participants")
        if time_limit <= 0:
            raise ValueError("time_limit must be positive")
        self._session_id = str(uuid.uuid4())
        self._a = participant_a
        self._b = participant_b
        self._lock = lock
        self._clock = clock
        self._time_limit = float(time_limit)
        self._on_turn = on_turn
        self._on_end = on_end
        self._state = SessionState.ACTIVE
        self._outcome: Optional[SessionOutcome] = None
        self._watch: Optional["Watch"] = None
        self._started_at = datetime.now(timezone.utc)
        self._started_mono = clock()
        self._starting_turn = turn_picker.pick(participant_a, participant_b)
        if self._starting_turn not in (participant_a, participant_b):
            raise ValueError("Turn picker returned a non-participant")
        self._turn_holder = self._starting_turn
        self._turns_taken = 0

    def __repr__(self) -> str:
        return (
            f"Session(id={self._session_id!r}, participants=({self._a!r}, {self._b!r}), "
            f"turn={self._turn_holder!r}, state={self._state.value})"
        )

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def participant_a(self) -> Hashable:
        return self._a

    @property
    def participant_b(self) -> Hashable:
        return self._b

    @property
    def participants(self) -> tuple[Hashable, Hashable]:
        return (self._a, self._b)

    @property
    def started_at(self) -> datetime:
        return self._started_at

    @property
    def time_limit(self) -> float:
        return self._time_limit

    @property
    def deadline(self) -> float:
        """Clock reading at which the session expires."""
        return self._started_mono + self._time_limit

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def outcome(self) -> Optional[SessionOutcome]:
        return self._outcome

    @property
    def starting_turn(self) -> Hashable:
        return self._starting_turn

    @property
    def turns_taken(self) -> int:
        return self._turns_taken

    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    def current_turn(self) -> Hashable:
        with self._lock:
            return self._turn_holder

    def is_participant(self, identity: Hashable) -> bool:
        return identity == self._a or identity == self._b

    def is_turn(self, identity: Hashable) -> bool:
        with self._lock:
            return self.is_active() and identity == self._turn_holder

    def opponent_of(self, identity: Hashable) -> Hashable:
        if identity == self._a:
            return self._b
        if identity == self._b:
            return self._a
        raise ValueError(f"{identity!r} is not a participant")

    def attach_watch(self, watch: "Watch") -> None:
        with self._lock:
            if self._watch is not None:
                raise RuntimeError("Session already has an expiration watch")
            self._watch = watch

    def advance_turn(self) -> None:
        """Pass the turn to the other participant.

        Does nothing once the session has ended.
        """
        with self._lock:
            if not self.is_active():
                return
            self._flip()

    def take_turn(self, identity: Hashable) -> bool:
        """Advance the turn only if ``identity`` currently holds it.

        Returns False without changing anything when the session has ended
        or it is not ``identity``'s turn.
        """
        with self._lock:
            if not self.is_active() or identity != self._turn_holder:
                return False
            self._flip()
            return True

    def end(self, reason: EndReason, winner: Optional[Hashable] = None) -> bool:
        """End the session.

        Returns True for the single call that performed the transition and
        False for every later call. The expiration watch is canceled by
        whichever call wins.
        """
        if winner is not None and not self.is_participant(winner):
            raise ValueError(f"Winner {winner!r} is not a participant")
        with self._lock:
            if self._state is SessionState.ENDED:
                return False
            self._state = SessionState.ENDED
            self._outcome = SessionOutcome(reason=reason, winner=winner)
            watch, self._watch = self._watch, None
            if watch is not None:
                watch.cancel()
            if self._on_end is not None:
                self._on_end(self)
            return True

    def elapsed(self) -> float:
        return max(0.0, self._clock() - self._started_mono)

    def remaining(self) -> float:
        return max(0.0, self._time_limit - self.elapsed())

    def is_expired(self) -> bool:
        return self.elapsed() >= self._time_limit

    def _flip(self) -> None:
        self._turn_holder = self._b if self._turn_holder == self._a else self._a
        self._turns_taken += 1
        if self._on_turn is not None:
            self._on_turn(self)
