"""Tests for the Session model."""
import threading

import pytest

from src.lobby.models import EndReason, Session, SessionState
from src.lobby.scheduler import TimeoutScheduler


def _session(clock, turn_picker, **kwargs) -> Session:
    return Session("alice", "bob", lock=threading.RLock(), turn_picker=turn_picker,
                   time_limit=kwargs.pop("time_limit", 300), clock=clock, **kwargs)


class TestSessionBasics:
    """Tests for construction and queries."""

    def test_starts_active_with_picked_turn(self, clock, turn_picker):
        """A new session is active and the picker chose the first turn."""
        session = _session(clock, turn_picker)
        assert session.state is SessionState.ACTIVE
        assert session.is_active()
        assert session.current_turn() == "alice"
        assert session.starting_turn == "alice"
        assert session.turns_taken == 0
        assert session.outcome is None

    def test_rejects_identical_participants(self, clock, turn_picker):
        """Both participants must be distinct."""
        with pytest.raises(ValueError):
            Session("alice", "alice", lock=threading.RLock(), turn_picker=turn_picker, clock=clock)

    def test_rejects_non_positive_time_limit(self, clock, turn_picker):
        """The time limit must be positive."""
        with pytest.raises(ValueError):
            _session(clock, turn_picker, time_limit=0)

    def test_session_ids_are_unique(self, clock, turn_picker):
        """Every session gets its own ID."""
        assert _session(clock, turn_picker).session_id != _session(clock, turn_picker).session_id

    def test_opponent_of(self, clock, turn_picker):
        """opponent_of returns the other participant."""
        session = _session(clock, turn_picker)
        assert session.opponent_of("alice") == "bob"
        assert session.opponent_of("bob") == "alice"
        with pytest.raises(ValueError):
            session.opponent_of("carol")

    def test_elapsed_and_remaining(self, clock, turn_picker):
        """Timing follows the injected clock."""
        session = _session(clock, turn_picker, time_limit=10)
        clock.advance(4)
        assert session.elapsed() == pytest.approx(4)
        assert session.remaining() == pytest.approx(6)
        assert not session.is_expired()
        clock.advance(6)
        assert session.is_expired()
        assert session.remaining() == 0
        assert session.deadline == pytest.approx(1010)


class TestTurns:
    """Tests for turn alternation."""

    def test_advance_turn_alternates(self, clock, turn_picker):
        """Each advance hands the turn to the other participant."""
        session = _session(clock, turn_picker)
        session.advance_turn()
        assert session.current_turn() == "bob"
        session.advance_turn()
        assert session.current_turn() == "alice"
        assert session.turns_taken == 2

    def test_take_turn_only_for_holder(self, clock, turn_picker):
        """take_turn advances only when called by the turn holder."""
        session = _session(clock, turn_picker)
        assert session.take_turn("bob") is False
        assert session.current_turn() == "alice"
        assert session.take_turn("alice") is True
        assert session.current_turn() == "bob"
        assert session.is_turn("bob")

    def test_on_turn_hook_called(self, clock, turn_picker):
        """The turn hook runs once per turn change."""
        seen = []
        session = _session(clock, turn_picker, on_turn=lambda s: seen.append(s.current_turn()))
        session.advance_turn()
        session.take_turn("bob")
        assert seen == ["bob", "alice"]

    def test_advance_after_end_is_noop(self, clock, turn_picker):
        """The turn is frozen once the session has ended."""
        session = _session(clock, turn_picker)
        session.end(EndReason.MANUAL)
        session.advance_turn()
        assert session.current_turn() == "alice"
        assert session.take_turn("alice") is False
        assert not session.is_turn("alice")


class TestEnd:
    """Tests for ending a session."""

    def test_end_records_outcome(self, clock, turn_picker):
        """The first end call records reason and winner."""
        session = _session(clock, turn_picker)
        assert session.end(EndReason.MANUAL, winner="bob") is True
        assert session.state is SessionState.ENDED
        assert session.outcome.reason is EndReason.MANUAL
        assert session.outcome.winner == "bob"

    def test_end_is_idempotent(self, clock, turn_picker):
        """Later end calls change nothing and return False."""
        ended = []
        session = _session(clock, turn_picker, on_end=ended.append)
        assert session.end(EndReason.TIMEOUT) is True
        assert session.end(EndReason.MANUAL, winner="alice") is False
        assert session.outcome.reason is EndReason.TIMEOUT
        assert session.outcome.winner is None
        assert ended == [session]

    def test_winner_must_be_participant(self, clock, turn_picker):
        """Naming an outsider as winner is rejected without ending."""
        session = _session(clock, turn_picker)
        with pytest.raises(ValueError):
            session.end(EndReason.MANUAL, winner="carol")
        assert session.is_active()

    def test_end_cancels_watch(self, clock, turn_picker):
        """Ending disarms the attached expiration watch."""
        scheduler = TimeoutScheduler(clock=clock)
        session = _session(clock, turn_picker)
        watch = scheduler.arm(session.session_id, session.deadline, lambda: None)
        session.attach_watch(watch)
        session.end(EndReason.MANUAL)
        assert not watch.armed
        assert scheduler.pending == 0

    def test_only_one_watch(self, clock, turn_picker):
        """A second watch cannot be attached."""
        scheduler = TimeoutScheduler(clock=clock)
        session = _session(clock, turn_picker)
        session.attach_watch(scheduler.arm("x", 1.0, lambda: None))
        with pytest.raises(RuntimeError):
            session.attach_watch(scheduler.arm("y", 1.0, lambda: None))
