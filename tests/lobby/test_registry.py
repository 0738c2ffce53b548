"""Tests for the session registry."""
import pytest

from src.lobby.errors import (
    AlreadyInSessionError,
    DuplicateInviteError,
    InviterNowBusyError,
    NoPendingInviteError,
    SelfInviteError,
)
from src.lobby.events import SessionAction
from src.lobby.models import EndReason, SessionState
from src.lobby.registry import SessionRegistry


def _actions(events) -> list[SessionAction]:
    return [e.action for e in events]


class TestInvites:
    """Tests for invite, decline and cancel."""

    def test_invite_emits_event(self, registry, events):
        """A successful invite is recorded and announced."""
        invite = registry.invite_player("alice", "bob")
        assert registry.pending_invites() == [invite]
        assert _actions(events) == [SessionAction.INVITED]
        assert events[0].invite is invite

    def test_self_invite(self, registry, events):
        """Self-invites are rejected without an event."""
        with pytest.raises(SelfInviteError):
            registry.invite_player("alice", "alice")
        assert events == []

    def test_duplicate_invite(self, registry):
        """An invitee holds at most one invite."""
        registry.invite_player("alice", "bob")
        with pytest.raises(DuplicateInviteError):
            registry.invite_player("carol", "bob")

    def test_decline(self, registry, events):
        """Declining removes the invite and announces it."""
        registry.invite_player("alice", "bob")
        declined = registry.decline_invite("bob")
        assert declined.inviter == "alice"
        assert registry.pending_invites() == []
        assert _actions(events)[-1] is SessionAction.DECLINED

    def test_decline_without_invite(self, registry):
        """Declining with nothing pending fails."""
        with pytest.raises(NoPendingInviteError):
            registry.decline_invite("bob")

    def test_cancel(self, registry, events):
        """The inviter can withdraw a pending invite."""
        registry.invite_player("alice", "bob")
        canceled = registry.cancel_invite("alice")
        assert canceled.invitee == "bob"
        assert _actions(events)[-1] is SessionAction.CANCELED
        with pytest.raises(NoPendingInviteError):
            registry.cancel_invite("alice")

    def test_pending_queries(self, registry):
        """Pending invites are read through queries that return copies."""
        to_bob = registry.invite_player("alice", "bob")
        to_carol = registry.invite_player("alice", "carol")
        assert registry.pending_for("bob") is to_bob
        assert registry.pending_for("alice") is None
        assert registry.outgoing_from("alice") == [to_bob, to_carol]
        assert registry.pending_count() == 2
        registry.pending_invites().clear()
        registry.outgoing_from("alice").clear()
        assert registry.pending_count() == 2
        assert not hasattr(registry, "invites")


class TestAccept:
    """Tests for accepting invites."""

    def test_accept_starts_session(self, registry, events):
        """Accepting creates an active session with both participants."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        assert session.participants == ("alice", "bob")
        assert session.current_turn() == "alice"
        assert registry.session_of("alice") is session
        assert registry.session_of("bob") is session
        assert registry.get(session.session_id) is session
        assert registry.is_active("alice") and registry.is_active("bob")
        assert registry.scheduler.pending == 1
        assert _actions(events) == [SessionAction.INVITED, SessionAction.ACCEPTED]

    def test_accept_without_invite(self, registry):
        """Accepting with nothing pending fails."""
        with pytest.raises(NoPendingInviteError):
            registry.accept_invite("bob")

    def test_accept_purges_other_invites(self, registry, events):
        """Both participants' other invites are canceled when play starts."""
        registry.invite_player("alice", "bob")
        registry.invite_player("alice", "carol")
        registry.invite_player("dave", "alice")
        registry.invite_player("bob", "erin")
        registry.invite_player("frank", "gina")
        registry.accept_invite("bob")
        assert [(i.inviter, i.invitee) for i in registry.pending_invites()] == [("frank", "gina")]
        canceled = [e.invite.invitee for e in events if e.action is SessionAction.CANCELED]
        assert sorted(canceled) == ["alice", "carol", "erin"]

    def test_busy_players_cannot_be_invited(self, registry):
        """Neither participant of an active session can send or receive invites."""
        registry.invite_player("alice", "bob")
        registry.accept_invite("bob")
        with pytest.raises(AlreadyInSessionError):
            registry.invite_player("carol", "alice")
        with pytest.raises(AlreadyInSessionError):
            registry.invite_player("bob", "carol")

    def test_inviter_now_busy(self, registry, monkeypatch):
        """Accept fails if the inviter started another session meanwhile."""
        registry.invite_player("alice", "bob")
        registry.invite_player("alice", "carol")
        # keep carol's invite alive through alice's first accept
        monkeypatch.setattr(registry._ledger, "purge", lambda identity: [])
        registry.accept_invite("bob")
        with pytest.raises(InviterNowBusyError):
            registry.accept_invite("carol")
        assert registry.pending_for("carol") is None
        assert not registry.is_active("carol")


class TestEndSession:
    """Tests for ending sessions."""

    def _start(self, registry):
        registry.invite_player("alice", "bob")
        return registry.accept_invite("bob")

    def test_manual_end_releases_participants(self, registry, events):
        """Ending deregisters both players and disarms the watch."""
        session = self._start(registry)
        assert registry.end_session(session, EndReason.MANUAL, winner="bob") is True
        assert not registry.is_active("alice")
        assert not registry.is_active("bob")
        assert registry.get(session.session_id) is None
        assert registry.scheduler.pending == 0
        assert events[-1].action is SessionAction.ENDED
        assert events[-1].outcome.winner == "bob"

    def test_end_twice(self, registry, events):
        """The second end is a no-op with no extra event."""
        session = self._start(registry)
        registry.end_session(session)
        count = len(events)
        assert registry.end_session(session) is False
        assert len(events) == count

    def test_players_free_after_end(self, registry):
        """Players can start a new game after the old one ends."""
        session = self._start(registry)
        registry.end_session(session)
        registry.invite_player("bob", "alice")
        assert registry.accept_invite("alice").participants == ("bob", "alice")

    def test_turn_events(self, registry, events):
        """Each turn change is announced."""
        session = self._start(registry)
        session.take_turn("alice")
        assert events[-1].action is SessionAction.TURN_PASSED
        assert events[-1].session is session


class TestExpiration:
    """Tests for timeout-driven expiration."""

    def test_expires_after_time_limit(self, registry, clock, events):
        """A session ends with TIMEOUT on the first tick past its deadline."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        clock.advance(299)
        registry.scheduler.tick()
        assert session.is_active()
        clock.advance(1)
        registry.scheduler.tick()
        assert not session.is_active()
        assert session.outcome.reason is EndReason.TIMEOUT
        assert session.outcome.winner is None
        assert not registry.is_active("alice")
        assert _actions(events).count(SessionAction.TIMED_OUT) == 1

    def test_manual_end_beats_timeout(self, registry, clock, events):
        """A session ended by hand never times out."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        registry.end_session(session, winner="alice")
        clock.advance(1000)
        registry.scheduler.tick()
        assert session.outcome.reason is EndReason.MANUAL
        assert SessionAction.TIMED_OUT not in _actions(events)

    def test_turns_do_not_extend_deadline(self, registry, clock):
        """Playing turns does not reset the time limit."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        clock.advance(200)
        session.take_turn("alice")
        clock.advance(100)
        registry.scheduler.tick()
        assert not session.is_active()


class TestClose:
    """Tests for shutdown."""

    def test_close_ends_everything_quietly(self, registry, events):
        """close ends sessions with SHUTDOWN, drops invites and sends no notifications."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        registry.invite_player("carol", "dave")
        before = len(events)
        assert registry.close() == 1
        assert session.outcome.reason is EndReason.SHUTDOWN
        assert registry.pending_invites() == []
        assert registry.scheduler.pending == 0
        assert len(events) == before

    def test_failing_sink_does_not_break_lifecycle(self, clock, turn_picker):
        """A sink that raises is logged and the transition still happens."""
        def sink(event):
            raise RuntimeError("sink down")

        registry = SessionRegistry(turn_picker=turn_picker, clock=clock, on_event=sink)
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        assert session.is_active()

    def test_time_limit_must_be_positive(self):
        """A zero time limit is rejected."""
        with pytest.raises(ValueError):
            SessionRegistry(time_limit=0)


class TestEventSnapshots:
    """Tests for what session events record at emit time."""

    def test_turn_events_record_each_holder(self, registry, events):
        """Back-to-back moves announce each new holder, not the latest one."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        assert session.take_turn("alice")
        assert session.take_turn("bob")
        turns = [e.turn_holder for e in events if e.action is SessionAction.TURN_PASSED]
        assert turns == ["bob", "alice"]

    def test_accept_event_survives_quick_end(self, registry, events):
        """The accept event keeps the starting turn and ACTIVE state after the session ends."""
        registry.invite_player("alice", "bob")
        session = registry.accept_invite("bob")
        session.take_turn("alice")
        registry.end_session(session)
        accepted = next(e for e in events if e.action is SessionAction.ACCEPTED)
        assert accepted.turn_holder == "alice"
        assert accepted.state is SessionState.ACTIVE
        assert events[-1].state is SessionState.ENDED
