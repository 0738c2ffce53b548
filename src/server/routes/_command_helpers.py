"""Helper functions shared by the command endpoints."""
from typing import Optional

from src.lobby.models import Invite, Session
from src.server.channel import ChannelResolver
from src.server.errors import ChannelNotConfiguredError, MissingIdentityError, WrongChannelError
from src.server.models.common import InviteView, SessionView
from src.server.models.requests import USER_ID_PATTERN


def _iso(dt) -> str:
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def require_user(x_user_id: Optional[str]) -> str:
    """Return the acting user's ID from the X-User-ID header.

    Raises:
        MissingIdentityError: If the header is absent or malformed.
    """
    if not x_user_id:
        raise MissingIdentityError("X-User-ID header is required")
    if not USER_ID_PATTERN.match(x_user_id):
        raise MissingIdentityError(f"Invalid X-User-ID header: {x_user_id!r}")
    return x_user_id


def require_channel(channels: ChannelResolver, channel_id: Optional[str]) -> None:
    """Reject commands issued outside the configured channel.

    Raises:
        ChannelNotConfiguredError: If no channel has been configured yet.
        WrongChannelError: If ``channel_id`` is not the configured channel.
    """
    required = channels.required_channel()
    if required is None:
        raise ChannelNotConfiguredError()
    if not channels.is_correct_channel(channel_id):
        raise WrongChannelError(required)


def invite_view(invite: Invite) -> InviteView:
    return InviteView(
        inviter_id=str(invite.inviter),
        invitee_id=str(invite.invitee),
        created_at=_iso(invite.created_at),
    )


def session_view(session: Session) -> SessionView:
    outcome = session.outcome
    return SessionView(
        session_id=session.session_id,
        participants=[str(p) for p in session.participants],
        turn=str(session.current_turn()),
        starting_turn=str(session.starting_turn),
        turns_taken=session.turns_taken,
        state=session.state.value,
        started_at=_iso(session.started_at),
        time_limit=session.time_limit,
        elapsed=round(session.elapsed(), 3),
        remaining=round(session.remaining(), 3),
        end_reason=outcome.reason.value if outcome else None,
        winner_id=str(outcome.winner) if outcome and outcome.winner is not None else None,
    )
