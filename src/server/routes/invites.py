"""Invite command endpoints: invite, accept, decline, cancel."""
import logging
from typing import Optional

from fastapi import APIRouter, Header, status

from src.lobby.registry import SessionRegistry
from src.server.channel import ChannelResolver
from src.server.models.requests import CancelRequest, InviteRequest
from src.server.models.responses import InviteResponse, PendingInvitesResponse, SessionResponse
from src.server.routes._command_helpers import invite_view, require_channel, require_user, session_view

logger = logging.getLogger(__name__)


def create_invite_router(registry: SessionRegistry, channels: ChannelResolver) -> APIRouter:
    """Create invite router with injected dependencies.

    Lobby errors raised by the registry propagate to the app's exception
    handlers, which map them to structured error responses.
    """
    router = APIRouter(prefix="/invites", tags=["invites"])

    @router.post("", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
    async def invite(
        body: InviteRequest,
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> InviteResponse:
        """Invite another user to a session."""
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        pending = registry.invite_player(user_id, body.invitee_id)
        return InviteResponse(status="pending", invite=invite_view(pending))

    @router.post("/accept", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
    async def accept(
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> SessionResponse:
        """Accept the caller's pending invite and start the session."""
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        session = registry.accept_invite(user_id)
        return SessionResponse(status="active", session=session_view(session))

    @router.post("/decline", response_model=InviteResponse)
    async def decline(
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> InviteResponse:
        """Decline the caller's pending invite."""
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        declined = registry.decline_invite(user_id)
        return InviteResponse(status="declined", invite=invite_view(declined))

    @router.post("/cancel", response_model=InviteResponse)
    async def cancel(
        body: Optional[CancelRequest] = None,
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> InviteResponse:
        """Withdraw an invite the caller sent.

        Without ``invitee_id`` the caller's most recent invite is withdrawn.
        """
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        invitee_id = body.invitee_id if body is not None else None
        canceled = registry.cancel_invite(user_id, invitee_id)
        return InviteResponse(status="canceled", invite=invite_view(canceled))

    @router.get("/pending", response_model=PendingInvitesResponse)
    async def pending(x_user_id: Optional[str] = Header(default=None)) -> PendingInvitesResponse:
        """List the invite addressed to the caller and the invites they sent."""
        user_id = require_user(x_user_id)
        incoming = registry.pending_for(user_id)
        return PendingInvitesResponse(
            incoming=invite_view(incoming) if incoming is not None else None,
            outgoing=[invite_view(i) for i in registry.outgoing_from(user_id)],
        )

    return router
