"""Session command endpoints: move, end, status."""
import logging
from typing import Optional

from fastapi import APIRouter, Header

from src.lobby.models import EndReason, Session
from src.lobby.registry import SessionRegistry
from src.server.channel import ChannelResolver
from src.server.errors import InvalidWinnerError, NotInSessionError, NotYourTurnError, SessionNotFoundError
from src.server.models.requests import EndRequest, MoveRequest
from src.server.models.responses import MoveResponse, SessionResponse
from src.server.routes._command_helpers import require_channel, require_user, session_view

logger = logging.getLogger(__name__)


def create_session_router(registry: SessionRegistry, channels: ChannelResolver) -> APIRouter:
    """Create session router with injected dependencies."""
    router = APIRouter(prefix="/sessions", tags=["sessions"])

    def _own_session(user_id: str) -> Session:
        session = registry.session_of(user_id)
        if session is None:
            raise NotInSessionError(f"{user_id} is not in a session", {"user_id": user_id})
        return session

    @router.post("/move", response_model=MoveResponse)
    async def move(
        body: Optional[MoveRequest] = None,
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> MoveResponse:
        """Play the caller's turn and pass it to the opponent."""
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        session = _own_session(user_id)
        if not session.take_turn(user_id):
            if not session.is_active():
                raise NotInSessionError(f"{user_id} is not in a session", {"user_id": user_id})
            raise NotYourTurnError(
                "It is not your turn",
                {"turn": str(session.current_turn())},
            )
        if body is not None and body.content:
            logger.debug("Move by %s in session %s: %s", user_id, session.session_id, body.content)
        return MoveResponse(session=session_view(session))

    @router.post("/end", response_model=SessionResponse)
    async def end(
        body: Optional[EndRequest] = None,
        x_user_id: Optional[str] = Header(default=None),
        x_channel_id: Optional[str] = Header(default=None),
    ) -> SessionResponse:
        """End the caller's session, optionally naming a winner.

        Ending a session that has just expired is not an error: the response
        reports ``already_ended`` with the outcome that was recorded first.
        """
        user_id = require_user(x_user_id)
        require_channel(channels, x_channel_id)
        session = _own_session(user_id)
        winner_id = body.winner_id if body is not None else None
        if winner_id is not None and not session.is_participant(winner_id):
            raise InvalidWinnerError(
                f"{winner_id} is not a participant in this session",
                {"winner_id": winner_id},
            )
        ended = registry.end_session(session, EndReason.MANUAL, winner_id)
        return SessionResponse(
            status="ended" if ended else "already_ended",
            session=session_view(session),
        )

    @router.get("/me", response_model=SessionResponse)
    async def my_session(x_user_id: Optional[str] = Header(default=None)) -> SessionResponse:
        user_id = require_user(x_user_id)
        session = _own_session(user_id)
        return SessionResponse(status=session.state.value, session=session_view(session))

    @router.get("/{session_id}", response_model=SessionResponse)
    async def get_session(session_id: str) -> SessionResponse:
        session = registry.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"No active session {session_id}", {"session_id": session_id})
        return SessionResponse(status=session.state.value, session=session_view(session))

    return router
