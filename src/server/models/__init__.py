"""Pydantic models for request/response validation."""
from src.server.models.common import InviteView, SessionView
from src.server.models.requests import (
    CancelRequest,
    ChannelRequest,
    EndRequest,
    InviteRequest,
    MoveRequest,
)
from src.server.models.responses import (
    ChannelResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    InviteResponse,
    MoveResponse,
    PendingInvitesResponse,
    SessionResponse,
)

__all__ = [
    "InviteView",
    "SessionView",
    "CancelRequest",
    "ChannelRequest",
    "EndRequest",
    "InviteRequest",
    "MoveRequest",
    "ChannelResponse",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
    "InviteResponse",
    "MoveResponse",
    "PendingInvitesResponse",
    "SessionResponse",
]
