"""Response models for API endpoints."""
from typing import Annotated, Literal, Optional, Any
from pydantic import BaseModel, Field
from src.server.models.common import InviteView, SessionView


class InviteResponse(BaseModel):
    status: Annotated[Literal["pending", "declined", "canceled"], Field()]
    invite: InviteView


class PendingInvitesResponse(BaseModel):
    incoming: Optional[InviteView] = None
    outgoing: Annotated[list[InviteView], Field()]


class SessionResponse(BaseModel):
    status: Annotated[Literal["active", "ended", "already_ended"], Field()]
    session: SessionView


class MoveResponse(BaseModel):
    status: Literal["accepted"] = "accepted"
    session: SessionView


class ChannelResponse(BaseModel):
    required_channel: Optional[str] = None


class HealthResponse(BaseModel):
    status: Annotated[Literal["healthy", "degraded"], Field()]
    version: Annotated[str, Field()]
    timestamp: Annotated[str, Field()]
    active_sessions: Annotated[int, Field(ge=0)]
    pending_invites: Annotated[int, Field(ge=0)]
    armed_watches: Annotated[int, Field(ge=0)]
    notification_backlog: Annotated[int, Field(ge=0)]
    scheduler_running: bool
    message: Optional[str] = None


class ErrorDetail(BaseModel):
    code: Annotated[
        Literal[
            "INVALID_FORMAT",
            "MISSING_IDENTITY",
            "NOT_AUTHORIZED",
            "CHANNEL_NOT_CONFIGURED",
            "WRONG_CHANNEL",
            "CHANNEL_CONFLICT",
            "COOLDOWN",
            "SELF_INVITE",
            "ALREADY_IN_SESSION",
            "DUPLICATE_INVITE",
            "NO_PENDING_INVITE",
            "INVITER_NOW_BUSY",
            "NOT_IN_SESSION",
            "SESSION_NOT_FOUND",
            "NOT_YOUR_TURN",
            "INVALID_WINNER",
            "INTERNAL_ERROR",
        ],
        Field(),
    ]
    message: Annotated[str, Field()]
    details: Optional[dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
