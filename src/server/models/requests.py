"""Request models for API endpoints."""
from typing import Annotated, Optional
from pydantic import BaseModel, Field, field_validator
import re

USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_.:-]{1,64}$")


def _validate_id(v: str) -> str:
    if not USER_ID_PATTERN.match(v):
        raise ValueError("IDs must be 1-64 characters of letters, digits, '_', '.', ':' or '-'")
    return v


class InviteRequest(BaseModel):
    invitee_id: Annotated[str, Field()]

    @field_validator("invitee_id")
    @classmethod
    def validate_invitee(cls, v: str) -> str:
        return _validate_id(v)


class CancelRequest(BaseModel):
    invitee_id: Optional[str] = None

    @field_validator("invitee_id")
    @classmethod
    def validate_invitee(cls, v: Optional[str]) -> Optional[str]:
        return _validate_id(v) if v is not None else v


class MoveRequest(BaseModel):
    content: Annotated[Optional[str], Field(max_length=4000)] = None


class EndRequest(BaseModel):
    winner_id: Optional[str] = None

    @field_validator("winner_id")
    @classmethod
    def validate_winner(cls, v: Optional[str]) -> Optional[str]:
        return _validate_id(v) if v is not None else v


class ChannelRequest(BaseModel):
    channel_id: Annotated[str, Field()]

    @field_validator("channel_id")
    @classmethod
    def validate_channel(cls, v: str) -> str:
        return _validate_id(v)
