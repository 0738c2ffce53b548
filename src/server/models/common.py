"""Common model types shared across requests and responses."""
from typing import Annotated, Literal, Optional
from pydantic import BaseModel, Field


class InviteView(BaseModel):
    inviter_id: Annotated[str, Field()]
    invitee_id: Annotated[str, Field()]
    created_at: Annotated[str, Field()]


class SessionView(BaseModel):
    session_id: Annotated[str, Field()]
    participants: Annotated[list[str], Field(min_length=2, max_length=2)]
    turn: Annotated[str, Field()]
    starting_turn: Annotated[str, Field()]
    turns_taken: Annotated[int, Field(ge=0)]
    state: Annotated[Literal["active", "ended"], Field()]
    started_at: Annotated[str, Field()]
    time_limit: Annotated[float, Field(gt=0)]
    elapsed: Annotated[float, Field(ge=0)]
    remaining: Annotated[float, Field(ge=0)]
    end_reason: Optional[Literal["manual", "timeout", "shutdown"]] = None
    winner_id: Optional[str] = None
