"""Pydantic request/response schemas for the Members API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class UpdateFieldRequest(BaseModel):
    key: str = Field(min_length=1, max_length=100)
    value: Any = None


class UpdatePresenceRequest(BaseModel):
    online: bool
    mode: int = Field(default=0, ge=0)
    last: datetime | None = None


class UpdatePhotoRequest(BaseModel):
    path: str = Field(min_length=1, max_length=500)
    kind: str  # "photo" or "cover"


class AddMemberReactionRequest(BaseModel):
    polarity: str  # "upvote" or "downvote"


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReceivedReactionSchema(BaseModel):
    author: str
    type: int


class PublicMemberResponse(BaseModel):
    member_id: str
    username: str
    name: str | None = None
    specialty: str | None = None
    offer: str | None = None
    photo: str | None = None
    cover: str | None = None
    stats: dict | None = None
    online: dict | None = None
    reactions: list[ReceivedReactionSchema] = []


class StatusResponse(BaseModel):
    status: str = "ok"
