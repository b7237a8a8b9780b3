"""Pydantic request/response schemas for the Market API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitProductRequest(BaseModel):
    market_id: int = Field(ge=0)
    title: str = Field(min_length=1, max_length=200)
    description: str
    price: float = Field(gt=0)
    currency: str | None = Field(default=None, max_length=3)
    photos: list[str] | None = None


class AddCommentRequest(BaseModel):
    body: str = Field(min_length=1, max_length=2000)


class AddReactionRequest(BaseModel):
    polarity: str  # "upvote" or "downvote"


class RecordPurchaseRequest(BaseModel):
    user_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class CommentIdResponse(BaseModel):
    comment_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class VerificationResponse(BaseModel):
    verified: bool


class CommentSchema(BaseModel):
    comment_id: str
    author_id: str
    body: str
    created_at: datetime


class ProductResponse(BaseModel):
    product_id: str
    seller_id: str
    market_id: int
    title: str
    description: str
    price: float
    currency: str
    photos: list[str]
    status: str
    upvotes: int
    downvotes: int
    buyer_count: int
    comments: list[CommentSchema]
    created_at: datetime | None = None
    approved_at: datetime | None = None
