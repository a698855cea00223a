"""Schemas for friend requests and friend listings."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FriendSummary(BaseModel):
    id: UUID = Field(..., description="Friend user ID")
    username: str


class FriendRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    sender_id: UUID
    recipient_id: UUID
    status: Literal["pending"] = "pending"
    created_at: datetime
    sender_username: str | None = None
    recipient_username: str | None = None


class SendFriendRequestResponse(BaseModel):
    status: Literal["pending", "accepted"]
    msg: str
    request: FriendRequestResponse | None = None
    friend: FriendSummary | None = None


class MessageResponse(BaseModel):
    msg: str


__all__ = [
    "FriendSummary",
    "FriendRequestResponse",
    "SendFriendRequestResponse",
    "MessageResponse",
]
