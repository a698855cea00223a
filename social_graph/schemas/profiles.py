"""Schemas for profile endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ProfileCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    expertise: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)
    past_experience: list[str] = Field(default_factory=list)
    gender: str | None = Field(default=None, max_length=50)


class ProfileUpdateRequest(BaseModel):
    """Editable descriptive fields. Follow arrays are not editable here."""

    name: str | None = Field(default=None, min_length=1, max_length=150)
    expertise: list[str] | None = None
    interests: list[str] | None = None
    past_experience: list[str] | None = None
    gender: str | None = Field(default=None, max_length=50)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    name: str
    expertise: list[str]
    interests: list[str]
    past_experience: list[str]
    gender: str | None = None
    verification_status: Literal["verified", "unverified"]
    followers: list[UUID]
    following: list[UUID]
    created_at: datetime
    updated_at: datetime


__all__ = ["ProfileCreateRequest", "ProfileUpdateRequest", "ProfileResponse"]
