"""SQLAlchemy ORM model for application users (the identity collaborator)."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from social_graph.database import Base
from .friend_request import FriendRequest
from .friendship import Friendship
from .profile import Profile


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    friendships_a = relationship(
        "Friendship",
        foreign_keys="Friendship.user_a_id",
        back_populates="user_a",
        cascade="all, delete-orphan",
    )
    friendships_b = relationship(
        "Friendship",
        foreign_keys="Friendship.user_b_id",
        back_populates="user_b",
        cascade="all, delete-orphan",
    )
    friend_requests_sent = relationship(
        "FriendRequest",
        foreign_keys="FriendRequest.sender_id",
        back_populates="sender",
        cascade="all, delete-orphan",
    )
    friend_requests_received = relationship(
        "FriendRequest",
        foreign_keys="FriendRequest.recipient_id",
        back_populates="recipient",
        cascade="all, delete-orphan",
    )


__all__ = ["User"]
