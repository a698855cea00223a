"""ORM model representing pending friend invitations between users.

A row only exists while the invitation is pending: accepting, rejecting or
withdrawing it deletes the row.
"""
from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from social_graph.database import Base


class FriendRequest(Base):
    __tablename__ = "friend_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Canonical ordering of (sender, recipient); see services.friendship_service.canonical_pair
    pair_low_id = Column(UUID(as_uuid=True), nullable=False)
    pair_high_id = Column(UUID(as_uuid=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    sender = relationship("User", foreign_keys=[sender_id], back_populates="friend_requests_sent")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="friend_requests_received")

    __table_args__ = (
        UniqueConstraint("pair_low_id", "pair_high_id", name="uq_friend_request_pair"),
        CheckConstraint("sender_id <> recipient_id", name="ck_friend_request_not_self"),
    )

    @property
    def status(self) -> str:
        return "pending"


__all__ = ["FriendRequest"]
