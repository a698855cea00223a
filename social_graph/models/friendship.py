"""ORM model representing a mutual friendship between two users."""
from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from social_graph.database import Base


class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Stored in canonical order: str(user_a_id) < str(user_b_id)
    user_a_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_b_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user_a = relationship("User", foreign_keys=[user_a_id], back_populates="friendships_a")
    user_b = relationship("User", foreign_keys=[user_b_id], back_populates="friendships_b")

    __table_args__ = (
        UniqueConstraint("user_a_id", "user_b_id", name="uq_friendship_pair"),
        CheckConstraint("user_a_id <> user_b_id", name="ck_friendship_not_self"),
    )

    def involves(self, user_id: uuid.UUID) -> bool:
        return user_id in {self.user_a_id, self.user_b_id}

    def other(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.user_b_id if self.user_a_id == user_id else self.user_a_id


__all__ = ["Friendship"]
