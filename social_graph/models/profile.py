"""ORM model for user profiles and their denormalised follow arrays."""
from __future__ import annotations

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from social_graph.database import Base
from .base import TimestampMixin


class Profile(TimestampMixin, Base):
    """One profile per user.

    ``followers`` and ``following`` hold identity strings and behave as sets.
    The same follow edge is recorded on two rows (the follower's ``following``
    and the followee's ``followers``); ``version`` guards concurrent writers.
    Assign new lists instead of mutating in place so changes are flushed.
    """

    __tablename__ = "profiles"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(150), nullable=False)
    expertise = Column(JSON, nullable=False, default=list)
    interests = Column(JSON, nullable=False, default=list)
    past_experience = Column(JSON, nullable=False, default=list)
    gender = Column(String(50), nullable=True)
    verification_status = Column(String(20), nullable=False, default="unverified")
    followers = Column(JSON, nullable=False, default=list)
    following = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)

    user = relationship("User", back_populates="profile")

    __mapper_args__ = {"version_id_col": version}


__all__ = ["Profile"]
