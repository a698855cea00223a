"""Identity resolution: usernames to user ids and back."""
from __future__ import annotations

from typing import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import User
from .errors import UserNotFoundError


def resolve_user_id(db: Session, username: str) -> UUID:
    """Return the id for ``username`` (case-insensitive)."""

    candidate = username.strip().lower()
    if not candidate:
        raise UserNotFoundError(username)
    user_id = db.scalar(select(User.id).where(func.lower(User.username) == candidate))
    if user_id is None:
        raise UserNotFoundError(username)
    return user_id


def require_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def usernames_for(db: Session, user_ids: Iterable[UUID]) -> dict[UUID, str]:
    ids = list(dict.fromkeys(user_ids))
    if not ids:
        return {}
    rows = db.execute(select(User.id, User.username).where(User.id.in_(ids)))
    return {row.id: row.username for row in rows}


__all__ = ["resolve_user_id", "require_user", "usernames_for"]
