"""Profile lifecycle: creation, descriptive edits and verification."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Profile
from ..schemas import ProfileCreateRequest, ProfileUpdateRequest
from .errors import ProfileExistsError, ProfileNotFoundError, StorageError
from .transactions import commit_with_retry

logger = logging.getLogger(__name__)


def get_profile(db: Session, user_id: UUID) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise ProfileNotFoundError(user_id)
    return profile


def create_profile(db: Session, *, user_id: UUID, payload: ProfileCreateRequest) -> Profile:
    """Create the profile for ``user_id`` with empty follow arrays."""

    if db.get(Profile, user_id) is not None:
        raise ProfileExistsError(user_id)

    profile = Profile(
        user_id=user_id,
        name=payload.name.strip(),
        expertise=list(payload.expertise),
        interests=list(payload.interests),
        past_experience=list(payload.past_experience),
        gender=payload.gender,
        verification_status="unverified",
        followers=[],
        following=[],
    )
    try:
        db.add(profile)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ProfileExistsError(user_id) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create profile for %s", user_id)
        raise StorageError("Failed to create profile") from exc

    db.refresh(profile)
    return profile


def update_profile(db: Session, *, user_id: UUID, payload: ProfileUpdateRequest) -> Profile:
    """Apply descriptive profile updates for ``user_id``.

    Follow writes bump the profile version too, so a conflicting follow is
    retried against the fresh row instead of failing the edit.
    """

    # Only update fields that were actually sent by the client
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    for field in ("expertise", "interests", "past_experience"):
        if field in update_data and update_data[field] is None:
            update_data[field] = []

    def _apply() -> Profile:
        profile = get_profile(db, user_id)
        for field, value in update_data.items():
            setattr(profile, field, value)
        return profile

    profile = commit_with_retry(db, _apply, description="update profile")
    db.refresh(profile)
    return profile


def verify_profile(db: Session, *, user_id: UUID) -> Profile:
    def _apply() -> tuple[Profile, bool]:
        profile = get_profile(db, user_id)
        if profile.verification_status == "verified":
            return profile, False
        profile.verification_status = "verified"
        return profile, True

    profile, changed = commit_with_retry(db, _apply, description="verify profile")
    if changed:
        db.refresh(profile)
        logger.info("Profile verified: %s", user_id)
    return profile


__all__ = ["get_profile", "create_profile", "update_profile", "verify_profile"]
