"""Business logic for follower relationships stored on profiles."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from .consistency_service import reconcile_pair, unique_ids
from .errors import SelfFollowError
from .profile_service import get_profile
from .transactions import commit_with_retry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def follow_user(db: Session, *, user_id: UUID, target_id: UUID) -> bool:
    """Record ``user_id -> target_id`` on both profiles.

    Returns ``False`` when the edge was already fully recorded.
    """

    if user_id == target_id:
        raise SelfFollowError(user_id)

    def _apply() -> bool:
        target = get_profile(db, target_id)
        follower = get_profile(db, user_id)
        changed = False

        followers = unique_ids(target.followers)
        if str(user_id) not in followers:
            target.followers = [*followers, str(user_id)]
            changed = True

        following = unique_ids(follower.following)
        if str(target_id) not in following:
            follower.following = [*following, str(target_id)]
            changed = True

        # Settle the reverse direction in the same write.
        reconcile_pair(follower, target)
        return changed

    changed = commit_with_retry(db, _apply, description="follow user")
    if changed:
        logger.info("User %s followed %s", user_id, target_id)
    return changed


def unfollow_user(db: Session, *, user_id: UUID, target_id: UUID) -> bool:
    """Remove ``user_id -> target_id`` from both profiles.

    Returns ``False`` when there was nothing to remove.
    """

    if user_id == target_id:
        raise SelfFollowError(user_id)

    def _apply() -> bool:
        target = get_profile(db, target_id)
        follower = get_profile(db, user_id)
        changed = False

        followers = unique_ids(target.followers)
        if str(user_id) in followers:
            target.followers = [value for value in followers if value != str(user_id)]
            changed = True

        following = unique_ids(follower.following)
        if str(target_id) in following:
            follower.following = [value for value in following if value != str(target_id)]
            changed = True

        reconcile_pair(follower, target)
        return changed

    changed = commit_with_retry(db, _apply, description="unfollow user")
    if changed:
        logger.info("User %s unfollowed %s", user_id, target_id)
    return changed


def get_followers(db: Session, user_id: UUID) -> list[UUID]:
    return [UUID(value) for value in unique_ids(get_profile(db, user_id).followers)]


def get_following(db: Session, user_id: UUID) -> list[UUID]:
    return [UUID(value) for value in unique_ids(get_profile(db, user_id).following)]


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    profile = get_profile(db, user_id)
    followers = unique_ids(profile.followers)
    following = unique_ids(profile.following)
    return FollowStats(
        user_id=user_id,
        followers_count=len(followers),
        following_count=len(following),
        is_following=viewer_id is not None and str(viewer_id) in followers,
    )


__all__ = [
    "FollowStats",
    "follow_user",
    "unfollow_user",
    "get_followers",
    "get_following",
    "get_follow_stats",
]
