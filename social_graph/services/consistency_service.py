"""Keeps the follow mirrors on two profiles in agreement.

A follow edge ``A -> B`` is recorded twice: ``B`` in ``profile(A).following``
and ``A`` in ``profile(B).followers``. Writes touching both profiles go
through :func:`commit_with_retry`, which relies on the profile ``version``
column to detect concurrent writers. :func:`reconcile_pair` and
:func:`sweep_follow_consistency` repair rows where only one side of an edge
was recorded; a half-recorded edge is completed on the missing side.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Profile
from .profile_service import get_profile
from .transactions import commit_with_retry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PairReconciliation:
    """Outcome of repairing the follow mirrors between two profiles."""

    first_id: UUID
    second_id: UUID
    entries_added: int

    @property
    def changed(self) -> bool:
        return self.entries_added > 0


@dataclass(frozen=True, slots=True)
class ConsistencySummary:
    """Counts describing a full follow-graph sweep."""

    profiles_scanned: int
    profiles_repaired: int
    entries_added: int
    dangling_removed: int


def unique_ids(values: Iterable[object]) -> list[str]:
    """Normalise a stored follow array: string ids, first occurrence kept."""

    return list(dict.fromkeys(str(value) for value in values))


def reconcile_pair(first: Profile, second: Profile) -> int:
    """Complete half-recorded follow edges between two loaded profiles.

    Checks both directions and returns the number of array entries added.
    Calling it again on the result adds nothing.
    """

    if first.user_id == second.user_id:
        return 0

    added = 0
    for follower, followee in ((first, second), (second, first)):
        follower_key = str(follower.user_id)
        followee_key = str(followee.user_id)
        following = unique_ids(follower.following)
        followers = unique_ids(followee.followers)
        in_following = followee_key in following
        in_followers = follower_key in followers
        if in_following and not in_followers:
            followee.followers = [*followers, follower_key]
            added += 1
        elif in_followers and not in_following:
            follower.following = [*following, followee_key]
            added += 1
    return added


def reconcile_follow_pair(db: Session, first_id: UUID, second_id: UUID) -> PairReconciliation:
    """Repair the follow mirrors between two users. Safe to call repeatedly."""

    def _apply() -> PairReconciliation:
        first = get_profile(db, first_id)
        second = get_profile(db, second_id)
        return PairReconciliation(first_id=first_id, second_id=second_id, entries_added=reconcile_pair(first, second))

    result = commit_with_retry(db, _apply, description="reconcile follow pair")
    if result.changed:
        logger.info("Repaired follow mirrors between %s and %s (%d entries)", first_id, second_id, result.entries_added)
    return result


def sweep_follow_consistency(db: Session) -> ConsistencySummary:
    """Repair every profile in one pass.

    Completes half-recorded edges, de-duplicates arrays and drops references
    to users without a profile, including self references.
    """

    def _apply() -> ConsistencySummary:
        profiles = {str(profile.user_id): profile for profile in db.scalars(select(Profile))}
        following: dict[str, list[str]] = {}
        followers: dict[str, list[str]] = {}
        dangling = 0
        for key, profile in profiles.items():
            stored_following = unique_ids(profile.following)
            stored_followers = unique_ids(profile.followers)
            following[key] = [other for other in stored_following if other in profiles and other != key]
            followers[key] = [other for other in stored_followers if other in profiles and other != key]
            dangling += len(stored_following) - len(following[key])
            dangling += len(stored_followers) - len(followers[key])

        added = 0
        for key in profiles:
            for target in following[key]:
                if key not in followers[target]:
                    followers[target].append(key)
                    added += 1
        for key in profiles:
            for source in followers[key]:
                if key not in following[source]:
                    following[source].append(key)
                    added += 1

        repaired = 0
        for key, profile in profiles.items():
            if list(profile.following) != following[key] or list(profile.followers) != followers[key]:
                profile.following = following[key]
                profile.followers = followers[key]
                repaired += 1

        return ConsistencySummary(
            profiles_scanned=len(profiles),
            profiles_repaired=repaired,
            entries_added=added,
            dangling_removed=dangling,
        )

    summary = commit_with_retry(db, _apply, description="sweep follow graph")
    logger.info(
        "Follow sweep finished (scanned=%d, repaired=%d, added=%d, dangling=%d)",
        summary.profiles_scanned,
        summary.profiles_repaired,
        summary.entries_added,
        summary.dangling_removed,
    )
    return summary


def run_consistency_sweep(session_factory: Callable[[], Session]) -> ConsistencySummary:
    """Run :func:`sweep_follow_consistency` on a session scoped to the run."""

    session = session_factory()
    try:
        return sweep_follow_consistency(session)
    finally:
        session.close()


__all__ = [
    "PairReconciliation",
    "ConsistencySummary",
    "unique_ids",
    "reconcile_pair",
    "reconcile_follow_pair",
    "sweep_follow_consistency",
    "run_consistency_sweep",
]
