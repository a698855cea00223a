"""Business logic for friend requests and friendships.

Pending requests live in ``friend_requests`` only while unanswered; resolving
one deletes the row. Friendships are stored once per unordered pair in
canonical order so either orientation resolves to the same row.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import FriendRequest, Friendship
from .errors import (
    AlreadyFriendsError,
    DuplicateRequestError,
    FriendshipNotFoundError,
    RequestNotFoundError,
    SelfRequestError,
    StorageError,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SendRequestOutcome:
    """Result of :func:`send_friend_request`.

    ``status`` is ``"pending"`` when a new request was stored and
    ``"accepted"`` when the recipient had already asked and the send
    completed the friendship instead.
    """

    status: Literal["pending", "accepted"]
    request: FriendRequest | None = None
    friendship: Friendship | None = None


def canonical_pair(a: UUID, b: UUID) -> tuple[UUID, UUID]:
    return (a, b) if str(a) < str(b) else (b, a)


def _existing_friendship(db: Session, user_id: UUID, friend_id: UUID) -> Friendship | None:
    first, second = canonical_pair(user_id, friend_id)
    stmt = select(Friendship).where(and_(Friendship.user_a_id == first, Friendship.user_b_id == second))
    return db.scalars(stmt).first()


def _pending_for_pair(db: Session, user_id: UUID, other_id: UUID) -> FriendRequest | None:
    low, high = canonical_pair(user_id, other_id)
    stmt = select(FriendRequest).where(FriendRequest.pair_low_id == low, FriendRequest.pair_high_id == high)
    return db.scalars(stmt).first()


def are_friends(db: Session, user_id: UUID, other_id: UUID) -> bool:
    return _existing_friendship(db, user_id, other_id) is not None


def _resolve_against_existing(db: Session, sender_id: UUID, recipient_id: UUID) -> SendRequestOutcome | None:
    if are_friends(db, sender_id, recipient_id):
        raise AlreadyFriendsError(sender_id, recipient_id)

    pending = _pending_for_pair(db, sender_id, recipient_id)
    if pending is None:
        return None
    if pending.sender_id == sender_id:
        raise DuplicateRequestError(sender_id, recipient_id)

    # The recipient already asked; answering in kind accepts their request.
    try:
        friendship = accept_friend_request(db, sender_id=recipient_id, recipient_id=sender_id)
    except RequestNotFoundError:
        # Their request was resolved after we read it; store a fresh one instead.
        logger.info("Reverse request %s -> %s vanished before acceptance", recipient_id, sender_id)
        return None
    return SendRequestOutcome(status="accepted", friendship=friendship)


def send_friend_request(db: Session, *, sender_id: UUID, recipient_id: UUID) -> SendRequestOutcome:
    if sender_id == recipient_id:
        raise SelfRequestError(sender_id)

    outcome = _resolve_against_existing(db, sender_id, recipient_id)
    if outcome is not None:
        return outcome

    low, high = canonical_pair(sender_id, recipient_id)
    request = FriendRequest(sender_id=sender_id, recipient_id=recipient_id, pair_low_id=low, pair_high_id=high)
    try:
        db.add(request)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # Lost the insert race for this pair: answer against the winner's row.
        outcome = _resolve_against_existing(db, sender_id, recipient_id)
        if outcome is not None:
            return outcome
        logger.exception("Friend request insert failed for %s -> %s", sender_id, recipient_id)
        raise StorageError("Failed to send friend request") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Friend request insert failed for %s -> %s", sender_id, recipient_id)
        raise StorageError("Failed to send friend request") from exc

    db.refresh(request)
    logger.info("Friend request sent: %s -> %s", sender_id, recipient_id)
    return SendRequestOutcome(status="pending", request=request)


def _consume_request(db: Session, sender_id: UUID, recipient_id: UUID) -> bool:
    """Delete the pending ``sender -> recipient`` row; ``True`` if this call removed it."""

    result = db.execute(
        delete(FriendRequest).where(
            FriendRequest.sender_id == sender_id,
            FriendRequest.recipient_id == recipient_id,
        )
    )
    return result.rowcount == 1


def accept_friend_request(db: Session, *, sender_id: UUID, recipient_id: UUID) -> Friendship:
    """Turn the pending ``sender -> recipient`` request into a friendship.

    The request delete and the friendship insert share one transaction. Only
    the caller whose delete removed the row proceeds; a request that is
    missing or already consumed raises :class:`RequestNotFoundError`.
    """

    try:
        if not _consume_request(db, sender_id, recipient_id):
            db.rollback()
            raise RequestNotFoundError(sender_id, recipient_id)

        friendship = _existing_friendship(db, sender_id, recipient_id)
        if friendship is None:
            user_a_id, user_b_id = canonical_pair(sender_id, recipient_id)
            friendship = Friendship(user_a_id=user_a_id, user_b_id=user_b_id)
            db.add(friendship)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Accepting friend request %s -> %s failed", sender_id, recipient_id)
        raise StorageError("Failed to accept friend request") from exc

    db.refresh(friendship)
    logger.info("Friend request accepted: %s -> %s", sender_id, recipient_id)
    return friendship


_DISCARD_LABELS = {"reject": "rejected", "withdraw": "withdrawn"}


def _discard_request(db: Session, sender_id: UUID, recipient_id: UUID, *, action: str) -> None:
    try:
        if not _consume_request(db, sender_id, recipient_id):
            db.rollback()
            raise RequestNotFoundError(sender_id, recipient_id)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s friend request %s -> %s", action, sender_id, recipient_id)
        raise StorageError(f"Failed to {action} friend request") from exc
    logger.info("Friend request %s: %s -> %s", _DISCARD_LABELS[action], sender_id, recipient_id)


def reject_friend_request(db: Session, *, sender_id: UUID, recipient_id: UUID) -> None:
    _discard_request(db, sender_id, recipient_id, action="reject")


def remove_friend_request(db: Session, *, sender_id: UUID, recipient_id: UUID) -> None:
    """Withdraw a request the sender has not had answered. Friendships are untouched."""

    _discard_request(db, sender_id, recipient_id, action="withdraw")


def list_friend_requests(db: Session, *, user_id: UUID) -> list[FriendRequest]:
    """Pending requests addressed to ``user_id``, oldest first."""

    stmt = (
        select(FriendRequest)
        .where(FriendRequest.recipient_id == user_id)
        .order_by(FriendRequest.created_at.asc())
    )
    return list(db.scalars(stmt))


def list_outgoing_requests(db: Session, *, user_id: UUID) -> list[FriendRequest]:
    stmt = (
        select(FriendRequest)
        .where(FriendRequest.sender_id == user_id)
        .order_by(FriendRequest.created_at.asc())
    )
    return list(db.scalars(stmt))


def list_friends(db: Session, *, user_id: UUID) -> list[UUID]:
    stmt = (
        select(Friendship)
        .where(or_(Friendship.user_a_id == user_id, Friendship.user_b_id == user_id))
        .order_by(Friendship.created_at.asc())
    )
    return [friendship.other(user_id) for friendship in db.scalars(stmt)]


def remove_friend(db: Session, *, user_id: UUID, friend_id: UUID) -> None:
    """Delete the friendship for both sides at once."""

    first, second = canonical_pair(user_id, friend_id)
    try:
        result = db.execute(
            delete(Friendship).where(Friendship.user_a_id == first, Friendship.user_b_id == second)
        )
        if result.rowcount != 1:
            db.rollback()
            raise FriendshipNotFoundError(user_id, friend_id)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to remove friendship %s <-> %s", user_id, friend_id)
        raise StorageError("Failed to remove friend") from exc
    logger.info("Friendship removed: %s <-> %s", user_id, friend_id)


__all__ = [
    "SendRequestOutcome",
    "canonical_pair",
    "are_friends",
    "send_friend_request",
    "accept_friend_request",
    "reject_friend_request",
    "remove_friend_request",
    "list_friend_requests",
    "list_outgoing_requests",
    "list_friends",
    "remove_friend",
]
