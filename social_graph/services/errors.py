"""Typed failures raised by the relationship services.

Domain errors derive from :class:`RelationshipError` and describe an invalid
request. :class:`StorageError` signals that the database could not complete
the operation and is not a ``RelationshipError``.
"""
from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status


class RelationshipError(RuntimeError):
    """Base class for invalid relationship operations."""

    status_code: int = status.HTTP_400_BAD_REQUEST


class SelfRequestError(RelationshipError):
    def __init__(self, user_id: UUID) -> None:
        super().__init__("Cannot send a friend request to yourself")
        self.user_id = user_id


class SelfFollowError(RelationshipError):
    def __init__(self, user_id: UUID) -> None:
        super().__init__("Cannot follow yourself")
        self.user_id = user_id


class DuplicateRequestError(RelationshipError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, sender_id: UUID, recipient_id: UUID) -> None:
        super().__init__(f"Friend request from {sender_id} to {recipient_id} is already pending")
        self.sender_id = sender_id
        self.recipient_id = recipient_id


class AlreadyFriendsError(RelationshipError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, user_id: UUID, other_id: UUID) -> None:
        super().__init__(f"{user_id} and {other_id} are already friends")
        self.user_id = user_id
        self.other_id = other_id


class RequestNotFoundError(RelationshipError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, sender_id: UUID, recipient_id: UUID) -> None:
        super().__init__(f"Pending friend request from {sender_id} to {recipient_id} does not exist")
        self.sender_id = sender_id
        self.recipient_id = recipient_id


class FriendshipNotFoundError(RelationshipError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, user_id: UUID, other_id: UUID) -> None:
        super().__init__(f"Friendship between {user_id} and {other_id} does not exist")
        self.user_id = user_id
        self.other_id = other_id


class ProfileNotFoundError(RelationshipError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"Profile for User ID {user_id} does not exist")
        self.user_id = user_id


class ProfileExistsError(RelationshipError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"Profile for User ID {user_id} already exists")
        self.user_id = user_id


class UserNotFoundError(RelationshipError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, reference: str | UUID) -> None:
        super().__init__(f"User {reference} not found")
        self.reference = reference


class StorageError(RuntimeError):
    """Raised when the database rejects or cannot complete a write."""

    status_code: int = status.HTTP_503_SERVICE_UNAVAILABLE


def as_http_exception(exc: RelationshipError | StorageError) -> HTTPException:
    """Translate a service failure into the HTTP error returned to clients."""

    if isinstance(exc, StorageError):
        return HTTPException(status_code=exc.status_code, detail="Storage unavailable, please retry")
    return HTTPException(status_code=exc.status_code, detail=str(exc))


__all__ = [
    "RelationshipError",
    "SelfRequestError",
    "SelfFollowError",
    "DuplicateRequestError",
    "AlreadyFriendsError",
    "RequestNotFoundError",
    "FriendshipNotFoundError",
    "ProfileNotFoundError",
    "ProfileExistsError",
    "UserNotFoundError",
    "StorageError",
    "as_http_exception",
]
