"""Friend management API routes.

Path segments name users by handle; they are resolved to ids before any
relationship service runs.
"""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import FriendRequest, User
from ..schemas import FriendRequestResponse, FriendSummary, MessageResponse, SendFriendRequestResponse
from ..services import (
    RelationshipError,
    StorageError,
    accept_friend_request,
    as_http_exception,
    get_current_user,
    list_friend_requests,
    list_friends,
    list_outgoing_requests,
    reject_friend_request,
    remove_friend,
    remove_friend_request,
    resolve_user_id,
    send_friend_request,
    usernames_for,
)

router = APIRouter(tags=["friends"])


def _resolve(db: Session, username: str) -> UUID:
    try:
        return resolve_user_id(db, username)
    except RelationshipError as exc:
        raise as_http_exception(exc) from exc


def _request_responses(db: Session, requests: list[FriendRequest]) -> list[FriendRequestResponse]:
    names = usernames_for(db, [cast(UUID, req.sender_id) for req in requests] + [cast(UUID, req.recipient_id) for req in requests])
    responses: list[FriendRequestResponse] = []
    for req in requests:
        response = FriendRequestResponse.model_validate(req)
        response.sender_username = names.get(response.sender_id)
        response.recipient_username = names.get(response.recipient_id)
        responses.append(response)
    return responses


@router.get("/friends", response_model=list[FriendSummary])
async def list_friends_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[FriendSummary]:
    friend_ids = list_friends(db, user_id=cast(UUID, current_user.id))
    names = usernames_for(db, friend_ids)
    return [FriendSummary(id=friend_id, username=names[friend_id]) for friend_id in friend_ids if friend_id in names]


@router.delete("/friends/{friend}", response_model=MessageResponse)
async def remove_friend_endpoint(
    friend: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    friend_id = _resolve(db, friend)
    try:
        remove_friend(db, user_id=cast(UUID, current_user.id), friend_id=friend_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return MessageResponse(msg="Unfriended!")


@router.get("/friend/requests", response_model=list[FriendRequestResponse])
async def incoming_requests_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[FriendRequestResponse]:
    return _request_responses(db, list_friend_requests(db, user_id=cast(UUID, current_user.id)))


@router.get("/friend/requests/outgoing", response_model=list[FriendRequestResponse])
async def outgoing_requests_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[FriendRequestResponse]:
    return _request_responses(db, list_outgoing_requests(db, user_id=cast(UUID, current_user.id)))


@router.post("/friend/requests/{to}", response_model=SendFriendRequestResponse, status_code=status.HTTP_201_CREATED)
async def send_friend_request_endpoint(
    to: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SendFriendRequestResponse:
    recipient_id = _resolve(db, to)
    try:
        outcome = send_friend_request(db, sender_id=cast(UUID, current_user.id), recipient_id=recipient_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc

    if outcome.status == "accepted":
        names = usernames_for(db, [recipient_id])
        return SendFriendRequestResponse(
            status="accepted",
            msg="Accepted their pending request!",
            friend=FriendSummary(id=recipient_id, username=names.get(recipient_id, to)),
        )
    if outcome.request is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Friend request was not stored")
    return SendFriendRequestResponse(
        status="pending",
        msg="Sent request!",
        request=_request_responses(db, [outcome.request])[0],
    )


@router.delete("/friend/requests/{to}", response_model=MessageResponse)
async def withdraw_friend_request_endpoint(
    to: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    recipient_id = _resolve(db, to)
    try:
        remove_friend_request(db, sender_id=cast(UUID, current_user.id), recipient_id=recipient_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return MessageResponse(msg="Removed request!")


@router.put("/friend/accept/{from_}", response_model=MessageResponse)
async def accept_friend_request_endpoint(
    from_: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    sender_id = _resolve(db, from_)
    try:
        accept_friend_request(db, sender_id=sender_id, recipient_id=cast(UUID, current_user.id))
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return MessageResponse(msg="Accepted request!")


@router.put("/friend/reject/{from_}", response_model=MessageResponse)
async def reject_friend_request_endpoint(
    from_: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MessageResponse:
    sender_id = _resolve(db, from_)
    try:
        reject_friend_request(db, sender_id=sender_id, recipient_id=cast(UUID, current_user.id))
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return MessageResponse(msg="Rejected request!")


__all__ = ["router"]
