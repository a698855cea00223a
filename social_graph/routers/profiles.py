"""Profile and follow API routes. Users are addressed by UUID here."""
from __future__ import annotations

from dataclasses import asdict
from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import (
    FollowActionResponse,
    FollowListResponse,
    ProfileCreateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    ReconcileResponse,
)
from ..services import (
    RelationshipError,
    StorageError,
    as_http_exception,
    create_profile,
    follow_user,
    get_current_user,
    get_follow_stats,
    get_followers,
    get_following,
    get_profile,
    reconcile_follow_pair,
    unfollow_user,
    update_profile,
)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    payload: ProfileCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    try:
        profile = create_profile(db, user_id=cast(UUID, current_user.id), payload=payload)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return ProfileResponse.model_validate(profile)


@router.patch("", response_model=ProfileResponse)
async def update_my_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ProfileResponse:
    try:
        profile = update_profile(db, user_id=cast(UUID, current_user.id), payload=payload)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return ProfileResponse.model_validate(profile)


@router.get("/{user_id}", response_model=ProfileResponse)
async def retrieve_profile(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> ProfileResponse:
    try:
        profile = get_profile(db, user_id)
    except RelationshipError as exc:
        raise as_http_exception(exc) from exc
    return ProfileResponse.model_validate(profile)


@router.get("/{user_id}/followers", response_model=FollowListResponse)
async def list_followers(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> FollowListResponse:
    try:
        users = get_followers(db, user_id)
    except RelationshipError as exc:
        raise as_http_exception(exc) from exc
    return FollowListResponse(user_id=user_id, users=users)


@router.get("/{user_id}/following", response_model=FollowListResponse)
async def list_following(
    user_id: UUID,
    db: Session = Depends(get_session),
) -> FollowListResponse:
    try:
        users = get_following(db, user_id)
    except RelationshipError as exc:
        raise as_http_exception(exc) from exc
    return FollowListResponse(user_id=user_id, users=users)


@router.put("/{target_user_id}/follow", response_model=FollowActionResponse)
async def follow_user_endpoint(
    target_user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FollowActionResponse:
    viewer_id = cast(UUID, current_user.id)
    try:
        changed = follow_user(db, user_id=viewer_id, target_id=target_user_id)
        stats = get_follow_stats(db, user_id=target_user_id, viewer_id=viewer_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    payload = asdict(stats)
    payload["status"] = "followed" if changed else "noop"
    return FollowActionResponse(**payload)


@router.delete("/{target_user_id}/follow", response_model=FollowActionResponse)
async def unfollow_user_endpoint(
    target_user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FollowActionResponse:
    viewer_id = cast(UUID, current_user.id)
    try:
        changed = unfollow_user(db, user_id=viewer_id, target_id=target_user_id)
        stats = get_follow_stats(db, user_id=target_user_id, viewer_id=viewer_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    payload = asdict(stats)
    payload["status"] = "unfollowed" if changed else "noop"
    return FollowActionResponse(**payload)


@router.post("/{target_user_id}/follow/reconcile", response_model=ReconcileResponse)
async def reconcile_follow_endpoint(
    target_user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ReconcileResponse:
    try:
        result = reconcile_follow_pair(db, cast(UUID, current_user.id), target_user_id)
    except (RelationshipError, StorageError) as exc:
        raise as_http_exception(exc) from exc
    return ReconcileResponse(
        first_id=result.first_id,
        second_id=result.second_id,
        entries_added=result.entries_added,
        status="repaired" if result.changed else "consistent",
    )


__all__ = ["router"]
