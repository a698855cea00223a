"""Authentication and identity lookup routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from ..services import (
    RelationshipError,
    as_http_exception,
    authenticate_user,
    create_access_token,
    get_current_user,
    register_user,
    require_user,
    resolve_user_id,
)

router = APIRouter(prefix="/auth", tags=["auth"])
users_router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    payload: RegisterRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user, token = register_user(db, payload)
    return AuthResponse(access_token=token, user_id=user.id)


@router.post("/login", response_model=AuthResponse)
async def login_endpoint(
    payload: LoginRequest,
    db: Session = Depends(get_session),
) -> AuthResponse:
    user = authenticate_user(db, payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return AuthResponse(access_token=create_access_token(user.id), user_id=user.id)


@router.get("/me", response_model=UserSummary)
async def me_endpoint(current_user: User = Depends(get_current_user)) -> UserSummary:
    return UserSummary.model_validate(current_user)


@users_router.get("/{username}", response_model=UserSummary)
async def lookup_user_endpoint(
    username: str,
    db: Session = Depends(get_session),
) -> UserSummary:
    try:
        user = require_user(db, resolve_user_id(db, username))
    except RelationshipError as exc:
        raise as_http_exception(exc) from exc
    return UserSummary.model_validate(user)


__all__ = ["router", "users_router"]
