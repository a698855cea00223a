"""Aggregate router exports."""
from .auth import router as auth_router
from .auth import users_router
from .friends import router as friends_router
from .profiles import router as profiles_router

__all__ = [
    "auth_router",
    "users_router",
    "friends_router",
    "profiles_router",
]
