"""Convenience exports for ORM models."""
from .friend_request import FriendRequest
from .friendship import Friendship
from .profile import Profile
from .user import User

__all__ = [
    "FriendRequest",
    "Friendship",
    "Profile",
    "User",
]
