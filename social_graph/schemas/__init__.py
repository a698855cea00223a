"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from .follow import FollowActionResponse, FollowListResponse, FollowStatsResponse, ReconcileResponse
from .friends import FriendRequestResponse, FriendSummary, MessageResponse, SendFriendRequestResponse
from .profiles import ProfileCreateRequest, ProfileResponse, ProfileUpdateRequest

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserSummary",
    "FollowActionResponse",
    "FollowListResponse",
    "FollowStatsResponse",
    "ReconcileResponse",
    "FriendRequestResponse",
    "FriendSummary",
    "MessageResponse",
    "SendFriendRequestResponse",
    "ProfileCreateRequest",
    "ProfileResponse",
    "ProfileUpdateRequest",
]
