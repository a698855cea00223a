"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    register_user,
)
from .consistency_service import (
    ConsistencySummary,
    PairReconciliation,
    reconcile_follow_pair,
    run_consistency_sweep,
    sweep_follow_consistency,
)
from .errors import (
    AlreadyFriendsError,
    DuplicateRequestError,
    FriendshipNotFoundError,
    ProfileExistsError,
    ProfileNotFoundError,
    RelationshipError,
    RequestNotFoundError,
    SelfFollowError,
    SelfRequestError,
    StorageError,
    UserNotFoundError,
    as_http_exception,
)
from .follow_service import FollowStats, follow_user, get_follow_stats, get_followers, get_following, unfollow_user
from .friendship_service import (
    SendRequestOutcome,
    accept_friend_request,
    are_friends,
    list_friend_requests,
    list_friends,
    list_outgoing_requests,
    reject_friend_request,
    remove_friend,
    remove_friend_request,
    send_friend_request,
)
from .identity_service import require_user, resolve_user_id, usernames_for
from .profile_service import create_profile, get_profile, update_profile, verify_profile

__all__ = [
    "authenticate_user",
    "register_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "ConsistencySummary",
    "PairReconciliation",
    "reconcile_follow_pair",
    "run_consistency_sweep",
    "sweep_follow_consistency",
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
    "FollowStats",
    "follow_user",
    "unfollow_user",
    "get_followers",
    "get_following",
    "get_follow_stats",
    "SendRequestOutcome",
    "send_friend_request",
    "accept_friend_request",
    "reject_friend_request",
    "remove_friend_request",
    "list_friend_requests",
    "list_outgoing_requests",
    "list_friends",
    "are_friends",
    "remove_friend",
    "resolve_user_id",
    "require_user",
    "usernames_for",
    "create_profile",
    "get_profile",
    "update_profile",
    "verify_profile",
]
