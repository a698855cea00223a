"""Service-level tests for the friend request lifecycle and friendships."""
from __future__ import annotations

import os
from typing import Callable, Iterator
from uuid import UUID

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_social_graph.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from social_graph.database import Base, SessionLocal, engine  # noqa: E402
from social_graph.models import FriendRequest, Friendship, Profile, User  # noqa: E402
from social_graph.services import (  # noqa: E402
    AlreadyFriendsError,
    DuplicateRequestError,
    FriendshipNotFoundError,
    RelationshipError,
    RequestNotFoundError,
    SelfRequestError,
    StorageError,
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
from social_graph.services import friendship_service  # noqa: E402
from social_graph.services.friendship_service import canonical_pair  # noqa: E402


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(FriendRequest))
        session.execute(delete(Friendship))
        session.execute(delete(Profile))
        session.execute(delete(User))
        session.commit()
    yield


@pytest.fixture
def db() -> Iterator[Session]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_factory() -> Callable[[str], UUID]:
    def _factory(username: str) -> UUID:
        with SessionLocal() as session:
            user = User(username=username, hashed_password="test-hash")
            session.add(user)
            session.commit()
            return user.id
    return _factory


def _pending_count(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(FriendRequest)) or 0


def test_request_accept_scenario(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    outcome = send_friend_request(db, sender_id=alice, recipient_id=bob)
    assert outcome.status == "pending"
    assert outcome.request is not None
    assert outcome.request.sender_id == alice

    assert [req.sender_id for req in list_friend_requests(db, user_id=bob)] == [alice]
    assert list_friend_requests(db, user_id=alice) == []
    assert [req.recipient_id for req in list_outgoing_requests(db, user_id=alice)] == [bob]

    accept_friend_request(db, sender_id=alice, recipient_id=bob)

    assert list_friends(db, user_id=alice) == [bob]
    assert list_friends(db, user_id=bob) == [alice]
    assert list_friend_requests(db, user_id=bob) == []
    assert _pending_count(db) == 0


def test_second_send_same_direction_is_duplicate(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    send_friend_request(db, sender_id=alice, recipient_id=bob)
    with pytest.raises(DuplicateRequestError):
        send_friend_request(db, sender_id=alice, recipient_id=bob)
    assert _pending_count(db) == 1


def test_reciprocal_send_accepts_pending_request(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")

    send_friend_request(db, sender_id=alice, recipient_id=bob)
    outcome = send_friend_request(db, sender_id=bob, recipient_id=alice)

    assert outcome.status == "accepted"
    assert outcome.request is None
    assert outcome.friendship is not None
    assert outcome.friendship.involves(alice) and outcome.friendship.involves(bob)
    assert are_friends(db, alice, bob)
    assert _pending_count(db) == 0


def test_reciprocal_insert_race_resolves_as_acceptance(db, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")
    real_resolver = friendship_service._resolve_against_existing
    calls = {"count": 0}

    def _racing(session, sender_id, recipient_id):
        calls["count"] += 1
        if calls["count"] == 1:
            # bob's request lands between alice's checks and her insert
            with SessionLocal() as other:
                low, high = canonical_pair(bob, alice)
                other.add(FriendRequest(sender_id=bob, recipient_id=alice, pair_low_id=low, pair_high_id=high))
                other.commit()
            return None
        return real_resolver(session, sender_id, recipient_id)

    monkeypatch.setattr(friendship_service, "_resolve_against_existing", _racing)

    outcome = send_friend_request(db, sender_id=alice, recipient_id=bob)

    assert calls["count"] == 2
    assert outcome.status == "accepted"
    assert list_friends(db, user_id=alice) == [bob]
    assert _pending_count(db) == 0


def test_reciprocal_send_stores_request_when_reverse_is_rejected_first(db, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")
    with SessionLocal() as setup:
        send_friend_request(setup, sender_id=bob, recipient_id=alice)

    real_lookup = friendship_service._pending_for_pair
    calls = {"count": 0}

    def _rejected_after_read(session, user_id, other_id):
        pending = real_lookup(session, user_id, other_id)
        calls["count"] += 1
        if calls["count"] == 1:
            # alice rejects bob's request in another tab right after this read
            with SessionLocal() as other:
                reject_friend_request(other, sender_id=bob, recipient_id=alice)
        return pending

    monkeypatch.setattr(friendship_service, "_pending_for_pair", _rejected_after_read)

    outcome = send_friend_request(db, sender_id=alice, recipient_id=bob)

    assert outcome.status == "pending"
    assert outcome.request is not None
    assert outcome.request.sender_id == alice
    assert list_friends(db, user_id=alice) == []
    assert [req.sender_id for req in list_friend_requests(db, user_id=bob)] == [alice]
    assert _pending_count(db) == 1


def test_storage_failure_is_not_a_relationship_error(db, user_factory, monkeypatch):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)

    def _failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(Session, "commit", _failing_commit)

    with pytest.raises(StorageError) as excinfo:
        accept_friend_request(db, sender_id=alice, recipient_id=bob)
    assert not isinstance(excinfo.value, RelationshipError)
    with pytest.raises(StorageError):
        remove_friend_request(db, sender_id=alice, recipient_id=bob)

    monkeypatch.undo()
    assert _pending_count(db) == 1
    assert list_friends(db, user_id=alice) == []


def test_self_request_rejected_without_write(db, user_factory):
    alice = user_factory("alice")

    with pytest.raises(SelfRequestError):
        send_friend_request(db, sender_id=alice, recipient_id=alice)
    assert _pending_count(db) == 0


def test_request_to_existing_friend_fails(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)
    accept_friend_request(db, sender_id=alice, recipient_id=bob)

    with pytest.raises(AlreadyFriendsError):
        send_friend_request(db, sender_id=bob, recipient_id=alice)
    with pytest.raises(AlreadyFriendsError):
        send_friend_request(db, sender_id=alice, recipient_id=bob)


def test_consumed_request_cannot_be_resolved_again(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)

    accept_friend_request(db, sender_id=alice, recipient_id=bob)

    with pytest.raises(RequestNotFoundError):
        accept_friend_request(db, sender_id=alice, recipient_id=bob)
    with pytest.raises(RequestNotFoundError):
        reject_friend_request(db, sender_id=alice, recipient_id=bob)
    with pytest.raises(RequestNotFoundError):
        remove_friend_request(db, sender_id=alice, recipient_id=bob)
    assert list_friends(db, user_id=alice) == [bob]


def test_racing_resolvers_only_one_wins(user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    with SessionLocal() as setup:
        send_friend_request(setup, sender_id=alice, recipient_id=bob)

    with SessionLocal() as first, SessionLocal() as second:
        # Both resolvers saw the request before either acted.
        assert list_friend_requests(first, user_id=bob)
        assert list_friend_requests(second, user_id=bob)

        accept_friend_request(first, sender_id=alice, recipient_id=bob)
        with pytest.raises(RequestNotFoundError):
            reject_friend_request(second, sender_id=alice, recipient_id=bob)

    with SessionLocal() as check:
        assert list_friends(check, user_id=bob) == [alice]


def test_accept_only_matches_direction(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)

    with pytest.raises(RequestNotFoundError):
        accept_friend_request(db, sender_id=bob, recipient_id=alice)
    assert _pending_count(db) == 1


def test_reject_discards_request_and_allows_resend(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)

    reject_friend_request(db, sender_id=alice, recipient_id=bob)

    assert list_friend_requests(db, user_id=bob) == []
    assert list_friends(db, user_id=alice) == []
    outcome = send_friend_request(db, sender_id=alice, recipient_id=bob)
    assert outcome.status == "pending"


def test_withdraw_request(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)

    remove_friend_request(db, sender_id=alice, recipient_id=bob)

    assert list_friend_requests(db, user_id=bob) == []
    with pytest.raises(RequestNotFoundError):
        remove_friend_request(db, sender_id=alice, recipient_id=bob)


def test_withdraw_leaves_friendships_alone(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    send_friend_request(db, sender_id=alice, recipient_id=bob)
    accept_friend_request(db, sender_id=alice, recipient_id=bob)
    send_friend_request(db, sender_id=alice, recipient_id=carol)

    remove_friend_request(db, sender_id=alice, recipient_id=carol)

    assert list_friends(db, user_id=alice) == [bob]
    with pytest.raises(RequestNotFoundError):
        remove_friend_request(db, sender_id=alice, recipient_id=bob)


def test_unfriend_is_mutual(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    send_friend_request(db, sender_id=alice, recipient_id=bob)
    accept_friend_request(db, sender_id=alice, recipient_id=bob)

    remove_friend(db, user_id=bob, friend_id=alice)

    assert list_friends(db, user_id=alice) == []
    assert list_friends(db, user_id=bob) == []
    with pytest.raises(FriendshipNotFoundError):
        remove_friend(db, user_id=alice, friend_id=bob)

    # No trace left behind: the pair can start over.
    assert send_friend_request(db, sender_id=bob, recipient_id=alice).status == "pending"


def test_friend_lists_span_both_orientations(db, user_factory):
    alice = user_factory("alice")
    bob = user_factory("bob")
    carol = user_factory("carol")
    send_friend_request(db, sender_id=alice, recipient_id=bob)
    accept_friend_request(db, sender_id=alice, recipient_id=bob)
    send_friend_request(db, sender_id=carol, recipient_id=alice)
    accept_friend_request(db, sender_id=carol, recipient_id=alice)

    assert set(list_friends(db, user_id=alice)) == {bob, carol}
    assert list_friends(db, user_id=bob) == [alice]
    assert list_friends(db, user_id=carol) == [alice]
    assert canonical_pair(alice, bob) == canonical_pair(bob, alice)
