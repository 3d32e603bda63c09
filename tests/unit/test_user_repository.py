"""Unit tests for the SQLAlchemy user store."""

from datetime import datetime, timedelta, timezone

import pytest

from backend.app.db.models.media_item import MediaItem, MediaType
from backend.app.db.models.watch_entry import WatchEntry
from backend.app.db.users import DuplicateUserError, UserRepository


@pytest.fixture
def users(test_session):
    return UserRepository(test_session)


@pytest.fixture
def alice(users):
    return users.create_user(
        email="alice@example.com", username="alice", password_hash="hash"
    )


def test_create_user_starts_at_version_zero(alice):
    assert alice.id
    assert alice.token_version == 0
    assert alice.created_at is not None


def test_duplicate_email_or_username(users, alice):
    with pytest.raises(DuplicateUserError):
        users.create_user(email="alice@example.com", username="other", password_hash="h")
    with pytest.raises(DuplicateUserError):
        users.create_user(email="other@example.com", username="alice", password_hash="h")


def test_lookups(users, alice):
    assert users.find_user_by_id(alice.id).email == "alice@example.com"
    assert users.find_user_by_email("alice@example.com").id == alice.id
    assert users.find_user_by_id("missing") is None
    assert users.find_user_by_email("missing@example.com") is None


def test_increment_token_version_is_visible_to_reads(users, alice):
    users.increment_token_version(alice.id)
    users.increment_token_version(alice.id)

    assert users.find_user_by_id(alice.id).token_version == 2


def test_increment_unknown_user_is_a_no_op(users):
    users.increment_token_version("missing")


def test_update_password_hash_revokes_and_consumes_reset_token(users, alice):
    expires = datetime.now(timezone.utc) + timedelta(hours=1)
    users.set_reset_token(alice.id, "digest", expires)
    assert users.find_user_by_reset_token_hash("digest").id == alice.id

    users.update_password_hash(alice.id, "new-hash")

    user = users.find_user_by_id(alice.id)
    assert user.password_hash == "new-hash"
    assert user.token_version == 1
    assert user.reset_token_hash is None
    assert user.reset_token_expires_at is None
    assert users.find_user_by_reset_token_hash("digest") is None


def test_delete_user_cascades_to_watchlist(users, alice, test_session):
    item = MediaItem(external_id="tt1", title="One", media_type=MediaType.MOVIE)
    test_session.add(item)
    test_session.commit()
    test_session.add(WatchEntry(user_id=alice.id, media_item_id=item.id))
    test_session.commit()

    assert users.delete_user(alice.id) is True

    assert users.find_user_by_id(alice.id) is None
    assert test_session.query(WatchEntry).count() == 0
    assert test_session.query(MediaItem).count() == 1
    assert users.delete_user(alice.id) is False
