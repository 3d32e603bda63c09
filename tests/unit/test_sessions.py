"""Unit tests for revocation-aware session flows over an in-memory store."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from backend.app.config import TokenSettings
from backend.app.security.jwt import TokenAuthority, TokenSubject
from backend.app.security.reset_tokens import hash_reset_token
from backend.app.security.sessions import (
    INVALID_ACCESS_MESSAGE,
    INVALID_CREDENTIALS_MESSAGE,
    INVALID_REFRESH_MESSAGE,
    MISSING_HEADER_MESSAGE,
    TIMING_DUMMY_HASH,
    InvalidResetTokenError,
    SessionService,
    Unauthorized,
    parse_bearer_header,
)


@dataclass
class FakeUser:
    id: str
    email: str
    password_hash: str
    token_version: int = 0
    reset_token_hash: str | None = None
    reset_token_expires_at: datetime | None = None


class InMemoryUserStore:
    def __init__(self, *users: FakeUser):
        self.users = {user.id: user for user in users}
        self.id_lookups = 0

    def find_user_by_id(self, user_id):
        self.id_lookups += 1
        return self.users.get(user_id)

    def find_user_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def find_user_by_reset_token_hash(self, token_hash):
        return next(
            (u for u in self.users.values() if u.reset_token_hash == token_hash), None
        )

    def increment_token_version(self, user_id):
        self.users[user_id].token_version += 1

    def update_password_hash(self, user_id, password_hash):
        user = self.users[user_id]
        user.password_hash = password_hash
        user.token_version += 1
        user.reset_token_hash = None
        user.reset_token_expires_at = None

    def set_reset_token(self, user_id, token_hash, expires_at):
        user = self.users[user_id]
        user.reset_token_hash = token_hash
        user.reset_token_expires_at = expires_at


PROPERTY_AUTHORITY = TokenAuthority(
    TokenSettings(
        access_secret="property-access-secret",
        refresh_secret="property-refresh-secret",
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )
)


def _plain_verifier(password: str, password_hash: str) -> bool:
    return password_hash == f"hashed:{password}"


def _plain_hasher(password: str) -> str:
    return f"hashed:{password}"


@pytest.fixture
def store():
    return InMemoryUserStore(
        FakeUser(id="u1", email="u1@example.com", password_hash="hashed:secret-pass")
    )


@pytest.fixture
def sessions(token_authority, store):
    return SessionService(
        token_authority,
        store,
        password_verifier=_plain_verifier,
        password_hasher=_plain_hasher,
    )


def bearer(token: str) -> str:
    return f"Bearer {token}"


class TestParseBearerHeader:
    def test_extracts_token(self):
        assert parse_bearer_header("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "abc", "Basic abc", "Bearer ", "bearer abc"])
    def test_rejects_missing_or_malformed(self, header):
        with pytest.raises(Unauthorized) as exc_info:
            parse_bearer_header(header)
        assert exc_info.value.message == MISSING_HEADER_MESSAGE


class TestAuthorize:
    def test_live_token_authorizes(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        identity = sessions.authorize(bearer(pair.access_token))

        assert identity.id == "u1"
        assert identity.token_version == 0

    def test_revocation_rejects_outstanding_tokens(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        sessions.revoke("u1")

        assert store.users["u1"].token_version == 1
        with pytest.raises(Unauthorized) as exc_info:
            sessions.authorize(bearer(pair.access_token))
        assert exc_info.value.message == INVALID_ACCESS_MESSAGE
        with pytest.raises(Unauthorized):
            sessions.refresh(pair.refresh_token)

    def test_logout_then_reissue_scenario(self, sessions, store, token_authority):
        pair = token_authority.issue_token_pair(TokenSubject(id="u1", token_version=0))
        assert token_authority.verify_access_token(pair.access_token).token_version == 0
        assert token_authority.verify_refresh_token(pair.refresh_token).token_version == 0

        store.users["u1"].token_version = 1

        with pytest.raises(Unauthorized):
            sessions.authorize(bearer(pair.access_token))
        fresh = token_authority.issue_token_pair(TokenSubject(id="u1", token_version=1))
        assert sessions.authorize(bearer(fresh.access_token)).token_version == 1
        assert token_authority.verify_refresh_token(fresh.refresh_token).token_version == 1

    def test_new_tokens_after_revocation_are_live(self, sessions, store):
        sessions.revoke("u1")
        pair = sessions.issue_token_pair(store.users["u1"])

        assert sessions.authorize(bearer(pair.access_token)).token_version == 1

    def test_version_ahead_of_store_is_rejected(self, sessions, token_authority):
        token = token_authority.issue_access_token(TokenSubject(id="u1", token_version=5))

        with pytest.raises(Unauthorized):
            sessions.authorize(bearer(token))

    def test_unknown_subject(self, sessions, token_authority):
        token = token_authority.issue_access_token(TokenSubject(id="ghost", token_version=0))

        with pytest.raises(Unauthorized) as exc_info:
            sessions.authorize(bearer(token))
        assert exc_info.value.message == INVALID_ACCESS_MESSAGE

    def test_refresh_token_cannot_authorize(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        with pytest.raises(Unauthorized):
            sessions.authorize(bearer(pair.refresh_token))

    def test_garbage_token_has_generic_message(self, sessions):
        with pytest.raises(Unauthorized) as exc_info:
            sessions.authorize(bearer("not-a-jwt"))
        assert exc_info.value.message == INVALID_ACCESS_MESSAGE
        assert exc_info.value.__cause__ is None


class TestRefreshAndLogout:
    def test_refresh_issues_pair_at_current_version(self, sessions, store, token_authority):
        pair = sessions.issue_token_pair(store.users["u1"])

        user, new_pair = sessions.refresh(pair.refresh_token)

        assert user.id == "u1"
        assert token_authority.verify_access_token(new_pair.access_token).token_version == 0
        assert store.users["u1"].token_version == 0

    def test_access_token_cannot_refresh(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        with pytest.raises(Unauthorized) as exc_info:
            sessions.refresh(pair.access_token)
        assert exc_info.value.message == INVALID_REFRESH_MESSAGE

    def test_logout_revokes_everything(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        sessions.logout(pair.refresh_token)

        assert store.users["u1"].token_version == 1
        with pytest.raises(Unauthorized):
            sessions.authorize(bearer(pair.access_token))
        with pytest.raises(Unauthorized):
            sessions.logout(pair.refresh_token)
        assert store.users["u1"].token_version == 1

    def test_logout_revokes_other_devices(self, sessions, store):
        phone = sessions.issue_token_pair(store.users["u1"])
        laptop = sessions.issue_token_pair(store.users["u1"])

        sessions.logout(phone.refresh_token)

        with pytest.raises(Unauthorized):
            sessions.refresh(laptop.refresh_token)


class TestLogin:
    def test_valid_credentials(self, sessions):
        user, pair = sessions.login("u1@example.com", "secret-pass")

        assert user.id == "u1"
        assert sessions.authorize(bearer(pair.access_token)).id == "u1"

    def test_wrong_password_and_unknown_email_look_the_same(self, sessions):
        with pytest.raises(Unauthorized) as wrong_password:
            sessions.login("u1@example.com", "nope")
        with pytest.raises(Unauthorized) as unknown_email:
            sessions.login("nobody@example.com", "secret-pass")

        assert wrong_password.value.message == INVALID_CREDENTIALS_MESSAGE
        assert unknown_email.value.message == INVALID_CREDENTIALS_MESSAGE

    def test_unknown_email_verifies_against_dummy_hash(self, token_authority, store):
        checked = []

        def recording_verifier(password, password_hash):
            checked.append(password_hash)
            return False

        service = SessionService(token_authority, store, password_verifier=recording_verifier)

        with pytest.raises(Unauthorized):
            service.login("nobody@example.com", "secret-pass")
        assert checked == [TIMING_DUMMY_HASH]
        assert TIMING_DUMMY_HASH.startswith("$argon2id$")


class TestPasswordReset:
    def test_unknown_email_yields_no_token(self, sessions):
        assert sessions.start_password_reset("nobody@example.com") is None

    def test_reset_stores_only_the_hash(self, sessions, store):
        token = sessions.start_password_reset("u1@example.com")

        user = store.users["u1"]
        assert token is not None
        assert user.reset_token_hash == hash_reset_token(token)
        assert user.reset_token_hash != token
        assert user.reset_token_expires_at > datetime.now(timezone.utc)

    def test_complete_reset_revokes_sessions(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])
        token = sessions.start_password_reset("u1@example.com")

        sessions.complete_password_reset(token, "brand-new-pass")

        user = store.users["u1"]
        assert user.password_hash == "hashed:brand-new-pass"
        assert user.token_version == 1
        assert user.reset_token_hash is None
        with pytest.raises(Unauthorized):
            sessions.authorize(bearer(pair.access_token))

    def test_reset_token_is_single_use(self, sessions):
        token = sessions.start_password_reset("u1@example.com")
        sessions.complete_password_reset(token, "brand-new-pass")

        with pytest.raises(InvalidResetTokenError):
            sessions.complete_password_reset(token, "another-pass")

    def test_expired_reset_token(self, sessions, store):
        token = sessions.start_password_reset("u1@example.com")
        store.users["u1"].reset_token_expires_at = datetime.now(timezone.utc) - timedelta(
            minutes=1
        )

        with pytest.raises(InvalidResetTokenError):
            sessions.complete_password_reset(token, "brand-new-pass")

    def test_unknown_reset_token(self, sessions):
        with pytest.raises(InvalidResetTokenError):
            sessions.complete_password_reset("deadbeef", "brand-new-pass")


class TestAccountDeletion:
    def test_requires_live_token_and_password(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        user = sessions.authorize_account_deletion(bearer(pair.access_token), "secret-pass")

        assert user.id == "u1"
        assert store.id_lookups == 1

    def test_wrong_password(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])

        with pytest.raises(Unauthorized) as exc_info:
            sessions.authorize_account_deletion(bearer(pair.access_token), "nope")
        assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE

    def test_revoked_token(self, sessions, store):
        pair = sessions.issue_token_pair(store.users["u1"])
        sessions.revoke("u1")

        with pytest.raises(Unauthorized):
            sessions.authorize_account_deletion(bearer(pair.access_token), "secret-pass")


@given(st.integers(min_value=0, max_value=10_000))
def test_property_revoke_rejects_tokens_at_any_version(version: int):
    store = InMemoryUserStore(
        FakeUser(
            id="u1",
            email="u1@example.com",
            password_hash="hashed:secret-pass",
            token_version=version,
        )
    )
    sessions = SessionService(
        PROPERTY_AUTHORITY,
        store,
        password_verifier=_plain_verifier,
        password_hasher=_plain_hasher,
    )
    old = sessions.issue_token_pair(store.users["u1"])
    assert sessions.authorize(bearer(old.access_token)).token_version == version

    sessions.revoke("u1")

    with pytest.raises(Unauthorized):
        sessions.authorize(bearer(old.access_token))
    with pytest.raises(Unauthorized):
        sessions.refresh(old.refresh_token)
    fresh = sessions.issue_token_pair(store.users["u1"])
    assert sessions.authorize(bearer(fresh.access_token)).token_version == version + 1
