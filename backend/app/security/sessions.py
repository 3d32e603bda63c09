"""Revocation-aware authorization flows.

Every flow follows the same pattern: verify the token's signature and shape,
load the current user, compare the embedded ``tokenVersion`` with the stored
counter, then proceed or reject. Revocation is a counter bump performed by
the user store; nothing here caches the counter.

All rejections surface as :class:`Unauthorized` with a generic message. The
specific cause is only logged.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from backend.app.security.jwt import (
    AuthenticationError,
    TokenAuthority,
    TokenInvalidError,
    TokenPair,
    TokenPayload,
    TokenSubject,
)
from backend.app.security.passwords import (
    get_password_hasher,
    hash_password,
    verify_password,
)
from backend.app.security.reset_tokens import (
    create_reset_token_expiration,
    generate_reset_token,
    hash_reset_token,
    is_reset_token_expired,
)

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

MISSING_HEADER_MESSAGE = "Missing or invalid Authorization header"
INVALID_ACCESS_MESSAGE = "Invalid or expired access token"
INVALID_REFRESH_MESSAGE = "Invalid or expired refresh token"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"


class StoredUser(Protocol):
    id: str
    email: str
    password_hash: str
    token_version: int


class UserStore(Protocol):
    """Persistence collaborator that owns ``token_version``."""

    def find_user_by_id(self, user_id: str) -> StoredUser | None: ...

    def find_user_by_email(self, email: str) -> StoredUser | None: ...

    def find_user_by_reset_token_hash(self, token_hash: str) -> StoredUser | None: ...

    def increment_token_version(self, user_id: str) -> None: ...

    def update_password_hash(self, user_id: str, password_hash: str) -> None: ...

    def set_reset_token(
        self, user_id: str, token_hash: str, expires_at: datetime
    ) -> None: ...


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Caller identity for the remainder of a request."""

    id: str
    token_version: int


class Unauthorized(AuthenticationError):
    """Uniform rejection for every authentication failure."""

    def __init__(self, message: str = INVALID_ACCESS_MESSAGE):
        super().__init__(message)
        self.message = message


class InvalidResetTokenError(Exception):
    """Raised when a password reset token is unknown or expired."""


# Verified against for unknown emails so login timing does not reveal them
TIMING_DUMMY_HASH = get_password_hasher().hash("timing-equalizer")


def parse_bearer_header(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        Unauthorized: If the header is absent or malformed
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized(MISSING_HEADER_MESSAGE)

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise Unauthorized(MISSING_HEADER_MESSAGE)
    return token


def subject_for(user: StoredUser) -> TokenSubject:
    return TokenSubject(id=user.id, token_version=user.token_version)


class SessionService:
    """Composes token verification with live lookups in the user store."""

    def __init__(
        self,
        authority: TokenAuthority,
        store: UserStore,
        *,
        password_verifier: Callable[[str, str], bool] = verify_password,
        password_hasher: Callable[[str], str] = hash_password,
        reset_token_ttl_hours: int = 1,
    ):
        self.authority = authority
        self.store = store
        self._verify_password = password_verifier
        self._hash_password = password_hasher
        self._reset_token_ttl_hours = reset_token_ttl_hours

    def issue_token_pair(self, user: StoredUser) -> TokenPair:
        return self.authority.issue_token_pair(subject_for(user))

    def authorize(self, authorization: str | None) -> AuthenticatedIdentity:
        """Authorize a request from its ``Authorization`` header.

        Raises:
            Unauthorized: On a missing header, bad token, unknown user or
                stale token version
        """
        user = self._access_token_user(authorization)
        return AuthenticatedIdentity(id=user.id, token_version=user.token_version)

    def refresh(self, refresh_token: str) -> tuple[StoredUser, TokenPair]:
        """Mint a new pair bound to the user's current token version."""
        user = self._current_user_for(
            refresh_token, self.authority.verify_refresh_token, INVALID_REFRESH_MESSAGE
        )
        return user, self.issue_token_pair(user)

    def logout(self, refresh_token: str) -> None:
        """Revoke every outstanding token of the refresh token's owner."""
        user = self._current_user_for(
            refresh_token, self.authority.verify_refresh_token, INVALID_REFRESH_MESSAGE
        )
        self.revoke(user.id)

    def revoke(self, user_id: str) -> None:
        self.store.increment_token_version(user_id)
        logger.info("Revoked tokens", extra={"user_id": user_id})

    def login(self, email: str, password: str) -> tuple[StoredUser, TokenPair]:
        """Check credentials and issue a token pair.

        Raises:
            Unauthorized: If the email is unknown or the password is wrong
        """
        user = self.store.find_user_by_email(email)
        if user is None:
            # Keep response time close to the wrong-password path
            self._verify_password(password, TIMING_DUMMY_HASH)
            logger.debug("Login rejected: unknown email")
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        if not self._verify_password(password, user.password_hash):
            logger.debug("Login rejected: wrong password", extra={"user_id": user.id})
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        return user, self.issue_token_pair(user)

    def start_password_reset(self, email: str) -> str | None:
        """Create a one-time reset token for ``email``.

        Returns:
            The raw token, or None when no account uses that email
        """
        user = self.store.find_user_by_email(email)
        if user is None:
            logger.debug("Password reset requested for unknown email")
            return None

        token = generate_reset_token()
        self.store.set_reset_token(
            user.id,
            hash_reset_token(token),
            create_reset_token_expiration(self._reset_token_ttl_hours),
        )
        return token

    def complete_password_reset(self, reset_token: str, new_password: str) -> None:
        """Set a new password and revoke all outstanding tokens.

        Raises:
            InvalidResetTokenError: If the reset token is unknown or expired
            ValueError: If the new password violates length rules
        """
        user = self.store.find_user_by_reset_token_hash(hash_reset_token(reset_token))
        if user is None or is_reset_token_expired(
            getattr(user, "reset_token_expires_at", None)
        ):
            raise InvalidResetTokenError("Invalid or expired reset token")

        self.store.update_password_hash(user.id, self._hash_password(new_password))
        logger.info("Password reset completed", extra={"user_id": user.id})

    def authorize_account_deletion(
        self, authorization: str | None, password: str
    ) -> StoredUser:
        """Require a live access token and the account password.

        Raises:
            Unauthorized: If any of the checks fails
        """
        user = self._access_token_user(authorization)
        if not self._verify_password(password, user.password_hash):
            logger.debug("Account deletion rejected: wrong password", extra={"user_id": user.id})
            raise Unauthorized(INVALID_CREDENTIALS_MESSAGE)

        return user

    def _access_token_user(self, authorization: str | None) -> StoredUser:
        token = parse_bearer_header(authorization)
        return self._current_user_for(
            token, self.authority.verify_access_token, INVALID_ACCESS_MESSAGE
        )

    def _current_user_for(
        self,
        token: str,
        verify: Callable[[str], TokenPayload],
        message: str,
    ) -> StoredUser:
        try:
            payload = verify(token)
        except TokenInvalidError as e:
            logger.debug("Token rejected: %s", e.reason)
            raise Unauthorized(message) from None

        user = self.store.find_user_by_id(payload.sub)
        if user is None:
            logger.debug("Token rejected: unknown subject")
            raise Unauthorized(message)

        if user.token_version != payload.token_version:
            logger.debug(
                "Token rejected: version %s superseded by %s",
                payload.token_version,
                user.token_version,
            )
            raise Unauthorized(message)

        return user
