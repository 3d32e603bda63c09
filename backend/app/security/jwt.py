"""JWT token creation and verification.

Access and refresh tokens are signed with distinct HMAC secrets and carry
the subject's ``tokenVersion``. A token that verifies here is only
structurally valid; callers must still compare its version against the
user's current counter (see :mod:`backend.app.security.sessions`).
"""

from datetime import datetime, timezone
from typing import Any, Literal

import jwt
from pydantic import BaseModel, Field

from backend.app.config import TokenSettings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

TokenType = Literal["access", "refresh"]


class TokenSubject(BaseModel):
    """Identity snapshot bound into a token at issuance time."""

    model_config = {"frozen": True}

    id: str
    token_version: int = Field(ge=0)


class TokenPayload(BaseModel):
    """Decoded JWT token payload."""

    sub: str
    token_version: int
    type: TokenType
    issued_at: datetime
    expires_at: datetime


class TokenPair(BaseModel):
    """Access and refresh tokens minted from the same subject."""

    access_token: str
    refresh_token: str


class AuthenticationError(Exception):
    """Authentication-related errors."""

    pass


class TokenInvalidError(AuthenticationError):
    """Raised for any token that fails verification.

    ``reason`` is for operator logs only; it must not reach API clients.
    """

    def __init__(self, reason: str):
        super().__init__("Invalid or expired token")
        self.reason = reason


class TokenAuthority:
    """Mints and verifies access/refresh token pairs."""

    def __init__(self, settings: TokenSettings):
        self._settings = settings
        self._secrets: dict[str, str] = {
            ACCESS_TOKEN_TYPE: settings.access_secret,
            REFRESH_TOKEN_TYPE: settings.refresh_secret,
        }
        self._ttls = {
            ACCESS_TOKEN_TYPE: settings.access_ttl,
            REFRESH_TOKEN_TYPE: settings.refresh_ttl,
        }

    @property
    def access_ttl_seconds(self) -> int:
        return int(self._settings.access_ttl.total_seconds())

    def issue_access_token(self, subject: TokenSubject) -> str:
        """Create a short-lived access token for ``subject``.

        Raises:
            ValueError: If the subject id is empty or the version is negative
        """
        return self._sign(subject, ACCESS_TOKEN_TYPE)

    def issue_refresh_token(self, subject: TokenSubject) -> str:
        """Create a long-lived refresh token for ``subject``.

        Raises:
            ValueError: If the subject id is empty or the version is negative
        """
        return self._sign(subject, REFRESH_TOKEN_TYPE)

    def issue_token_pair(self, subject: TokenSubject) -> TokenPair:
        return TokenPair(
            access_token=self.issue_access_token(subject),
            refresh_token=self.issue_refresh_token(subject),
        )

    def verify_access_token(self, token: str) -> TokenPayload:
        """Verify and decode an access token.

        Raises:
            TokenInvalidError: If the token is invalid, expired, or wrong type
        """
        return self._verify(token, ACCESS_TOKEN_TYPE)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Verify and decode a refresh token.

        Raises:
            TokenInvalidError: If the token is invalid, expired, or wrong type
        """
        return self._verify(token, REFRESH_TOKEN_TYPE)

    def _sign(self, subject: TokenSubject, token_type: str) -> str:
        if not subject.id:
            raise ValueError("Token subject id must not be empty")
        if isinstance(subject.token_version, bool) or subject.token_version < 0:
            raise ValueError("Token version must be a non-negative integer")

        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject.id,
            "tokenVersion": subject.token_version,
            "type": token_type,
            "iat": now,
            "exp": now + self._ttls[token_type],
        }
        return jwt.encode(
            payload, self._secrets[token_type], algorithm=self._settings.algorithm
        )

    def _verify(self, token: str, expected_type: str) -> TokenPayload:
        try:
            decoded = jwt.decode(
                token,
                self._secrets[expected_type],
                algorithms=[self._settings.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenInvalidError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        return _validate_claims(decoded, expected_type)


def _validate_claims(decoded: Any, expected_type: str) -> TokenPayload:
    if not isinstance(decoded, dict):
        raise TokenInvalidError("Invalid token payload")

    if decoded.get("type") != expected_type:
        raise TokenInvalidError("Unexpected token type")

    sub = decoded.get("sub")
    if not isinstance(sub, str) or not sub:
        raise TokenInvalidError("Token subject missing or invalid")

    version = decoded.get("tokenVersion")
    if not isinstance(version, int) or isinstance(version, bool):
        raise TokenInvalidError("Token version missing or invalid")

    try:
        return TokenPayload(
            sub=sub,
            token_version=version,
            type=decoded["type"],
            issued_at=datetime.fromtimestamp(decoded["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(decoded["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TokenInvalidError(f"Malformed token payload: {e}")
