"""One-time password reset tokens.

Only the SHA-256 digest of a reset token is stored; the raw value is handed
to the client once.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone


def generate_reset_token() -> str:
    """Return a random 64 character hex token."""
    return secrets.token_hex(32)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def create_reset_token_expiration(hours_from_now: int = 1) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours_from_now)


def is_reset_token_expired(expires_at: datetime | None) -> bool:
    """A missing expiry counts as expired."""
    if expires_at is None:
        return True
    # SQLite hands back naive datetimes
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc) > expires_at
