"""Password hashing and verification using Argon2id."""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from backend.app.config import get_settings


def get_password_hasher() -> PasswordHasher:
    """Get configured Argon2id password hasher.

    Returns:
        Configured PasswordHasher instance
    """
    return PasswordHasher(
        time_cost=3,        # 3 iterations
        memory_cost=65536,  # 64 MB
        parallelism=1,
        hash_len=32,
        salt_len=16,
        encoding="utf-8",
    )


def validate_password_length(password: str) -> None:
    """Check password length bounds from settings.

    Raises:
        ValueError: If password is too short or too long
    """
    settings = get_settings()

    if len(password) < settings.password_min_length:
        raise ValueError(
            f"Password must be at least {settings.password_min_length} characters"
        )

    if len(password) > settings.password_max_length:
        raise ValueError(
            f"Password must be {settings.password_max_length} characters or less"
        )


def hash_password(password: str) -> str:
    """Hash password using Argon2id.

    Args:
        password: Plain text password

    Returns:
        Argon2id hash string

    Raises:
        ValueError: If password is invalid
    """
    validate_password_length(password)
    return get_password_hasher().hash(password)


def verify_password(password: str, hash_string: str) -> bool:
    """Verify password against Argon2id hash.

    Malformed hashes count as a mismatch.
    """
    try:
        return get_password_hasher().verify(hash_string, password)
    except (VerificationError, InvalidHashError):
        return False
