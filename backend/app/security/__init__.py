"""Security utilities for authentication and authorization."""

from .jwt import (
    AuthenticationError,
    TokenAuthority,
    TokenInvalidError,
    TokenPair,
    TokenPayload,
    TokenSubject,
)
from .middleware import SecurityHeadersMiddleware
from .passwords import hash_password, verify_password
from .sessions import (
    AuthenticatedIdentity,
    InvalidResetTokenError,
    SessionService,
    Unauthorized,
    UserStore,
)

__all__ = [
    "AuthenticationError",
    "TokenAuthority",
    "TokenInvalidError",
    "TokenPair",
    "TokenPayload",
    "TokenSubject",
    "hash_password",
    "verify_password",
    "AuthenticatedIdentity",
    "InvalidResetTokenError",
    "SessionService",
    "Unauthorized",
    "UserStore",
    "SecurityHeadersMiddleware",
]
