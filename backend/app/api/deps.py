"""Shared FastAPI dependencies."""

from collections.abc import Generator

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from backend.app.adapters.omdb import OmdbClient
from backend.app.config import get_settings
from backend.app.db.session import get_session
from backend.app.db.users import UserRepository
from backend.app.security.jwt import TokenAuthority
from backend.app.security.sessions import AuthenticatedIdentity, SessionService

_token_authority: TokenAuthority | None = None


def get_token_authority() -> TokenAuthority:
    """Token authority singleton built from the startup configuration."""
    global _token_authority
    if _token_authority is None:
        _token_authority = TokenAuthority(get_settings().token_settings())
    return _token_authority


def get_user_repository(session: Session = Depends(get_session)) -> UserRepository:
    return UserRepository(session)


def get_session_service(
    authority: TokenAuthority = Depends(get_token_authority),
    users: UserRepository = Depends(get_user_repository),
) -> SessionService:
    return SessionService(
        authority,
        users,
        reset_token_ttl_hours=get_settings().reset_token_ttl_hours,
    )


def get_current_identity(
    authorization: str | None = Header(default=None),
    sessions: SessionService = Depends(get_session_service),
) -> AuthenticatedIdentity:
    """Authorize the request's bearer token against the live token version."""
    return sessions.authorize(authorization)


def get_omdb_client() -> Generator[OmdbClient, None, None]:
    settings = get_settings()
    client = OmdbClient(
        api_key=settings.omdb_api_key,
        base_url=settings.omdb_base_url,
        timeout=settings.omdb_timeout_s,
    )
    try:
        yield client
    finally:
        client.close()
