"""Authentication API endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import EmailStr, Field

from backend.app.api.deps import (
    get_current_identity,
    get_session_service,
    get_user_repository,
)
from backend.app.db.models.user import User
from backend.app.db.users import UserRepository
from backend.app.models.common import CamelModel, SuccessResponse
from backend.app.security.jwt import TokenPair
from backend.app.security.passwords import hash_password
from backend.app.security.sessions import AuthenticatedIdentity, SessionService

__all__ = ["router"]

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    username: str = Field(min_length=3, max_length=32)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenRequest(CamelModel):
    """Body carrying a refresh token (refresh and logout)."""

    refresh_token: str = Field(min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ForgotPasswordResponse(CamelModel):
    message: str
    reset_token: str | None = None


class ResetPasswordRequest(CamelModel):
    reset_token: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=128)


class DeleteAccountRequest(CamelModel):
    password: str = Field(min_length=1)


class UserResponse(CamelModel):
    """Public view of a user account."""

    id: str
    email: str
    username: str
    created_at: datetime
    updated_at: datetime


class AuthResponse(CamelModel):
    """Authentication response."""

    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


def serialize_user(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def build_auth_response(
    user: User, tokens: TokenPair, sessions: SessionService
) -> AuthResponse:
    return AuthResponse(
        user=serialize_user(user),
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=sessions.authority.access_ttl_seconds,
    )


@router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def register(
    request: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
    sessions: SessionService = Depends(get_session_service),
) -> AuthResponse:
    """Create an account and log it in.

    Raises:
        DuplicateUserError: If email or username is taken (409)
    """
    try:
        password_hash = hash_password(request.password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    user = users.create_user(
        email=request.email, username=request.username, password_hash=password_hash
    )
    logger.info("Registered user", extra={"user_id": user.id})
    return build_auth_response(user, sessions.issue_token_pair(user), sessions)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    sessions: SessionService = Depends(get_session_service),
) -> AuthResponse:
    """Authenticate with email and password.

    Unknown email and wrong password are indistinguishable (401).
    """
    user, tokens = sessions.login(request.email, request.password)
    return build_auth_response(user, tokens, sessions)


@router.post("/refresh", response_model=AuthResponse)
def refresh_tokens(
    request: TokenRequest,
    sessions: SessionService = Depends(get_session_service),
) -> AuthResponse:
    """Exchange a live refresh token for a new token pair."""
    user, tokens = sessions.refresh(request.refresh_token)
    return build_auth_response(user, tokens, sessions)


@router.post("/logout", response_model=SuccessResponse, response_model_exclude_none=True)
def logout(
    request: TokenRequest,
    sessions: SessionService = Depends(get_session_service),
) -> SuccessResponse:
    """Revoke all of the user's tokens by bumping their token version."""
    sessions.logout(request.refresh_token)
    return SuccessResponse(success=True)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    users: UserRepository = Depends(get_user_repository),
) -> UserResponse:
    user = users.find_user_by_id(identity.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return serialize_user(user)


@router.post("/forgot-password", response_model=ForgotPasswordResponse)
def forgot_password(
    request: ForgotPasswordRequest,
    sessions: SessionService = Depends(get_session_service),
) -> ForgotPasswordResponse:
    """Issue a one-time reset token.

    The response is the same whether or not the email exists, apart from
    the token itself.
    """
    token = sessions.start_password_reset(request.email)
    return ForgotPasswordResponse(message="Reset token generated", reset_token=token)


@router.post("/reset-password", response_model=SuccessResponse)
def reset_password(
    request: ResetPasswordRequest,
    sessions: SessionService = Depends(get_session_service),
) -> SuccessResponse:
    """Set a new password; every existing session is revoked."""
    try:
        sessions.complete_password_reset(request.reset_token, request.new_password)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SuccessResponse(success=True, message="Password has been reset successfully")


@router.delete("/account", response_model=SuccessResponse, response_model_exclude_none=True)
def delete_account(
    request: DeleteAccountRequest,
    authorization: str | None = Header(default=None),
    sessions: SessionService = Depends(get_session_service),
    users: UserRepository = Depends(get_user_repository),
) -> SuccessResponse:
    """Delete the caller's account after re-checking token and password."""
    user = sessions.authorize_account_deletion(authorization, request.password)
    users.delete_user(user.id)
    logger.info("Deleted user", extra={"user_id": user.id})
    return SuccessResponse(success=True)
