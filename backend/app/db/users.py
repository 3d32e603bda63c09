"""User persistence operations.

Reads always bypass the session identity map so that ``token_version`` is
the value currently committed in the database.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.db.models.user import User

logger = logging.getLogger(__name__)


class DuplicateUserError(Exception):
    """Raised when email or username is already taken."""


class UserRepository:
    """SQLAlchemy-backed implementation of the user store."""

    def __init__(self, session: Session):
        self.session = session

    def find_user_by_id(self, user_id: str) -> User | None:
        stmt = (
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_user_by_email(self, email: str) -> User | None:
        stmt = (
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def find_user_by_reset_token_hash(self, token_hash: str) -> User | None:
        stmt = (
            select(User)
            .where(User.reset_token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create_user(self, email: str, username: str, password_hash: str) -> User:
        """Insert a new user with ``token_version`` 0.

        Raises:
            DuplicateUserError: If email or username already exists
        """
        user = User(
            email=email,
            username=username,
            password_hash=password_hash,
            token_version=0,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateUserError("Email or username is already in use") from e

        self.session.refresh(user)
        return user

    def increment_token_version(self, user_id: str) -> None:
        """Bump the revocation counter in a single UPDATE statement."""
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                token_version=User.token_version + 1,
                updated_at=datetime.now(UTC),
            )
        )
        self.session.commit()
        logger.info("Token version incremented", extra={"user_id": user_id})

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        """Store a new password hash and revoke all outstanding tokens.

        The reset token is consumed in the same statement.
        """
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                password_hash=password_hash,
                token_version=User.token_version + 1,
                reset_token_hash=None,
                reset_token_expires_at=None,
                updated_at=datetime.now(UTC),
            )
        )
        self.session.commit()
        logger.info("Password updated and tokens revoked", extra={"user_id": user_id})

    def set_reset_token(
        self, user_id: str, token_hash: str, expires_at: datetime
    ) -> None:
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(reset_token_hash=token_hash, reset_token_expires_at=expires_at)
        )
        self.session.commit()

    def delete_user(self, user_id: str) -> bool:
        """Delete a user and (by cascade) their watchlist."""
        user = self.session.get(User, user_id)
        if user is None:
            return False
        self.session.delete(user)
        self.session.commit()
        return True
