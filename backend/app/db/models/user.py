"""User ORM model."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from .watch_entry import WatchEntry


class User(IdMixin, TimestampMixin, Base):
    """User account.

    ``token_version`` is the revocation counter: every token embeds the value
    current at issuance and is rejected once the counter moves on.
    """

    __tablename__ = "user"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    username: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)  # Argon2id
    token_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    reset_token_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reset_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    watch_entries: Mapped[list["WatchEntry"]] = relationship(
        "WatchEntry",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, token_version={self.token_version})>"
