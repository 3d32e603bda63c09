"""Watchlist entry ORM model."""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base
from backend.app.db.mixins import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from .media_item import MediaItem
    from .user import User


class WatchStatus(str, enum.Enum):
    PLANNED = "PLANNED"
    WATCHING = "WATCHING"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    DROPPED = "DROPPED"


class WatchEntry(IdMixin, TimestampMixin, Base):
    """A media item on a user's watchlist."""

    __tablename__ = "watch_entry"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    media_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("media_item.id", ondelete="CASCADE"), nullable=False
    )
    status: Mapped[WatchStatus] = mapped_column(
        Enum(WatchStatus, name="watch_status"),
        nullable=False,
        default=WatchStatus.PLANNED,
    )
    rating: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_watched_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="watch_entries")
    media_item: Mapped["MediaItem"] = relationship("MediaItem", lazy="joined")

    # Constraints
    __table_args__ = (
        UniqueConstraint("user_id", "media_item_id", name="uq_watch_entry_user_media"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 10)",
            name="ck_watch_entry_rating",
        ),
        Index("idx_watch_entry_user", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<WatchEntry(id={self.id}, user_id={self.user_id}, status={self.status})>"
