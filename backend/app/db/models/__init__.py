"""ORM models for database tables."""

from .media_item import MediaItem, MediaType
from .user import User
from .watch_entry import WatchEntry, WatchStatus

__all__ = [
    "User",
    "MediaItem",
    "MediaType",
    "WatchEntry",
    "WatchStatus",
]
