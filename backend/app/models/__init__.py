"""Convenient imports for API model types."""

from .common import CamelModel, ErrorResponse, SuccessResponse
from .media import MediaItemData, MediaList
from .watchlist import (
    AddWatchlistRequest,
    UpdateWatchlistRequest,
    WatchEntryData,
    WatchlistResponse,
)

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "SuccessResponse",
    "MediaItemData",
    "MediaList",
    "AddWatchlistRequest",
    "UpdateWatchlistRequest",
    "WatchEntryData",
    "WatchlistResponse",
]
