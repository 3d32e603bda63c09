"""Watchlist request/response models."""

from datetime import datetime

from pydantic import Field

from backend.app.db.models.watch_entry import WatchStatus
from backend.app.models.common import CamelModel
from backend.app.models.media import MediaItemData


class WatchEntryData(CamelModel):
    id: str
    user_id: str
    media_item_id: str
    status: WatchStatus
    rating: int | None = None
    notes: str | None = None
    last_watched_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    media_item: MediaItemData


class WatchlistResponse(CamelModel):
    items: list[WatchEntryData]


class AddWatchlistRequest(CamelModel):
    media_item_id: str = Field(min_length=1)


class UpdateWatchlistRequest(CamelModel):
    """Partial update; only fields present in the body are applied."""

    status: WatchStatus | None = None
    rating: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = None
    last_watched_at: datetime | None = None
