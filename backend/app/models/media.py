"""Media item models shared by the OMDb mapper and the API."""

from datetime import datetime

from pydantic import Field

from backend.app.db.models.media_item import MediaType
from backend.app.models.common import CamelModel


class MediaItemData(CamelModel):
    """A media item as served to clients."""

    id: str = Field(min_length=1)
    external_id: str = Field(min_length=1)
    source: str = "omdb"
    title: str
    description: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    media_type: MediaType
    total_seasons: int | None = Field(default=None, ge=0)
    total_episodes: int | None = Field(default=None, ge=0)
    release_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MediaList(CamelModel):
    """One page of search results."""

    items: list[MediaItemData]
    has_more: bool = False
    next_page: int | None = None
