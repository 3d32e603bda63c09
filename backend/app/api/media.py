"""Media search and lookup endpoints backed by OMDb."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from backend.app.adapters.omdb import OmdbClient
from backend.app.api.deps import get_omdb_client
from backend.app.models.media import MediaItemData, MediaList
from backend.app.services.media_search import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    fetch_media_detail,
    search_media,
)

router = APIRouter(prefix="/media", tags=["media"])


@router.get("", response_model=MediaList)
def list_media(
    query: str = Query(default=""),
    limit: int = Query(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    page: int = Query(default=1, ge=1),
    client: OmdbClient = Depends(get_omdb_client),
) -> MediaList:
    """Search OMDb titles; a blank query returns an empty page.

    Raises:
        OmdbError: If OMDb fails (502)
    """
    return search_media(client, query, page=page, limit=limit)


@router.get("/{media_id}", response_model=MediaItemData)
def get_media(
    media_id: str,
    client: OmdbClient = Depends(get_omdb_client),
) -> MediaItemData:
    item = fetch_media_detail(client, media_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Media item not found"
        )
    return item
