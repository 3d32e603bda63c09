"""Watchlist API endpoints for the authenticated user."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.adapters.omdb import OmdbClient
from backend.app.api.deps import get_current_identity, get_omdb_client
from backend.app.db.session import get_session
from backend.app.models.common import SuccessResponse
from backend.app.models.watchlist import (
    AddWatchlistRequest,
    UpdateWatchlistRequest,
    WatchEntryData,
    WatchlistResponse,
)
from backend.app.security.sessions import AuthenticatedIdentity
from backend.app.services import watchlist as watchlist_service

router = APIRouter(prefix="/watchlist", tags=["watchlist"])


@router.post("", response_model=WatchEntryData, status_code=status.HTTP_201_CREATED)
def add_watchlist_entry(
    request: AddWatchlistRequest,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    session: Session = Depends(get_session),
    client: OmdbClient = Depends(get_omdb_client),
) -> WatchEntryData:
    """Add a title to the watchlist, importing it from OMDb if needed.

    Raises:
        MediaItemNotFoundError: Unknown title (404)
        DuplicateWatchEntryError: Already on the watchlist (409)
        OmdbError: OMDb failure (502)
    """
    media_item = watchlist_service.resolve_media_item(
        session, client, request.media_item_id
    )
    entry = watchlist_service.add_to_watchlist(session, identity.id, media_item)
    return watchlist_service.watch_entry_to_data(entry)


@router.get("", response_model=WatchlistResponse)
def list_watchlist_entries(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> WatchlistResponse:
    entries = watchlist_service.list_watchlist(session, identity.id)
    return WatchlistResponse(
        items=[watchlist_service.watch_entry_to_data(entry) for entry in entries]
    )


@router.get("/{media_item_id}", response_model=WatchEntryData)
def get_watchlist_entry(
    media_item_id: str,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> WatchEntryData:
    entry = watchlist_service.get_watch_entry(session, identity.id, media_item_id)
    return watchlist_service.watch_entry_to_data(entry)


@router.patch("/{media_item_id}", response_model=WatchEntryData)
def update_watchlist_entry(
    media_item_id: str,
    request: UpdateWatchlistRequest,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> WatchEntryData:
    """Apply only the fields present in the body."""
    entry = watchlist_service.update_watch_entry(
        session, identity.id, media_item_id, request
    )
    return watchlist_service.watch_entry_to_data(entry)


@router.delete("/{media_item_id}", response_model=SuccessResponse)
def delete_watchlist_entry(
    media_item_id: str,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> SuccessResponse:
    watchlist_service.remove_from_watchlist(session, identity.id, media_item_id)
    return SuccessResponse(success=True, message="Item removed from watchlist")
