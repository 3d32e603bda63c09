"""Watchlist operations scoped to one user."""

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.adapters.omdb import OmdbClient
from backend.app.db.models.media_item import MediaItem
from backend.app.db.models.watch_entry import WatchEntry, WatchStatus
from backend.app.models.media import MediaItemData
from backend.app.models.watchlist import UpdateWatchlistRequest, WatchEntryData
from backend.app.services.media_search import fetch_media_detail

logger = logging.getLogger(__name__)


class MediaItemNotFoundError(Exception):
    """The media item is neither stored locally nor known to OMDb."""


class WatchEntryNotFoundError(Exception):
    """The media item is not on the user's watchlist."""


class DuplicateWatchEntryError(Exception):
    """The media item is already on the user's watchlist."""


def media_item_to_data(item: MediaItem) -> MediaItemData:
    return MediaItemData(
        id=item.id,
        external_id=item.external_id,
        source=item.source,
        title=item.title,
        description=item.description,
        poster_url=item.poster_url,
        backdrop_url=item.backdrop_url,
        media_type=item.media_type,
        total_seasons=item.total_seasons,
        total_episodes=item.total_episodes,
        release_date=item.release_date,
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def watch_entry_to_data(entry: WatchEntry) -> WatchEntryData:
    return WatchEntryData(
        id=entry.id,
        user_id=entry.user_id,
        media_item_id=entry.media_item_id,
        status=entry.status,
        rating=entry.rating,
        notes=entry.notes,
        last_watched_at=entry.last_watched_at,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
        media_item=media_item_to_data(entry.media_item),
    )


def find_media_item(session: Session, media_item_id: str) -> MediaItem | None:
    """Look a media item up by internal id or external (IMDb) id."""
    stmt = select(MediaItem).where(
        or_(MediaItem.id == media_item_id, MediaItem.external_id == media_item_id)
    )
    return session.execute(stmt).scalars().first()


def resolve_media_item(
    session: Session, client: OmdbClient, media_item_id: str
) -> MediaItem:
    """Find a stored media item, importing it from OMDb when missing.

    Raises:
        MediaItemNotFoundError: If OMDb does not know the id either
        OmdbError: For other OMDb failures
    """
    item = find_media_item(session, media_item_id)
    if item is not None:
        return item

    data = fetch_media_detail(client, media_item_id)
    if data is None:
        raise MediaItemNotFoundError("Media item not found")

    return upsert_media_item(session, data)


def upsert_media_item(session: Session, data: MediaItemData) -> MediaItem:
    """Insert or refresh a media item keyed by ``external_id``."""
    fields = {
        "source": data.source,
        "title": data.title,
        "description": data.description,
        "poster_url": data.poster_url,
        "backdrop_url": data.backdrop_url,
        "media_type": data.media_type,
        "total_seasons": data.total_seasons,
        "total_episodes": data.total_episodes,
        "release_date": data.release_date,
    }

    stmt = select(MediaItem).where(MediaItem.external_id == data.external_id)
    item = session.execute(stmt).scalar_one_or_none()
    if item is None:
        item = MediaItem(external_id=data.external_id, **fields)
        session.add(item)
        try:
            session.commit()
        except IntegrityError:
            # Inserted concurrently by another request
            session.rollback()
            item = session.execute(stmt).scalar_one()
    else:
        for key, value in fields.items():
            setattr(item, key, value)
        session.commit()

    session.refresh(item)
    logger.info("Stored media item %s", data.external_id)
    return item


def add_to_watchlist(session: Session, user_id: str, media_item: MediaItem) -> WatchEntry:
    """Raises DuplicateWatchEntryError when already present."""
    if _find_entry(session, user_id, media_item.id) is not None:
        raise DuplicateWatchEntryError("Item already in watchlist")

    entry = WatchEntry(
        user_id=user_id,
        media_item_id=media_item.id,
        status=WatchStatus.PLANNED,
    )
    session.add(entry)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise DuplicateWatchEntryError("Item already in watchlist") from e

    session.refresh(entry)
    return entry


def list_watchlist(session: Session, user_id: str) -> list[WatchEntry]:
    stmt = (
        select(WatchEntry)
        .where(WatchEntry.user_id == user_id)
        .order_by(WatchEntry.created_at.desc())
    )
    return list(session.execute(stmt).unique().scalars().all())


def get_watch_entry(session: Session, user_id: str, media_item_id: str) -> WatchEntry:
    """Find the caller's entry for a media item (internal or external id).

    Raises:
        WatchEntryNotFoundError: If there is no such entry
    """
    item = find_media_item(session, media_item_id)
    entry = _find_entry(session, user_id, item.id) if item is not None else None
    if entry is None:
        raise WatchEntryNotFoundError("Item not found in watchlist")
    return entry


def update_watch_entry(
    session: Session,
    user_id: str,
    media_item_id: str,
    update: UpdateWatchlistRequest,
) -> WatchEntry:
    entry = get_watch_entry(session, user_id, media_item_id)

    changes = update.model_dump(exclude_unset=True)
    if not changes:
        return entry

    if "status" in changes and changes["status"] is None:
        # status is not nullable; an explicit null leaves it untouched
        changes.pop("status")

    for key, value in changes.items():
        setattr(entry, key, value)

    session.commit()
    session.refresh(entry)
    return entry


def remove_from_watchlist(session: Session, user_id: str, media_item_id: str) -> None:
    entry = get_watch_entry(session, user_id, media_item_id)
    session.delete(entry)
    session.commit()


def _find_entry(session: Session, user_id: str, media_item_id: str) -> WatchEntry | None:
    stmt = select(WatchEntry).where(
        WatchEntry.user_id == user_id,
        WatchEntry.media_item_id == media_item_id,
    )
    return session.execute(stmt).unique().scalar_one_or_none()
