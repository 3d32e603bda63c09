"""Map OMDb payloads to media items.

OMDb encodes missing values as the literal string ``"N/A"``; every field
passes through the normalizers below before reaching a MediaItemData.
"""

import re
from datetime import UTC, datetime
from typing import Any

from backend.app.db.models.media_item import MediaType
from backend.app.models.media import MediaItemData

OMDB_SOURCE = "omdb"

_RELEASED_FORMATS = ("%d %b %Y", "%Y-%m-%d")
_YEAR_RE = re.compile(r"^\s*(\d{4})")
_LEADING_INT_RE = re.compile(r"^\s*(-?\d+)")


def map_omdb_detail(
    detail: dict[str, Any], now: datetime | None = None
) -> MediaItemData | None:
    """Map an OMDb detail response; None when OMDb reports Response=False."""
    if detail.get("Response") == "False":
        return None

    imdb_id = normalize_value(detail.get("imdbID"))
    title = normalize_value(detail.get("Title"))
    if not imdb_id or not title:
        return None

    now = now or datetime.now(UTC)
    return MediaItemData(
        id=imdb_id,
        external_id=imdb_id,
        source=OMDB_SOURCE,
        title=title,
        description=normalize_value(detail.get("Plot")),
        poster_url=normalize_value(detail.get("Poster")),
        backdrop_url=None,
        media_type=map_media_type(
            detail.get("Type"), detail.get("Genre"), detail.get("Country")
        ),
        total_seasons=parse_optional_int(detail.get("totalSeasons")),
        total_episodes=parse_optional_int(detail.get("totalEpisodes")),
        release_date=derive_release_date(detail.get("Released"), detail.get("Year")),
        created_at=now,
        updated_at=now,
    )


def map_search_fallback(
    item: dict[str, Any], now: datetime | None = None
) -> MediaItemData:
    """Minimal item built from a search hit when details are unavailable."""
    now = now or datetime.now(UTC)
    return MediaItemData(
        id=item["imdbID"],
        external_id=item["imdbID"],
        source=OMDB_SOURCE,
        title=item.get("Title") or item["imdbID"],
        description=None,
        poster_url=normalize_value(item.get("Poster")),
        backdrop_url=None,
        media_type=map_media_type(item.get("Type")),
        total_seasons=None,
        total_episodes=None,
        release_date=derive_release_date(None, item.get("Year")),
        created_at=now,
        updated_at=now,
    )


def normalize_value(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == "N/A":
        return None
    return value


def parse_optional_int(value: Any) -> int | None:
    """Parse "24" -> 24; "N/A", blanks and garbage -> None."""
    text = normalize_value(value)
    if text is None:
        return None
    match = _LEADING_INT_RE.match(text)
    if not match:
        return None
    parsed = int(match.group(1))
    return parsed if parsed >= 0 else None


def derive_release_date(released: Any, year: Any) -> datetime | None:
    """Prefer ``Released``; fall back to January 1st of ``Year``."""
    released_text = normalize_value(released)
    if released_text:
        for fmt in _RELEASED_FORMATS:
            try:
                return datetime.strptime(released_text, fmt).replace(tzinfo=UTC)
            except ValueError:
                continue

    year_text = normalize_value(year)
    if year_text:
        # Series report ranges such as "2010–2015"
        match = _YEAR_RE.match(year_text)
        if match:
            return datetime(int(match.group(1)), 1, 1, tzinfo=UTC)

    return None


def map_media_type(
    type_: Any, genre: Any = None, country: Any = None
) -> MediaType:
    """series/episode -> TV; anime genre, or Japanese animation -> ANIME."""
    normalized_type = (type_ or "").lower() if isinstance(type_, str) else ""
    if normalized_type in ("series", "episode"):
        return MediaType.TV

    normalized_genre = genre.lower() if isinstance(genre, str) else ""
    normalized_country = country.lower() if isinstance(country, str) else ""

    if "anime" in normalized_genre or (
        "animation" in normalized_genre and "japan" in normalized_country
    ):
        return MediaType.ANIME

    return MediaType.MOVIE
