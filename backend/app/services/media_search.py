"""Paginated, de-duplicated media search over OMDb."""

import logging
import math

from backend.app.adapters.omdb import (
    OMDB_PAGE_SIZE,
    TOO_MANY_RESULTS_ERROR,
    OmdbClient,
    OmdbError,
    is_not_found_error,
)
from backend.app.adapters.omdb_mapper import map_omdb_detail, map_search_fallback
from backend.app.models.media import MediaItemData, MediaList

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20
MAX_LIMIT = 50
# OMDb refuses pages beyond 100
MAX_OMDB_PAGE = 100


def search_media(
    client: OmdbClient, query: str, *, page: int = 1, limit: int = DEFAULT_LIMIT
) -> MediaList:
    """Return one page of ``limit`` unique results for ``query``.

    Pages are expressed in units of ``limit`` unique results. OMDb's fixed
    10-result pages are walked from the start so that duplicate imdbIDs
    never shift a title onto two consecutive pages. Each hit is
    enriched with a detail call and falls back to the bare search hit when
    the detail lookup fails.

    Raises:
        OmdbError: If OMDb fails while searching
    """
    query = query.strip()
    if not query:
        return MediaList(items=[], has_more=False, next_page=None)

    limit = max(1, min(limit, MAX_LIMIT))
    page = max(1, page)

    to_skip = (page - 1) * limit
    omdb_page = 1

    hits: list[dict] = []
    seen: set[str] = set()
    total_results = 0
    last_index = -1  # absolute index of the last result consumed

    while len(hits) < limit and omdb_page <= MAX_OMDB_PAGE:
        response = client.search(query, page=omdb_page)

        if response.get("Response") == "False":
            error = response.get("Error")
            if is_not_found_error(error) or error == TOO_MANY_RESULTS_ERROR:
                break
            raise OmdbError(error or "Unknown OMDb search error")

        total_results = _parse_total(response.get("totalResults"))
        results = response.get("Search") or []
        page_start = (omdb_page - 1) * OMDB_PAGE_SIZE

        for position, item in enumerate(results):
            last_index = page_start + position
            imdb_id = item.get("imdbID") if isinstance(item, dict) else None
            if not imdb_id or imdb_id in seen:
                continue
            seen.add(imdb_id)
            if to_skip:
                to_skip -= 1
                continue
            hits.append(item)
            if len(hits) >= limit:
                break

        last_page = math.ceil(total_results / OMDB_PAGE_SIZE) if total_results else 0
        if not results or omdb_page >= last_page:
            break
        omdb_page += 1

    has_more = last_index + 1 < min(total_results, MAX_OMDB_PAGE * OMDB_PAGE_SIZE)
    items = [_enrich(client, hit) for hit in hits]

    return MediaList(
        items=items,
        has_more=has_more,
        next_page=page + 1 if has_more else None,
    )


def fetch_media_detail(client: OmdbClient, imdb_id: str) -> MediaItemData | None:
    """Fetch and map one title; None when OMDb does not know it.

    Raises:
        OmdbError: For OMDb errors other than "not found"
    """
    detail = client.detail(imdb_id)
    if detail.get("Response") == "False":
        error = detail.get("Error")
        if is_not_found_error(error):
            return None
        raise OmdbError(error or "Unknown OMDb detail error")

    return map_omdb_detail(detail)


def _enrich(client: OmdbClient, hit: dict) -> MediaItemData:
    try:
        mapped = map_omdb_detail(client.detail(hit["imdbID"]))
    except OmdbError as e:
        logger.warning("OMDb detail lookup failed for %s: %s", hit["imdbID"], e.message)
        mapped = None
    return mapped or map_search_fallback(hit)


def _parse_total(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
