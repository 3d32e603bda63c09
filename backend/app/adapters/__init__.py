"""Adapters for external data sources.

Adapters talk to third-party APIs and map their payloads to our models;
they never touch the database.
"""

from .omdb import OmdbClient, OmdbError
from .omdb_mapper import map_omdb_detail, map_search_fallback

__all__ = [
    "OmdbClient",
    "OmdbError",
    "map_omdb_detail",
    "map_search_fallback",
]
