"""Unit tests for mapping OMDb payloads to media items."""

from datetime import datetime, timezone

import pytest

from backend.app.adapters.omdb_mapper import (
    derive_release_date,
    map_media_type,
    map_omdb_detail,
    map_search_fallback,
    normalize_value,
    parse_optional_int,
)
from backend.app.db.models.media_item import MediaType
from tests.omdb_fakes import ANIME_DETAIL, MOVIE_DETAIL, SERIES_DETAIL, search_hit


def test_movie_detail():
    item = map_omdb_detail(MOVIE_DETAIL)

    assert item.id == "tt1375666"
    assert item.external_id == "tt1375666"
    assert item.source == "omdb"
    assert item.title == "Inception"
    assert item.media_type == MediaType.MOVIE
    assert item.poster_url == "https://example.com/inception.jpg"
    assert item.release_date == datetime(2010, 7, 16, tzinfo=timezone.utc)
    assert item.total_seasons is None


def test_series_is_tv_even_when_japanese_animation():
    item = map_omdb_detail(SERIES_DETAIL)

    assert item.media_type == MediaType.TV
    assert item.total_seasons == 4


def test_anime_detail_normalizes_missing_values():
    item = map_omdb_detail(ANIME_DETAIL)

    assert item.media_type == MediaType.ANIME
    assert item.description is None
    assert item.poster_url is None
    # Released is N/A, so the year is used
    assert item.release_date == datetime(2001, 1, 1, tzinfo=timezone.utc)


def test_error_response_maps_to_none():
    assert map_omdb_detail({"Response": "False", "Error": "Movie not found!"}) is None
    assert map_omdb_detail({"Response": "True", "Title": "No id"}) is None


def test_search_fallback():
    item = map_search_fallback(search_hit(SERIES_DETAIL))

    assert item.external_id == "tt2560140"
    assert item.media_type == MediaType.TV
    assert item.description is None
    assert item.release_date == datetime(2013, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value, expected",
    [("N/A", None), ("", None), ("  ", None), (None, None), (3, None), (" x ", "x")],
)
def test_normalize_value(value, expected):
    assert normalize_value(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [("24", 24), ("10 episodes", 10), ("N/A", None), ("abc", None), ("-3", None)],
)
def test_parse_optional_int(value, expected):
    assert parse_optional_int(value) == expected


def test_release_date_formats():
    assert derive_release_date("2010-07-16", None) == datetime(
        2010, 7, 16, tzinfo=timezone.utc
    )
    assert derive_release_date("sometime", "1999") == datetime(
        1999, 1, 1, tzinfo=timezone.utc
    )
    assert derive_release_date(None, "2010–2015") == datetime(
        2010, 1, 1, tzinfo=timezone.utc
    )
    assert derive_release_date("N/A", "N/A") is None


@pytest.mark.parametrize(
    "type_, genre, country, expected",
    [
        ("movie", "Drama", "USA", MediaType.MOVIE),
        ("series", "Drama", "USA", MediaType.TV),
        ("episode", None, None, MediaType.TV),
        ("movie", "Action, Anime", None, MediaType.ANIME),
        ("movie", "Animation, Fantasy", "Japan", MediaType.ANIME),
        ("movie", "Animation, Family", "USA", MediaType.MOVIE),
        (None, None, None, MediaType.MOVIE),
    ],
)
def test_map_media_type(type_, genre, country, expected):
    assert map_media_type(type_, genre, country) == expected
