"""Unit tests for the OMDb HTTP client using httpx mock transports."""

import httpx
import pytest

from backend.app.adapters.omdb import OmdbClient, OmdbError, is_not_found_error


def make_client(handler) -> OmdbClient:
    return OmdbClient(
        api_key="k",
        base_url="https://omdb.test/",
        transport=httpx.MockTransport(handler),
    )


def test_search_sends_key_title_and_page():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"Search": [], "totalResults": "0", "Response": "True"})

    with make_client(handler) as client:
        result = client.search("alien", page=3)

    assert result["Response"] == "True"
    assert seen == {"apikey": "k", "s": "alien", "page": "3"}


def test_detail_sends_imdb_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"Title": "Alien", "Response": "True"})

    with make_client(handler) as client:
        assert client.detail("tt0078748")["Title"] == "Alien"

    assert seen["i"] == "tt0078748"


def test_http_error_status():
    with make_client(lambda request: httpx.Response(503, text="down")) as client:
        with pytest.raises(OmdbError) as exc_info:
            client.detail("tt1")

    assert exc_info.value.status_code == 503


def test_transport_failure():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with make_client(handler) as client:
        with pytest.raises(OmdbError, match="OMDb request failed"):
            client.search("alien")


def test_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with make_client(handler) as client:
        with pytest.raises(OmdbError, match="timed out"):
            client.search("alien")


def test_invalid_json():
    with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(OmdbError, match="invalid JSON"):
            client.search("alien")


def test_not_found_errors():
    assert is_not_found_error("Movie not found!")
    assert is_not_found_error("Incorrect IMDb ID.")
    assert not is_not_found_error("Invalid API key!")
    assert not is_not_found_error(None)
