"""HTTP client for the OMDb metadata API."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

OMDB_PAGE_SIZE = 10

# OMDb answers HTTP 200 with Response="False" for these; they mean "no data"
NOT_FOUND_ERRORS = frozenset(
    {
        "Movie not found!",
        "Series not found!",
        "Episode not found!",
        "Incorrect IMDb ID.",
        "Error getting data.",
    }
)
TOO_MANY_RESULTS_ERROR = "Too many results."


class OmdbError(Exception):
    """Raised when OMDb fails or reports an error other than "not found"."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def is_not_found_error(message: str | None) -> bool:
    return message in NOT_FOUND_ERRORS


class OmdbClient:
    """Thin synchronous wrapper over the OMDb REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.omdbapi.com/",
        timeout: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize OMDb client.

        Args:
            api_key: OMDb API key
            base_url: API root URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.base_url = base_url
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self) -> "OmdbClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def search(self, title: str, page: int = 1) -> dict[str, Any]:
        """Search titles; OMDb returns at most 10 results per page."""
        return self._request({"s": title, "page": str(page)})

    def detail(self, imdb_id: str) -> dict[str, Any]:
        """Fetch full details for one IMDb id."""
        return self._request({"i": imdb_id, "plot": "short"})

    def _request(self, params: dict[str, str]) -> dict[str, Any]:
        query = {"apikey": self.api_key, **params}
        try:
            response = self._client.get(self.base_url, params=query)
        except httpx.TimeoutException as e:
            logger.error("OMDb request timed out: %s", e)
            raise OmdbError("OMDb request timed out") from e
        except httpx.HTTPError as e:
            logger.error("OMDb request failed: %s", e)
            raise OmdbError("OMDb request failed") from e

        if response.status_code >= 400:
            logger.error(
                "OMDb request failed",
                extra={"status": response.status_code, "body": response.text[:200]},
            )
            raise OmdbError(
                f"OMDb request failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise OmdbError("OMDb returned invalid JSON") from e

        if not isinstance(data, dict):
            raise OmdbError("OMDb returned an unexpected payload")
        return data
