"""Unsplash photo search client built on `requests`.

Every failure mode of a search call (transport error, non-2xx status,
invalid JSON, unexpected payload shape) is raised as `SearchError` so that
callers have a single error category to handle.
"""

from __future__ import annotations

from typing import Any

import requests
from loguru import logger

from core.errors import ImageDownloadError, SearchError
from core.models import Photo, SearchPage

DEFAULT_BASE_URL = "https://api.unsplash.com"
SEARCH_PATH = "/search/photos"
DEFAULT_PER_PAGE = 24
MAX_PER_PAGE = 30  # Unsplash caps per_page at 30


class UnsplashClient:
    """Search Unsplash photos and download image bytes."""

    def __init__(
        self,
        access_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        """Create a client.

        Args:
            access_key: Unsplash Access Key, sent as the `client_id` parameter.
            base_url: API root without trailing slash.
            timeout: Seconds before a request is abandoned.
            session: Optional session to reuse (tests pass a fake).
        """
        self.access_key = access_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def search(self, query: str, page: int = 1, per_page: int = DEFAULT_PER_PAGE) -> SearchPage:
        """Fetch one page of results for `query`.

        Raises:
            SearchError: The request failed or returned an unusable payload.
        """
        params = {
            "query": query,
            "page": page,
            "per_page": min(per_page, MAX_PER_PAGE),
            "client_id": self.access_key,
        }
        logger.info(
            "Searching Unsplash: query={!r} page={} per_page={}", query, page, params["per_page"]
        )
        try:
            response = self._session.get(
                f"{self.base_url}{SEARCH_PATH}", params=params, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as ex:
            raise SearchError(f"Search request failed: {ex}") from ex
        except ValueError as ex:
            raise SearchError(f"Search response is not valid JSON: {ex}") from ex

        result = parse_search_payload(data)
        logger.info(
            "Unsplash returned {} photos (page {}/{})",
            len(result.photos),
            page,
            result.total_pages,
        )
        return result

    def download(self, url: str) -> bytes:
        """Download image bytes from `url`.

        Raises:
            ImageDownloadError: The download failed.
        """
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content
        except requests.RequestException as ex:
            raise ImageDownloadError(f"Failed to download {url}: {ex}") from ex

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()


def parse_search_payload(data: Any) -> SearchPage:
    """Convert a decoded `/search/photos` response into a `SearchPage`.

    Raises:
        SearchError: `data` does not have the expected shape.
    """
    try:
        results = data["results"]
        photos = tuple(Photo.from_api(item) for item in results)
        total_pages = int(data["total_pages"])
        total = int(data.get("total", len(photos)))
    except (KeyError, TypeError, ValueError) as ex:
        raise SearchError(f"Malformed search response: {ex!r}") from ex
    if total_pages < 0:
        raise SearchError(f"Malformed search response: total_pages={total_pages}")
    return SearchPage(photos=photos, total_pages=total_pages, total=total)
