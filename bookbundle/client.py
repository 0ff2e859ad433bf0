"""Async client for the search and bundle analysis backend."""

import logging

import httpx

from bookbundle.errors import AnalysisFailed, SearchFailed
from bookbundle.models import BundleResult, SearchResult

log = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8080/api"


class BookBundleClient:
    """Thin wrapper over the backend's JSON endpoints.

    Network errors, non-2xx statuses and payloads that do not match the
    expected shape all surface as :class:`SearchFailed` or
    :class:`AnalysisFailed`, so callers only have one thing to catch.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "BookBundleClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def search(self, keyword: str) -> list[SearchResult]:
        keyword = keyword.strip()
        if not keyword:
            return []

        try:
            resp = await self._client.get("/books/search", params={"keyword": keyword})
            resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, list):
                raise TypeError(f"expected a list, got {type(data).__name__}")
            return [SearchResult.from_json(item) for item in data]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            log.warning("Search for %r failed: %s", keyword, e)
            raise SearchFailed("Book search failed. Please try again.") from e

    async def analyze(self, request: dict) -> BundleResult:
        try:
            resp = await self._client.post("/bundle/analyze", json=request)
            resp.raise_for_status()
            return BundleResult.from_json(resp.json())
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            log.warning("Bundle analysis failed: %s", e)
            raise AnalysisFailed(
                "Analysis failed. Check that the backend server is running."
            ) from e

    async def health(self) -> bool:
        try:
            resp = await self._client.get("/health")
        except httpx.HTTPError as e:
            log.debug("Health check failed: %s", e)
            return False
        return resp.is_success
