"""
SerpAPI client for Google Jobs search.
Uses the engine: google_jobs
"""

from typing import Optional

import httpx
from loguru import logger

from shared.config import Settings, get_settings
from shared.errors import SerpApiError
from shared.models import SerpApiJobResult

# SerpAPI caps a single Google Jobs page at 100 results
MAX_RESULTS_PER_REQUEST = 100


class SerpApiClient:
    """Client for the SerpAPI Google Jobs engine."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.serpapi_base_url
        self._client = client

    @property
    def api_key(self) -> str:
        key = self.settings.serpapi_api_key.get_secret_value()
        if not key:
            raise SerpApiError("SERPAPI_API_KEY is not set")
        return key

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.settings.serpapi_timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def search(
        self,
        query: str,
        location: str,
        max_results: int = 20,
    ) -> list[SerpApiJobResult]:
        """
        Run one Google Jobs search.

        Args:
            query: Free-text search query (e.g., "Python FastAPI")
            location: Location to search in (e.g., "United States")
            max_results: Number of results to request

        Returns:
            List of raw job results

        Raises:
            SerpApiError: on transport failure, a non-2xx status or an
                error reported in the response body
        """
        params = {
            "engine": "google_jobs",
            "q": query,
            "location": location,
            "api_key": self.api_key,
            "num": str(min(max_results, MAX_RESULTS_PER_REQUEST)),
        }

        client = await self._get_client()
        logger.info(f"Searching Google Jobs: '{query}' in {location}")

        try:
            response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise SerpApiError(f"SerpAPI request failed: {e}") from e

        if response.is_error:
            raise SerpApiError(
                f"SerpAPI request failed: {response.status_code} - {response.text}"
            )

        data = response.json()
        if data.get("error"):
            raise SerpApiError(f"SerpAPI error: {data['error']}")

        items = data.get("jobs_results") or []
        logger.info(f"Fetched {len(items)} jobs from SerpAPI")
        return self._parse_results(items)

    def _parse_results(self, items: list[dict]) -> list[SerpApiJobResult]:
        """Parse raw items into SerpApiJobResult objects."""
        results = []
        for item in items:
            try:
                results.append(SerpApiJobResult.model_validate(item))
            except Exception as e:
                logger.warning(f"Failed to parse job item: {e}")

        return results
