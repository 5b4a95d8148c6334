"""
Tavily web search for interview research.
"""

from typing import Optional

import httpx
from loguru import logger
from pydantic import Field

from shared.config import Settings, get_settings
from shared.errors import SearchError
from shared.models import LenientModel

NO_COMPANY_INFO = "No company information found"
NO_TECH_INFO = "No technology information found"

# Tavily rate limits are easy to hit with long technology lists
MAX_TECH_SEARCHES = 5
RESULTS_PER_QUERY = 3


class SearchResult(LenientModel):
    title: str = ""
    url: str = ""
    content: str = ""
    score: float = 0


class SearchResponse(LenientModel):
    query: str
    results: list[SearchResult] = Field(default_factory=list)

    def to_markdown(self) -> str:
        return "\n\n".join(f"{r.title}\n{r.content}\n---" for r in self.results)


class TavilySearch:
    """Client for the Tavily search API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.tavily_base_url.rstrip("/")
        self._client = client

    @property
    def headers(self) -> dict[str, str]:
        key = self.settings.tavily_api_key.get_secret_value()
        if not key:
            raise SearchError("TAVILY_API_KEY is not set")
        return {
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.settings.tavily_timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def search(self, query: str, max_results: int = 5) -> SearchResponse:
        """
        Run one advanced-depth web search.

        Raises:
            SearchError: if the key is missing or the request fails
        """
        payload = {
            "query": query,
            "max_results": max_results,
            "search_depth": "advanced",
            "include_answer": False,
            "include_raw_content": False,
        }
        headers = self.headers
        client = await self._get_client()

        try:
            response = await client.post(f"{self.base_url}/search", headers=headers, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Tavily search error for '{query}': {e}")
            raise SearchError(f"Search failed: {e}") from e

        data = response.json()
        return SearchResponse(query=query, results=data.get("results") or [])

    async def _collect(self, sections: list[tuple[str, str]]) -> str:
        content = ""
        for heading, query in sections:
            try:
                response = await self.search(query, RESULTS_PER_QUERY)
            except SearchError as e:
                logger.error(f"Error searching '{query}': {e}")
                continue
            content += f"\n\n## {heading}\n\n{response.to_markdown()}"
        return content

    async def search_company_info(self, company: str, role: str) -> str:
        """Interview process, culture and news for a company, as markdown."""
        queries = [
            f"{company} {role} interview process",
            f"{company} engineering culture values",
            f"{company} recent news tech updates",
        ]
        content = await self._collect([(f"Search: {q}", q) for q in queries])
        return content or NO_COMPANY_INFO

    async def search_tech_trends(self, technologies: list[str]) -> str:
        """Recent updates and best practices for up to five technologies."""
        sections = [
            (f"Technology: {tech}", f"{tech} latest updates best practices")
            for tech in technologies[:MAX_TECH_SEARCHES]
        ]
        content = await self._collect(sections)
        return content or NO_TECH_INFO
