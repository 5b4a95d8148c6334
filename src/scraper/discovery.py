"""
Job discovery: Google Jobs search results turned into JobListing records.
"""

import asyncio
from typing import Optional
from urllib.parse import quote

from loguru import logger

from shared.config import Settings, get_settings
from shared.llm import LLMClient
from shared.models import JobListing, SerpApiJobResult

from .job_details import JobDetailExtractor
from .serpapi_client import SerpApiClient

DESCRIPTION_PREVIEW = 500

# Characters left unescaped in URL query components
URI_SAFE = "-_.!~*'()"


def google_search_url(query: str) -> str:
    return f"https://www.google.com/search?q={quote(query, safe=URI_SAFE)}"


def linkedin_company_search_url(company: str) -> str:
    return (
        "https://www.linkedin.com/search/results/companies/"
        f"?keywords={quote(company, safe=URI_SAFE)}"
    )


class JobDiscovery:
    """Searches for jobs and enriches each result with extracted details."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        serpapi: Optional[SerpApiClient] = None,
        extractor: Optional[JobDetailExtractor] = None,
    ):
        self.settings = settings or get_settings()
        self.serpapi = serpapi or SerpApiClient(self.settings)
        self.extractor = extractor or JobDetailExtractor(LLMClient(self.settings))

    async def close(self) -> None:
        await self.serpapi.close()

    async def to_listing(self, result: SerpApiJobResult) -> JobListing:
        """Convert one search result, extracting skills from its description."""
        title = result.title
        company = result.company_name
        description = result.description

        details = await self.extractor.extract(description, title, company)

        apply_url = result.apply_url
        return JobListing(
            title=title,
            company=company,
            location=result.location,
            employment_type=result.employment_type,
            description=description[:DESCRIPTION_PREVIEW],
            requirements=details.requirements,
            skills=details.skills,
            experience_level=details.experience_level,
            salary=result.salary_range,
            url=apply_url or google_search_url(f"{title} {company} jobs"),
            apply_url=apply_url or None,
            company_url=google_search_url(company),
            linkedin_url=linkedin_company_search_url(company),
            posted_date=result.detected_extensions.posted_at,
            source=result.source,
        )

    async def search_jobs(
        self,
        keywords: list[str],
        location: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> list[JobListing]:
        """
        Search for jobs matching the keywords.

        Results that fail to convert are logged and skipped. Listings with the
        same title and company collapse into the last one seen.

        Raises:
            SerpApiError: if the search itself fails
        """
        location = location or self.settings.discovery_default_location
        max_results = max_results or self.settings.discovery_max_results
        query = " ".join(keywords)

        results = await self.serpapi.search(query, location, max_results)

        semaphore = asyncio.Semaphore(max(1, self.settings.matcher_max_concurrency))

        async def convert(result: SerpApiJobResult) -> Optional[JobListing]:
            async with semaphore:
                try:
                    return await self.to_listing(result)
                except Exception as e:
                    logger.error(f"Error processing job '{result.title}': {e}")
                    return None

        listings = await asyncio.gather(*(convert(r) for r in results))

        unique: dict[str, JobListing] = {}
        for job in listings:
            if job is not None:
                unique[f"{job.title}-{job.company}"] = job

        jobs = list(unique.values())[:max_results]
        logger.info(f"Discovered {len(jobs)} unique jobs for '{query}'")
        return jobs
