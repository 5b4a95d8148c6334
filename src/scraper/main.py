"""
Scraper Service - Main entry point.
Discovers jobs via SerpAPI Google Jobs and optionally ranks them for a stored profile.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from loguru import logger

from matcher.explainer import TemplateMatchExplainer
from matcher.job_matcher import JobMatcher
from shared.config import get_settings
from shared.database import Database, ProfileStore
from shared.log import setup_logging
from scraper.discovery import JobDiscovery
from scraper.pipeline import discover_matches


async def discover(
    keywords: list[str],
    location: Optional[str] = None,
    max_results: Optional[int] = None,
    email: Optional[str] = None,
    use_llm: bool = True,
) -> list[dict]:
    """
    Discover jobs, ranking them when an email is given.

    Args:
        keywords: Search keywords; may be empty when email has a stored profile
        location: Location to search in (default from settings)
        max_results: Maximum jobs to return
        email: Email of a stored profile to rank jobs against
        use_llm: Use the LLM for match explanations

    Returns:
        JSON-ready job or match records
    """
    settings = get_settings()
    discovery = JobDiscovery(settings)

    try:
        if not email:
            jobs = await discovery.search_jobs(keywords, location, max_results)
            return [job.model_dump(mode="json", by_alias=True) for job in jobs]

        if use_llm and not settings.llm_configured:
            logger.warning("LLM_API_KEY not set, using templated explanations")
            use_llm = False

        db = Database(settings)
        try:
            matcher = JobMatcher(
                explainer=None if use_llm else TemplateMatchExplainer(),
                settings=settings,
            )
            matches = await discover_matches(
                email,
                ProfileStore(db),
                discovery,
                matcher,
                keywords=keywords,
                location=location,
                max_results=max_results,
            )
        finally:
            await db.close()

        return [m.model_dump(mode="json", by_alias=True) for m in matches]

    finally:
        await discovery.close()


@click.command()
@click.option(
    "--keywords",
    "-k",
    help="Comma-separated search keywords (e.g., 'Python,FastAPI')",
)
@click.option(
    "--location",
    "-l",
    help="Location to search in (e.g., 'United States')",
)
@click.option(
    "--max-results",
    "-m",
    type=int,
    help="Maximum jobs to return",
)
@click.option(
    "--email",
    "-e",
    help="Rank jobs against the profile stored for this email",
)
@click.option(
    "--no-llm",
    is_flag=True,
    help="Use templated match explanations",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write results to this file instead of stdout",
)
def main(
    keywords: Optional[str],
    location: Optional[str],
    max_results: Optional[int],
    email: Optional[str],
    no_llm: bool,
    output: Optional[Path],
):
    """Job Discovery - Searches Google Jobs via SerpAPI."""
    setup_logging()

    keyword_list = []
    if keywords:
        keyword_list = [k.strip() for k in keywords.split(",") if k.strip()]

    if not keyword_list and not email:
        raise click.UsageError("Provide --keywords, --email, or both")

    results = asyncio.run(
        discover(keyword_list, location, max_results, email, use_llm=not no_llm)
    )
    payload = json.dumps(results, indent=2, ensure_ascii=False)

    if output:
        output.write_text(payload, encoding="utf-8")
        click.echo(f"Wrote {len(results)} results to {output}")
    else:
        click.echo(payload)


if __name__ == "__main__":
    main()
