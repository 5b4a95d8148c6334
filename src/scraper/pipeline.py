"""
Discover jobs for a user and rank them against the user's profile.
"""

from typing import Optional

from loguru import logger

from matcher.job_matcher import JobMatcher
from shared.database import ProfileStore
from shared.errors import ProfileNotFoundError
from shared.models import JobMatch, ProfileRecord

from .discovery import JobDiscovery
from .keywords import generate_search_keywords


async def discover_matches(
    email: str,
    profiles: ProfileStore,
    discovery: JobDiscovery,
    matcher: JobMatcher,
    keywords: Optional[list[str]] = None,
    location: Optional[str] = None,
    max_results: Optional[int] = None,
) -> list[JobMatch]:
    """
    Search for jobs and rank them for the user with the given email.

    The stored profile is used when there is one. Without it the supplied
    keywords stand in for a minimal profile.

    Raises:
        ProfileNotFoundError: no stored profile and no keywords
    """
    keywords = [k for k in (keywords or []) if k and k.strip()]

    logger.info(f"Fetching user profile for: {email}")
    record = await profiles.get_by_email(email)
    if record is None:
        if not keywords:
            raise ProfileNotFoundError(
                "User profile not found. Please upload your resume first, "
                "or provide search keywords."
            )
        record = ProfileRecord.from_keywords(email, keywords, location)

    profile = record.to_user_profile()
    search_keywords = keywords or generate_search_keywords(profile)
    logger.info(f"Searching jobs with keywords: {search_keywords}")

    jobs = await discovery.search_jobs(search_keywords, location, max_results)
    logger.info(f"Found {len(jobs)} jobs")

    matches = await matcher.match_jobs(profile, jobs)
    logger.info(f"Matched {len(matches)} jobs")
    return matches
