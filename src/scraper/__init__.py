"""
Scraper Service - job discovery via SerpAPI Google Jobs.
"""

from .discovery import JobDiscovery
from .job_details import JobDetailExtractor, JobDetails
from .keywords import generate_search_keywords
from .pipeline import discover_matches
from .serpapi_client import SerpApiClient

__all__ = [
    "JobDiscovery",
    "JobDetailExtractor",
    "JobDetails",
    "SerpApiClient",
    "discover_matches",
    "generate_search_keywords",
]
