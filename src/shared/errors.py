"""
Exception types shared by the services.
"""


class CareerPrepError(Exception):
    """Base class for application errors."""


class LLMError(CareerPrepError):
    """The LLM returned nothing usable or could not be reached."""


class DatabaseError(CareerPrepError):
    """A Supabase request failed."""


class SerpApiError(CareerPrepError):
    """The SerpAPI job search failed."""


class SearchError(CareerPrepError):
    """The Tavily web search failed."""


class ResumeParsingError(CareerPrepError):
    """A résumé could not be turned into a structured profile."""


class ResearchError(CareerPrepError):
    """The interview research workflow could not produce insights."""


class ProfileNotFoundError(CareerPrepError):
    """No stored profile exists for the requested user."""
