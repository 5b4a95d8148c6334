# Shared module for common utilities, models, and configuration
from .config import Settings, get_settings
from .database import Database, InterviewSessionStore, ProfileStore
from .llm import LLMClient
from .models import JobListing, JobMatch, ProfileRecord, UserProfile

__all__ = [
    "Settings",
    "get_settings",
    "Database",
    "ProfileStore",
    "InterviewSessionStore",
    "LLMClient",
    "JobListing",
    "JobMatch",
    "ProfileRecord",
    "UserProfile",
]
