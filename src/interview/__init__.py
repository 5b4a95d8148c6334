"""
Interview Service - research-driven interview preparation.
"""

from .research import ResearchWorkflow, validate_research_params
from .search import SearchResponse, SearchResult, TavilySearch
from .service import run_research

__all__ = [
    "ResearchWorkflow",
    "SearchResponse",
    "SearchResult",
    "TavilySearch",
    "run_research",
    "validate_research_params",
]
