"""Shared dependencies for API routes."""

from typing import AsyncIterator, Optional

from fastapi import Depends

from interview.research import ResearchWorkflow
from interview.search import TavilySearch
from matcher.explainer import LLMMatchExplainer, TemplateMatchExplainer
from matcher.job_matcher import JobMatcher
from resume.profile_extractor import ResumeParser
from scraper.discovery import JobDiscovery
from shared.config import Settings, get_settings
from shared.database import Database, InterviewSessionStore, ProfileStore
from shared.llm import LLMClient


def get_app_settings() -> Settings:
    return get_settings()


def get_llm(settings: Settings = Depends(get_app_settings)) -> LLMClient:
    return LLMClient(settings)


async def get_database(
    settings: Settings = Depends(get_app_settings),
) -> AsyncIterator[Database]:
    db = Database(settings)
    try:
        yield db
    finally:
        await db.close()


def get_profile_store(db: Database = Depends(get_database)) -> ProfileStore:
    return ProfileStore(db)


def get_session_store(
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_database),
) -> Optional[InterviewSessionStore]:
    """Session store, or None when Supabase is not configured."""
    if not settings.supabase_configured:
        return None
    return InterviewSessionStore(db)


def get_resume_parser(llm: LLMClient = Depends(get_llm)) -> ResumeParser:
    return ResumeParser(llm)


async def get_job_discovery(
    settings: Settings = Depends(get_app_settings),
) -> AsyncIterator[JobDiscovery]:
    discovery = JobDiscovery(settings)
    try:
        yield discovery
    finally:
        await discovery.close()


def get_job_matcher(
    settings: Settings = Depends(get_app_settings),
    llm: LLMClient = Depends(get_llm),
) -> JobMatcher:
    if settings.llm_configured:
        explainer = LLMMatchExplainer(llm)
    else:
        explainer = TemplateMatchExplainer()
    return JobMatcher(explainer=explainer, settings=settings)


async def get_research_workflow(
    settings: Settings = Depends(get_app_settings),
    llm: LLMClient = Depends(get_llm),
) -> AsyncIterator[ResearchWorkflow]:
    workflow = ResearchWorkflow(llm, TavilySearch(settings))
    try:
        yield workflow
    finally:
        await workflow.close()
