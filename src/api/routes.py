from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from interview.research import ResearchWorkflow, validate_research_params
from interview.service import run_research
from matcher.job_matcher import JobMatcher
from resume.pdf import PDF_MAGIC, validate_pdf_file
from resume.profile_extractor import ResumeParser
from resume.service import parse_resume
from scraper.discovery import JobDiscovery
from scraper.pipeline import discover_matches
from shared.config import Settings
from shared.database import InterviewSessionStore, ProfileStore
from shared.errors import ProfileNotFoundError
from shared.models import ProfileRecord, ResearchParams

from .dependencies import (
    get_app_settings,
    get_job_discovery,
    get_job_matcher,
    get_profile_store,
    get_research_workflow,
    get_resume_parser,
    get_session_store,
)
from .schemas import DiscoverJobsRequest

router = APIRouter()


def error_response(status_code: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


@router.get("/health")
async def health(settings: Settings = Depends(get_app_settings)):
    return {
        "status": "ok",
        "llm_configured": settings.llm_configured,
        "supabase_configured": settings.supabase_configured,
    }


@router.post("/api/cv/upload")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_app_settings),
    parser: ResumeParser = Depends(get_resume_parser),
    profiles: ProfileStore = Depends(get_profile_store),
):
    if resume is None:
        return error_response(400, "No file provided or invalid file")

    content = await resume.read()
    validation = validate_pdf_file(
        resume.filename,
        resume.content_type,
        len(content),
        max_size=settings.upload_max_size_mb * 1024 * 1024,
        min_size=settings.upload_min_size_bytes,
    )
    if not validation.valid:
        return error_response(400, validation.error or "Invalid file")

    if not content.startswith(PDF_MAGIC):
        return error_response(
            400, "Invalid PDF file - file does not appear to be a valid PDF"
        )

    logger.info(f"Processing resume: {resume.filename} ({len(content)} bytes)")

    try:
        parsed = await parse_resume(content, resume.filename or "resume.pdf", parser, profiles)
    except Exception as e:
        logger.error(f"Resume upload error: {e}")
        return error_response(500, "Failed to process resume", message=str(e))

    return {
        "success": True,
        "profileId": parsed.record.id if parsed.record else None,
        "profile": parsed.to_response(),
    }


@router.post("/api/cv/profile")
async def save_profile(
    body: dict[str, Any] = Body(...),
    profiles: ProfileStore = Depends(get_profile_store),
):
    if not body.get("email"):
        return error_response(400, "Email is required")

    try:
        profile = await profiles.save(ProfileRecord.model_validate(body))
    except Exception as e:
        logger.error(f"Error saving profile: {e}")
        return error_response(500, "Failed to save profile", message=str(e))

    return {"success": True, "profile": profile.model_dump(mode="json")}


@router.get("/api/cv/profile/{profile_id}")
async def get_profile(
    profile_id: str,
    profiles: ProfileStore = Depends(get_profile_store),
):
    try:
        profile = await profiles.get_by_id(profile_id)
    except Exception as e:
        logger.error(f"Error fetching profile: {e}")
        return error_response(500, "Failed to fetch profile", message=str(e))

    if profile is None:
        return error_response(404, "Profile not found")

    return {"success": True, "profile": profile.model_dump(mode="json")}


@router.post("/api/jobs/discover")
async def discover_jobs(
    body: DiscoverJobsRequest,
    profiles: ProfileStore = Depends(get_profile_store),
    discovery: JobDiscovery = Depends(get_job_discovery),
    matcher: JobMatcher = Depends(get_job_matcher),
):
    if not body.email:
        return error_response(400, "Email is required")

    try:
        matches = await discover_matches(
            body.email,
            profiles,
            discovery,
            matcher,
            keywords=body.keywords,
            location=body.location,
            max_results=body.max_results,
        )
    except ProfileNotFoundError as e:
        return error_response(
            404,
            str(e),
            hint="You can provide keywords in the request body to search without a profile.",
        )
    except Exception as e:
        logger.error(f"Job discovery error: {e}")
        return error_response(500, "Failed to discover jobs", details=str(e))

    return {
        "success": True,
        "jobs": [m.model_dump(mode="json", by_alias=True) for m in matches],
        "total": len(matches),
    }


@router.post("/api/interview-prep")
async def interview_prep(
    params: ResearchParams,
    workflow: ResearchWorkflow = Depends(get_research_workflow),
    sessions: Optional[InterviewSessionStore] = Depends(get_session_store),
):
    errors = validate_research_params(params)
    if errors:
        return error_response(400, "Invalid parameters", details=errors)

    try:
        session_id, result = await run_research(params, workflow, sessions)
    except Exception as e:
        logger.error(f"Interview prep error: {e}")
        return error_response(500, "Research failed", message=str(e))

    return {
        "success": True,
        "sessionId": session_id,
        "data": result.model_dump(mode="json", by_alias=True),
    }
