"""
End-to-end résumé processing: PDF bytes to stored profile.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from shared.database import ProfileStore
from shared.errors import ResumeParsingError
from shared.models import ProficiencyAnalysis, ProfileRecord, UserProfile

from .pdf import extract_text_from_pdf, preprocess_text
from .profile_extractor import ResumeParser


@dataclass
class ParsedResume:
    profile: UserProfile
    analysis: ProficiencyAnalysis
    pages: int
    record: Optional[ProfileRecord] = None

    def to_response(self) -> dict:
        """Profile plus analysis, keyed the way the web client expects."""
        data = self.profile.model_dump(mode="json", by_alias=True)
        data["id"] = self.record.id if self.record else None
        data["analysis"] = self.analysis.model_dump(mode="json", by_alias=True)
        return data


async def parse_resume(
    data: bytes,
    file_name: str,
    parser: ResumeParser,
    profiles: Optional[ProfileStore] = None,
) -> ParsedResume:
    """
    Extract, parse and analyse a PDF résumé; store it when a store is given.

    Raises:
        ResumeParsingError: if no text can be extracted or the LLM fails
        DatabaseError: if storing the profile fails
    """
    extraction = extract_text_from_pdf(data)
    if extraction.error or not extraction.text:
        raise ResumeParsingError(extraction.error or "Failed to extract text from PDF")

    text = preprocess_text(extraction.text)
    logger.info(f"Extracted {len(text)} characters from {extraction.pages} pages")

    profile = await parser.extract_profile(text)
    analysis = await parser.analyze_proficiency(profile)
    parsed = ParsedResume(profile=profile, analysis=analysis, pages=extraction.pages)

    if profiles is not None:
        record = ProfileRecord.from_parsed(profile, analysis, file_name, len(data))
        parsed.record = await profiles.create(record)
        logger.info(f"Profile saved with ID: {parsed.record.id}")

    return parsed
