"""
Natural-language explanations for job matches.
"""

import json
from typing import Optional, Protocol

from loguru import logger

from shared.llm import LLMClient
from shared.models import JobListing, UserProfile

EXPLANATION_PROMPT = """Generate a brief, professional explanation (2-3 sentences) for why this job matches the candidate.

Candidate Skills: {candidate_skills}
Matched Skills: {matched}
Missing Skills: {missing}
Match Score: {score}%

Job: {title} at {company}
Required Skills: {required}

Write a concise explanation highlighting:
1. Why this is a good match (matched skills)
2. What might be missing (missing skills)
3. Overall fit assessment

Keep it professional and actionable."""


class MatchExplainer(Protocol):
    """Produces the explanation text attached to a JobMatch."""

    async def explain(
        self,
        profile: UserProfile,
        job: JobListing,
        matched_skills: list[str],
        missing_skills: list[str],
        match_score: int,
    ) -> str: ...


def fallback_explanation(match_score: int, matched_count: int, required_count: int) -> str:
    """Deterministic explanation used when the LLM gives nothing."""
    return (
        f"Match score: {match_score}%. "
        f"You have {matched_count} of {required_count} required skills."
    )


class TemplateMatchExplainer:
    """Explainer that never calls out; always returns the templated sentence."""

    async def explain(
        self,
        profile: UserProfile,
        job: JobListing,
        matched_skills: list[str],
        missing_skills: list[str],
        match_score: int,
    ) -> str:
        required_count = len(matched_skills) + len(missing_skills)
        return fallback_explanation(match_score, len(matched_skills), required_count)


class LLMMatchExplainer:
    """Asks the LLM for a short fit summary."""

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    async def explain(
        self,
        profile: UserProfile,
        job: JobListing,
        matched_skills: list[str],
        missing_skills: list[str],
        match_score: int,
    ) -> str:
        prompt = EXPLANATION_PROMPT.format(
            candidate_skills=json.dumps(profile.skills.model_dump(by_alias=True)),
            matched=", ".join(matched_skills),
            missing=", ".join(missing_skills),
            score=match_score,
            title=job.title,
            company=job.company,
            required=", ".join(matched_skills + missing_skills),
        )

        content = await self.llm.complete(
            [{"role": "user", "content": prompt}],
            temperature=0.7,
            max_tokens=200,
        )
        logger.debug(f"Explanation for {job.title} at {job.company}: {len(content)} chars")
        return content
