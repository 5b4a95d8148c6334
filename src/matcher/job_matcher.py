"""
Ranks job listings against a candidate profile.

Each job gets a 0-100 score from three weighted components (skill overlap,
seniority fit, location fit) plus a short explanation. Explanation failures
never abort a batch; they fall back to a templated sentence.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional

from loguru import logger

from shared.config import Settings, get_settings
from shared.llm import LLMClient
from shared.models import JobListing, JobMatch, SkillBreakdownItem, UserProfile

from .explainer import LLMMatchExplainer, MatchExplainer, fallback_explanation
from .scoring import (
    combine_score,
    experience_level,
    level_fit,
    location_match,
    total_years_experience,
)
from .skills import candidate_skill_set, check_skill, normalize_skill


@dataclass(frozen=True)
class JobScore:
    """Score components for one job, before explanation."""

    match_score: int
    skill_ratio: float
    experience_match: float
    location_match: float
    matched_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    skill_breakdown: list[SkillBreakdownItem] = field(default_factory=list)


class JobMatcher:
    """Scores and ranks jobs for one profile."""

    def __init__(
        self,
        explainer: Optional[MatchExplainer] = None,
        settings: Optional[Settings] = None,
        max_concurrency: Optional[int] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or get_settings()
        self.explainer = explainer or LLMMatchExplainer(LLMClient(self.settings))
        self.max_concurrency = max(
            1, max_concurrency or self.settings.matcher_max_concurrency
        )
        self.now = now

    def score_job(
        self,
        profile: UserProfile,
        job: JobListing,
        candidate_skills: Optional[set[str]] = None,
        candidate_level: Optional[str] = None,
    ) -> JobScore:
        """
        Compute the score components for a single job.

        Raises:
            ValueError: if an experience entry has an unparseable date
        """
        if candidate_skills is None:
            candidate_skills = candidate_skill_set(profile)
        if candidate_level is None:
            candidate_level = experience_level(total_years_experience(profile, self.now))

        matched: list[str] = []
        missing: list[str] = []
        breakdown: list[SkillBreakdownItem] = []

        job_skills = [s for s in (normalize_skill(skill) for skill in job.skills) if s]
        for job_skill in job_skills:
            check = check_skill(job_skill, candidate_skills)
            if check.matched:
                matched.append(job_skill)
            else:
                missing.append(job_skill)
            breakdown.append(
                SkillBreakdownItem(
                    skill=check.skill, matched=check.matched, importance=check.importance
                )
            )

        skill_ratio = len(matched) / len(job_skills) if job_skills else 0.0
        experience = level_fit(job.experience_level, candidate_level)
        location = location_match(profile.personal_info.location, job.location)

        return JobScore(
            match_score=combine_score(skill_ratio, experience, location),
            skill_ratio=skill_ratio,
            experience_match=experience,
            location_match=location,
            matched_skills=matched,
            missing_skills=missing,
            skill_breakdown=breakdown,
        )

    async def explain(self, profile: UserProfile, job: JobListing, score: JobScore) -> str:
        """Explanation text for a scored job; never raises."""
        fallback = fallback_explanation(
            score.match_score,
            len(score.matched_skills),
            len(score.matched_skills) + len(score.missing_skills),
        )
        try:
            explanation = await self.explainer.explain(
                profile,
                job,
                score.matched_skills,
                score.missing_skills,
                score.match_score,
            )
        except Exception as e:
            logger.error(f"Error generating explanation for {job.title} at {job.company}: {e}")
            return fallback

        return explanation.strip() if explanation and explanation.strip() else fallback

    async def match_job(self, profile: UserProfile, job: JobListing) -> JobMatch:
        score = self.score_job(profile, job)
        return await self._build_match(profile, job, score)

    async def _build_match(
        self, profile: UserProfile, job: JobListing, score: JobScore
    ) -> JobMatch:
        explanation = await self.explain(profile, job, score)
        return JobMatch(
            job=job,
            match_score=score.match_score,
            explanation=explanation,
            matched_skills=score.matched_skills,
            missing_skills=score.missing_skills,
            skill_breakdown=score.skill_breakdown,
        )

    async def match_jobs(
        self, profile: UserProfile, jobs: Optional[Iterable[JobListing]]
    ) -> list[JobMatch]:
        """
        Match a profile against jobs, best match first.

        Scores are computed up front; explanations are then requested with at
        most ``max_concurrency`` calls in flight. Tie order is unspecified.
        """
        jobs = list(jobs or [])
        if not jobs:
            return []

        candidate_skills = candidate_skill_set(profile)
        years = total_years_experience(profile, self.now)
        candidate_level = experience_level(years)
        logger.info(
            f"Matching {len(jobs)} jobs against {len(candidate_skills)} skills "
            f"({years:.1f} years, {candidate_level})"
        )

        scores = [
            self.score_job(profile, job, candidate_skills, candidate_level) for job in jobs
        ]

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def build(job: JobListing, score: JobScore) -> JobMatch:
            async with semaphore:
                return await self._build_match(profile, job, score)

        matches = await asyncio.gather(
            *(build(job, score) for job, score in zip(jobs, scores))
        )

        ranked = sorted(matches, key=lambda m: m.match_score, reverse=True)
        logger.info(
            f"Matching complete: best {ranked[0].match_score}, "
            f"worst {ranked[-1].match_score}"
        )
        return ranked


async def match_jobs_with_profile(
    profile: UserProfile,
    jobs: Optional[Iterable[JobListing]],
    explainer: Optional[MatchExplainer] = None,
    settings: Optional[Settings] = None,
) -> list[JobMatch]:
    """Rank jobs for a profile, best match first."""
    matcher = JobMatcher(explainer=explainer, settings=settings)
    return await matcher.match_jobs(profile, jobs)
