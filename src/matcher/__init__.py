"""
Matcher Service - skill-based job/profile matching.

Scores each job 0-100 from skill overlap, seniority fit and location fit,
and attaches an LLM-written explanation.
"""

from .explainer import LLMMatchExplainer, MatchExplainer, TemplateMatchExplainer
from .job_matcher import JobMatcher, JobScore, match_jobs_with_profile
from .skills import SKILL_SYNONYM_GROUPS

__all__ = [
    "JobMatcher",
    "JobScore",
    "match_jobs_with_profile",
    "MatchExplainer",
    "LLMMatchExplainer",
    "TemplateMatchExplainer",
    "SKILL_SYNONYM_GROUPS",
]
