"""
Experience, location and overall score components for job matching.
"""

import math
import re
from datetime import datetime
from typing import Callable, Optional

from dateutil import parser

from shared.models import ExperienceEntry, JobListing, UserProfile

# Fixed weighting of the three components (sums to 100)
SKILL_WEIGHT = 70
EXPERIENCE_WEIGHT = 20
LOCATION_WEIGHT = 10

JUNIOR_MAX_YEARS = 2
MID_MAX_YEARS = 5

DAYS_PER_YEAR = 365

# Day/month defaults for partial dates such as "2021" or "2021-03"
_DATE_DEFAULT = datetime(2000, 1, 1)

_YEAR_RE = re.compile(r"\b\d{4}\b")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})[./](\d{1,2})$")

# (job level, candidate level) -> experience match
_LEVEL_FIT: dict[tuple[str, str], float] = {
    # Overqualified but still a match
    ("mid", "senior"): 0.8,
    ("junior", "mid"): 0.8,
    ("junior", "senior"): 0.8,
    # Underqualified but possible
    ("senior", "mid"): 0.5,
    ("mid", "junior"): 0.5,
}
_POOR_FIT = 0.2


def parse_date(value: str) -> datetime:
    """
    Parse a résumé date string ("2021-01", "Jan 2021", "2021-01-15", ...).

    Raises:
        ValueError: if the string is blank or not a recognisable date
    """
    value = (value or "").strip()
    if not _YEAR_RE.search(value):
        raise ValueError(f"Date has no four-digit year: {value!r}")

    # dateutil reads "2019.05" as a bare year
    year_month = _YEAR_MONTH_RE.match(value)
    if year_month:
        return datetime(int(year_month.group(1)), int(year_month.group(2)), 1)

    parsed = parser.parse(value, default=_DATE_DEFAULT)
    return parsed.replace(tzinfo=None)


def years_in_role(
    entry: ExperienceEntry, now: Callable[[], datetime] = datetime.now
) -> float:
    """Years between start and end date; "Present" ends now. Never negative."""
    start = parse_date(entry.start_date)
    if entry.end_date.strip().lower() == "present":
        end = now()
    else:
        end = parse_date(entry.end_date)
    return max(0.0, (end - start).days / DAYS_PER_YEAR)


def total_years_experience(
    profile: UserProfile, now: Callable[[], datetime] = datetime.now
) -> float:
    return sum(years_in_role(entry, now) for entry in profile.experience)


def experience_level(years: float) -> str:
    """Bucket total years into junior / mid / senior."""
    if years < JUNIOR_MAX_YEARS:
        return "junior"
    if years < MID_MAX_YEARS:
        return "mid"
    return "senior"


def level_fit(job_level: str, candidate_level: str) -> float:
    """How well a candidate seniority fits the level a job asks for."""
    if job_level == "any" or job_level == candidate_level:
        return 1.0
    return _LEVEL_FIT.get((job_level, candidate_level), _POOR_FIT)


def experience_match(
    profile: UserProfile,
    job: JobListing,
    now: Callable[[], datetime] = datetime.now,
) -> float:
    candidate_level = experience_level(total_years_experience(profile, now))
    return level_fit(job.experience_level, candidate_level)


def _split_location(location: str) -> list[str]:
    return [part.strip() for part in location.split(",")]


def location_match(candidate_location: Optional[str], job_location: Optional[str]) -> float:
    """
    Compare two "City, State, Country" style locations.

    Remote (or unspecified) jobs always match. Otherwise the comma-separated
    parts are compared pairwise: an exact part wins outright, a part
    contained in the other is a partial match.
    """
    candidate = (candidate_location or "").lower()
    job = (job_location or "").lower()

    if not job or "remote" in job:
        return 1.0
    if not candidate:
        return 0.5

    for candidate_part in _split_location(candidate):
        for job_part in _split_location(job):
            if candidate_part == job_part:
                return 1.0
            if candidate_part in job_part or job_part in candidate_part:
                return 0.7

    return 0.3


def combine_score(skill_ratio: float, experience: float, location: float) -> int:
    """Weighted 0-100 match score, rounded half up."""
    raw = (
        skill_ratio * SKILL_WEIGHT
        + experience * EXPERIENCE_WEIGHT
        + location * LOCATION_WEIGHT
    )
    return max(0, min(100, math.floor(raw + 0.5)))
