"""
Pydantic models for profiles, job listings, matches and interview research.

JSON uses camelCase field names; Python attributes are snake_case.
Null values are dropped before validation so missing data falls back to
field defaults instead of failing.
"""

import re
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ExperienceLevel = Literal["junior", "mid", "senior", "any"]
Importance = Literal["high", "medium", "low"]

EXPERIENCE_LEVELS: tuple[str, ...] = ("junior", "mid", "senior", "any")


class LenientModel(BaseModel):
    """Base model that treats nulls as absent."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if value is None:
                continue
            if isinstance(value, list):
                value = [item for item in value if item is not None]
            cleaned[key] = value
        return cleaned


class CamelModel(LenientModel):
    """Lenient model serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# User profile
# -----------------------------------------------------------------------------


class PersonalInfo(CamelModel):
    """Contact details."""

    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: Optional[str] = None
    github: Optional[str] = None
    portfolio: Optional[str] = None


class SkillSet(CamelModel):
    """Skills grouped into the five fixed categories."""

    technical: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)


class ExperienceEntry(CamelModel):
    """Work experience entry."""

    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    responsibilities: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)


class EducationEntry(CamelModel):
    """Education entry."""

    degree: str = ""
    field: str = ""
    institution: str = ""
    location: str = ""
    graduation_date: str = ""
    gpa: Optional[str] = None
    achievements: list[str] = Field(default_factory=list)


class Certification(CamelModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: Optional[str] = None


class Project(CamelModel):
    name: str = ""
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: Optional[str] = None


class UserProfile(CamelModel):
    """Structured résumé data produced by the résumé parser."""

    model_config = ConfigDict(frozen=True)

    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    skills: SkillSet = Field(default_factory=SkillSet)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)


class SkillProficiency(CamelModel):
    skill: str = ""
    level: str = "intermediate"
    years_of_experience: float = 0
    context: str = ""


class ProficiencyAnalysis(CamelModel):
    """LLM assessment of skill depth and overall seniority."""

    skill_proficiency: list[SkillProficiency] = Field(default_factory=list)
    top_strengths: list[str] = Field(default_factory=list)
    experience_level: str = "mid"
    total_years_experience: float = 0


class ProfileRecord(LenientModel):
    """A row of the user_profiles table."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    file_name: str = ""
    file_size: int = 0
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    summary: str = ""
    skills: SkillSet = Field(default_factory=SkillSet)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    certifications: list[Certification] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    skill_proficiency: list[SkillProficiency] = Field(default_factory=list)
    top_strengths: list[str] = Field(default_factory=list)
    experience_level: str = ""
    total_years_experience: float = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_parsed(
        cls,
        profile: UserProfile,
        analysis: ProficiencyAnalysis,
        file_name: str,
        file_size: int,
    ) -> "ProfileRecord":
        """Build a storable record from parser output."""
        info = profile.personal_info
        return cls(
            file_name=file_name,
            file_size=file_size,
            full_name=info.name,
            email=info.email,
            phone=info.phone,
            location=info.location,
            linkedin_url=info.linkedin or None,
            github_url=info.github or None,
            portfolio_url=info.portfolio or None,
            summary=profile.summary,
            skills=profile.skills,
            experience=profile.experience,
            education=profile.education,
            certifications=profile.certifications,
            projects=profile.projects,
            skill_proficiency=analysis.skill_proficiency,
            top_strengths=analysis.top_strengths,
            experience_level=analysis.experience_level,
            total_years_experience=analysis.total_years_experience,
        )

    @classmethod
    def from_keywords(
        cls, email: str, keywords: list[str], location: Optional[str] = None
    ) -> "ProfileRecord":
        """Minimal profile for searches made without an uploaded résumé."""
        return cls(
            email=email,
            full_name=email.split("@")[0],
            location=location or "",
            file_name="manual_search",
            skills=SkillSet(technical=list(keywords)),
            top_strengths=list(keywords),
            experience_level="mid",
        )

    def to_user_profile(self) -> UserProfile:
        return UserProfile(
            personal_info=PersonalInfo(
                name=self.full_name,
                email=self.email,
                phone=self.phone,
                location=self.location,
                linkedin=self.linkedin_url,
                github=self.github_url,
                portfolio=self.portfolio_url,
            ),
            summary=self.summary,
            skills=self.skills,
            experience=self.experience,
            education=self.education,
            certifications=self.certifications,
            projects=self.projects,
        )

    def to_db_dict(self) -> dict[str, Any]:
        """Convert to dictionary for database insert (server-managed keys omitted)."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        for key in ("id", "created_at", "updated_at"):
            data.pop(key, None)
        return data


# -----------------------------------------------------------------------------
# Jobs and matches
# -----------------------------------------------------------------------------


class SalaryRange(CamelModel):
    min: Optional[int] = None
    max: Optional[int] = None
    currency: Optional[str] = None


class JobListing(CamelModel):
    """A discovered job posting."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    location: str = ""
    employment_type: str = Field(default="full-time", alias="type")
    description: str = ""
    requirements: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel = "any"
    salary: Optional[SalaryRange] = None
    url: str = ""
    apply_url: Optional[str] = None
    company_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    posted_date: Optional[str] = None
    source: str = "other"

    @field_validator("experience_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        level = str(value or "").strip().lower()
        return level if level in EXPERIENCE_LEVELS else "any"


class SkillBreakdownItem(CamelModel):
    model_config = ConfigDict(frozen=True)

    skill: str
    matched: bool
    importance: Importance = "medium"


class JobMatch(CamelModel):
    """Fit of one job against one profile."""

    model_config = ConfigDict(frozen=True)

    job: JobListing
    match_score: int = Field(ge=0, le=100)
    explanation: str = ""
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    skill_breakdown: list[SkillBreakdownItem] = Field(default_factory=list)


class DetectedExtensions(BaseModel):
    posted_at: Optional[str] = None
    schedule_type: Optional[str] = None
    salary: Optional[str] = None


class ApplyOption(BaseModel):
    title: str = ""
    link: str = ""


_SALARY_RE = re.compile(r"(\d[\d,]*)\s*-\s*(\d[\d,]*)")

_KNOWN_SOURCES = ("linkedin", "indeed", "glassdoor", "monster", "ziprecruiter")


class SerpApiJobResult(LenientModel):
    """Raw job data from the SerpAPI Google Jobs engine."""

    title: str = ""
    company_name: str = ""
    location: str = ""
    via: str = ""
    description: str = ""
    thumbnail: Optional[str] = None
    extensions: list[str] = Field(default_factory=list)
    job_id: Optional[str] = None
    detected_extensions: DetectedExtensions = Field(default_factory=DetectedExtensions)
    apply_options: list[ApplyOption] = Field(default_factory=list)

    @property
    def source(self) -> str:
        """Job board the posting was published on, from the "via" field."""
        via = self.via.lower()
        for name in _KNOWN_SOURCES:
            if name in via:
                return name
        return "other"

    @property
    def employment_type(self) -> str:
        return (self.detected_extensions.schedule_type or "full-time").lower()

    @property
    def salary_range(self) -> Optional[SalaryRange]:
        text = self.detected_extensions.salary
        if not text:
            return None
        match = _SALARY_RE.search(text)
        if not match:
            return None
        return SalaryRange(
            min=int(match.group(1).replace(",", "")),
            max=int(match.group(2).replace(",", "")),
            currency="USD",
        )

    @property
    def apply_url(self) -> str:
        return self.apply_options[0].link if self.apply_options else ""


# -----------------------------------------------------------------------------
# Interview research
# -----------------------------------------------------------------------------


class ResearchParams(CamelModel):
    company: str = ""
    role: str = ""
    technologies: list[str] = Field(default_factory=list)
    user_id: Optional[str] = None


class ContentAnalysis(CamelModel):
    relevant_points: list[str] = Field(default_factory=list)
    insights: str = ""


class CompanyInsights(CamelModel):
    culture: list[str] = Field(default_factory=list)
    values: list[str] = Field(default_factory=list)
    practices: list[str] = Field(default_factory=list)
    recent_news: list[str] = Field(default_factory=list)


class RoleInsights(CamelModel):
    key_responsibilities: list[str] = Field(default_factory=list)
    required_skills: list[str] = Field(default_factory=list)
    experience_level: str = "mid"
    focus_areas: list[str] = Field(default_factory=list)


class TechInsight(CamelModel):
    technology: str = ""
    recent_updates: list[str] = Field(default_factory=list)
    best_practices: list[str] = Field(default_factory=list)
    common_challenges: list[str] = Field(default_factory=list)


class PreparationChecklist(CamelModel):
    priority_topics: list[str] = Field(default_factory=list)
    study_timeline: str = ""
    resources: list[str] = Field(default_factory=list)


class ResearchSynthesis(CamelModel):
    company_insights: CompanyInsights = Field(default_factory=CompanyInsights)
    role_insights: RoleInsights = Field(default_factory=RoleInsights)
    tech_insights: list[TechInsight] = Field(default_factory=list)
    preparation_checklist: PreparationChecklist = Field(default_factory=PreparationChecklist)


class InterviewQuestion(CamelModel):
    question: str = ""
    difficulty: str = "mid"
    category: str = ""
    hints: list[str] = Field(default_factory=list)
    question_type: str = Field(default="", alias="question_type")


class InterviewQuestions(CamelModel):
    technical: list[InterviewQuestion] = Field(default_factory=list)
    behavioral: list[InterviewQuestion] = Field(default_factory=list)


class ResearchResult(ResearchSynthesis):
    """Everything the interview preparation workflow produces."""

    questions: InterviewQuestions = Field(default_factory=InterviewQuestions)
