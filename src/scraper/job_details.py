"""
Skill, requirement and seniority extraction from job descriptions.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from shared.llm import LLMClient
from shared.models import EXPERIENCE_LEVELS

# Skills spotted by plain substring search when the LLM is unavailable
COMMON_SKILLS = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "C#", "Go", "Rust",
    "React", "Vue", "Angular", "Node.js", "Express", "Next.js", "Django", "Flask",
    "AWS", "Azure", "GCP", "Docker", "Kubernetes", "Git", "MongoDB", "PostgreSQL",
    "MySQL", "Redis", "GraphQL", "REST", "HTML", "CSS", "SASS", "Tailwind",
    "Machine Learning", "AI", "Data Science", "SQL", "NoSQL", "Linux", "Unix",
]

DESCRIPTION_LIMIT = 3000

EXTRACTION_PROMPT = """Extract structured information from this job description.

Job Title: {title}
Company: {company}
Description:
{description}

Extract and return ONLY valid JSON (no markdown, no explanations):
{{
  "skills": ["skill1", "skill2", "skill3", ...],
  "requirements": ["requirement 1", "requirement 2", ...],
  "experienceLevel": "junior" or "mid" or "senior" or "any"
}}

Important:
- Extract ALL technical skills (programming languages, frameworks, tools, technologies)
- Extract key requirements from the description
- Determine experience level from keywords like "junior", "senior", "years of experience", etc.
- Return ONLY the JSON object. No markdown formatting."""


@dataclass
class JobDetails:
    skills: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)
    experience_level: str = "any"


def extract_skills_basic(description: str) -> list[str]:
    """Common skills whose name appears anywhere in the description."""
    lowered = description.lower()
    return [skill for skill in COMMON_SKILLS if skill.lower() in lowered]


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


class JobDetailExtractor:
    """Pulls structured details out of free-text job descriptions."""

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    def fallback(self, description: str) -> JobDetails:
        return JobDetails(skills=extract_skills_basic(description))

    async def extract(self, description: str, title: str, company: str) -> JobDetails:
        """
        Extract skills, requirements and experience level.

        Falls back to keyword spotting when the LLM is not configured or its
        reply cannot be used.
        """
        if not self.llm.settings.llm_configured:
            return self.fallback(description)

        prompt = EXTRACTION_PROMPT.format(
            title=title,
            company=company,
            description=description[:DESCRIPTION_LIMIT],
        )

        try:
            data = await self.llm.complete_json(
                [{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=1024,
            )
        except Exception as e:
            logger.error(f"Error extracting job details for {title} at {company}: {e}")
            return self.fallback(description)

        if not isinstance(data, dict):
            logger.warning(f"Unexpected job details payload for {title} at {company}")
            return self.fallback(description)

        level = str(data.get("experienceLevel") or "any").strip().lower()
        return JobDetails(
            skills=_string_list(data.get("skills")),
            requirements=_string_list(data.get("requirements")),
            experience_level=level if level in EXPERIENCE_LEVELS else "any",
        )
