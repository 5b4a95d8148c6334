"""
Résumé parser: turns extracted résumé text into a structured profile
and a skill proficiency analysis.
"""

import json
from typing import Optional

from loguru import logger

from shared.errors import ResumeParsingError
from shared.llm import LLMClient
from shared.models import ProficiencyAnalysis, UserProfile

RESUME_TEXT_LIMIT = 8000

PROFILE_PROMPT = """You are an expert resume parser. Extract structured information from this resume.

Resume Text:
{resume_text}

Extract and return ONLY valid JSON (no markdown, no explanations):
{{
  "personalInfo": {{
    "name": "Full Name",
    "email": "email@example.com",
    "phone": "+1-xxx-xxx-xxxx",
    "location": "City, State/Country",
    "linkedin": "linkedin_url",
    "github": "github_url",
    "portfolio": "portfolio_url"
  }},
  "summary": "Professional summary in 2-3 sentences",
  "skills": {{
    "technical": ["JavaScript", "Python", ...],
    "languages": ["English", "Spanish", ...],
    "frameworks": ["React", "Node.js", ...],
    "tools": ["Git", "Docker", ...],
    "soft": ["Leadership", "Communication", ...]
  }},
  "experience": [
    {{
      "title": "Job Title",
      "company": "Company Name",
      "location": "City, Country",
      "startDate": "2020-01",
      "endDate": "2023-12" or "Present",
      "responsibilities": ["Developed...", "Led..."],
      "achievements": ["Increased...", "Reduced..."],
      "technologies": ["React", "Node.js"]
    }}
  ],
  "education": [
    {{
      "degree": "Bachelor of Science",
      "field": "Computer Science",
      "institution": "University Name",
      "location": "City, Country",
      "graduationDate": "2020-05",
      "gpa": "3.8/4.0",
      "achievements": ["Dean's List", ...]
    }}
  ],
  "certifications": [
    {{
      "name": "AWS Certified",
      "issuer": "Amazon",
      "date": "2023-06",
      "url": "credential_url"
    }}
  ],
  "projects": [
    {{
      "name": "Project Name",
      "description": "Brief description",
      "technologies": ["React", "Firebase"],
      "url": "github_url"
    }}
  ]
}}

Important: Return ONLY the JSON object. No markdown formatting."""

PROFICIENCY_PROMPT = """Analyze the skills and experience to determine proficiency levels.

Skills:
{skills}

Experience:
{experience}

For each technical skill/framework/tool, determine proficiency level based on:
- Years of experience using it
- Complexity of projects
- Context in which it was used

Return ONLY valid JSON (no markdown):
{{
  "skillProficiency": [
    {{
      "skill": "React",
      "level": "advanced",
      "yearsOfExperience": 3,
      "context": "Used in multiple production projects"
    }}
  ],
  "topStrengths": ["skill1", "skill2", "skill3"],
  "experienceLevel": "mid",
  "totalYearsExperience": 5
}}

Determine experienceLevel as:
- junior: 0-2 years
- mid: 2-5 years
- senior: 5+ years"""


class ResumeParser:
    """LLM-backed résumé parser."""

    def __init__(self, llm: Optional[LLMClient] = None):
        self.llm = llm or LLMClient()

    async def extract_profile(self, resume_text: str) -> UserProfile:
        """
        Extract a structured profile from résumé text.

        Only the first 8000 characters are sent to the LLM.

        Raises:
            ResumeParsingError: if the LLM fails or its reply is not a profile
        """
        prompt = PROFILE_PROMPT.format(resume_text=resume_text[:RESUME_TEXT_LIMIT])

        try:
            data = await self.llm.complete_json(
                [{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=4096,
            )
            if not isinstance(data, dict):
                raise ResumeParsingError("Profile response is not a JSON object")
            profile = UserProfile.model_validate(data)
        except ResumeParsingError:
            raise
        except Exception as e:
            logger.error(f"Profile extraction error: {e}")
            raise ResumeParsingError(f"Failed to extract profile: {e}") from e

        logger.info(
            f"Extracted profile for {profile.personal_info.name or 'unknown'}: "
            f"{len(profile.experience)} roles, {len(profile.skills.technical)} technical skills"
        )
        return profile

    async def analyze_proficiency(self, profile: UserProfile) -> ProficiencyAnalysis:
        """
        Assess skill proficiency and seniority from a profile.

        Raises:
            ResumeParsingError: if the LLM fails or its reply is not an analysis
        """
        prompt = PROFICIENCY_PROMPT.format(
            skills=json.dumps(profile.skills.model_dump(by_alias=True), indent=2),
            experience=json.dumps(
                [e.model_dump(by_alias=True) for e in profile.experience], indent=2
            ),
        )

        try:
            data = await self.llm.complete_json(
                [{"role": "user", "content": prompt}],
                temperature=0.3,
                max_tokens=2048,
            )
            if not isinstance(data, dict):
                raise ResumeParsingError("Proficiency response is not a JSON object")
            analysis = ProficiencyAnalysis.model_validate(data)
        except ResumeParsingError:
            raise
        except Exception as e:
            logger.error(f"Proficiency analysis error: {e}")
            raise ResumeParsingError(f"Failed to analyze proficiency: {e}") from e

        logger.info(
            f"Proficiency analysis: {analysis.experience_level}, "
            f"{analysis.total_years_experience} years"
        )
        return analysis
