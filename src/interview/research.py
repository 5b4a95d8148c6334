"""
Interview preparation research workflow.

Five steps: company search, technology search, LLM filtering of the search
results, synthesis into structured insights, and question generation.
Only the synthesis step is fatal; every other step degrades to empty output.
"""

import asyncio
from typing import Any, Optional

from loguru import logger
from pydantic import ValidationError

from shared.errors import LLMError, ResearchError
from shared.llm import LLMClient, parse_json_response
from shared.models import (
    CompanyInsights,
    ContentAnalysis,
    InterviewQuestion,
    InterviewQuestions,
    ResearchParams,
    ResearchResult,
    ResearchSynthesis,
    RoleInsights,
)

from .search import TavilySearch

MAX_TECHNOLOGIES = 10

ANALYSIS_SYSTEM = (
    "You are an expert career coach analyzing web search results for interview "
    "preparation. Extract ONLY relevant, recent, and accurate information. Filter "
    "out ads, outdated content, and promotional material."
)

ANALYSIS_PROMPT = """Company: {company}
Role: {role}
Technologies: {technologies}

Search Results:
{search_results}

Task:
1. Extract 5-10 key relevant points about the company, role, or technologies
2. Identify recent updates or trends (last 12 months)
3. Note important technical requirements
4. Filter out outdated information

Return ONLY valid JSON (no markdown, no explanations):
{{
  "relevantPoints": ["point 1", "point 2", ...],
  "insights": "brief summary"
}}"""

SYNTHESIS_SYSTEM = (
    "You are an expert interview preparation coach. Create comprehensive, "
    "actionable interview preparation insights."
)

SYNTHESIS_PROMPT = """Company: {company}
Role: {role}
Technologies: {technologies}

Company Research:
{company_info}

Technology Research:
{tech_info}

Create a comprehensive interview preparation guide. Return ONLY valid JSON (no markdown):
{{
  "companyInsights": {{
    "culture": ["value 1", "value 2", "value 3"],
    "values": ["value 1", "value 2", "value 3"],
    "practices": ["practice 1", "practice 2", "practice 3"],
    "recentNews": ["update 1", "update 2", "update 3"]
  }},
  "roleInsights": {{
    "keyResponsibilities": ["resp 1", "resp 2", "resp 3"],
    "requiredSkills": ["skill 1", "skill 2", "skill 3"],
    "experienceLevel": "mid",
    "focusAreas": ["area 1", "area 2", "area 3"]
  }},
  "techInsights": [
    {{
      "technology": "{first_technology}",
      "recentUpdates": ["update 1", "update 2"],
      "bestPractices": ["practice 1", "practice 2"],
      "commonChallenges": ["challenge 1", "challenge 2"]
    }}
  ],
  "preparationChecklist": {{
    "priorityTopics": ["topic 1", "topic 2", "topic 3"],
    "studyTimeline": "2-3 weeks",
    "resources": ["resource 1", "resource 2"]
  }}
}}"""

TECHNICAL_SYSTEM = (
    "You are an expert technical interviewer. Generate realistic, challenging "
    "interview questions."
)

TECHNICAL_PROMPT = """Technologies: {technologies}
Role Level: {level}
Focus Areas: {focus_areas}

Generate 10 technical interview questions. Return ONLY valid JSON array:
[
  {{
    "question": "detailed question text",
    "difficulty": "junior|mid|senior",
    "category": "algorithm|system_design|tech_specific|debugging",
    "hints": ["hint 1", "hint 2"]
  }}
]

Cover: algorithms, system design, and {technologies}. Mix difficulty levels."""

BEHAVIORAL_SYSTEM = (
    "You are an expert behavioral interviewer. Generate questions that assess "
    "culture fit, leadership, and soft skills."
)

BEHAVIORAL_PROMPT = """Company Values: {values}
Company Culture: {culture}
Role Level: {level}

Generate 6 behavioral interview questions. Return ONLY valid JSON array:
[
  {{
    "question": "STAR-format question",
    "difficulty": "junior|mid|senior",
    "category": "culture_fit|leadership|teamwork|problem_solving",
    "hints": ["what they look for", "key points"]
  }}
]

Use STAR format. Cover: culture fit, leadership, teamwork, problem-solving."""


def validate_research_params(params: ResearchParams) -> list[str]:
    """Return the validation errors for a research request (empty when valid)."""
    errors = []

    if not params.company.strip():
        errors.append("Company name is required")

    if not params.role.strip():
        errors.append("Role/position is required")

    if not params.technologies:
        errors.append("At least one technology is required")
    elif len(params.technologies) > MAX_TECHNOLOGIES:
        errors.append(f"Maximum {MAX_TECHNOLOGIES} technologies allowed")

    return errors


def _tag_questions(data: Any, question_type: str) -> list[InterviewQuestion]:
    if not isinstance(data, list):
        raise ValueError("Expected a JSON array of questions")

    questions = []
    for item in data:
        if not isinstance(item, dict):
            continue
        questions.append(
            InterviewQuestion.model_validate({**item, "question_type": question_type})
        )
    return questions


class ResearchWorkflow:
    """Coordinates search, analysis, synthesis and question generation."""

    def __init__(
        self,
        llm: Optional[LLMClient] = None,
        search: Optional[TavilySearch] = None,
    ):
        self.llm = llm or LLMClient()
        self.search = search or TavilySearch(self.llm.settings)

    async def close(self) -> None:
        await self.search.close()

    async def _chat(self, system: str, user: str) -> str:
        return await self.llm.complete(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=0.7,
            max_tokens=4096,
        )

    async def analyze_content(self, search_results: str, params: ResearchParams) -> ContentAnalysis:
        """Filter raw search results down to relevant points."""
        prompt = ANALYSIS_PROMPT.format(
            company=params.company,
            role=params.role,
            technologies=", ".join(params.technologies),
            search_results=search_results,
        )

        try:
            content = await self._chat(ANALYSIS_SYSTEM, prompt)
        except Exception as e:
            logger.error(f"Error analyzing content: {e}")
            return ContentAnalysis()

        try:
            return ContentAnalysis.model_validate(parse_json_response(content))
        except Exception as e:
            logger.error(f"Error parsing analysis response: {e}")
            return ContentAnalysis(
                relevant_points=[content[:200]] if content else [],
                insights="Analysis completed but formatting error occurred",
            )

    async def synthesize(
        self,
        params: ResearchParams,
        company_info: str,
        tech_info: str,
    ) -> ResearchSynthesis:
        """
        Turn the filtered research into structured insights.

        Raises:
            ResearchError: if the LLM fails or returns something unusable
        """
        prompt = SYNTHESIS_PROMPT.format(
            company=params.company,
            role=params.role,
            technologies=", ".join(params.technologies),
            company_info=company_info,
            tech_info=tech_info,
            first_technology=params.technologies[0] if params.technologies else "JavaScript",
        )

        try:
            content = await self._chat(SYNTHESIS_SYSTEM, prompt)
        except Exception as e:
            raise ResearchError(f"Failed to synthesize research: {e}") from e

        try:
            return ResearchSynthesis.model_validate(parse_json_response(content))
        except (LLMError, ValidationError) as e:
            logger.error(f"Error parsing synthesis response: {e}")
            raise ResearchError("Failed to parse AI synthesis response") from e
        except Exception as e:
            raise ResearchError(f"Failed to synthesize research: {e}") from e

    async def generate_technical_questions(
        self, role: RoleInsights, technologies: list[str]
    ) -> list[InterviewQuestion]:
        joined = ", ".join(technologies)
        prompt = TECHNICAL_PROMPT.format(
            technologies=joined,
            level=role.experience_level or "mid",
            focus_areas=", ".join(role.focus_areas) or "general",
        )

        try:
            content = await self._chat(TECHNICAL_SYSTEM, prompt)
            return _tag_questions(parse_json_response(content), "technical")
        except Exception as e:
            logger.error(f"Error generating technical questions: {e}")
            return []

    async def generate_behavioral_questions(
        self, company: CompanyInsights, role: RoleInsights
    ) -> list[InterviewQuestion]:
        prompt = BEHAVIORAL_PROMPT.format(
            values=", ".join(company.values) or "innovation, teamwork",
            culture=", ".join(company.culture) or "collaborative, fast-paced",
            level=role.experience_level or "mid",
        )

        try:
            content = await self._chat(BEHAVIORAL_SYSTEM, prompt)
            return _tag_questions(parse_json_response(content), "behavioral")
        except Exception as e:
            logger.error(f"Error generating behavioral questions: {e}")
            return []

    async def execute(self, params: ResearchParams) -> ResearchResult:
        """
        Run the complete research workflow.

        Raises:
            ResearchError: if synthesis fails
        """
        logger.info(
            f"Starting interview prep research: {params.role} at {params.company} "
            f"({len(params.technologies)} technologies)"
        )

        logger.info("Step 1/5: Searching company information")
        company_info = await self.search.search_company_info(params.company, params.role)

        logger.info("Step 2/5: Researching technology trends")
        tech_info = await self.search.search_tech_trends(params.technologies)

        logger.info("Step 3/5: Analyzing and filtering content")
        company_analysis = await self.analyze_content(company_info, params)
        tech_analysis = await self.analyze_content(tech_info, params)

        logger.info("Step 4/5: Synthesizing insights")
        synthesis = await self.synthesize(
            params, company_analysis.insights, tech_analysis.insights
        )

        logger.info("Step 5/5: Generating interview questions")
        technical, behavioral = await asyncio.gather(
            self.generate_technical_questions(synthesis.role_insights, params.technologies),
            self.generate_behavioral_questions(
                synthesis.company_insights, synthesis.role_insights
            ),
        )

        logger.info(
            f"Research complete: {len(technical)} technical, "
            f"{len(behavioral)} behavioral questions"
        )
        return ResearchResult(
            **synthesis.model_dump(),
            questions=InterviewQuestions(technical=technical, behavioral=behavioral),
        )
