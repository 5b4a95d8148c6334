"""Shared test fixtures: settings, a scripted LLM and model factories."""

from datetime import datetime
from typing import Callable, Union

import pytest

from shared.config import Settings
from shared.llm import LLMClient
from shared.models import ExperienceEntry, JobListing, PersonalInfo, SkillSet, UserProfile

NOW = datetime(2025, 1, 1)

Reply = Union[str, Exception]

PROFILE_JSON = {
    "personalInfo": {"name": "Ada Lovelace", "email": "ada@example.com", "location": "London"},
    "summary": "Analyst.",
    "skills": {"technical": ["Python"], "frameworks": ["Django"], "tools": [], "languages": [], "soft": []},
    "experience": [
        {"title": "Analyst", "company": "Engine Co", "startDate": "2020-01", "endDate": "Present", "technologies": ["Python"]}
    ],
    "education": [],
    "certifications": None,
    "projects": [],
}

ANALYSIS_JSON = {
    "skillProficiency": [{"skill": "Python", "level": "advanced", "yearsOfExperience": 4, "context": "Work"}],
    "topStrengths": ["Python"],
    "experienceLevel": "mid",
    "totalYearsExperience": 4,
}


def fixed_now() -> datetime:
    return NOW


def make_settings(**overrides) -> Settings:
    values = {
        "supabase_url": "https://test.supabase.co",
        "supabase_service_key": "service-key",
        "llm_api_key": "llm-key",
        "serpapi_api_key": "serp-key",
        "tavily_api_key": "tavily-key",
        "log_format": "text",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeLLM(LLMClient):
    """LLMClient that returns scripted replies instead of calling the API.

    ``replies`` is either a list consumed in order or a function of the
    prompt messages. An Exception reply is raised.
    """

    def __init__(
        self,
        replies: Union[list[Reply], Callable[[list[dict]], Reply]],
        settings: Settings = None,
    ):
        super().__init__(settings or make_settings())
        self.replies = replies
        self.calls: list[list[dict]] = []

    async def complete(self, messages, temperature=0.7, max_tokens=4096) -> str:
        self.calls.append(messages)
        if callable(self.replies):
            reply = self.replies(messages)
        else:
            reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_profile(
    technical=(),
    frameworks=(),
    tools=(),
    location="",
    experience=(),
) -> UserProfile:
    return UserProfile(
        personal_info=PersonalInfo(name="Ada Lovelace", email="ada@example.com", location=location),
        skills=SkillSet(technical=list(technical), frameworks=list(frameworks), tools=list(tools)),
        experience=[
            e if isinstance(e, ExperienceEntry) else ExperienceEntry(**e) for e in experience
        ],
    )


def make_job(title="Engineer", company="Acme", skills=(), level="any", location="Remote") -> JobListing:
    return JobListing(
        title=title,
        company=company,
        skills=list(skills),
        experience_level=level,
        location=location,
    )


def make_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF showing each line of text in Helvetica."""
    stream = "BT /F1 12 Tf 72 720 Td 14 TL\n"
    for line in lines:
        escaped = line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
        stream += f"({escaped}) Tj T*\n"
    stream += "ET"

    objects = [
        "<< /Type /Catalog /Pages 2 0 R >>",
        "<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        "/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        f"<< /Length {len(stream)} >>\nstream\n{stream}\nendstream",
        "<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n{body}\nendobj\n".encode("latin-1")

    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n0000000000 65535 f \n".encode()
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_at}\n%%EOF\n"
    ).encode()
    return out


@pytest.fixture
def settings() -> Settings:
    return make_settings()
