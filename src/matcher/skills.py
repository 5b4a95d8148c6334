"""
Skill normalisation and matching against a candidate's skill set.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from shared.models import Importance, UserProfile

# Alternate spellings treated as the same skill. Entries are compared after
# stripping every non-alphanumeric character.
SKILL_SYNONYM_GROUPS: dict[str, frozenset[str]] = {
    "js": frozenset({"javascript", "js", "ecmascript"}),
    "react": frozenset({"react", "reactjs", "react.js"}),
    "node": frozenset({"node", "nodejs", "node.js"}),
    "vue": frozenset({"vue", "vuejs", "vue.js"}),
    "angular": frozenset({"angular", "angularjs", "angular.js"}),
    "python": frozenset({"python", "py"}),
    "java": frozenset({"java", "javase"}),
    "csharp": frozenset({"c#", "csharp", "dotnet"}),
    "typescript": frozenset({"typescript", "ts"}),
}

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_skill(skill: str) -> str:
    """Lower-case and trim."""
    return (skill or "").strip().lower()


def compact_skill(skill: str) -> str:
    """Lower-case and drop everything but letters and digits."""
    return _NON_ALNUM_RE.sub("", (skill or "").lower())


def are_similar_skills(
    first: str,
    second: str,
    groups: Optional[dict[str, frozenset[str]]] = None,
) -> bool:
    """True if both skills compact to the same token or share a synonym group."""
    a = compact_skill(first)
    b = compact_skill(second)
    if a == b:
        return True

    for variants in (groups or SKILL_SYNONYM_GROUPS).values():
        if a in variants and b in variants:
            return True
    return False


def candidate_skill_set(profile: UserProfile) -> set[str]:
    """
    All skills the candidate can claim.

    Union of technical skills, frameworks, tools and every technology listed
    under an experience entry, normalised. Blank entries are ignored.
    """
    sources: list[Iterable[str]] = [
        profile.skills.technical,
        profile.skills.frameworks,
        profile.skills.tools,
    ]
    sources.extend(exp.technologies for exp in profile.experience)

    skills = set()
    for source in sources:
        for skill in source:
            normalized = normalize_skill(skill)
            if normalized:
                skills.add(normalized)
    return skills


@dataclass(frozen=True)
class SkillCheck:
    """Outcome of looking one job skill up in a candidate skill set."""

    skill: str
    matched: bool
    importance: Importance


def check_skill(job_skill: str, candidate_skills: set[str]) -> SkillCheck:
    """
    Look a (normalised) job skill up in the candidate's skills.

    Exact membership is a strong match; substring containment in either
    direction or a shared synonym group is a partial one.
    """
    if job_skill in candidate_skills:
        return SkillCheck(skill=job_skill, matched=True, importance="high")

    for candidate in candidate_skills:
        if (
            job_skill in candidate
            or candidate in job_skill
            or are_similar_skills(job_skill, candidate)
        ):
            return SkillCheck(skill=job_skill, matched=True, importance="medium")

    return SkillCheck(skill=job_skill, matched=False, importance="medium")
