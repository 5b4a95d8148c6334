"""
Search keywords derived from a candidate profile.
"""

from shared.models import UserProfile

MAX_KEYWORDS = 10


def generate_search_keywords(profile: UserProfile, limit: int = MAX_KEYWORDS) -> list[str]:
    """
    Build job search keywords from a profile.

    Technical skills, frameworks and tools come first, then each past job
    title followed by its technologies. Duplicates keep their first position.
    """
    keywords: dict[str, None] = {}

    for group in (profile.skills.technical, profile.skills.frameworks, profile.skills.tools):
        for skill in group:
            keywords.setdefault(skill, None)

    for entry in profile.experience:
        keywords.setdefault(entry.title, None)
        for tech in entry.technologies:
            keywords.setdefault(tech, None)

    return [k for k in keywords if k and k.strip()][:limit]
