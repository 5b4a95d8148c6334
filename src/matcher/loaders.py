"""
Load profiles and job listings from YAML or JSON files for offline matching.
"""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from loguru import logger

from shared.models import JobListing, ProfileRecord, UserProfile


def _read_data(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def load_profile(path: Path) -> UserProfile:
    """
    Load a profile file.

    Accepts either the camelCase profile produced by the résumé parser
    (``personalInfo``, ``skills``, ...) or a stored profile row
    (``full_name``, ``email``, ...).
    """
    data: Optional[dict] = _read_data(path)
    if not isinstance(data, dict):
        raise ValueError(f"Profile file must contain a mapping: {path}")

    if "personalInfo" in data or "personal_info" in data:
        profile = UserProfile.model_validate(data)
    else:
        profile = ProfileRecord.model_validate(data).to_user_profile()

    logger.info(f"Loaded profile for: {profile.personal_info.name or path.name}")
    return profile


def load_jobs(path: Path) -> list[JobListing]:
    """Load a list of job listings; a ``{"jobs": [...]}`` wrapper is accepted."""
    data = _read_data(path)
    if isinstance(data, dict):
        data = data.get("jobs", [])
    if not isinstance(data, list):
        raise ValueError(f"Jobs file must contain a list: {path}")

    jobs = []
    for item in data:
        # Discovery output wraps each listing in a match record
        if isinstance(item, dict) and isinstance(item.get("job"), dict):
            item = item["job"]
        jobs.append(JobListing.model_validate(item))

    logger.info(f"Loaded {len(jobs)} jobs from {path.name}")
    return jobs
