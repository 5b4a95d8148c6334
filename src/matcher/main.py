"""
Matcher Service - Main entry point.
Ranks job listings against a candidate profile.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from loguru import logger

from shared.config import get_settings
from shared.log import setup_logging

from .explainer import TemplateMatchExplainer
from .job_matcher import JobMatcher
from .loaders import load_jobs, load_profile


async def match_files(
    profile_path: Path,
    jobs_path: Path,
    use_llm: bool = True,
    concurrency: Optional[int] = None,
) -> list[dict]:
    """
    Match the jobs in one file against the profile in another.

    Returns:
        JSON-ready match records, best match first
    """
    settings = get_settings()

    profile = load_profile(profile_path)
    jobs = load_jobs(jobs_path)

    if use_llm and not settings.llm_configured:
        logger.warning("LLM_API_KEY not set, using templated explanations")
        use_llm = False

    matcher = JobMatcher(
        explainer=None if use_llm else TemplateMatchExplainer(),
        settings=settings,
        max_concurrency=concurrency,
    )
    matches = await matcher.match_jobs(profile, jobs)
    return [m.model_dump(mode="json", by_alias=True) for m in matches]


@click.command()
@click.argument("profile_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("jobs_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--no-llm",
    is_flag=True,
    help="Use templated explanations instead of calling the LLM",
)
@click.option(
    "--concurrency",
    "-c",
    type=int,
    help="Explanation requests in flight at once",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write matches to this file instead of stdout",
)
def main(
    profile_path: Path,
    jobs_path: Path,
    no_llm: bool,
    concurrency: Optional[int],
    output: Optional[Path],
):
    """Job Matcher - Scores job listings against a profile."""
    setup_logging()

    matches = asyncio.run(
        match_files(profile_path, jobs_path, use_llm=not no_llm, concurrency=concurrency)
    )
    payload = json.dumps(matches, indent=2, ensure_ascii=False)

    if output:
        output.write_text(payload, encoding="utf-8")
        click.echo(f"Wrote {len(matches)} matches to {output}")
    else:
        click.echo(payload)


if __name__ == "__main__":
    main()
