"""
Interview Service - Main entry point.
Researches a company, role and tech stack and generates practice questions.
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
from shared.database import Database, InterviewSessionStore
from shared.log import setup_logging
from shared.models import ResearchParams
from interview.research import ResearchWorkflow, validate_research_params
from interview.service import run_research


async def prepare(params: ResearchParams, save: bool = False) -> dict:
    """Run research and return the JSON-ready result with its session id."""
    settings = get_settings()
    workflow = ResearchWorkflow()
    db: Optional[Database] = None

    try:
        sessions = None
        if save:
            db = Database(settings)
            sessions = InterviewSessionStore(db)

        session_id, result = await run_research(params, workflow, sessions)
        return {
            "sessionId": session_id,
            "data": result.model_dump(mode="json", by_alias=True),
        }

    finally:
        await workflow.close()
        if db is not None:
            await db.close()


@click.command()
@click.option("--company", "-c", required=True, help="Company name (e.g., 'Stripe')")
@click.option("--role", "-r", required=True, help="Role (e.g., 'Backend Engineer')")
@click.option(
    "--technologies",
    "-t",
    required=True,
    help="Comma-separated technologies (e.g., 'Python,PostgreSQL')",
)
@click.option(
    "--save",
    "-s",
    is_flag=True,
    help="Store the session in Supabase",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write research to this file instead of stdout",
)
def main(company: str, role: str, technologies: str, save: bool, output: Optional[Path]):
    """Interview Prep - Company research and practice questions."""
    setup_logging()

    params = ResearchParams(
        company=company,
        role=role,
        technologies=[t.strip() for t in technologies.split(",") if t.strip()],
    )
    errors = validate_research_params(params)
    if errors:
        raise click.UsageError("; ".join(errors))

    result = asyncio.run(prepare(params, save=save))
    payload = json.dumps(result, indent=2, ensure_ascii=False)

    if output:
        output.write_text(payload, encoding="utf-8")
        logger.info(f"Research written to {output}")
    else:
        click.echo(payload)


if __name__ == "__main__":
    main()
