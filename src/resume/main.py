"""
Resume Service - Main entry point.
Parses a PDF résumé into a structured profile.
"""

import asyncio
import json
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from loguru import logger

from shared.config import get_settings
from shared.database import Database, ProfileStore
from shared.log import setup_logging
from resume.pdf import validate_pdf_file
from resume.profile_extractor import ResumeParser
from resume.service import ParsedResume, parse_resume


async def process_file(pdf_path: Path, save: bool = False) -> ParsedResume:
    """Parse one résumé file, optionally storing the result."""
    settings = get_settings()
    data = pdf_path.read_bytes()

    validation = validate_pdf_file(
        pdf_path.name,
        None,
        len(data),
        max_size=settings.upload_max_size_mb * 1024 * 1024,
        min_size=settings.upload_min_size_bytes,
    )
    if not validation.valid:
        raise click.ClickException(validation.error or "Invalid file")

    parser = ResumeParser()
    logger.info(f"Processing resume: {pdf_path.name} ({len(data)} bytes)")

    if not save:
        return await parse_resume(data, pdf_path.name, parser)

    db = Database(settings)
    try:
        return await parse_resume(data, pdf_path.name, parser, ProfileStore(db))
    finally:
        await db.close()


@click.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--save",
    "-s",
    is_flag=True,
    help="Store the parsed profile in Supabase",
)
def main(pdf_path: Path, save: bool):
    """Resume Parser - Extracts a structured profile from a PDF."""
    setup_logging()

    parsed = asyncio.run(process_file(pdf_path, save=save))
    click.echo(json.dumps(parsed.to_response(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
