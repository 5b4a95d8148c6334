"""
Run an interview research session and persist it when storage is available.
"""

import secrets
import time
from typing import Optional

from loguru import logger

from shared.database import InterviewSessionStore
from shared.models import ResearchParams, ResearchResult

from .research import ResearchWorkflow


def local_session_id() -> str:
    """Session id for research that is not stored."""
    return f"session_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


async def run_research(
    params: ResearchParams,
    workflow: ResearchWorkflow,
    sessions: Optional[InterviewSessionStore] = None,
) -> tuple[str, ResearchResult]:
    """
    Execute the research workflow for one request.

    With a session store, the session is created first and marked
    ``failed`` if the workflow raises.

    Returns:
        (session id, research result)
    """
    if sessions is None:
        result = await workflow.execute(params)
        return local_session_id(), result

    session_id = await sessions.create_session(params)
    logger.info(f"Created interview prep session {session_id}")

    try:
        result = await workflow.execute(params)
    except Exception:
        await sessions.update_status(session_id, "failed")
        raise

    await sessions.save_result(session_id, result)
    return session_id, result
