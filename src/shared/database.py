"""
Supabase (PostgREST) access over httpx.
Stores résumé profiles and interview preparation sessions.
"""

from typing import Any, Optional

import httpx
from loguru import logger

from .config import Settings, get_settings
from .errors import DatabaseError
from .models import InterviewQuestion, ProfileRecord, ResearchParams, ResearchResult

PROFILES_TABLE = "user_profiles"
SESSIONS_TABLE = "interview_prep_sessions"
INSIGHTS_TABLE = "interview_insights"
QUESTIONS_TABLE = "interview_questions"


class Database:
    """Async Supabase REST wrapper."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def base_url(self) -> str:
        if not self.settings.supabase_url:
            raise DatabaseError("SUPABASE_URL is not set")
        return f"{self.settings.supabase_url.rstrip('/')}/rest/v1"

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers with the service role key."""
        key = self.settings.supabase_service_key.get_secret_value()
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.settings.supabase_timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def request(
        self,
        method: str,
        table: str,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
    ) -> list[dict[str, Any]]:
        """Run one PostgREST request and return the affected rows."""
        client = await self._get_client()
        url = f"{self.base_url}/{table}"

        try:
            response = await client.request(
                method, url, headers=self.headers, params=params, json=json
            )
        except httpx.HTTPError as e:
            raise DatabaseError(f"{method} {table} failed: {e}") from e

        if response.is_error:
            raise DatabaseError(
                f"{method} {table} failed: {response.status_code} - {response.text}"
            )

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]


class ProfileStore:
    """CRUD operations for résumé profiles."""

    def __init__(self, db: Database):
        self.db = db

    async def create(self, record: ProfileRecord) -> ProfileRecord:
        rows = await self.db.request("POST", PROFILES_TABLE, json=[record.to_db_dict()])
        if not rows:
            raise DatabaseError("Failed to create profile: no row returned")
        profile = ProfileRecord.model_validate(rows[0])
        logger.info(f"Created profile {profile.id} for {profile.email}")
        return profile

    async def get_by_id(self, profile_id: str) -> Optional[ProfileRecord]:
        rows = await self.db.request(
            "GET", PROFILES_TABLE, params={"select": "*", "id": f"eq.{profile_id}"}
        )
        return ProfileRecord.model_validate(rows[0]) if rows else None

    async def get_by_email(self, email: str) -> Optional[ProfileRecord]:
        """Get the most recent profile uploaded for an email."""
        rows = await self.db.request(
            "GET",
            PROFILES_TABLE,
            params={
                "select": "*",
                "email": f"eq.{email}",
                "order": "created_at.desc",
                "limit": "1",
            },
        )
        return ProfileRecord.model_validate(rows[0]) if rows else None

    async def update(self, profile_id: str, data: dict[str, Any]) -> ProfileRecord:
        rows = await self.db.request(
            "PATCH", PROFILES_TABLE, params={"id": f"eq.{profile_id}"}, json=data
        )
        if not rows:
            raise DatabaseError(f"Profile not found: {profile_id}")
        return ProfileRecord.model_validate(rows[0])

    async def save(self, record: ProfileRecord) -> ProfileRecord:
        """Update the profile stored for the record's email, or create one."""
        existing = await self.get_by_email(record.email)
        if existing and existing.id:
            logger.info(f"Updating existing profile {existing.id}")
            return await self.update(existing.id, record.to_db_dict())
        return await self.create(record)

    async def delete(self, profile_id: str) -> None:
        await self.db.request("DELETE", PROFILES_TABLE, params={"id": f"eq.{profile_id}"})
        logger.info(f"Deleted profile {profile_id}")

    async def recent(self, limit: int = 10) -> list[dict[str, Any]]:
        """Summaries of the latest uploaded profiles."""
        return await self.db.request(
            "GET",
            PROFILES_TABLE,
            params={
                "select": "id,full_name,email,experience_level,top_strengths,created_at",
                "order": "created_at.desc",
                "limit": str(limit),
            },
        )


class InterviewSessionStore:
    """Persistence for interview preparation sessions."""

    def __init__(self, db: Database):
        self.db = db

    async def create_session(self, params: ResearchParams) -> str:
        rows = await self.db.request(
            "POST",
            SESSIONS_TABLE,
            json={
                "company_name": params.company,
                "role_name": params.role,
                "technologies": params.technologies,
                "user_id": params.user_id,
                "status": "processing",
            },
        )
        if not rows:
            raise DatabaseError("Failed to create session: no row returned")
        return str(rows[0]["id"])

    async def update_status(self, session_id: str, status: str) -> None:
        await self.db.request(
            "PATCH", SESSIONS_TABLE, params={"id": f"eq.{session_id}"}, json={"status": status}
        )

    async def save_insights(self, session_id: str, result: ResearchResult) -> None:
        dumped = result.model_dump(mode="json", by_alias=True)
        await self.db.request(
            "POST",
            INSIGHTS_TABLE,
            json={
                "session_id": session_id,
                "company_insights": dumped["companyInsights"],
                "role_insights": dumped["roleInsights"],
                "tech_insights": dumped["techInsights"],
                "preparation_checklist": dumped["preparationChecklist"],
            },
        )

    async def save_questions(
        self, session_id: str, questions: list[InterviewQuestion]
    ) -> None:
        if not questions:
            return
        await self.db.request(
            "POST",
            QUESTIONS_TABLE,
            json=[
                {
                    "session_id": session_id,
                    "question_text": q.question,
                    "question_type": q.question_type,
                    "difficulty": q.difficulty,
                    "category": q.category,
                    "hints": q.hints,
                }
                for q in questions
            ],
        )

    async def save_result(self, session_id: str, result: ResearchResult) -> None:
        """Store insights and questions, then mark the session completed."""
        await self.save_insights(session_id, result)
        await self.save_questions(
            session_id, result.questions.technical + result.questions.behavioral
        )
        await self.update_status(session_id, "completed")
        logger.info(f"Saved research for session {session_id}")

    async def get_session(self, session_id: str) -> Optional[dict[str, Any]]:
        """Get a session with its insights and questions."""
        sessions = await self.db.request(
            "GET", SESSIONS_TABLE, params={"select": "*", "id": f"eq.{session_id}"}
        )
        if not sessions:
            return None

        insights = await self.db.request(
            "GET", INSIGHTS_TABLE, params={"select": "*", "session_id": f"eq.{session_id}"}
        )
        questions = await self.db.request(
            "GET",
            QUESTIONS_TABLE,
            params={
                "select": "*",
                "session_id": f"eq.{session_id}",
                "order": "created_at.asc",
            },
        )
        return {
            "session": sessions[0],
            "insights": insights[0] if insights else None,
            "questions": questions,
        }
