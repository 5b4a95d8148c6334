"""Tests for Tavily search and the interview research workflow."""

import json

import httpx
import pytest
from conftest import FakeLLM, make_settings

from interview.research import ResearchWorkflow, validate_research_params
from interview.search import NO_COMPANY_INFO, NO_TECH_INFO, TavilySearch
from interview.service import local_session_id, run_research
from shared.errors import LLMError, ResearchError, SearchError
from shared.models import ResearchParams, ResearchResult

SYNTHESIS = {
    "companyInsights": {"culture": ["ownership"], "values": ["customers first"], "practices": [], "recentNews": []},
    "roleInsights": {"keyResponsibilities": ["APIs"], "requiredSkills": ["Go"], "experienceLevel": "senior", "focusAreas": ["scale"]},
    "techInsights": [{"technology": "Go", "recentUpdates": ["generics"], "bestPractices": [], "commonChallenges": []}],
    "preparationChecklist": {"priorityTopics": ["concurrency"], "studyTimeline": "2 weeks", "resources": []},
}

TECH_QUESTIONS = [{"question": "Explain goroutines", "difficulty": "mid", "category": "tech_specific", "hints": ["scheduler"]}]
BEHAVIORAL_QUESTIONS = [{"question": "Tell me about a failure", "difficulty": "mid", "category": "teamwork", "hints": []}]


def tavily_with(handler, **settings):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TavilySearch(make_settings(**settings), client=client)


class FakeSearch:
    def __init__(self, company="company research", tech="tech research"):
        self.company = company
        self.tech = tech
        self.calls = []

    async def search_company_info(self, company, role):
        self.calls.append(("company", company, role))
        return self.company

    async def search_tech_trends(self, technologies):
        self.calls.append(("tech", technologies))
        return self.tech

    async def close(self):
        pass


def route_llm(overrides=None):
    """Answer each workflow prompt by its system message."""
    replies = {
        "career coach": json.dumps({"relevantPoints": ["p"], "insights": "filtered insights"}),
        "preparation coach": json.dumps(SYNTHESIS),
        "technical interviewer": json.dumps(TECH_QUESTIONS),
        "behavioral interviewer": json.dumps(BEHAVIORAL_QUESTIONS),
    }
    replies.update(overrides or {})

    def reply(messages):
        system = messages[0]["content"]
        for key, value in replies.items():
            if key in system:
                return value
        raise AssertionError(f"unexpected prompt: {system}")

    return FakeLLM(reply)


def params(**overrides):
    values = {"company": "Acme", "role": "Backend Engineer", "technologies": ["Go", "Postgres"]}
    values.update(overrides)
    return ResearchParams(**values)


class TestTavilySearch:
    @pytest.mark.asyncio
    async def test_search_request(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200, json={"results": [{"title": "T", "url": "https://t", "content": "C", "score": 0.9}]}
            )

        response = await tavily_with(handler).search("acme culture", max_results=3)

        assert response.query == "acme culture"
        assert response.results[0].title == "T"
        request = seen[0]
        assert str(request.url) == "https://api.tavily.com/search"
        assert request.headers["authorization"] == "Bearer tavily-key"
        body = json.loads(request.content)
        assert body["query"] == "acme culture"
        assert body["max_results"] == 3
        assert body["search_depth"] == "advanced"

    @pytest.mark.asyncio
    async def test_search_failure_raises(self):
        search = tavily_with(lambda request: httpx.Response(429, json={"detail": "slow down"}))
        with pytest.raises(SearchError):
            await search.search("q")

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        search = tavily_with(lambda request: httpx.Response(200, json={}), tavily_api_key="")
        with pytest.raises(SearchError, match="TAVILY_API_KEY"):
            await search.search("q")

    @pytest.mark.asyncio
    async def test_company_info_runs_three_queries(self):
        queries = []

        def handler(request):
            query = json.loads(request.content)["query"]
            queries.append(query)
            if "news" in query:
                return httpx.Response(500)
            return httpx.Response(200, json={"results": [{"title": query, "content": "body"}]})

        content = await tavily_with(handler).search_company_info("Acme", "SRE")

        assert queries == [
            "Acme SRE interview process",
            "Acme engineering culture values",
            "Acme recent news tech updates",
        ]
        assert "## Search: Acme SRE interview process" in content
        assert "Acme engineering culture values\nbody\n---" in content
        assert "recent news" not in content

    @pytest.mark.asyncio
    async def test_company_info_fallback(self):
        content = await tavily_with(lambda r: httpx.Response(500)).search_company_info("Acme", "SRE")
        assert content == NO_COMPANY_INFO

    @pytest.mark.asyncio
    async def test_tech_trends_limited_to_five(self):
        queries = []

        def handler(request):
            queries.append(json.loads(request.content)["query"])
            return httpx.Response(200, json={"results": []})

        techs = ["A", "B", "C", "D", "E", "F", "G"]
        content = await tavily_with(handler).search_tech_trends(techs)

        assert len(queries) == 5
        assert queries[0].startswith("A ")
        assert "## Technology: E" in content
        assert "## Technology: F" not in content

    @pytest.mark.asyncio
    async def test_tech_trends_fallback(self):
        content = await tavily_with(lambda r: httpx.Response(503)).search_tech_trends(["Go"])
        assert content == NO_TECH_INFO


class TestValidateParams:
    def test_valid(self):
        assert validate_research_params(params()) == []

    def test_missing_fields(self):
        errors = validate_research_params(ResearchParams(company=" ", role="", technologies=[]))
        assert errors == [
            "Company name is required",
            "Role/position is required",
            "At least one technology is required",
        ]

    def test_too_many_technologies(self):
        errors = validate_research_params(params(technologies=[f"t{i}" for i in range(11)]))
        assert errors == ["Maximum 10 technologies allowed"]


class TestResearchWorkflow:
    @pytest.mark.asyncio
    async def test_execute(self):
        search = FakeSearch()
        llm = route_llm()

        result = await ResearchWorkflow(llm, search).execute(params())

        assert search.calls == [("company", "Acme", "Backend Engineer"), ("tech", ["Go", "Postgres"])]
        assert result.company_insights.values == ["customers first"]
        assert result.role_insights.experience_level == "senior"
        assert result.tech_insights[0].technology == "Go"
        assert [q.question_type for q in result.questions.technical] == ["technical"]
        assert [q.question_type for q in result.questions.behavioral] == ["behavioral"]

        prompts = [call[1]["content"] for call in llm.calls]
        assert "company research" in prompts[0]
        assert "tech research" in prompts[1]
        assert "filtered insights" in prompts[2]
        technical_prompt = next(p for p in prompts if "technical interview questions" in p)
        assert "Role Level: senior" in technical_prompt
        assert "Focus Areas: scale" in technical_prompt
        behavioral_prompt = next(p for p in prompts if "behavioral interview questions" in p)
        assert "Company Values: customers first" in behavioral_prompt

    @pytest.mark.asyncio
    async def test_analysis_failure_degrades(self):
        llm = route_llm({"career coach": LLMError("down")})

        result = await ResearchWorkflow(llm, FakeSearch()).execute(params())

        synthesis_prompt = next(c[1]["content"] for c in llm.calls if "Company Research:" in c[1]["content"])
        assert "Company Research:\n\n" in synthesis_prompt
        assert result.role_insights.experience_level == "senior"

    @pytest.mark.asyncio
    async def test_analysis_unparseable_keeps_snippet(self):
        llm = route_llm({"career coach": "Plain prose instead of JSON"})
        analysis = await ResearchWorkflow(llm, FakeSearch()).analyze_content("results", params())

        assert analysis.relevant_points == ["Plain prose instead of JSON"]
        assert analysis.insights == "Analysis completed but formatting error occurred"

    @pytest.mark.asyncio
    async def test_synthesis_failure_raises(self):
        llm = route_llm({"preparation coach": "not json"})
        with pytest.raises(ResearchError, match="synthesis"):
            await ResearchWorkflow(llm, FakeSearch()).execute(params())

    @pytest.mark.asyncio
    async def test_synthesis_llm_error_raises(self):
        llm = route_llm({"preparation coach": LLMError("rate limited")})
        with pytest.raises(ResearchError, match="rate limited"):
            await ResearchWorkflow(llm, FakeSearch()).execute(params())

    @pytest.mark.asyncio
    async def test_question_failures_degrade_to_empty(self):
        llm = route_llm({"technical interviewer": LLMError("down"), "behavioral interviewer": "{}"})

        result = await ResearchWorkflow(llm, FakeSearch()).execute(params())

        assert result.questions.technical == []
        assert result.questions.behavioral == []
        assert result.company_insights.culture == ["ownership"]


class FakeSessionStore:
    def __init__(self):
        self.events = []

    async def create_session(self, params):
        self.events.append(("create", params.company))
        return "session-1"

    async def update_status(self, session_id, status):
        self.events.append(("status", session_id, status))

    async def save_result(self, session_id, result):
        self.events.append(("save", session_id))


class FailingWorkflow:
    async def execute(self, params):
        raise ResearchError("Failed to parse AI synthesis response")


class StaticWorkflow:
    async def execute(self, params):
        return ResearchResult()


class TestRunResearch:
    @pytest.mark.asyncio
    async def test_without_store_generates_id(self):
        session_id, result = await run_research(params(), StaticWorkflow())
        assert session_id.startswith("session_")
        assert isinstance(result, ResearchResult)

    @pytest.mark.asyncio
    async def test_with_store(self):
        store = FakeSessionStore()
        session_id, _ = await run_research(params(), StaticWorkflow(), store)

        assert session_id == "session-1"
        assert store.events == [("create", "Acme"), ("save", "session-1")]

    @pytest.mark.asyncio
    async def test_failure_marks_session(self):
        store = FakeSessionStore()
        with pytest.raises(ResearchError):
            await run_research(params(), FailingWorkflow(), store)
        assert store.events[-1] == ("status", "session-1", "failed")


def test_local_session_ids_are_unique():
    assert local_session_id() != local_session_id()
