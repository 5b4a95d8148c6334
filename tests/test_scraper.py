"""Tests for SerpAPI search, job detail extraction and discovery."""

import httpx
import pytest
from conftest import FakeLLM, make_profile, make_settings

from scraper.discovery import JobDiscovery
from scraper.job_details import JobDetailExtractor, JobDetails, extract_skills_basic
from scraper.keywords import generate_search_keywords
from scraper.serpapi_client import SerpApiClient
from shared.errors import SerpApiError


def serp_job(title, company, **extra):
    job = {
        "title": title,
        "company_name": company,
        "location": "Austin, TX",
        "via": "LinkedIn",
        "description": f"{title} role working with Python and Docker. " * 30,
    }
    job.update(extra)
    return job


def serpapi_with(handler, **settings):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SerpApiClient(make_settings(**settings), client=client)


class StaticExtractor(JobDetailExtractor):
    """Extractor returning fixed details without calling the LLM."""

    def __init__(self, details=None, fail_for=()):
        self.details = details or JobDetails(skills=["python"], experience_level="mid")
        self.fail_for = set(fail_for)
        self.calls = []

    async def extract(self, description, title, company):
        self.calls.append((title, company))
        if title in self.fail_for:
            raise RuntimeError("extraction exploded")
        return self.details


class TestSerpApiClient:
    @pytest.mark.asyncio
    async def test_search_params(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"jobs_results": [serp_job("Dev", "Acme")]})

        results = await serpapi_with(handler).search("python django", "Texas", max_results=250)

        assert len(results) == 1
        assert results[0].company_name == "Acme"
        params = seen[0].url.params
        assert params["engine"] == "google_jobs"
        assert params["q"] == "python django"
        assert params["location"] == "Texas"
        assert params["api_key"] == "serp-key"
        assert params["num"] == "100"

    @pytest.mark.asyncio
    async def test_no_results_key(self):
        client = serpapi_with(lambda request: httpx.Response(200, json={}))
        assert await client.search("x", "y") == []

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        client = serpapi_with(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(SerpApiError, match="500"):
            await client.search("x", "y")

    @pytest.mark.asyncio
    async def test_error_in_body_raises(self):
        client = serpapi_with(lambda request: httpx.Response(200, json={"error": "Invalid API key"}))
        with pytest.raises(SerpApiError, match="Invalid API key"):
            await client.search("x", "y")

    @pytest.mark.asyncio
    async def test_missing_key_raises(self):
        client = serpapi_with(lambda request: httpx.Response(200, json={}), serpapi_api_key="")
        with pytest.raises(SerpApiError, match="SERPAPI_API_KEY"):
            await client.search("x", "y")


class TestJobDetailExtractor:
    def test_basic_extraction(self):
        skills = extract_skills_basic("We use Python, Docker and PostgreSQL on AWS.")
        assert {"Python", "Docker", "PostgreSQL", "AWS"} <= set(skills)
        assert "Rust" not in skills

    @pytest.mark.asyncio
    async def test_llm_extraction(self):
        llm = FakeLLM(
            ['```json\n{"skills": ["Python", "FastAPI"], "requirements": ["3+ years"], "experienceLevel": "Senior"}\n```']
        )
        details = await JobDetailExtractor(llm).extract("long description", "Backend Dev", "Acme")

        assert details.skills == ["Python", "FastAPI"]
        assert details.requirements == ["3+ years"]
        assert details.experience_level == "senior"
        assert "Backend Dev" in llm.calls[0][0]["content"]

    @pytest.mark.asyncio
    async def test_description_truncated_in_prompt(self):
        llm = FakeLLM(['{"skills": []}'])
        await JobDetailExtractor(llm).extract("x" * 5000, "Dev", "Acme")
        assert "x" * 3000 in llm.calls[0][0]["content"]
        assert "x" * 3001 not in llm.calls[0][0]["content"]

    @pytest.mark.asyncio
    async def test_unknown_level_is_any(self):
        llm = FakeLLM(['{"skills": ["Go"], "experienceLevel": "principal"}'])
        details = await JobDetailExtractor(llm).extract("desc", "Dev", "Acme")
        assert details.experience_level == "any"

    @pytest.mark.asyncio
    async def test_llm_failure_falls_back(self):
        llm = FakeLLM(["this is not json"])
        details = await JobDetailExtractor(llm).extract("Needs Kubernetes and Go", "SRE", "Acme")

        assert "Kubernetes" in details.skills
        assert details.requirements == []
        assert details.experience_level == "any"

    @pytest.mark.asyncio
    async def test_unconfigured_llm_skips_call(self):
        llm = FakeLLM([], settings=make_settings(llm_api_key=""))
        details = await JobDetailExtractor(llm).extract("React and TypeScript", "FE", "Acme")

        assert llm.calls == []
        assert {"React", "TypeScript"} <= set(details.skills)


class TestKeywords:
    def test_order_and_uniqueness(self):
        profile = make_profile(
            technical=["Python", "SQL"],
            frameworks=["Django"],
            tools=["Docker", "Python"],
            experience=[
                {"title": "Backend Engineer", "technologies": ["Django", "Celery"]},
            ],
        )
        assert generate_search_keywords(profile) == [
            "Python", "SQL", "Django", "Docker", "Backend Engineer", "Celery",
        ]

    def test_limited_to_ten(self):
        profile = make_profile(technical=[f"skill{i}" for i in range(15)])
        assert generate_search_keywords(profile) == [f"skill{i}" for i in range(10)]


class TestJobDiscovery:
    def discovery(self, jobs, extractor=None, **settings):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"jobs_results": jobs})

        s = make_settings(**settings)
        discovery = JobDiscovery(
            s,
            serpapi=serpapi_with(handler, **settings),
            extractor=extractor or StaticExtractor(),
        )
        return discovery, seen

    @pytest.mark.asyncio
    async def test_converts_results(self):
        raw = serp_job(
            "Data Engineer",
            "Initech",
            via="via Indeed",
            detected_extensions={"schedule_type": "Part-time", "salary": "90,000 - 110,000", "posted_at": "2 days ago"},
            apply_options=[{"title": "Apply", "link": "https://jobs.initech.com/1"}],
        )
        discovery, seen = self.discovery([raw])

        jobs = await discovery.search_jobs(["python", "spark"])

        assert seen[0].url.params["q"] == "python spark"
        assert seen[0].url.params["location"] == "United States"
        job = jobs[0]
        assert job.source == "indeed"
        assert job.employment_type == "part-time"
        assert job.salary.min == 90000
        assert job.posted_date == "2 days ago"
        assert job.url == "https://jobs.initech.com/1"
        assert job.apply_url == "https://jobs.initech.com/1"
        assert job.company_url == "https://www.google.com/search?q=Initech"
        assert job.linkedin_url == "https://www.linkedin.com/search/results/companies/?keywords=Initech"
        assert job.skills == ["python"]
        assert job.experience_level == "mid"
        assert len(job.description) == 500

    @pytest.mark.asyncio
    async def test_fallback_url_without_apply_option(self):
        discovery, _ = self.discovery([serp_job("ML Engineer", "Big Co")])

        jobs = await discovery.search_jobs(["ml"], location="Remote")

        assert jobs[0].apply_url is None
        assert jobs[0].url == "https://www.google.com/search?q=ML%20Engineer%20Big%20Co%20jobs"

    @pytest.mark.asyncio
    async def test_deduplicates_by_title_and_company(self):
        jobs = [
            serp_job("Dev", "Acme", location="Austin, TX"),
            serp_job("Dev", "Acme", location="Dallas, TX"),
            serp_job("Dev", "Globex"),
        ]
        discovery, _ = self.discovery(jobs)

        result = await discovery.search_jobs(["dev"])

        assert [(j.title, j.company) for j in result] == [("Dev", "Acme"), ("Dev", "Globex")]
        assert result[0].location == "Dallas, TX"

    @pytest.mark.asyncio
    async def test_truncates_to_max_results(self):
        discovery, seen = self.discovery([serp_job(f"Dev {i}", "Acme") for i in range(5)])

        result = await discovery.search_jobs(["dev"], max_results=3)

        assert len(result) == 3
        assert seen[0].url.params["num"] == "3"

    @pytest.mark.asyncio
    async def test_failed_conversion_skipped(self):
        extractor = StaticExtractor(fail_for={"Broken"})
        discovery, _ = self.discovery([serp_job("Broken", "Acme"), serp_job("Fine", "Acme")], extractor)

        result = await discovery.search_jobs(["dev"])

        assert [j.title for j in result] == ["Fine"]

    @pytest.mark.asyncio
    async def test_search_failure_propagates(self):
        def handler(request):
            return httpx.Response(200, json={"error": "quota exceeded"})

        discovery = JobDiscovery(
            make_settings(), serpapi=serpapi_with(handler), extractor=StaticExtractor()
        )
        with pytest.raises(SerpApiError):
            await discovery.search_jobs(["dev"])
