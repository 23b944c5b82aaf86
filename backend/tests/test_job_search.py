import httpx
import pytest

from models.requests import ExtractedData, JobRole
from models.responses import JobPosting
from services.cache import TTLCache
from services.job_search import (
    JobSearchProvider,
    JobSearchService,
    USAJobsProvider,
    extract_skill_phrases,
    relevance,
    search_queries,
)

ROLE = JobRole(
    id="role-1",
    title="Cybersecurity Analyst",
    required_skills=["SIEM"],
    preferred_skills=["Python"],
)


def usajobs_item(position_id, title, summary="", org="Department of Defense", location="Fort Meade, Maryland"):
    return {
        "MatchedObjectDescriptor": {
            "PositionID": position_id,
            "PositionTitle": title,
            "OrganizationName": org,
            "PositionLocationDisplay": location,
            "PositionURI": f"https://www.usajobs.gov/job/{position_id}",
            "PublicationStartDate": "2024-05-01T00:00:00",
            "PositionRemuneration": [
                {"MinimumRange": "85000", "MaximumRange": "120000", "RateIntervalCode": "Per Year"}
            ],
            "UserArea": {"Details": {"JobSummary": summary}},
        }
    }


class StaticProvider(JobSearchProvider):
    def __init__(self, name, postings):
        self.name = name
        self.postings = postings
        self.queries = []

    async def search(self, query, location=None):
        self.queries.append((query, location))
        return list(self.postings)


class BrokenProvider(JobSearchProvider):
    name = "Broken"

    async def search(self, query, location=None):
        raise httpx.ConnectError("unreachable")


class FlakyProvider(StaticProvider):
    """Fails its first `failures` calls, then serves postings."""

    def __init__(self, name, postings, failures):
        super().__init__(name, postings)
        self.failures = failures

    async def search(self, query, location=None):
        if self.failures > 0:
            self.failures -= 1
            self.queries.append((query, location))
            raise httpx.HTTPStatusError("503", request=httpx.Request("GET", "https://example.test"),
                                        response=httpx.Response(503))
        return await super().search(query, location)


def posting(title, description="", company="Acme", location="Remote", posted="2024-01-01", source="Static"):
    return JobPosting(
        id=f"{title}-{company}",
        title=title,
        company=company,
        location=location,
        description=description,
        source=source,
        posted_date=posted,
    )


class TestUSAJobsProvider:
    @pytest.mark.asyncio
    async def test_request_and_parsing(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            seen["headers"] = request.headers
            return httpx.Response(200, json={
                "SearchResult": {"SearchResultItems": [
                    usajobs_item("ABC-123", "IT Specialist (INFOSEC)", "Requires knowledge of network defense. Veterans preference."),
                ]}
            })

        provider = USAJobsProvider("secret", "me@example.com", transport=httpx.MockTransport(handler))
        jobs = await provider.search("cybersecurity analyst", "Maryland")

        assert seen["url"].params["Keyword"] == "cybersecurity analyst"
        assert seen["url"].params["LocationName"] == "Maryland"
        assert seen["url"].params["ResultsPerPage"] == "25"
        assert seen["headers"]["Authorization-Key"] == "secret"
        assert seen["headers"]["User-Agent"] == "me@example.com"

        job = jobs[0]
        assert job.id == "ABC-123"
        assert job.company == "Department of Defense"
        assert job.salary == "85000 - 120000 Per Year"
        assert job.source == "USAJobs"
        assert job.skills == ["network defense"]

    @pytest.mark.asyncio
    async def test_http_error_raises(self):
        provider = USAJobsProvider("k", "e", transport=httpx.MockTransport(lambda r: httpx.Response(500)))
        with pytest.raises(httpx.HTTPStatusError):
            await provider.search("anything")

    @pytest.mark.asyncio
    async def test_malformed_items_skipped(self):
        payload = {"SearchResult": {"SearchResultItems": [{"Nope": {}}, usajobs_item("1", "Analyst")]}}
        provider = USAJobsProvider("k", "e", transport=httpx.MockTransport(lambda r: httpx.Response(200, json=payload)))
        jobs = await provider.search("analyst")
        assert [j.id for j in jobs] == ["1"]


class TestHelpers:
    def test_search_queries(self):
        assert search_queries(ROLE) == [
            "Cybersecurity Analyst",
            "SIEM",
            "Cybersecurity Analyst veteran",
            "Cybersecurity Analyst military",
        ]

    def test_relevance(self):
        job = posting("Senior Cybersecurity Analyst", "SIEM and Python, military spouses and veterans welcome")
        assert relevance(job, ROLE) == 10 + 5 + 3 + 5
        assert relevance(posting("Cook", "kitchen"), ROLE) == 0

    def test_extract_skill_phrases(self):
        text = "Experience with Splunk. Ability to lead teams! Nothing else"
        assert extract_skill_phrases(text) == ["Splunk", "lead teams"]


class TestJobSearchService:
    @pytest.mark.asyncio
    async def test_dedupes_and_sorts(self):
        provider = StaticProvider("Static", [
            posting("Help Desk", "general IT", posted="2024-03-01"),
            posting("Cybersecurity Analyst", "SIEM monitoring", posted="2024-01-01"),
            posting("Cybersecurity Analyst", "SIEM monitoring", posted="2024-01-01"),
            posting("Help Desk Lead", "general IT", posted="2024-04-01"),
        ])
        service = JobSearchService([provider], TTLCache(3600))
        response = await service.search(ROLE, "Remote")

        assert [j.title for j in response.jobs] == ["Cybersecurity Analyst", "Help Desk Lead", "Help Desk"]
        assert response.total == 3
        assert response.sources == ["Static"]
        assert {q for q, _ in provider.queries} == set(search_queries(ROLE))
        assert all(loc == "Remote" for _, loc in provider.queries)

    @pytest.mark.asyncio
    async def test_failing_source_contributes_nothing(self):
        good = StaticProvider("Static", [posting("Cybersecurity Analyst")])
        service = JobSearchService([BrokenProvider(), good], TTLCache(3600))
        response = await service.search(ROLE)
        assert response.total == 1
        assert response.sources == ["Broken", "Static"]

    @pytest.mark.asyncio
    async def test_only_failing_source_is_empty(self):
        response = await JobSearchService([BrokenProvider()], TTLCache(3600)).search(ROLE)
        assert response.jobs == []
        assert response.total == 0

    @pytest.mark.asyncio
    async def test_results_cached_per_role_and_location(self):
        provider = StaticProvider("Static", [posting("Cybersecurity Analyst")])
        cache = TTLCache(3600)
        service = JobSearchService([provider], cache)
        await service.search(ROLE, "Denver")
        calls = len(provider.queries)
        await service.search(ROLE, "Denver")
        assert len(provider.queries) == calls
        assert "job-search:role-1:Denver" in cache

        await service.search(ROLE)
        assert len(provider.queries) == calls * 2

    @pytest.mark.asyncio
    async def test_failed_search_not_cached(self):
        provider = FlakyProvider("Flaky", [posting("Cybersecurity Analyst")], failures=len(search_queries(ROLE)))
        cache = TTLCache(3600)
        service = JobSearchService([provider], cache)

        first = await service.search(ROLE, "Denver")
        assert first.total == 0
        assert "job-search:role-1:Denver" not in cache

        second = await service.search(ROLE, "Denver")
        assert second.total == 1
        assert "job-search:role-1:Denver" in cache

    @pytest.mark.asyncio
    async def test_partial_failure_not_cached(self):
        good = StaticProvider("Static", [posting("Cybersecurity Analyst")])
        cache = TTLCache(3600)
        response = await JobSearchService([BrokenProvider(), good], cache).search(ROLE)
        assert response.total == 1
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_scores_against_profile(self, cyber_profile):
        provider = StaticProvider("Static", [posting("Cybersecurity Analyst", "cybersecurity and leadership")])
        response = await JobSearchService([provider], TTLCache(3600)).search(ROLE, profile=cyber_profile)
        assert response.jobs[0].match_score is not None
        assert response.jobs[0].match_score > 0

    @pytest.mark.asyncio
    async def test_no_profile_leaves_score_empty(self):
        provider = StaticProvider("Static", [posting("Cybersecurity Analyst")])
        response = await JobSearchService([provider], TTLCache(3600)).search(ROLE, profile=None)
        assert response.jobs[0].match_score is None

    @pytest.mark.asyncio
    async def test_no_providers(self):
        response = await JobSearchService([], TTLCache(3600)).search(ROLE, profile=ExtractedData())
        assert response.jobs == []
        assert response.sources == []
