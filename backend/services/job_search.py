"""Live job postings for a recommended role.

Each provider is queried with the role title, its required skills and
veteran/military variants of the title. A provider that fails contributes
no postings. Results are deduplicated on (title, company, location), sorted
by relevance then posting date, and cached per (role, location).
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod

import httpx

from config import settings
from models.requests import ExtractedData, JobRole
from models.responses import JobPosting, JobSearchResponse
from services import match_scorer
from services.cache import TTLCache, job_search_cache_key

logger = logging.getLogger(__name__)

TITLE_RELEVANCE = 10
REQUIRED_SKILL_RELEVANCE = 5
PREFERRED_SKILL_RELEVANCE = 3
VETERAN_RELEVANCE = 5

_SKILL_PHRASES = ("experience with", "knowledge of", "proficiency in", "skills in", "ability to")
_SENTENCE_RE = re.compile(r"[.!?]+")


def extract_skill_phrases(description: str) -> list[str]:
    """Phrases following "experience with", "knowledge of", etc. in a job summary."""
    phrases: list[str] = []
    for sentence in _SENTENCE_RE.split(description):
        lowered = sentence.lower()
        for marker in _SKILL_PHRASES:
            idx = lowered.find(marker)
            if idx == -1:
                continue
            phrase = sentence[idx + len(marker):].strip()
            if phrase and phrase not in phrases:
                phrases.append(phrase)
    return phrases


class JobSearchProvider(ABC):
    """A source of job postings."""

    name: str = ""

    @abstractmethod
    async def search(self, query: str, location: str | None = None) -> list[JobPosting]:
        ...


class USAJobsProvider(JobSearchProvider):
    """Federal postings from the USAJobs search API."""

    name = "USAJobs"
    BASE_URL = "https://data.usajobs.gov/api/search"
    HOST = "data.usajobs.gov"
    RESULTS_PER_PAGE = 25
    TIMEOUT = 30.0

    def __init__(
        self,
        api_key: str,
        email: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.email = email
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization-Key": self.api_key,
            "Host": self.HOST,
            "User-Agent": self.email,
        }

    async def search(self, query: str, location: str | None = None) -> list[JobPosting]:
        params = {"Keyword": query, "ResultsPerPage": self.RESULTS_PER_PAGE}
        if location:
            params["LocationName"] = location

        async with httpx.AsyncClient(timeout=self.TIMEOUT, transport=self._transport) as client:
            response = await client.get(self.BASE_URL, params=params, headers=self._headers())
            response.raise_for_status()
            payload = response.json()

        items = payload.get("SearchResult", {}).get("SearchResultItems", [])
        postings = []
        for item in items:
            try:
                postings.append(self._to_posting(item["MatchedObjectDescriptor"]))
            except (KeyError, IndexError, TypeError) as e:
                logger.warning("Skipping malformed USAJobs item: %s", e)
        return postings

    def _to_posting(self, descriptor: dict) -> JobPosting:
        summary = descriptor.get("UserArea", {}).get("Details", {}).get("JobSummary", "") or ""
        salary = None
        remuneration = descriptor.get("PositionRemuneration") or []
        if remuneration:
            pay = remuneration[0]
            salary = f"{pay['MinimumRange']} - {pay['MaximumRange']} {pay['RateIntervalCode']}"
        return JobPosting(
            id=str(descriptor["PositionID"]),
            title=descriptor["PositionTitle"],
            company=descriptor.get("OrganizationName", ""),
            location=descriptor.get("PositionLocationDisplay", ""),
            description=summary,
            salary=salary,
            url=descriptor.get("PositionURI", ""),
            source=self.name,
            posted_date=descriptor.get("PublicationStartDate"),
            skills=extract_skill_phrases(summary),
        )


def search_queries(role: JobRole) -> list[str]:
    queries = [role.title, *role.required_skills, f"{role.title} veteran", f"{role.title} military"]
    return list(dict.fromkeys(q for q in queries if q.strip()))


def relevance(posting: JobPosting, role: JobRole) -> int:
    title = posting.title.lower()
    desc = posting.description.lower()
    score = 0
    if role.title.lower() in title:
        score += TITLE_RELEVANCE
    score += REQUIRED_SKILL_RELEVANCE * sum(1 for s in role.required_skills if s.lower() in desc)
    score += PREFERRED_SKILL_RELEVANCE * sum(1 for s in role.preferred_skills if s.lower() in desc)
    if "veteran" in desc or "military" in desc:
        score += VETERAN_RELEVANCE
    return score


def dedupe_postings(postings: list[JobPosting]) -> list[JobPosting]:
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for posting in postings:
        key = (posting.title, posting.company, posting.location)
        if key in seen:
            continue
        seen.add(key)
        unique.append(posting)
    return unique


def sort_postings(postings: list[JobPosting], role: JobRole) -> list[JobPosting]:
    """Most relevant first; ties broken by newest posting date."""
    return sorted(
        postings,
        key=lambda p: (relevance(p, role), p.posted_date or ""),
        reverse=True,
    )


class JobSearchService:
    def __init__(self, providers: list[JobSearchProvider], cache: TTLCache | None = None) -> None:
        self.providers = providers
        self.cache = cache if cache is not None else TTLCache(settings.job_cache_ttl_minutes * 60)

    async def _search_provider(
        self, provider: JobSearchProvider, query: str, location: str | None
    ) -> tuple[list[JobPosting], bool]:
        """Postings from one source and whether the call succeeded; a failure yields no postings."""
        try:
            return await provider.search(query, location), True
        except Exception as e:
            logger.warning("Job source %s failed for %r: %s", provider.name, query, e)
            return [], False

    async def search(
        self,
        role: JobRole,
        location: str | None = None,
        profile: ExtractedData | None = None,
    ) -> JobSearchResponse:
        key = job_search_cache_key(role.id or role.title, location)
        postings = self.cache.get(key)
        if postings is None:
            queries = search_queries(role)
            results = await asyncio.gather(*(
                self._search_provider(provider, query, location)
                for provider in self.providers
                for query in queries
            ))
            postings = sort_postings(dedupe_postings([p for batch, _ in results for p in batch]), role)
            if all(ok for _, ok in results):
                self.cache.set(key, postings)
            else:
                logger.info("Not caching results for %r: a job source failed", role.title)
            logger.info("Found %d postings for %r across %d sources", len(postings), role.title, len(self.providers))

        if profile is not None:
            postings = [
                p.model_copy(update={"match_score": match_scorer.score(p.title, p.description, profile).composite})
                for p in postings
            ]

        return JobSearchResponse(
            jobs=postings,
            total=len(postings),
            sources=[p.name for p in self.providers],
        )
