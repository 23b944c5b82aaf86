"""Shared dependencies for API routes.

The two caches are process-wide; everything else is cheap to share.
"""

from config import settings
from services.cache import TTLCache
from services.job_search import JobSearchProvider, JobSearchService, USAJobsProvider
from services.recommendation_oracle import RecommendationOracle
from services.salary_data import SalaryDataService

salary_cache = TTLCache(settings.salary_cache_ttl_hours * 3600)
job_cache = TTLCache(settings.job_cache_ttl_minutes * 60)

_oracle = RecommendationOracle()
_salary_service = SalaryDataService(salary_cache)


def _job_providers() -> list[JobSearchProvider]:
    if not settings.usajobs_api_key:
        return []
    return [USAJobsProvider(settings.usajobs_api_key, settings.usajobs_email)]


_job_search_service = JobSearchService(_job_providers(), job_cache)


def get_oracle() -> RecommendationOracle:
    return _oracle


def get_salary_service() -> SalaryDataService:
    return _salary_service


def get_job_search_service() -> JobSearchService:
    return _job_search_service


def all_caches() -> list[TTLCache]:
    return [salary_cache, job_cache]
