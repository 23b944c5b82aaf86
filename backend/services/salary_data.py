"""Synthetic salary insights for a job title.

Titles are bucketed into four tiers by keyword (checked in order); every
other range is the tier range scaled by fixed multipliers. Results are
cached per (title, location) for `salary_cache_ttl_hours`.
"""

import logging

from config import settings
from models.responses import ExperienceSalaries, SalaryInsights, SalaryRange
from services.cache import TTLCache

logger = logging.getLogger(__name__)

# (title keywords, (min, max, median)), first match wins
SALARY_TIERS: tuple[tuple[tuple[str, ...], tuple[int, int, int]], ...] = (
    (("senior", "lead", "manager"), (120000, 200000, 160000)),
    (("engineer", "developer"), (90000, 160000, 125000)),
    (("analyst", "specialist"), (70000, 120000, 95000)),
)
DEFAULT_TIER = (60000, 100000, 80000)
CURRENCY = "USD"

# location -> multiplier applied to min, max and median
LOCATION_MULTIPLIERS: dict[str, float] = {
    "San Francisco": 1.4,
    "New York": 1.3,
    "Remote": 0.9,
}

# industry -> (min multiplier, max multiplier, median multiplier)
INDUSTRY_MULTIPLIERS: dict[str, tuple[float, float, float]] = {
    "Technology": (1.1, 1.2, 1.15),
    "Finance": (1.2, 1.3, 1.25),
    "Defense": (1.05, 1.15, 1.1),
}


def base_salary_range(job_title: str) -> SalaryRange:
    title = job_title.lower()
    low, high, median = DEFAULT_TIER
    for keywords, tier in SALARY_TIERS:
        if any(k in title for k in keywords):
            low, high, median = tier
            break
    return SalaryRange(min=low, max=high, median=median, currency=CURRENCY)


def _scaled(base: SalaryRange, low: float, high: float, median: float) -> SalaryRange:
    return SalaryRange(
        min=round(base.min * low),
        max=round(base.max * high),
        median=round(base.median * median),
        currency=base.currency,
    )


def build_salary_insights(job_title: str) -> SalaryInsights:
    base = base_salary_range(job_title)
    by_experience = ExperienceSalaries(
        entry=SalaryRange(
            min=round(base.min * 0.7),
            max=round(base.min * 1.2),
            median=round(base.min * 0.95),
            currency=base.currency,
        ),
        mid=SalaryRange(
            min=round(base.median * 0.8),
            max=round(base.median * 1.2),
            median=base.median,
            currency=base.currency,
        ),
        senior=SalaryRange(
            min=round(base.max * 0.8),
            max=round(base.max * 1.3),
            median=round(base.max * 1.1),
            currency=base.currency,
        ),
    )
    return SalaryInsights(
        range=base,
        median=base.median,
        by_experience=by_experience,
        by_location={loc: _scaled(base, m, m, m) for loc, m in LOCATION_MULTIPLIERS.items()},
        by_industry={ind: _scaled(base, *m) for ind, m in INDUSTRY_MULTIPLIERS.items()},
    )


def format_salary_range(salary: SalaryRange) -> str:
    return f"${salary.min:,} - ${salary.max:,}"


class SalaryDataService:
    """Salary insights with a per-(title, location) TTL cache."""

    def __init__(self, cache: TTLCache | None = None) -> None:
        self.cache = cache if cache is not None else TTLCache(settings.salary_cache_ttl_hours * 3600)

    def get_salary_data(self, job_title: str, location: str | None = None) -> SalaryInsights:
        key = (job_title, location or "any")
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        logger.debug("Salary cache miss for %s", key)
        insights = build_salary_insights(job_title)
        self.cache.set(key, insights)
        return insights
