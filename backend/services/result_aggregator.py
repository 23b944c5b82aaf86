"""Shape scored recommendations into the response envelope."""

import logging
from datetime import datetime, timezone

from models.requests import ExtractedData
from models.responses import JobRecommendation, MarketInsights, RecommendationResponse

logger = logging.getLogger(__name__)

MAX_TOP_LOCATIONS = 3
MAX_TRENDS = 4

SECURITY_CLEARANCE_TREND = "Security clearance highly valued in private sector"
GENERAL_TRENDS = (
    "Growing demand for veterans in leadership roles",
    "Increased remote work opportunities in tech sector",
)
CYBER_TREND = "Rising demand for cybersecurity professionals with military background"
FALLBACK_TRENDS = [
    "Growing demand for veterans in tech roles",
    "Increased focus on cybersecurity expertise",
    "Remote work opportunities expanding",
]

ERROR_MESSAGE = "Failed to generate recommendations"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def dedupe_key(rec: JobRecommendation) -> str:
    return f"{rec.title.lower()}-{rec.description.lower()}"


def dedupe(recommendations: list[JobRecommendation]) -> list[JobRecommendation]:
    """Drop repeated (title, description) pairs, case-insensitively. First occurrence wins."""
    seen: set[str] = set()
    unique = []
    for rec in recommendations:
        key = dedupe_key(rec)
        if key in seen:
            continue
        seen.add(key)
        unique.append(rec)
    return unique


def sort_by_score(recommendations: list[JobRecommendation]) -> list[JobRecommendation]:
    # sorted() is stable, ties keep input order
    return sorted(recommendations, key=lambda r: r.match_score, reverse=True)


def build_market_insights(recommendations: list[JobRecommendation], data: ExtractedData) -> MarketInsights:
    if not recommendations:
        return MarketInsights(
            industry_growth="No matching positions found",
            top_locations=[],
            key_trends=list(FALLBACK_TRENDS),
        )

    industries: list[str] = []
    for rec in recommendations:
        for industry in rec.industries:
            if industry not in industries:
                industries.append(industry)

    trends = []
    if any("security" in f"{r.title} {r.description}".lower() for r in recommendations):
        trends.append(SECURITY_CLEARANCE_TREND)
    trends.extend(GENERAL_TRENDS)
    if any("cyber" in skill.lower() for skill in data.skills):
        trends.append(CYBER_TREND)

    return MarketInsights(
        industry_growth=f"{len(recommendations)} relevant positions found",
        top_locations=industries[:MAX_TOP_LOCATIONS],
        key_trends=list(dict.fromkeys(trends))[:MAX_TRENDS],
    )


def aggregate(
    recommendations: list[JobRecommendation],
    data: ExtractedData,
    limit: int | None = None,
) -> RecommendationResponse:
    """Dedupe, sort by match score, cap at `limit` and attach market insights."""
    ranked = sort_by_score(dedupe(recommendations))
    if limit is not None:
        ranked = ranked[:limit]
    logger.info("Aggregated %d recommendations (%d before dedupe)", len(ranked), len(recommendations))
    return RecommendationResponse(
        recommendations=ranked,
        market_insights=build_market_insights(ranked, data),
        timestamp=utc_timestamp(),
    )


def error_response(message: str = ERROR_MESSAGE) -> RecommendationResponse:
    """Well-formed envelope for a failed request."""
    return RecommendationResponse(
        recommendations=[],
        market_insights=MarketInsights(industry_growth="Data not available"),
        timestamp=utc_timestamp(),
        error=message,
    )
