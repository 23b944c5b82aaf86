"""Career matching orchestrator.

Pipeline:
1. Oracle recommendations (resume text or manual-entry prompt)
2. Conversion: id, salary enrichment, demand trend, clamped match scores
3. Optional local rescoring with the match scorer
4. Static fallback roles, scored locally, when the oracle is unavailable
5. Dedupe, sort, cap and market insights
"""

import logging
import random
import string
import time
from dataclasses import dataclass

from config import settings
from models.requests import ExtractedData
from models.responses import JobRecommendation, MatchDetails, RecommendationResponse
from models.schemas.match_breakdown import MatchBreakdown
from models.schemas.oracle_recommendation import RawRecommendation
from models.schemas.parse_result import Unavailable
from services import match_scorer, result_aggregator, vocabulary
from services.recommendation_oracle import RecommendationOracle
from services.salary_data import SalaryDataService, format_salary_range

logger = logging.getLogger(__name__)

HIGH_DEMAND_THRESHOLD = 80
MEDIUM_DEMAND_THRESHOLD = 60

_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class FallbackRole:
    title: str
    description: str
    required_skills: tuple[str, ...]
    industries: tuple[str, ...]
    certifications: tuple[str, ...]
    career_progression: str


FALLBACK_ROLES: tuple[FallbackRole, ...] = (
    FallbackRole(
        title="Project Manager",
        description=(
            "Plan and deliver cross-functional projects, manage schedules, budgets and risk, "
            "and lead teams through execution. Leadership and operations management experience "
            "from military service translates directly."
        ),
        required_skills=("Leadership", "Project Management", "Risk Management", "Communication"),
        industries=("Technology", "Defense", "Consulting"),
        certifications=("PMP", "CAPM"),
        career_progression="Project Manager -> Senior Project Manager -> Program Manager -> Director of PMO",
    ),
    FallbackRole(
        title="Technical Program Manager",
        description=(
            "Coordinate engineering programs across teams, track technical dependencies and "
            "report status to leadership. Values operations management, strategic planning "
            "and veteran experience with complex systems."
        ),
        required_skills=("Program Management", "Strategic Planning", "Operations Management", "Technical Communication"),
        industries=("Technology", "Aerospace", "Government"),
        certifications=("PMP", "PgMP"),
        career_progression="Technical Program Manager -> Senior TPM -> Director of Program Management",
    ),
    FallbackRole(
        title="Cybersecurity Analyst",
        description=(
            "Monitor networks for threats, investigate incidents and harden systems. "
            "Cybersecurity, intelligence analysis and security clearance experience from "
            "military service are highly valued."
        ),
        required_skills=("Cybersecurity", "Intelligence Analysis", "Network Security", "Incident Response"),
        industries=("Technology", "Finance", "Defense"),
        certifications=("Security+", "CISSP", "CySA+"),
        career_progression="Cybersecurity Analyst -> Senior Analyst -> Security Engineer -> Security Manager",
    ),
)


def new_recommendation_id() -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"job-{int(time.time() * 1000)}-{suffix}"


def demand_trend(score: float) -> str:
    if score > HIGH_DEMAND_THRESHOLD:
        return "High"
    if score > MEDIUM_DEMAND_THRESHOLD:
        return "Medium"
    return "Low"


def _percent(value: float) -> int:
    return min(100, max(0, round(value)))


def _details_from_breakdown(breakdown: MatchBreakdown) -> MatchDetails:
    return MatchDetails(
        skill_match=_percent(breakdown.skill_match * 100),
        experience_match=_percent(breakdown.experience_match * 100),
        mos_match=_percent(breakdown.mos_match * 100),
        technical_match=_percent(breakdown.technical_match * 100),
    )


def _job_text(rec: RawRecommendation) -> str:
    return " ".join([rec.reason_for_match, *rec.required_skills, rec.career_progression])


def convert_recommendation(
    rec: RawRecommendation,
    salary_service: SalaryDataService,
    data: ExtractedData | None = None,
    rescore: bool = False,
    weighted: bool = False,
) -> JobRecommendation:
    """Turn one oracle recommendation into a scored, salary-enriched JobRecommendation.

    With `rescore`, the oracle's self-reported percentages are replaced by the
    local match scorer's breakdown against `data`.
    """
    pct = rec.match_percentages
    score = _percent(pct.overall_match)
    details = MatchDetails(
        skill_match=_percent(pct.skill_match),
        experience_match=_percent(pct.experience_match),
        mos_match=_percent(pct.mos_match),
        technical_match=_percent(pct.technical_match),
    )
    if rescore and data is not None:
        breakdown = match_scorer.score(rec.title, _job_text(rec), data, weighted=weighted)
        score = breakdown.composite
        details = _details_from_breakdown(breakdown)

    salary = salary_service.get_salary_data(rec.title)
    return JobRecommendation(
        id=new_recommendation_id(),
        title=rec.title,
        description=rec.reason_for_match,
        salary_range=format_salary_range(salary.range),
        salary_insights=salary,
        required_skills=rec.required_skills,
        demand_trend=demand_trend(score),
        industries=rec.suggested_industries,
        match_reason=rec.reason_for_match,
        match_score=score,
        match_details=details,
        recommended_certifications=rec.recommended_certifications,
        career_progression=rec.career_progression,
    )


def fallback_recommendations(
    data: ExtractedData,
    salary_service: SalaryDataService,
    weighted: bool = False,
) -> list[JobRecommendation]:
    """Static roles scored locally against the candidate."""
    civilian = vocabulary.civilian_equivalent(data.skills, data.military_info.mos)
    recommendations = []
    for role in FALLBACK_ROLES:
        breakdown = match_scorer.score(role.title, role.description, data, civilian=civilian, weighted=weighted)
        salary = salary_service.get_salary_data(role.title)
        recommendations.append(JobRecommendation(
            id=new_recommendation_id(),
            title=role.title,
            description=role.description,
            salary_range=format_salary_range(salary.range),
            salary_insights=salary,
            required_skills=list(role.required_skills),
            demand_trend=demand_trend(breakdown.composite),
            industries=list(role.industries),
            match_reason=match_scorer.match_reason(role.description, civilian),
            match_score=breakdown.composite,
            match_details=_details_from_breakdown(breakdown),
            recommended_certifications=list(role.certifications),
            career_progression=role.career_progression,
        ))
    return recommendations


async def calculate_job_matches(
    data: ExtractedData,
    oracle: RecommendationOracle,
    salary_service: SalaryDataService,
    limit: int | None = None,
    rescore: bool | None = None,
    weighted: bool | None = None,
) -> RecommendationResponse:
    """Run the full matching pipeline. Oracle failures degrade to the fallback roles."""
    limit = settings.max_recommendations if limit is None else limit
    rescore = settings.rescore_recommendations if rescore is None else rescore
    weighted = settings.weighted_skill_match if weighted is None else weighted

    outcome = await oracle.get_recommendations(data)
    if isinstance(outcome, Unavailable):
        logger.warning("Oracle unavailable (%s), serving fallback recommendations", outcome.reason)
        recommendations = fallback_recommendations(data, salary_service, weighted=weighted)
    else:
        recommendations = []
        for raw in outcome.recommendations:
            try:
                recommendations.append(convert_recommendation(raw, salary_service, data, rescore, weighted))
            except Exception as e:
                logger.warning("Skipping recommendation %r: %s", raw.title, e)

    return result_aggregator.aggregate(recommendations, data, limit)
