"""Oracle output: one civilian job recommendation as the model reports it."""

from pydantic import Field

from models.base import CamelModel


class MatchPercentages(CamelModel):
    """Self-reported match percentages, each 0-100."""
    skill_match: float = 0
    experience_match: float = 0
    mos_match: float = 0
    technical_match: float = 0
    overall_match: float = 0


class RawRecommendation(CamelModel):
    """A recommendation as parsed from the oracle response, before enrichment."""
    title: str = Field(..., min_length=1)
    match_percentages: MatchPercentages = MatchPercentages()
    reason_for_match: str = ""
    required_skills: list[str] = []
    suggested_industries: list[str] = []
    recommended_certifications: list[str] = []
    career_progression: str = ""
