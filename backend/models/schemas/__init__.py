"""Internal contracts between the oracle client, the scorer and the aggregator."""

from models.schemas.match_breakdown import MatchBreakdown
from models.schemas.oracle_recommendation import MatchPercentages, RawRecommendation
from models.schemas.parse_result import (
    Failed,
    OracleOutcome,
    ParseResult,
    Recommendations,
    Recovered,
    Structured,
    Unavailable,
)

__all__ = [
    "MatchBreakdown",
    "MatchPercentages",
    "RawRecommendation",
    "Failed",
    "OracleOutcome",
    "ParseResult",
    "Recommendations",
    "Recovered",
    "Structured",
    "Unavailable",
]
