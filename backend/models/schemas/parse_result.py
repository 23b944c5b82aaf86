"""Outcomes of parsing oracle text and of a full oracle request.

ParseResult:
    Structured - the response was valid JSON in the expected schema
    Recovered  - JSON failed; fields were recovered from "Job Title:" sections
    Failed     - nothing usable in the response

OracleOutcome:
    Recommendations - the oracle answered (possibly with zero matches)
    Unavailable     - no answer at all (no API key, transport error, every chunk failed)
"""

from typing import Literal, Union

from pydantic import BaseModel

from models.schemas.oracle_recommendation import RawRecommendation


class Structured(BaseModel):
    kind: Literal["structured"] = "structured"
    recommendations: list[RawRecommendation] = []


class Recovered(BaseModel):
    kind: Literal["recovered"] = "recovered"
    recommendations: list[RawRecommendation] = []


class Failed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str = ""

    @property
    def recommendations(self) -> list[RawRecommendation]:
        return []


ParseResult = Union[Structured, Recovered, Failed]


class Recommendations(BaseModel):
    kind: Literal["recommendations"] = "recommendations"
    recommendations: list[RawRecommendation] = []


class Unavailable(BaseModel):
    kind: Literal["unavailable"] = "unavailable"
    reason: str = ""


OracleOutcome = Union[Recommendations, Unavailable]
