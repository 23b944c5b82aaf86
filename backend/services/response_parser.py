"""Parse oracle responses into raw recommendations.

Two strategies behind one entry point, `parse_oracle_response`:

1. Structured: the text is JSON, either a list of recommendations or an
   object with a "recommendations" list. Items that fail schema validation
   are dropped individually.
2. Recovered: the text is not JSON. Best-effort recovery splits on
   "Job Title:" markers and reads line-anchored fields. Percentages that
   cannot be found fall back to fixed defaults.

Anything else is Failed.
"""

import json
import logging
import re

from pydantic import ValidationError

from models.schemas.oracle_recommendation import MatchPercentages, RawRecommendation
from models.schemas.parse_result import Failed, ParseResult, Recovered, Structured

logger = logging.getLogger(__name__)

# Recovery defaults when a section has no explicit percentages
DEFAULT_SKILL_MATCH = 80
DEFAULT_EXPERIENCE_MATCH = 75
DEFAULT_MOS_MATCH = 70
DEFAULT_TECHNICAL_MATCH = 75
DEFAULT_OVERALL_MATCH = 75

DEFAULT_REASON = "Based on skill and experience match"
DEFAULT_PROGRESSION = "Standard industry progression path"


def strip_fences(text: str) -> str:
    """Remove a leading ```/```json fence line and a trailing ``` fence."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


# ---------------------------------------------------------------------------
# Structured (JSON) path
# ---------------------------------------------------------------------------


def _validate_items(items: list) -> list[RawRecommendation]:
    recommendations = []
    for i, item in enumerate(items):
        try:
            recommendations.append(RawRecommendation.model_validate(item))
        except ValidationError as e:
            logger.warning("Dropping malformed recommendation #%d: %s", i, e.error_count())
    return recommendations


def parse_structured(payload) -> ParseResult:
    """Interpret decoded JSON as a recommendation list."""
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, dict) and isinstance(payload.get("recommendations"), list):
        items = payload["recommendations"]
    else:
        return Failed(reason="unexpected JSON shape")
    return Structured(recommendations=_validate_items(items))


# ---------------------------------------------------------------------------
# Best-effort text recovery
# ---------------------------------------------------------------------------

_SECTION_SPLIT_RE = re.compile(r"(?=Job Title:)", re.IGNORECASE)
_TITLE_RE = re.compile(r"Job Title:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_OVERALL_RE = re.compile(r"Match Percentages?:[\s\S]*?Overall(?:\s+Match)?:\s*(\d+)", re.IGNORECASE)
_REASON_RE = re.compile(r"Reason for Match:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_SKILLS_RE = re.compile(r"Required Skills:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_INDUSTRIES_RE = re.compile(r"Suggested Industries:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_CERTS_RE = re.compile(r"Recommended Certifications:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_PROGRESSION_RE = re.compile(r"Career Progression:\s*(.+?)(?:\n|$)", re.IGNORECASE)


def _field(pattern: re.Pattern, section: str) -> str | None:
    m = pattern.search(section)
    return m.group(1).strip() if m else None


def _list_field(pattern: re.Pattern, section: str) -> list[str]:
    value = _field(pattern, section)
    if not value:
        return []
    return [v.strip() for v in re.split(r",\s*", value) if v.strip()]


def recover_from_text(text: str) -> ParseResult:
    """Pull recommendations out of free text with "Job Title:" sections."""
    recommendations = []
    for section in _SECTION_SPLIT_RE.split(text):
        title = _field(_TITLE_RE, section)
        if not title:
            continue
        overall = _field(_OVERALL_RE, section)
        recommendations.append(RawRecommendation(
            title=title,
            match_percentages=MatchPercentages(
                skill_match=DEFAULT_SKILL_MATCH,
                experience_match=DEFAULT_EXPERIENCE_MATCH,
                mos_match=DEFAULT_MOS_MATCH,
                technical_match=DEFAULT_TECHNICAL_MATCH,
                overall_match=int(overall) if overall else DEFAULT_OVERALL_MATCH,
            ),
            reason_for_match=_field(_REASON_RE, section) or DEFAULT_REASON,
            required_skills=_list_field(_SKILLS_RE, section),
            suggested_industries=_list_field(_INDUSTRIES_RE, section),
            recommended_certifications=_list_field(_CERTS_RE, section),
            career_progression=_field(_PROGRESSION_RE, section) or DEFAULT_PROGRESSION,
        ))

    if not recommendations:
        return Failed(reason="no JSON and no 'Job Title:' sections")
    return Recovered(recommendations=recommendations)


def parse_oracle_response(text: str) -> ParseResult:
    """Parse raw oracle text: JSON first, text recovery only if JSON decoding fails."""
    cleaned = strip_fences(text)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Oracle response is not JSON (%s); attempting text recovery", e)
        return recover_from_text(cleaned)
    return parse_structured(payload)
