"""Deterministic candidate-to-role scoring.

Scores a job (title + description) against a candidate's background and
civilian equivalent:

    skill_match       fraction of civilian skills mentioned in the description
    experience_match  tiered on total years of experience (5/3/1 years)
    mos_match         1.0 on the occupational title, 0.5 on military keywords
    role_match        1.0 if any civilian role name appears in the job text
    technical_match   fraction of technical skills mentioned in the job text

    composite = round(100 * (W_SKILL*skill + W_EXPERIENCE*experience + W_ROLE*role))

No I/O; missing or malformed inputs score 0 rather than raising.
"""

import re
from datetime import date, datetime

from models.requests import Experience, ExtractedData, TechnicalSkill
from models.schemas.match_breakdown import MatchBreakdown
from services import vocabulary
from services.vocabulary import CivilianEquivalent


# Composite weights (tunable, must sum to 1.0)
W_SKILL = 0.4
W_EXPERIENCE = 0.3
W_ROLE = 0.3

# (minimum years, score), checked in order
EXPERIENCE_TIERS: tuple[tuple[float, float], ...] = ((5, 1.0), (3, 0.8), (1, 0.6))
EXPERIENCE_FLOOR = 0.4

MOS_TITLE_SCORE = 1.0
MOS_KEYWORD_SCORE = 0.5
MILITARY_KEYWORDS: tuple[str, ...] = ("military", "veteran", "armed forces")

_DAYS_PER_YEAR = 365
_DURATION_RE = re.compile(r"(\d+)\s*(?:years?|yrs?)", re.IGNORECASE)


def _job_text(title: str, description: str) -> str:
    return f"{title} {description}".lower()


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------


def skill_match(description: str, civilian: CivilianEquivalent) -> float:
    """Fraction of civilian skills whose text appears in the description. 0 when there are none."""
    if not civilian.skills:
        return 0.0
    desc = description.lower()
    matched = [s for s in civilian.skills if s.lower() in desc]
    return len(matched) / len(civilian.skills)


def weighted_skill_match(description: str, civilian: CivilianEquivalent) -> float:
    """Skill match weighted by the skill weight table, counting related skills as synonyms."""
    if not civilian.skills:
        return 0.0
    desc = description.lower()
    total = 0.0
    matched = 0.0
    for skill in civilian.skills:
        weight = vocabulary.skill_weight(skill)
        total += weight
        if any(term in desc for term in vocabulary.skill_synonyms(skill)):
            matched += weight
    return matched / total if total else 0.0


def matched_skills(description: str, civilian: CivilianEquivalent) -> list[str]:
    desc = description.lower()
    return [s for s in civilian.skills if s.lower() in desc]


# ---------------------------------------------------------------------------
# Experience
# ---------------------------------------------------------------------------


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    value = value.strip()
    for fmt in ("%Y-%m-%d", "%Y-%m", "%Y", "%m/%d/%Y", "%m/%Y"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def parse_years_from_duration(duration: str | None) -> int:
    """Leading integer of a free-text duration ("3 years" -> 3). Unparseable -> 0."""
    if not duration:
        return 0
    m = _DURATION_RE.search(duration)
    return int(m.group(1)) if m else 0


def entry_years(entry: Experience, today: date | None = None) -> float:
    """Years spent in one experience entry, never negative.

    Dated entries run from start_date to end_date (or today). Entries without a
    parseable start date fall back to their free-text duration.
    """
    start = _parse_date(entry.start_date)
    if start is None:
        return float(parse_years_from_duration(entry.duration))
    end = _parse_date(entry.end_date) if entry.end_date else None
    if end is None:
        end = today or date.today()
    return max(0.0, (end - start).days / _DAYS_PER_YEAR)


def total_years(experience: list[Experience], today: date | None = None) -> float:
    return sum(entry_years(e, today) for e in experience)


def experience_score(years: float) -> float:
    for threshold, score in EXPERIENCE_TIERS:
        if years >= threshold:
            return score
    return EXPERIENCE_FLOOR


def experience_match(experience: list[Experience], today: date | None = None) -> float:
    return experience_score(total_years(experience, today))


def experience_match_from_durations(durations: list[str]) -> float:
    """Tiered experience score from free-text durations only."""
    return experience_score(sum(parse_years_from_duration(d) for d in durations))


# ---------------------------------------------------------------------------
# Occupational code, role, technical skills
# ---------------------------------------------------------------------------


def mos_match(title: str, description: str, mos: str | None, branch: str | None = None) -> float:
    """1.0 if the code's title appears in the job text, 0.5 on military keywords, else 0."""
    code = vocabulary.find_code(mos)
    if code is None:
        return 0.0
    text = _job_text(title, description)
    if code.title.lower() in text:
        return MOS_TITLE_SCORE
    keywords = MILITARY_KEYWORDS + ((branch or code.branch).lower(),)
    if any(k in text for k in keywords):
        return MOS_KEYWORD_SCORE
    return 0.0


def role_match(title: str, description: str, civilian: CivilianEquivalent) -> float:
    text = _job_text(title, description)
    return 1.0 if any(role.lower() in text for role in civilian.roles) else 0.0


def technical_match(title: str, description: str, technical_skills: list[TechnicalSkill]) -> float:
    if not technical_skills:
        return 0.0
    text = _job_text(title, description)
    matched = [s for s in technical_skills if s.name and s.name.lower() in text]
    return len(matched) / len(technical_skills)


def composite_score(skill: float, experience: float, role: float) -> int:
    raw = W_SKILL * skill + W_EXPERIENCE * experience + W_ROLE * role
    return min(100, max(0, round(raw * 100)))


def score(
    title: str,
    description: str,
    data: ExtractedData,
    civilian: CivilianEquivalent | None = None,
    weighted: bool = False,
    today: date | None = None,
) -> MatchBreakdown:
    """Score a job against a candidate. `civilian` defaults to the candidate's own equivalent."""
    if civilian is None:
        civilian = vocabulary.civilian_equivalent(data.skills, data.military_info.mos)

    skills = weighted_skill_match(description, civilian) if weighted else skill_match(description, civilian)
    experience = experience_match(data.experience, today)
    role = role_match(title, description, civilian)

    return MatchBreakdown(
        skill_match=skills,
        experience_match=experience,
        mos_match=mos_match(title, description, data.military_info.mos, data.military_info.branch),
        role_match=role,
        technical_match=technical_match(title, description, data.technical_skills),
        composite=composite_score(skills, experience, role),
    )


def match_reason(description: str, civilian: CivilianEquivalent) -> str:
    """Short justification naming matched skills and industry alignment."""
    reasons = []
    skills = matched_skills(description, civilian)
    if skills:
        reasons.append(f"matches your civilian equivalent skills in {', '.join(skills[:2])}")
    desc = description.lower()
    if any(i.lower() in desc for i in civilian.industries):
        reasons.append("aligns with your target industries")
    if not reasons:
        return "This role matches your civilian career profile"
    return f"This role {' and '.join(reasons)}"
