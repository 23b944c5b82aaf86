"""Extraction adapter: form payloads and resume text -> canonical ExtractedData.

Form input is normalised (skills canonicalised against the military skill
vocabulary). Resume text goes through a regex pass that picks up skills,
pay grade, branch, occupational code, role lines and degrees; it is the
fallback when the oracle cannot extract a profile.
"""

import logging
import re

from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process

from models.requests import (
    Certification,
    Education,
    Experience,
    ExtractedData,
    MilitaryInfo,
    TechnicalSkill,
)
from services import vocabulary

logger = logging.getLogger(__name__)

FUZZY_THRESHOLD = 88


class InputValidationError(ValueError):
    """A user-correctable problem with the submitted background."""


# ---------------------------------------------------------------------------
# Skill canonicalisation
# ---------------------------------------------------------------------------

_SKILL_ALIASES: dict[str, str] = {
    "cyber security": "Cybersecurity",
    "infosec": "Information Security",
    "sysadmin": "System Administration",
    "systems administration": "System Administration",
    "strategy": "Strategic Planning",
    "mentoring": "Training & Development",
    "training": "Training & Development",
    "program management": "Project Management",
    "operations": "Operations Management",
    "intelligence": "Intelligence Analysis",
}


def canonicalize_skill(skill: str) -> str:
    """Map a free-text skill onto the vocabulary; unknown skills pass through trimmed."""
    cleaned = re.sub(r"\s+", " ", skill).strip()
    if not cleaned:
        return ""
    alias = _SKILL_ALIASES.get(cleaned.lower())
    if alias:
        return alias
    match = process.extractOne(
        cleaned,
        vocabulary.COMMON_MILITARY_SKILLS,
        scorer=fuzz.ratio,
        processor=default_process,
        score_cutoff=FUZZY_THRESHOLD,
    )
    return match[0] if match else cleaned


def _dedupe(items: list[str]) -> list[str]:
    seen: set[str] = set()
    out = []
    for item in items:
        key = item.lower()
        if item and key not in seen:
            seen.add(key)
            out.append(item)
    return out


def canonicalize_skills(skills: list[str]) -> list[str]:
    return _dedupe([canonicalize_skill(s) for s in skills])


# ---------------------------------------------------------------------------
# Form input
# ---------------------------------------------------------------------------


def from_form(data: ExtractedData) -> ExtractedData:
    """Return a normalised copy of a form submission. The input is not modified."""
    return data.model_copy(update={"skills": canonicalize_skills(data.skills)})


def validate_for_matching(data: ExtractedData) -> None:
    """Reject manual entries that cannot produce recommendations.

    Resume submissions skip these checks: the text is the whole input.
    """
    if data.resume_text and data.resume_text.strip():
        return
    if not data.military_info.branch:
        raise InputValidationError("Please select your military branch.")
    if not data.skills:
        raise InputValidationError("Please select at least one skill.")


# ---------------------------------------------------------------------------
# Resume text
# ---------------------------------------------------------------------------

_PAY_GRADE_RE = re.compile(r"\b([EWO])-?([1-9])\b")
_YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
_DATE_RANGE_RE = re.compile(
    r"\b((?:19|20)\d{2})\s*(?:-|–|—|to)\s*((?:19|20)\d{2}|present|current)\b",
    re.IGNORECASE,
)
_ROLE_LINE_RE = re.compile(
    r"^(.*?\b(?:specialist|officer|manager|lead|chief|director|coordinator|analyst|technician|nco)\b.{0,50}?)$",
    re.IGNORECASE | re.MULTILINE,
)
_DEGREE_RE = re.compile(
    r"\b(bachelor|master|phd|doctorate|associate|certificate|certification|degree)(?:'?s)?\s+(?:of\s+(?:science\s+|arts\s+)?(?:in\s+)?|in\s+)([^.,;\n]+)",
    re.IGNORECASE,
)
_DEGREE_TYPES = {
    "bachelor": "Bachelor",
    "master": "Master",
    "phd": "Doctorate",
    "doctorate": "Doctorate",
    "associate": "Associate",
    "certificate": "Certification",
    "certification": "Certification",
    "degree": "Other",
}


def _word_re(term: str) -> re.Pattern:
    return re.compile(rf"(?<![\w]){re.escape(term)}(?![\w])", re.IGNORECASE)


def _find_skills(text: str) -> list[str]:
    found = [s for s in vocabulary.COMMON_MILITARY_SKILLS if _word_re(s).search(text)]
    found += [canon for alias, canon in _SKILL_ALIASES.items() if _word_re(alias).search(text)]
    return _dedupe(found)


def _find_branch(text: str) -> str | None:
    best: tuple[int, str] | None = None
    for alias, branch in vocabulary.BRANCH_ALIASES.items():
        m = _word_re(alias).search(text)
        if m and (best is None or m.start() < best[0]):
            best = (m.start(), branch)
    return best[1] if best else None


def _find_rank(text: str) -> str | None:
    for m in _PAY_GRADE_RE.finditer(text):
        rank = f"{m.group(1)}-{m.group(2)}"
        if rank in vocabulary.RANK_DESCRIPTIONS:
            return rank
    return None


def _find_mos(text: str, branch: str | None) -> str | None:
    """Find an occupational code printed in the text.

    Only codes containing a digit are considered; letter-only ratings such as
    "IT" collide with ordinary words.
    """
    for code in vocabulary.codes_for_branch(branch):
        printed = vocabulary.printed_code(code.code)
        if not any(ch.isdigit() for ch in printed):
            continue
        if re.search(rf"(?<![\w-]){re.escape(printed)}(?![\w-])", text):
            return code.code
    return None


def _find_experience(text: str) -> list[Experience]:
    entries = []
    for m in _ROLE_LINE_RE.finditer(text):
        line = m.group(1).strip()
        if not line or len(line) > 120:
            continue
        start_date, end_date, duration = "", None, None
        dates = _DATE_RANGE_RE.search(line)
        if dates:
            start_date = f"{dates.group(1)}-01-01"
            end = dates.group(2).lower()
            end_date = None if end in ("present", "current") else f"{end}-01-01"
        else:
            years = _YEARS_RE.search(line)
            if years:
                duration = f"{years.group(1)} years"
        title = _DATE_RANGE_RE.sub("", line).strip(" ,|-–—")
        entries.append(Experience(
            title=title[:100],
            start_date=start_date,
            end_date=end_date,
            duration=duration,
        ))
    return entries


def _find_education(text: str) -> list[Education]:
    entries = []
    for m in _DEGREE_RE.finditer(text):
        entries.append(Education(
            type=_DEGREE_TYPES[m.group(1).lower()],
            field=m.group(2).strip()[:100],
        ))
    return entries


def extract_from_text(text: str) -> ExtractedData:
    """Regex-based profile extraction from raw resume text."""
    branch = _find_branch(text)
    military_info = MilitaryInfo(
        rank=_find_rank(text),
        branch=branch,
        mos=_find_mos(text, branch),
    )
    technical = [
        TechnicalSkill(name=name, proficiency="Intermediate")
        for name in vocabulary.TECHNICAL_SKILLS
        if _word_re(name).search(text)
    ]
    certifications = [
        Certification(name=name)
        for name in vocabulary.COMMON_CERTIFICATIONS
        if _word_re(name).search(text)
    ]
    return ExtractedData(
        military_info=military_info,
        skills=_find_skills(text),
        technical_skills=technical,
        certifications=certifications,
        experience=_find_experience(text),
        education=_find_education(text),
        resume_text=text,
    )


# ---------------------------------------------------------------------------
# Chunking and merging
# ---------------------------------------------------------------------------


def chunk_text(text: str, size: int) -> list[str]:
    """Split text into chunks of at most `size` characters, preferring line breaks."""
    text = text.strip()
    if not text:
        return []
    chunks = []
    start = 0
    while start < len(text):
        end = min(start + size, len(text))
        if end < len(text):
            cut = text.rfind("\n", start, end)
            if cut > start + size // 2:
                end = cut
        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)
        start = end
    return chunks


def merge_extractions(parts: list[ExtractedData]) -> ExtractedData:
    """Combine per-chunk extractions.

    Skills are unioned; list sections are concatenated in chunk order;
    each military-info field takes the first non-empty value.
    """
    info: dict[str, str | None] = {"service_type": None, "rank": None, "branch": None, "mos": None}
    for part in parts:
        for name in info:
            if info[name] is None:
                info[name] = getattr(part.military_info, name)

    return ExtractedData(
        military_info=MilitaryInfo(**info),
        skills=canonicalize_skills([s for p in parts for s in p.skills]),
        technical_skills=[t for p in parts for t in p.technical_skills],
        certifications=[c for p in parts for c in p.certifications],
        experience=[e for p in parts for e in p.experience],
        education=[e for p in parts for e in p.education],
        resume_text=next((p.resume_text for p in parts if p.resume_text), None),
    )
