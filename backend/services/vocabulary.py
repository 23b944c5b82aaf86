"""Military reference data: ranks, branches, occupational codes and skills.

Static tables consumed by the extraction adapter, the oracle prompts and the
match scorer. Occupational codes cover the cyber, intelligence and technical
MOS/AFSC/rating families the matcher knows how to translate.
"""

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Service structure
# ---------------------------------------------------------------------------

SERVICE_TYPES: tuple[str, ...] = ("Enlisted", "Warrant Officer", "Officer")

MILITARY_BRANCHES: tuple[str, ...] = (
    "Air Force",
    "Army",
    "Navy",
    "Marine Corps",
    "Coast Guard",
    "Space Force",
)

# Spellings seen in resumes and older form payloads
BRANCH_ALIASES: dict[str, str] = {
    "air force": "Air Force",
    "usaf": "Air Force",
    "army": "Army",
    "navy": "Navy",
    "marine corps": "Marine Corps",
    "marines": "Marine Corps",
    "usmc": "Marine Corps",
    "coast guard": "Coast Guard",
    "uscg": "Coast Guard",
    "space force": "Space Force",
    "ussf": "Space Force",
}

RANK_DESCRIPTIONS: dict[str, str] = {
    "E-1": "Private/Airman Basic/Seaman Recruit",
    "E-2": "Private/Airman/Seaman Apprentice",
    "E-3": "Private First Class/Airman First Class/Seaman",
    "E-4": "Corporal-Specialist/Senior Airman/Petty Officer 3rd Class",
    "E-5": "Sergeant/Staff Sergeant/Petty Officer 2nd Class",
    "E-6": "Staff Sergeant/Technical Sergeant/Petty Officer 1st Class",
    "E-7": "Sergeant First Class/Master Sergeant/Chief Petty Officer",
    "E-8": "Master Sergeant-First Sergeant/Senior Master Sergeant/Senior Chief Petty Officer",
    "E-9": "Sergeant Major/Chief Master Sergeant/Master Chief Petty Officer",
    "W-1": "Warrant Officer 1",
    "W-2": "Chief Warrant Officer 2",
    "W-3": "Chief Warrant Officer 3",
    "W-4": "Chief Warrant Officer 4",
    "W-5": "Chief Warrant Officer 5",
    "O-1": "Second Lieutenant/Ensign",
    "O-2": "First Lieutenant/Lieutenant Junior Grade",
    "O-3": "Captain/Lieutenant",
    "O-4": "Major/Lieutenant Commander",
    "O-5": "Lieutenant Colonel/Commander",
    "O-6": "Colonel/Captain",
}

MILITARY_RANKS: tuple[str, ...] = tuple(RANK_DESCRIPTIONS)

_RANK_PREFIX_SERVICE_TYPE = {"E": "Enlisted", "W": "Warrant Officer", "O": "Officer"}


# ---------------------------------------------------------------------------
# Occupational codes (MOS / AFSC / Navy ratings and designators)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MilitaryCode:
    code: str
    title: str
    branch: str
    service_type: str
    category: str  # Cyber | Intelligence | Technical | Program Management


MILITARY_CODES: tuple[MilitaryCode, ...] = (
    # Air Force
    MilitaryCode("17S_AF", "Cyber Warfare Operations Officer", "Air Force", "Officer", "Cyber"),
    MilitaryCode("1B4", "Cyber Warfare Operations", "Air Force", "Enlisted", "Cyber"),
    MilitaryCode("3D0", "Cyberspace Operations", "Air Force", "Enlisted", "Technical"),
    MilitaryCode("14N", "Intelligence Officer", "Air Force", "Officer", "Intelligence"),
    MilitaryCode("1N0", "All Source Intelligence Analyst", "Air Force", "Enlisted", "Intelligence"),
    MilitaryCode("1N4", "Fusion Analyst", "Air Force", "Enlisted", "Intelligence"),
    MilitaryCode("63A", "Acquisition Manager", "Air Force", "Officer", "Program Management"),
    # Army
    MilitaryCode("17A", "Cyber Operations Officer", "Army", "Officer", "Cyber"),
    MilitaryCode("17C", "Cyber Operations Specialist", "Army", "Enlisted", "Cyber"),
    MilitaryCode("25B", "Information Technology Specialist", "Army", "Enlisted", "Technical"),
    MilitaryCode("35F", "Intelligence Analyst", "Army", "Enlisted", "Intelligence"),
    MilitaryCode("35D", "All Source Intelligence Officer", "Army", "Officer", "Intelligence"),
    MilitaryCode("35N", "Signals Intelligence Analyst", "Army", "Enlisted", "Intelligence"),
    MilitaryCode("255A", "Information Services Technician", "Army", "Warrant Officer", "Technical"),
    MilitaryCode("51C", "Acquisition, Logistics and Technology Contracting NCO", "Army", "Enlisted", "Program Management"),
    # Navy
    MilitaryCode("1810", "Cryptologic Warfare Officer", "Navy", "Officer", "Cyber"),
    MilitaryCode("CTN", "Cryptologic Technician Networks", "Navy", "Enlisted", "Cyber"),
    MilitaryCode("IT", "Information Systems Technician", "Navy", "Enlisted", "Technical"),
    MilitaryCode("IS", "Intelligence Specialist", "Navy", "Enlisted", "Intelligence"),
    MilitaryCode("1830", "Intelligence Officer", "Navy", "Officer", "Intelligence"),
    # Marine Corps
    MilitaryCode("0650", "Cyberspace Operations Officer", "Marine Corps", "Officer", "Cyber"),
    MilitaryCode("0651", "Cyber Network Operator", "Marine Corps", "Enlisted", "Cyber"),
    MilitaryCode("0689", "Cybersecurity Technician", "Marine Corps", "Enlisted", "Cyber"),
    MilitaryCode("0671", "Data Systems Administrator", "Marine Corps", "Enlisted", "Technical"),
    MilitaryCode("0211", "Counterintelligence/Human Intelligence Specialist", "Marine Corps", "Enlisted", "Intelligence"),
    MilitaryCode("0231", "Intelligence Specialist", "Marine Corps", "Enlisted", "Intelligence"),
    MilitaryCode("0202", "Intelligence Officer", "Marine Corps", "Officer", "Intelligence"),
    # Coast Guard
    MilitaryCode("CYB", "Cyber Mission Specialist", "Coast Guard", "Enlisted", "Cyber"),
    MilitaryCode("IS_CG", "Intelligence Specialist", "Coast Guard", "Enlisted", "Intelligence"),
    # Space Force
    MilitaryCode("17S_SF", "Cyber Warfare Operations Officer", "Space Force", "Officer", "Cyber"),
    MilitaryCode("5C0", "Cyber Operations Specialist", "Space Force", "Enlisted", "Cyber"),
    MilitaryCode("5I0", "Intelligence Officer", "Space Force", "Officer", "Intelligence"),
)

_CODES_BY_ID: dict[str, MilitaryCode] = {c.code: c for c in MILITARY_CODES}

# Table keys shared by two branches carry a branch suffix ("17S_AF")
_CODE_SUFFIX_RE = re.compile(r"_[A-Z]{2}$")


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

COMMON_MILITARY_SKILLS: tuple[str, ...] = (
    "Leadership",
    "Project Management",
    "Team Building",
    "Strategic Planning",
    "Risk Management",
    "Cybersecurity",
    "Network Security",
    "Intelligence Analysis",
    "Data Analysis",
    "System Administration",
    "Information Security",
    "Operations Management",
    "Training & Development",
    "Problem Solving",
    "Communication",
    "Technical Writing",
)

TECHNICAL_SKILLS: tuple[str, ...] = (
    "Python", "PowerShell", "Bash", "SQL", "Linux", "Windows Server",
    "Active Directory", "Cisco IOS", "TCP/IP", "Wireshark", "Splunk",
    "Nessus", "Metasploit", "Kali Linux", "SIEM", "Firewalls",
    "AWS", "Azure", "VMware", "Docker", "Excel", "Tableau", "ArcGIS",
)

COMMON_CERTIFICATIONS: tuple[str, ...] = (
    "CompTIA Security+",
    "CompTIA Network+",
    "CompTIA A+",
    "CompTIA CySA+",
    "CISSP",
    "CISM",
    "CEH",
    "GIAC GSEC",
    "CCNA",
    "PMP",
    "ITIL Foundation",
    "AWS Certified Solutions Architect",
)


@dataclass(frozen=True)
class SkillWeight:
    skill: str
    weight: float
    related_skills: tuple[str, ...] = ()


SKILL_WEIGHTS: tuple[SkillWeight, ...] = (
    SkillWeight("cybersecurity", 1.5, ("security", "network security", "information security")),
    SkillWeight("leadership", 1.3, ("management", "team leadership", "supervision")),
    SkillWeight("intelligence analysis", 1.4, ("data analysis", "threat analysis", "intelligence")),
    SkillWeight("operations management", 1.2, ("project management", "program management", "operations")),
)

DEFAULT_SKILL_WEIGHT = 1.0


# ---------------------------------------------------------------------------
# Civilian equivalents
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CivilianEquivalent:
    """Civilian roles, skills and industries proposed for a military background."""
    roles: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()
    industries: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()


# Military skill -> civilian phrasing that shows up in job postings
CIVILIAN_SKILL_NAMES: dict[str, str] = {
    "Training & Development": "Training",
    "System Administration": "Systems Administration",
}

_CATEGORY_EQUIVALENTS: dict[str, CivilianEquivalent] = {
    "Cyber": CivilianEquivalent(
        roles=("Cybersecurity Analyst", "Security Engineer", "Penetration Tester", "SOC Analyst"),
        industries=("Technology", "Defense", "Finance"),
        keywords=("incident response", "threat hunting", "vulnerability"),
    ),
    "Intelligence": CivilianEquivalent(
        roles=("Intelligence Analyst", "Threat Intelligence Analyst", "Data Analyst", "Risk Analyst"),
        industries=("Defense", "Government", "Consulting"),
        keywords=("analysis", "reporting", "osint"),
    ),
    "Technical": CivilianEquivalent(
        roles=("Systems Administrator", "Network Engineer", "IT Specialist", "Cloud Engineer"),
        industries=("Technology", "Telecommunications", "Healthcare"),
        keywords=("infrastructure", "networking", "help desk"),
    ),
    "Program Management": CivilianEquivalent(
        roles=("Project Manager", "Program Manager", "Operations Manager"),
        industries=("Consulting", "Manufacturing", "Government"),
        keywords=("stakeholder", "budget", "schedule"),
    ),
}

_SKILL_ROLES: dict[str, tuple[str, ...]] = {
    "Leadership": ("Operations Manager",),
    "Project Management": ("Project Manager", "Program Manager"),
    "Operations Management": ("Operations Manager",),
    "Cybersecurity": ("Cybersecurity Analyst",),
    "Network Security": ("Network Security Engineer",),
    "Information Security": ("Information Security Analyst",),
    "Intelligence Analysis": ("Intelligence Analyst",),
    "Data Analysis": ("Data Analyst",),
    "System Administration": ("Systems Administrator",),
    "Training & Development": ("Training Specialist",),
    "Technical Writing": ("Technical Writer",),
}


def _unique(items) -> tuple[str, ...]:
    seen: set[str] = set()
    out = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            out.append(item)
    return tuple(out)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def find_code(code: str | None) -> MilitaryCode | None:
    if not code:
        return None
    return _CODES_BY_ID.get(code)


def printed_code(code: str) -> str:
    """The code as it appears on a resume, without the branch suffix."""
    return _CODE_SUFFIX_RE.sub("", code)


def resolve_code(code: str | None, branch: str | None = None, service_type: str | None = None) -> str | None:
    """Map a code as written ("17S", "is") to its table key.

    A printed code resolves only when it names a single entry for the branch
    and service type; anything else comes back unchanged.
    """
    if not code:
        return None
    code = code.strip()
    candidates = codes_for_branch(branch, service_type)
    if any(c.code == code for c in candidates):
        return code
    matches = [c.code for c in candidates if printed_code(c.code) == code.upper()]
    return matches[0] if len(matches) == 1 else code


def codes_for_branch(branch: str | None, service_type: str | None = None) -> list[MilitaryCode]:
    """Codes available for a branch, optionally narrowed to a service type."""
    return [
        c for c in MILITARY_CODES
        if (branch is None or c.branch == branch)
        and (service_type is None or c.service_type == service_type)
    ]


def is_valid_mos(code: str, branch: str | None = None, service_type: str | None = None) -> bool:
    """True if the code exists and belongs to the given branch/service type."""
    entry = find_code(code)
    if entry is None:
        return False
    if branch and entry.branch != branch:
        return False
    if service_type and entry.service_type != service_type:
        return False
    return True


def normalize_branch(name: str | None) -> str | None:
    if not name:
        return None
    return BRANCH_ALIASES.get(name.strip().lower())


def rank_description(rank: str) -> str:
    return RANK_DESCRIPTIONS.get(rank, "")


def service_type_for_rank(rank: str | None) -> str | None:
    if not rank or rank not in RANK_DESCRIPTIONS:
        return None
    return _RANK_PREFIX_SERVICE_TYPE[rank[0]]


def skill_weight(skill: str) -> float:
    """Weight for a skill, matching the skill itself or any related skill."""
    s = skill.lower()
    for sw in SKILL_WEIGHTS:
        if sw.skill == s or s in sw.related_skills:
            return sw.weight
    return DEFAULT_SKILL_WEIGHT


def skill_synonyms(skill: str) -> tuple[str, ...]:
    """The skill plus its related skills, lowercased."""
    s = skill.lower()
    for sw in SKILL_WEIGHTS:
        if sw.skill == s:
            return (s,) + sw.related_skills
    return (s,)


def civilian_equivalent(skills: list[str], mos: str | None = None) -> CivilianEquivalent:
    """Translate military skills and occupational code into civilian terms.

    Civilian skills come only from the user's own skills; the occupational
    code contributes roles, industries and search keywords.
    """
    civ_skills = _unique(CIVILIAN_SKILL_NAMES.get(s, s) for s in skills if s)

    roles: list[str] = []
    industries: list[str] = []
    keywords: list[str] = []

    code = find_code(mos)
    if code is not None:
        base = _CATEGORY_EQUIVALENTS[code.category]
        roles.extend(base.roles)
        industries.extend(base.industries)
        keywords.extend(base.keywords)

    for s in skills:
        roles.extend(_SKILL_ROLES.get(s, ()))

    return CivilianEquivalent(
        roles=_unique(roles),
        skills=civ_skills,
        industries=_unique(industries),
        keywords=_unique(keywords),
    )
