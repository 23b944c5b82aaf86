from typing import Literal

from pydantic import Field, ValidationInfo, field_validator

from models.base import CamelModel, FrozenCamelModel
from services import vocabulary

Proficiency = Literal["Beginner", "Intermediate", "Advanced", "Expert"]
DegreeType = Literal["High School", "Associate", "Bachelor", "Master", "Doctorate", "Certification", "Other"]


def _null_as_empty(v):
    # Resume extraction reports missing values as null
    return "" if v is None else v


def _null_as_empty_list(v):
    return [] if v is None else v


class MilitaryInfo(FrozenCamelModel):
    """Service background. Unknown values and invalid code combinations become None."""
    service_type: str | None = None
    rank: str | None = None
    branch: str | None = None
    mos: str | None = None

    @field_validator("service_type", mode="before")
    @classmethod
    def _known_service_type(cls, v):
        return v if v in vocabulary.SERVICE_TYPES else None

    @field_validator("rank", mode="before")
    @classmethod
    def _known_rank(cls, v):
        return v if v in vocabulary.MILITARY_RANKS else None

    @field_validator("branch", mode="before")
    @classmethod
    def _canonical_branch(cls, v):
        if v in vocabulary.MILITARY_BRANCHES:
            return v
        return vocabulary.normalize_branch(v) if isinstance(v, str) else None

    @field_validator("mos")
    @classmethod
    def _mos_for_branch(cls, v, info: ValidationInfo):
        branch, service_type = info.data.get("branch"), info.data.get("service_type")
        code = vocabulary.resolve_code(v, branch, service_type)
        if not code or not vocabulary.is_valid_mos(code, branch, service_type):
            return None
        return code


class TechnicalSkill(FrozenCamelModel):
    name: str
    proficiency: Proficiency = "Beginner"
    years_of_experience: float = Field(0, ge=0)

    @field_validator("proficiency", mode="before")
    @classmethod
    def _default_proficiency(cls, v):
        return "Beginner" if v is None else v

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def _default_years(cls, v):
        return 0 if v is None else v


class Certification(FrozenCamelModel):
    name: str
    issuer: str = ""
    date_obtained: str = ""
    expiration_date: str | None = None
    is_active: bool = True

    @field_validator("issuer", "date_obtained", mode="before")
    @classmethod
    def _blank_strings(cls, v):
        return _null_as_empty(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def _default_active(cls, v):
        return True if v is None else v


class Experience(FrozenCamelModel):
    title: str = ""
    organization: str = ""
    start_date: str = ""
    end_date: str | None = None  # None means "present"
    description: str = ""
    skills: list[str] = []
    duration: str | None = None  # free text ("3 years") when dates are unknown

    @field_validator("title", "organization", "start_date", "description", mode="before")
    @classmethod
    def _blank_strings(cls, v):
        return _null_as_empty(v)

    @field_validator("skills", mode="before")
    @classmethod
    def _blank_skills(cls, v):
        return _null_as_empty_list(v)


class Education(FrozenCamelModel):
    type: DegreeType = "Other"
    field: str = ""
    institution: str = ""
    graduation_date: str = ""
    gpa: float | None = None

    @field_validator("field", "institution", "graduation_date", mode="before")
    @classmethod
    def _blank_strings(cls, v):
        return _null_as_empty(v)

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, v):
        return "Other" if v is None else v


class ExtractedData(FrozenCamelModel):
    """Canonical candidate background, from the form or from a resume."""
    military_info: MilitaryInfo = MilitaryInfo()
    skills: list[str] = []
    technical_skills: list[TechnicalSkill] = []
    certifications: list[Certification] = []
    experience: list[Experience] = []
    education: list[Education] = []
    resume_text: str | None = Field(None, max_length=200000)

    @field_validator("skills", "technical_skills", "certifications", "experience", "education", mode="before")
    @classmethod
    def _blank_lists(cls, v):
        return _null_as_empty_list(v)

    @field_validator("military_info", mode="before")
    @classmethod
    def _default_military_info(cls, v):
        return MilitaryInfo() if v is None else v


class ResumeTextRequest(CamelModel):
    resume_text: str = Field(..., max_length=200000, description="Plain text resume content")


class JobRole(CamelModel):
    """The recommendation a job search is run for."""
    id: str = ""
    title: str = Field(..., min_length=1)
    required_skills: list[str] = []
    preferred_skills: list[str] = []
    industries: list[str] = []


class JobSearchRequest(CamelModel):
    role: JobRole
    location: str | None = None
    profile: ExtractedData | None = None
