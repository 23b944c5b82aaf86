from pydantic import Field

from models.base import CamelModel


class SalaryRange(CamelModel):
    min: int
    max: int
    median: int
    currency: str = "USD"


class ExperienceSalaries(CamelModel):
    entry: SalaryRange
    mid: SalaryRange
    senior: SalaryRange


class SalaryInsights(CamelModel):
    """Salary ranges for a title, by experience tier, location and industry."""
    range: SalaryRange
    median: int
    by_experience: ExperienceSalaries
    by_location: dict[str, SalaryRange] = {}
    by_industry: dict[str, SalaryRange] = {}


class MatchDetails(CamelModel):
    skill_match: int = 0
    experience_match: int = 0
    mos_match: int = 0
    technical_match: int = 0


class JobRecommendation(CamelModel):
    id: str
    title: str
    description: str = ""
    salary_range: str = ""
    salary_insights: SalaryInsights | None = None
    required_skills: list[str] = []
    demand_trend: str = "Low"  # Low | Medium | High
    industries: list[str] = []
    match_reason: str = ""
    match_score: int = Field(0, ge=0, le=100)
    match_details: MatchDetails = MatchDetails()
    recommended_certifications: list[str] = []
    career_progression: str = ""


class MarketInsights(CamelModel):
    industry_growth: str = ""
    top_locations: list[str] = []
    key_trends: list[str] = []


class RecommendationResponse(CamelModel):
    recommendations: list[JobRecommendation] = []
    market_insights: MarketInsights = MarketInsights()
    timestamp: str
    error: str | None = None


class PdfMetadata(CamelModel):
    pages: int = 0
    version: str = ""


class ExtractedPdfData(CamelModel):
    text: str
    metadata: PdfMetadata = PdfMetadata()


class ResumeUploadResponse(CamelModel):
    success: bool
    data: ExtractedPdfData | None = None
    error: str | None = None


class JobPosting(CamelModel):
    id: str
    title: str
    company: str = ""
    location: str = ""
    description: str = ""
    salary: str | None = None
    url: str = ""
    source: str
    posted_date: str | None = None
    skills: list[str] = []
    match_score: int | None = None


class JobSearchResponse(CamelModel):
    jobs: list[JobPosting] = []
    total: int = 0
    sources: list[str] = []
