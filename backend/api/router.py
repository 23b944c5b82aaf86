import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_job_search_service, get_oracle, get_salary_service
from config import settings
from models.requests import ExtractedData, JobSearchRequest, ResumeTextRequest
from models.responses import JobSearchResponse, RecommendationResponse, ResumeUploadResponse
from services import career_matcher, extraction, pdf_parser, result_aggregator
from services.job_search import JobSearchService
from services.recommendation_oracle import RecommendationOracle
from services.salary_data import SalaryDataService

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)

PDF_CONTENT_TYPE = "application/pdf"
INVALID_INPUT_MESSAGE = "Some of your entries are invalid. Please review them and try again."


def _envelope(response: RecommendationResponse, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


def _upload_error(message: str, status_code: int = 400) -> JSONResponse:
    body = ResumeUploadResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True, exclude_none=True))


def invalid_career_mapping_input(exc: RequestValidationError) -> JSONResponse:
    """Malformed /career-mapping bodies get the recommendation envelope, not a bare 422."""
    logger.info("Rejected career-mapping input: %d validation errors", len(exc.errors()))
    return _envelope(result_aggregator.error_response(INVALID_INPUT_MESSAGE), 400)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "oracle_configured": bool(settings.gemini_api_key),
    }


@router.post(
    "/career-mapping",
    response_model=RecommendationResponse,
    response_model_exclude_none=True,
)
@limiter.limit(settings.rate_limit)
async def career_mapping(
    request: Request,
    body: ExtractedData,
    oracle: RecommendationOracle = Depends(get_oracle),
    salary_service: SalaryDataService = Depends(get_salary_service),
):
    try:
        data = extraction.from_form(body)
        extraction.validate_for_matching(data)
    except extraction.InputValidationError as e:
        return _envelope(result_aggregator.error_response(str(e)), 400)

    try:
        return await career_matcher.calculate_job_matches(data, oracle, salary_service)
    except Exception:
        logger.exception("Error generating recommendations")
        return _envelope(result_aggregator.error_response(), 500)


@router.post(
    "/resume/upload",
    response_model=ResumeUploadResponse,
    response_model_exclude_none=True,
)
@limiter.limit(settings.rate_limit)
async def upload_resume(request: Request, resume: UploadFile | None = File(None)):
    if resume is None:
        return _upload_error("No file uploaded")

    content = await resume.read()
    filename = (resume.filename or "").lower()
    declared_pdf = resume.content_type == PDF_CONTENT_TYPE or filename.endswith(".pdf")
    if not declared_pdf and not pdf_parser.is_pdf(content):
        return _upload_error("Please upload a PDF document")

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        return _upload_error(f"File size must be less than {settings.max_upload_size_mb}MB")

    try:
        extracted = pdf_parser.extract_pdf(content)
    except Exception as e:
        logger.warning("PDF parsing failed for %r: %s", resume.filename, e)
        return _upload_error("Failed to parse PDF file")

    if not extracted.text.strip():
        return _upload_error("No text content found in PDF")

    logger.info("Parsed resume %r: %d pages, %d chars",
                resume.filename, extracted.metadata.pages, len(extracted.text))
    return ResumeUploadResponse(success=True, data=extracted)


@router.post("/resume/process", response_model=ExtractedData, response_model_exclude_none=True)
@limiter.limit(settings.rate_limit)
async def process_resume(
    request: Request,
    body: ResumeTextRequest,
    oracle: RecommendationOracle = Depends(get_oracle),
):
    if not body.resume_text.strip():
        return JSONResponse(status_code=400, content={"error": "Resume text is required"})
    return await oracle.extract_profile(body.resume_text)


@router.post("/jobs/search", response_model=JobSearchResponse, response_model_exclude_none=True)
@limiter.limit(settings.rate_limit)
async def search_jobs(
    request: Request,
    body: JobSearchRequest,
    service: JobSearchService = Depends(get_job_search_service),
):
    return await service.search(body.role, body.location, body.profile)
