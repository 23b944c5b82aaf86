import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    max_upload_size_mb: int = 5
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    debug: bool = False
    log_level: str = "INFO"
    rate_limit: str = "10/minute"

    # Oracle settings
    oracle_temperature: float = 0.2
    oracle_max_output_tokens: int = 4096
    resume_chunk_chars: int = 15000
    chunk_delay_seconds: float = 20.0  # pause between resume chunks (provider rate limits)

    # Matching settings
    max_recommendations: int = 5
    rescore_recommendations: bool = False  # replace oracle self-reported scores with local composite
    weighted_skill_match: bool = False

    # Caches
    salary_cache_ttl_hours: float = 24
    job_cache_ttl_minutes: float = 60
    cache_sweep_interval_seconds: float = 3600

    # USAJobs search API
    usajobs_api_key: str = ""
    usajobs_email: str = ""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
