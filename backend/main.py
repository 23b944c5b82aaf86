import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.dependencies import all_caches
from api.router import invalid_career_mapping_input, limiter, router
from config import settings
from services.cache import run_periodic_sweep

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sweeper = asyncio.create_task(run_periodic_sweep(all_caches(), settings.cache_sweep_interval_seconds))
    yield
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper


async def validation_error_handler(request: Request, exc: RequestValidationError):
    if request.url.path == "/career-mapping":
        return invalid_career_mapping_input(exc)
    return await request_validation_exception_handler(request, exc)


app = FastAPI(
    title="BridgeSkills API",
    description="Military-to-civilian career matching",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
