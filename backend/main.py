import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from api.router import limiter, router
from config import settings
from db import dispose_engine, init_db
from logging_config import configure_logging
from services.errors import (
    AIServiceError,
    DuplicateSkillError,
    InvalidCredentialsError,
    InvalidUploadError,
    ItemNotFoundError,
    MissingCredentialError,
    UserExistsError,
    UserNotFoundError,
)

configure_logging(settings.log_level, debug=settings.debug)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("CareerPilot API started (database: %s)", settings.database_url.split("://", 1)[0])
    yield
    dispose_engine()


app = FastAPI(
    title="CareerPilot API",
    description="AI career coaching: profile, gap analysis, roadmap and weekly tasks",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AIServiceError)
async def ai_error_handler(request: Request, exc: AIServiceError):
    status = 503 if isinstance(exc, MissingCredentialError) else 502
    logger.warning("AI request failed on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status,
        content={
            "detail": str(exc),
            "retryable": exc.retryable,
            "action": "reconfigure_credential",
        },
    )


_STATUS_CODES = {
    UserNotFoundError: 404,
    ItemNotFoundError: 404,
    UserExistsError: 400,
    InvalidUploadError: 400,
    InvalidCredentialsError: 401,
    DuplicateSkillError: 409,
}


async def domain_error_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=_STATUS_CODES[type(exc)], content={"detail": str(exc)})


for _error in _STATUS_CODES:
    app.add_exception_handler(_error, domain_error_handler)

app.include_router(router)
