"""FastAPI application entry point."""

import logging
import os

# Configure logging based on ENV environment variable
# ENV=dev: INFO level with detailed format (default)
# ENV=prod/staging: WARNING level, minimal logs
_env = os.getenv("ENV", "dev").lower()
_is_dev = _env == "dev"
_log_level = logging.INFO if _is_dev else logging.WARNING

logging.basicConfig(
    level=_log_level,
    format=(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        if _is_dev
        else "%(levelname)s | %(message)s"
    ),
    datefmt="%H:%M:%S",
)

# httpx logs every request at INFO; keep it for dev only
if not _is_dev:
    logging.getLogger("httpx").setLevel(logging.WARNING)

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from commit_stats.api import commit_stats, health
from commit_stats.config import settings
from commit_stats.entities import CommitStatsInputError
from commit_stats.middleware.exception_handlers import (
    general_exception_handler,
    github_exception_handler,
    http_exception_handler,
    input_exception_handler,
    validation_exception_handler,
)
from commit_stats.services.github.exceptions import GithubError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Commit Stats API",
    description="GitHub commit activity aggregated by language and time period",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(CommitStatsInputError, input_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(GithubError, github_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)


app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(commit_stats.router, prefix="/api", tags=["Commit Stats"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }
