"""Global exception handlers for the error response format.

Caller errors become 400 ``{"error": ...}``; upstream and unexpected failures
become 500 ``{"error", "details"}`` with a stack trace outside production.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from commit_stats.config import settings
from commit_stats.entities import CommitStatsInputError
from commit_stats.services.github.exceptions import GithubError

logger = logging.getLogger("commit_stats.exception")

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PIPELINE_FAILURE_MESSAGE = "Failed to fetch commit statistics"


def build_error_response(
    status_code: int,
    message: str,
    details: Any = None,
    exc: BaseException | None = None,
) -> JSONResponse:
    """Build the error response body."""
    body: dict[str, Any] = {"error": message}

    if details is not None:
        body["details"] = details
    if exc is not None and settings.DEBUG and not settings.is_production:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )

    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


async def input_exception_handler(
    request: Request, exc: CommitStatsInputError
) -> JSONResponse:
    """Handle caller input errors: the pipeline never started."""
    logger.info("Rejected request path=%s reason=%s", request.url.path, exc)
    return build_error_response(status_code=400, message=str(exc))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "HTTPException status=%s detail=%s path=%s",
            exc.status_code,
            exc.detail,
            request.url.path,
        )
    return build_error_response(status_code=exc.status_code, message=str(exc.detail))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle query parameter validation errors with field-level details."""
    details = []
    for error in exc.errors():
        loc = " -> ".join(str(x) for x in error.get("loc", []))
        details.append(
            {
                "field": loc,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type", "value_error"),
            }
        )

    return build_error_response(
        status_code=400,
        message="Invalid request parameters",
        details=details,
    )


async def github_exception_handler(request: Request, exc: GithubError) -> JSONResponse:
    """Handle upstream failures that escaped every per-item guard."""
    logger.exception("GitHub failure path=%s", request.url.path)
    return build_error_response(
        status_code=500,
        message=PIPELINE_FAILURE_MESSAGE,
        details=str(exc),
        exc=exc,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    logger.exception("Unhandled exception path=%s", request.url.path)
    return build_error_response(
        status_code=500,
        message=PIPELINE_FAILURE_MESSAGE,
        details=str(exc),
        exc=exc,
    )
