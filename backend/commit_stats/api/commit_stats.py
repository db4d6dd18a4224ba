"""Commit statistics endpoints."""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Query, Response

from commit_stats.dtos import (
    CommitStatsResponse,
    SupportedLanguage,
    SupportedLanguagesResponse,
)
from commit_stats.entities import CommitStatsInputError, DateWindow, TimePeriod
from commit_stats.middleware.exception_handlers import CORS_HEADERS
from commit_stats.services.commit_activity import CommitActivityService
from commit_stats.services.github.github_client import GitHubClient
from commit_stats.services.language_colors import get_language_color
from commit_stats.services.language_detector import get_supported_languages

logger = logging.getLogger(__name__)

router = APIRouter()

GitHubClientFactory = Callable[[str], GitHubClient]


def get_github_client_factory() -> GitHubClientFactory:
    """Dependency returning how to build a client for a caller's token."""
    return GitHubClient


def _parse_time_period(raw: str) -> TimePeriod:
    try:
        return TimePeriod(raw.lower())
    except ValueError as exc:
        allowed = ", ".join(p.value for p in TimePeriod)
        raise CommitStatsInputError(
            f"Invalid time_period '{raw}'. Expected one of: {allowed}"
        ) from exc


@router.get(
    "/commit-stats",
    response_model=CommitStatsResponse,
    response_model_exclude_none=True,
)
async def get_commit_stats(
    response: Response,
    access_token: Optional[str] = Query(None, description="GitHub OAuth token"),
    username: Optional[str] = Query(None, description="GitHub login"),
    start_date: Optional[str] = Query(None, description="ISO date or timestamp"),
    end_date: Optional[str] = Query(None, description="ISO date or timestamp"),
    time_period: str = Query("daily", description="daily or weekly"),
    aggregate: bool = Query(
        True, description="Return aggregated data instead of raw commits"
    ),
    client_factory: GitHubClientFactory = Depends(get_github_client_factory),
):
    """
    Return a user's commit activity in [start_date, end_date).

    The window may span at most 365 days. Wider windows process fewer
    repositories and commits per repository.
    """
    if not access_token:
        raise CommitStatsInputError("Missing access_token parameter")
    if not username:
        raise CommitStatsInputError("Missing username parameter")
    if not start_date or not end_date:
        raise CommitStatsInputError("Missing start_date or end_date parameter")

    window = DateWindow.parse(start_date, end_date)
    period = _parse_time_period(time_period)

    async with client_factory(access_token) as client:
        service = CommitActivityService(client)
        result = await service.get_commit_stats(
            username, window, time_period=period, aggregate=aggregate
        )

    response.headers.update(CORS_HEADERS)
    return result


@router.get("/languages", response_model=SupportedLanguagesResponse)
async def list_languages():
    """List every language label the classifier can produce, with its colour."""
    return SupportedLanguagesResponse(
        languages=[
            SupportedLanguage(name=name, color=get_language_color(name))
            for name in get_supported_languages()
        ]
    )
