"""
Request window and work budget.

Both are computed once per request and never mutated afterwards.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict

from commit_stats.config import settings

SECONDS_PER_DAY = 24 * 60 * 60


class CommitStatsInputError(ValueError):
    """Base class for caller input errors (reported as HTTP 400)."""


class InvalidDateError(CommitStatsInputError):
    """Raised when a date parameter cannot be parsed."""


class InvalidDateRangeError(CommitStatsInputError):
    """Raised when the window is inverted or wider than allowed."""

    def __init__(
        self,
        message: str,
        requested_days: float | None = None,
        max_days: int | None = None,
    ):
        super().__init__(message)
        self.requested_days = requested_days
        self.max_days = max_days


class TimePeriod(str, Enum):
    """Bucket granularity for the aggregated view."""

    DAILY = "daily"
    WEEKLY = "weekly"


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an ISO-8601 date or timestamp into an aware UTC datetime.

    Bare dates map to midnight UTC, naive timestamps are taken as UTC and a
    trailing ``Z`` is accepted.
    """
    value = (raw or "").strip()
    if not value:
        raise InvalidDateError("Empty date value")

    try:
        if len(value) == 10:
            parsed = datetime.combine(date.fromisoformat(value), time.min)
        else:
            if value.endswith(("Z", "z")):
                value = value[:-1] + "+00:00"
            parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date value: {raw!r}") from exc

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class DateWindow(BaseModel):
    """Caller-specified [start, end) range bounding the query."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @classmethod
    def from_bounds(cls, start: datetime, end: datetime) -> "DateWindow":
        """Build a window, rejecting inverted or over-wide ranges."""
        max_days = settings.MAX_DATE_RANGE_DAYS
        width = (end - start).total_seconds() / SECONDS_PER_DAY
        if width > max_days:
            raise InvalidDateRangeError(
                f"Time window too large. Maximum allowed is {max_days} days, "
                f"but {math.floor(width + 0.5)} days were requested. "
                "Please use a shorter date range.",
                requested_days=width,
                max_days=max_days,
            )
        if width <= 0:
            raise InvalidDateRangeError(
                "Invalid date range. Start date must be before end date.",
                requested_days=width,
                max_days=max_days,
            )
        return cls(start=start, end=end)

    @classmethod
    def parse(cls, start_raw: str, end_raw: str) -> "DateWindow":
        return cls.from_bounds(parse_timestamp(start_raw), parse_timestamp(end_raw))

    @property
    def width_days(self) -> float:
        return (self.end - self.start).total_seconds() / SECONDS_PER_DAY

    @property
    def start_iso(self) -> str:
        return _isoformat_z(self.start)

    @property
    def end_iso(self) -> str:
        return _isoformat_z(self.end)


class WorkBudget(BaseModel):
    """Caps on upstream work for one request."""

    model_config = ConfigDict(frozen=True)

    max_repositories: int
    max_commits_per_repository: int
    repo_concurrency: int
    commit_batch_size: int


def _isoformat_z(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )
