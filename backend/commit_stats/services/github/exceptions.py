"""Custom exceptions for GitHub API access."""

from __future__ import annotations


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubConfigurationError(GithubError):
    """Raised when required configuration is missing."""


class GithubRequestError(GithubError):
    """
    Raised when a single upstream request fails.

    Covers non-2xx responses and transport errors (status_code is None for the
    latter). Callers treat this as a per-item failure.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GithubRateLimitError(GithubRequestError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 403,
        retry_after: int | float | None = None,
    ):
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class GithubSecondaryRateLimitError(GithubRateLimitError):
    """
    Raised when GitHub's secondary rate limit (abuse detection) is triggered.

    Secondary rate limits are triggered by bursts or too many concurrent
    requests and usually come with a Retry-After of 60s or more.
    """

    pass


class GithubResponseError(GithubError):
    """Raised when a 2xx response carries a payload that cannot be decoded."""
