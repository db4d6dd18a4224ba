from .exceptions import (
    GithubConfigurationError,
    GithubError,
    GithubRateLimitError,
    GithubRequestError,
    GithubResponseError,
    GithubSecondaryRateLimitError,
)
from .github_client import GitHubClient
from .pagination import Page, PageToken, collect, paginate

__all__ = [
    "GitHubClient",
    "GithubConfigurationError",
    "GithubError",
    "GithubRateLimitError",
    "GithubRequestError",
    "GithubResponseError",
    "GithubSecondaryRateLimitError",
    "Page",
    "PageToken",
    "collect",
    "paginate",
]
