from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from commit_stats.config import settings
from commit_stats.services.github.exceptions import (
    GithubConfigurationError,
    GithubRateLimitError,
    GithubRequestError,
    GithubResponseError,
    GithubSecondaryRateLimitError,
)
from commit_stats.services.github.pagination import Page, PageToken

API_PREVIEW_HEADERS = {
    "Accept": "application/vnd.github+json",
}

# Commit search historically required the cloak preview media type
COMMIT_SEARCH_ACCEPT = "application/vnd.github.cloak-preview+json"

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub REST client bound to one bearer credential."""

    def __init__(
        self,
        token: str,
        api_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Initialize GitHubClient.

        Args:
            token: OAuth access token supplied by the caller
            api_url: GitHub API URL (defaults to settings.GITHUB_API_URL)
            transport: Custom httpx transport (tests use httpx.MockTransport)
            timeout: Per-request timeout in seconds
        """
        self._token = token

        if not self._token:
            raise GithubConfigurationError("GitHub token is required to call the API")

        self._api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")
        if transport is None:
            transport = httpx.AsyncHTTPTransport(retries=settings.GITHUB_HTTP_RETRIES)
        self._rest = httpx.AsyncClient(
            base_url=self._api_url,
            timeout=timeout or settings.GITHUB_REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": settings.GITHUB_USER_AGENT,
        }
        headers.update(API_PREVIEW_HEADERS)
        return headers

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.status_code in (403, 429):
            text_lower = response.text.lower()
            if "secondary rate limit" in text_lower:
                self._handle_secondary_rate_limit(response)
            elif "rate limit" in text_lower or response.status_code == 429:
                self._handle_rate_limit(response)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GithubRequestError(
                f"HTTP {response.status_code} for {response.request.url.path}",
                status_code=response.status_code,
            ) from exc
        return response

    def _handle_rate_limit(self, response: httpx.Response) -> None:
        reset_header = response.headers.get("X-RateLimit-Reset")
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = 60.0

        if retry_after_header:
            try:
                wait_seconds = float(retry_after_header)
            except ValueError:
                pass
        elif reset_header:
            try:
                reset_epoch = float(reset_header)
                now_epoch = datetime.now(timezone.utc).timestamp()
                wait_seconds = max(reset_epoch - now_epoch, 1.0)
            except ValueError:
                pass

        raise GithubRateLimitError(
            "GitHub rate limit reached",
            status_code=response.status_code,
            retry_after=wait_seconds,
        )

    def _handle_secondary_rate_limit(self, response: httpx.Response) -> None:
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = 120.0  # Default 2 minutes for secondary

        if retry_after_header:
            try:
                wait_seconds = max(float(retry_after_header), 60.0)
            except ValueError:
                pass

        logger.warning(
            "GitHub secondary rate limit (abuse detection) hit, retry after %ss",
            wait_seconds,
        )
        raise GithubSecondaryRateLimitError(
            "GitHub secondary rate limit (abuse detection) hit",
            status_code=response.status_code,
            retry_after=wait_seconds,
        )

    async def _get(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        accept: Optional[str] = None,
    ) -> httpx.Response:
        headers = self._headers()
        if accept:
            headers["Accept"] = accept
        try:
            response = await self._rest.get(url, headers=headers, params=params)
        except httpx.RequestError as exc:
            raise GithubRequestError(f"Request to {url} failed: {exc}") from exc
        return self._handle_response(response)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GithubResponseError(
                f"Malformed JSON from {response.request.url.path}"
            ) from exc

    @staticmethod
    def _next_token(response: httpx.Response) -> Optional[PageToken]:
        link_header = response.headers.get("Link")
        if link_header:
            for part in link_header.split(","):
                segment = part.strip()
                if segment.endswith('rel="next"'):
                    return PageToken(segment[segment.find("<") + 1 : segment.find(">")])
        return None

    async def _list_page(
        self,
        path: str,
        params: Dict[str, Any],
        token: Optional[PageToken],
        accept: Optional[str] = None,
    ) -> httpx.Response:
        if token is None:
            return await self._get(path, params=params, accept=accept)
        # GitHub link already contains query params
        return await self._get(token, accept=accept)

    async def search_commits(
        self,
        query: str,
        token: Optional[PageToken] = None,
        per_page: int = 100,
    ) -> Page[Dict[str, Any]]:
        """One page of GET /search/commits, newest committer date first."""
        params = {
            "q": query,
            "per_page": per_page,
            "page": 1,
            "sort": "committer-date",
            "order": "desc",
        }
        response = await self._list_page(
            "/search/commits", params, token, accept=COMMIT_SEARCH_ACCEPT
        )
        data = self._json(response)
        items = data.get("items", []) if isinstance(data, dict) else []
        return Page(items=items, next_token=self._next_token(response))

    async def list_commits(
        self,
        full_name: str,
        *,
        author: str,
        since: str,
        until: str,
        token: Optional[PageToken] = None,
        per_page: int = 100,
    ) -> Page[Dict[str, Any]]:
        """One page of GET /repos/{full_name}/commits filtered by author and date."""
        params = {
            "author": author,
            "since": since,
            "until": until,
            "per_page": per_page,
            "page": 1,
        }
        response = await self._list_page(f"/repos/{full_name}/commits", params, token)
        data = self._json(response)
        items: List[Dict[str, Any]] = data if isinstance(data, list) else []
        return Page(items=items, next_token=self._next_token(response))

    async def get_commit(self, full_name: str, sha: str) -> Dict[str, Any]:
        response = await self._get(f"/repos/{full_name}/commits/{sha}")
        data = self._json(response)
        if not isinstance(data, dict):
            raise GithubResponseError(f"Unexpected commit payload for {full_name}@{sha}")
        return data

    async def close(self) -> None:
        await self._rest.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
