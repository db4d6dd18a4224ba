"""Tests for the async GitHub REST client."""

import httpx
import pytest

from commit_stats.services.github.exceptions import (
    GithubConfigurationError,
    GithubRateLimitError,
    GithubRequestError,
    GithubResponseError,
    GithubSecondaryRateLimitError,
)
from commit_stats.services.github.github_client import COMMIT_SEARCH_ACCEPT, GitHubClient
from tests._fakes import run


def client_for(handler) -> GitHubClient:
    return GitHubClient("secret-token", transport=httpx.MockTransport(handler))


async def _call(client: GitHubClient, method: str, *args, **kwargs):
    async with client:
        return await getattr(client, method)(*args, **kwargs)


class TestGitHubClient:
    def test_token_required(self):
        with pytest.raises(GithubConfigurationError):
            GitHubClient("")

    def test_search_commits_sends_auth_and_preview_headers(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": [{"sha": "abc"}]})

        page = run(_call(client_for(handler), "search_commits", "author:octocat"))

        assert page.items == [{"sha": "abc"}]
        assert page.next_token is None
        request = seen[0]
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Accept"] == COMMIT_SEARCH_ACCEPT
        assert request.url.params["q"] == "author:octocat"
        assert request.url.params["sort"] == "committer-date"

    def test_next_link_becomes_opaque_token(self):
        next_url = "https://api.github.com/repositories/1/commits?author=octocat&page=2"
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(
                200,
                json=[{"sha": "abc"}],
                headers={
                    "Link": f'<{next_url}>; rel="next", '
                    '<https://api.github.com/repositories/1/commits?page=5>; rel="last"'
                },
            )

        client = client_for(handler)

        async def two_pages():
            async with client:
                first = await client.list_commits(
                    "octocat/hello", author="octocat", since="s", until="u"
                )
                await client.list_commits(
                    "octocat/hello",
                    author="octocat",
                    since="s",
                    until="u",
                    token=first.next_token,
                )
                return first

        first = run(two_pages())

        assert first.next_token == next_url
        assert seen[1] == next_url

    def test_non_2xx_raises_request_error_with_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"message": "Git Repository is empty."})

        with pytest.raises(GithubRequestError) as excinfo:
            run(
                _call(
                    client_for(handler),
                    "list_commits",
                    "octocat/empty",
                    author="octocat",
                    since="s",
                    until="u",
                )
            )

        assert excinfo.value.status_code == 409

    def test_rate_limit_uses_retry_after(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                403,
                text="API rate limit exceeded for user",
                headers={"Retry-After": "42"},
            )

        with pytest.raises(GithubRateLimitError) as excinfo:
            run(_call(client_for(handler), "get_commit", "octocat/hello", "abc"))

        assert excinfo.value.retry_after == 42.0
        assert isinstance(excinfo.value, GithubRequestError)

    def test_secondary_rate_limit(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="You have exceeded a secondary rate limit")

        with pytest.raises(GithubSecondaryRateLimitError) as excinfo:
            run(_call(client_for(handler), "get_commit", "octocat/hello", "abc"))

        assert excinfo.value.retry_after == 120.0

    def test_transport_error_is_request_error_without_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GithubRequestError) as excinfo:
            run(_call(client_for(handler), "get_commit", "octocat/hello", "abc"))

        assert excinfo.value.status_code is None

    def test_malformed_json_is_response_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(GithubResponseError):
            run(_call(client_for(handler), "search_commits", "author:octocat"))
