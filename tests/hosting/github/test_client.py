"""Tests for GitHub client."""

from collections.abc import Callable

import httpx
import pytest
import respx

from stale_sweep.config import SweepConfig
from stale_sweep.hosting import (
    HostingAPIError,
    HostingAuthError,
    HostingNotFoundError,
    HostingRateLimitError,
)
from stale_sweep.hosting.github import GitHubClient

API = "https://api.github.com"
REPO = f"{API}/repos/octo/widgets"


@pytest.fixture
def config(make_config: Callable[..., SweepConfig]) -> SweepConfig:
    """Create test configuration."""
    return make_config()


def branch_json(name: str) -> dict:
    return {"name": name, "commit": {"sha": f"sha-{name}", "url": "..."}, "protected": False}


class TestGitHubClient:
    """Tests for GitHubClient basics."""

    def test_init(self, config: SweepConfig) -> None:
        """Test client initialization."""
        client = GitHubClient(config)

        assert client.config == config
        assert client.base_url == API
        assert client.owner == "octo"
        assert client.repo == "widgets"
        assert client._client is None

    def test_headers(self, config: SweepConfig) -> None:
        """Test authentication and API version headers."""
        headers = GitHubClient(config)._get_headers()

        assert headers["Authorization"] == "Bearer test-token"
        assert headers["Accept"] == "application/vnd.github+json"
        assert "X-GitHub-Api-Version" in headers

    @pytest.mark.asyncio
    async def test_context_manager(self, config: SweepConfig) -> None:
        """Test async context manager."""
        client = GitHubClient(config)

        async with client:
            assert isinstance(client._client, httpx.AsyncClient)

    @pytest.mark.asyncio
    async def test_request_without_context_manager(self, config: SweepConfig) -> None:
        """Test that request fails without context manager."""
        client = GitHubClient(config)

        with pytest.raises(RuntimeError, match="Client not initialized"):
            await client.get_repository()

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_token(self, config: SweepConfig) -> None:
        """Test that requests carry the bearer token."""
        route = respx.get(REPO).mock(return_value=httpx.Response(200, json={"default_branch": "main"}))

        async with GitHubClient(config) as client:
            await client.get_repository()

        assert route.calls.last.request.headers["Authorization"] == "Bearer test-token"


class TestErrorHandling:
    """Tests for mapping HTTP failures to exceptions."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_authentication_failure(self, config: SweepConfig) -> None:
        """Test authentication failure (401)."""
        respx.get(REPO).mock(return_value=httpx.Response(401, json={"message": "Bad credentials"}))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAuthError, match="Authentication failed"):
                await client.get_repository()

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found(self, config: SweepConfig) -> None:
        """Test missing resource (404)."""
        respx.get(REPO).mock(return_value=httpx.Response(404, json={"message": "Not Found"}))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingNotFoundError) as exc_info:
                await client.get_repository()

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limited(self, config: SweepConfig) -> None:
        """Test exhausted quota (403 with no remaining calls)."""
        respx.get(REPO).mock(
            return_value=httpx.Response(
                403,
                headers={"x-ratelimit-remaining": "0"},
                json={"message": "API rate limit exceeded"},
            )
        )

        async with GitHubClient(config) as client:
            with pytest.raises(HostingRateLimitError) as exc_info:
                await client.get_repository()

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    @respx.mock
    async def test_forbidden_is_api_error(self, config: SweepConfig) -> None:
        """Test 403 with quota left is a plain API error."""
        respx.get(REPO).mock(
            return_value=httpx.Response(403, headers={"x-ratelimit-remaining": "42"}, json={"message": "Forbidden"})
        )

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError) as exc_info:
                await client.get_repository()

        assert not isinstance(exc_info.value, HostingRateLimitError)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self, config: SweepConfig) -> None:
        """Test API error (500)."""
        respx.get(REPO).mock(return_value=httpx.Response(500, text="Internal Server Error"))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError) as exc_info:
                await client.get_repository()

        assert exc_info.value.status_code == 500
        assert "API request failed" in str(exc_info.value)

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error(self, config: SweepConfig) -> None:
        """Test network failures are wrapped."""
        respx.get(REPO).mock(side_effect=httpx.ConnectError("connection refused"))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError, match="HTTP error"):
                await client.get_repository()

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_payload(self, config: SweepConfig) -> None:
        """Test malformed payloads are reported as API errors."""
        respx.get(REPO).mock(return_value=httpx.Response(200, json={"name": "widgets"}))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError, match="Unexpected RepositoryInfo response"):
                await client.get_repository()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_body(self, config: SweepConfig) -> None:
        """Test a successful status with an HTML body is reported as an API error."""
        respx.get(f"{REPO}/commits/abc123").mock(return_value=httpx.Response(200, text="<html>proxy</html>"))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError, match="Invalid JSON response") as exc_info:
                await client.get_commit("abc123")

        assert exc_info.value.status_code == 200

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_page(self, config: SweepConfig) -> None:
        """Test an undecodable page fails the listing with an API error."""
        respx.get(f"{REPO}/branches").mock(return_value=httpx.Response(200, text="<html>proxy</html>"))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError, match="Invalid JSON response"):
                await client.list_branches()


class TestEndpoints:
    """Tests for individual API operations."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_repository(self, config: SweepConfig) -> None:
        """Test repository metadata lookup."""
        respx.get(REPO).mock(
            return_value=httpx.Response(
                200, json={"full_name": "octo/widgets", "default_branch": "trunk", "private": False, "fork": True}
            )
        )

        async with GitHubClient(config) as client:
            info = await client.get_repository()

        assert info.default_branch == "trunk"
        assert info.fork is True

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_branches_follows_pagination(self, config: SweepConfig) -> None:
        """Test that all pages are fetched in order."""
        next_url = f"{API}/repositories/42/branches?per_page=100&page=2"
        first = respx.get(f"{REPO}/branches").mock(
            return_value=httpx.Response(
                200,
                headers={"Link": f'<{next_url}>; rel="next", <{next_url}>; rel="last"'},
                json=[branch_json("main"), branch_json("feature/a")],
            )
        )
        second = respx.get(f"{API}/repositories/42/branches").mock(
            return_value=httpx.Response(200, json=[branch_json("feature/b")])
        )

        async with GitHubClient(config) as client:
            branches = await client.list_branches()

        assert [b.name for b in branches] == ["main", "feature/a", "feature/b"]
        assert first.calls.last.request.url.params["per_page"] == "100"
        assert second.calls.last.request.url.params["page"] == "2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_branches_error_on_later_page(self, config: SweepConfig) -> None:
        """Test that a failing page fails the whole listing."""
        next_url = f"{API}/repositories/42/branches?page=2"
        respx.get(f"{REPO}/branches").mock(
            return_value=httpx.Response(200, headers={"Link": f'<{next_url}>; rel="next"'}, json=[branch_json("a")])
        )
        respx.get(f"{API}/repositories/42/branches").mock(return_value=httpx.Response(502, text="Bad Gateway"))

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError):
                await client.list_branches()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_commit(self, config: SweepConfig) -> None:
        """Test fetching a commit."""
        respx.get(f"{REPO}/commits/abc123").mock(
            return_value=httpx.Response(
                200,
                json={"sha": "abc123", "commit": {"committer": {"date": "2024-03-01T12:00:00Z"}}},
            )
        )

        async with GitHubClient(config) as client:
            commit = await client.get_commit("abc123")

        assert commit.committed_at.year == 2024
        assert commit.committed_at.month == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_pull_requests(self, config: SweepConfig) -> None:
        """Test pull request filters."""
        route = respx.get(f"{REPO}/pulls").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"number": 7, "state": "closed", "merged_at": None},
                    {"number": 8, "state": "open", "merged_at": None},
                ],
            )
        )

        async with GitHubClient(config) as client:
            prs = await client.list_pull_requests("feature/a", state="all")

        assert [pr.number for pr in prs] == [7, 8]
        params = route.calls.last.request.url.params
        assert params["state"] == "all"
        assert params["head"] == "octo:feature/a"

    @pytest.mark.asyncio
    @respx.mock
    async def test_compare_commits(self, config: SweepConfig) -> None:
        """Test comparing a branch to the default branch."""
        route = respx.get(f"{REPO}/compare/main...feature/a").mock(
            return_value=httpx.Response(200, json={"status": "diverged", "ahead_by": 2, "behind_by": 5})
        )

        async with GitHubClient(config) as client:
            result = await client.compare_commits("main", "feature/a")

        assert route.called
        assert result.ahead_by == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_rate_limit(self, config: SweepConfig) -> None:
        """Test reading the core quota."""
        respx.get(f"{API}/rate_limit").mock(
            return_value=httpx.Response(
                200,
                json={"resources": {"core": {"limit": 5000, "remaining": 12, "reset": 1, "used": 4988}}},
            )
        )

        async with GitHubClient(config) as client:
            status = await client.get_rate_limit()

        assert status.remaining == 12
        assert status.limit == 5000

    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_branch(self, config: SweepConfig) -> None:
        """Test deleting a branch ref."""
        route = respx.delete(f"{REPO}/git/refs/heads/feature/a").mock(return_value=httpx.Response(204))

        async with GitHubClient(config) as client:
            await client.delete_branch("feature/a")

        assert route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_delete_branch_failure(self, config: SweepConfig) -> None:
        """Test failed deletion raises."""
        respx.delete(f"{REPO}/git/refs/heads/gone").mock(
            return_value=httpx.Response(422, json={"message": "Reference does not exist"})
        )

        async with GitHubClient(config) as client:
            with pytest.raises(HostingAPIError) as exc_info:
                await client.delete_branch("gone")

        assert exc_info.value.status_code == 422
