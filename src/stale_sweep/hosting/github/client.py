"""GitHub REST API client."""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from stale_sweep.config import SweepConfig
from stale_sweep.hosting.base import RepositoryHost
from stale_sweep.hosting.exceptions import (
    HostingAPIError,
    HostingAuthError,
    HostingNotFoundError,
    HostingRateLimitError,
)
from stale_sweep.hosting.models import (
    Branch,
    Commit,
    CompareResult,
    PullRequest,
    RateLimitResponse,
    RateLimitStatus,
    RepositoryInfo,
)

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"
PAGE_SIZE = 100

ModelT = TypeVar("ModelT", bound=BaseModel)


def _ref_path(ref: str) -> str:
    # Branch names may contain '/', which GitHub expects unescaped in ref paths
    return quote(ref, safe="/")


class GitHubClient(RepositoryHost):
    """Client for the GitHub REST API, bound to one repository."""

    def __init__(self, config: SweepConfig) -> None:
        """Initialize the GitHub client.

        Args:
            config: Application configuration
        """
        self.config = config
        self.base_url = config.github_api_url
        self.owner = config.repository_owner
        self.repo = config.repository_name
        self._client: httpx.AsyncClient | None = None

    def _get_headers(self) -> dict[str, str]:
        """Get headers sent with every request.

        Returns:
            Authentication and API version headers
        """
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.config.github_token or ''}",
            "X-GitHub-Api-Version": API_VERSION,
        }

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    async def __aenter__(self) -> "GitHubClient":
        """Async context manager entry.

        Returns:
            Self
        """
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._get_headers(),
            timeout=30.0,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit.

        Args:
            exc_type: Exception type
            exc_val: Exception value
            exc_tb: Exception traceback
        """
        if self._client:
            await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send an HTTP request and map error responses to exceptions.

        Args:
            method: HTTP method
            url: API endpoint (without base URL) or absolute URL from a pagination link
            **kwargs: Additional arguments for httpx

        Returns:
            Successful response

        Raises:
            HostingAuthError: Authentication failed
            HostingRateLimitError: API quota exhausted
            HostingNotFoundError: Resource not found
            HostingAPIError: API request failed
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise HostingAPIError(f"HTTP error: {e}") from e

        if response.status_code == 401:
            raise HostingAuthError("Authentication failed. Check your GitHub token.")

        if response.status_code in (403, 429) and response.headers.get("x-ratelimit-remaining") == "0":
            raise HostingRateLimitError(
                f"API rate limit exhausted: {response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 404:
            raise HostingNotFoundError(f"Not found: {method} {url}", status_code=404)

        if response.status_code >= 400:
            raise HostingAPIError(
                f"API request failed: {response.text}",
                status_code=response.status_code,
            )

        return response

    async def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an HTTP request to the GitHub API.

        Args:
            method: HTTP method
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for httpx

        Returns:
            Decoded JSON body, or an empty dict for empty responses

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        response = await self._send(method, endpoint, **kwargs)

        # 204 No Content for deletions
        if response.status_code == 204 or not response.content:
            return {}

        return self._decode(response)

    async def _paginate(self, endpoint: str, params: dict[str, Any] | None = None) -> list[Any]:
        """Fetch every page of a list endpoint.

        Follows the 'next' relation of the Link header until it is absent.

        Args:
            endpoint: API endpoint (without base URL)
            params: Query parameters for the first page

        Returns:
            Concatenated items of all pages, in order

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: Any page request failed
        """
        items: list[Any] = []
        url: str | None = endpoint
        page_params: dict[str, Any] | None = {**(params or {}), "per_page": PAGE_SIZE}
        page = 1

        while url:
            response = await self._send("GET", url, params=page_params)
            data = self._decode(response)
            if not isinstance(data, list):
                raise HostingAPIError(f"Expected a list from {endpoint}, got {type(data).__name__}")

            logger.debug(f"Fetched {len(data)} items from page {page} of {endpoint}")
            items.extend(data)

            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            page_params = None
            page += 1

        return items

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        # Proxies and captive portals can answer 200 with an HTML page
        try:
            return response.json()
        except ValueError as e:
            raise HostingAPIError(
                f"Invalid JSON response from {response.request.url}",
                status_code=response.status_code,
            ) from e

    @staticmethod
    def _parse(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise HostingAPIError(f"Unexpected {model.__name__} response: {e}") from e

    async def get_repository(self) -> RepositoryInfo:
        """Get repository metadata.

        Returns:
            Repository information including the default branch

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        data = await self._request("GET", self._repo_path)
        return self._parse(RepositoryInfo, data)

    async def list_branches(self) -> list[Branch]:
        """List all branches of the repository.

        Returns:
            Branches in API order

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        data = await self._paginate(f"{self._repo_path}/branches")
        branches = [self._parse(Branch, item) for item in data]
        logger.debug(f"Total branches fetched: {len(branches)}")
        return branches

    async def get_commit(self, sha: str) -> Commit:
        """Get a single commit.

        Args:
            sha: Commit SHA

        Returns:
            Commit with committer timestamp

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        data = await self._request("GET", f"{self._repo_path}/commits/{_ref_path(sha)}")
        return self._parse(Commit, data)

    async def list_pull_requests(self, head_ref: str, state: str = "open") -> list[PullRequest]:
        """List pull requests opened from a branch of this repository.

        Args:
            head_ref: Branch name
            state: 'open', 'closed' or 'all'

        Returns:
            Matching pull requests

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        params = {
            "state": state,
            "head": f"{self.owner}:{head_ref}",
        }
        data = await self._paginate(f"{self._repo_path}/pulls", params=params)
        return [self._parse(PullRequest, item) for item in data]

    async def compare_commits(self, base: str, head: str) -> CompareResult:
        """Compare head against base.

        Args:
            base: Base ref (usually the default branch)
            head: Head ref

        Returns:
            Comparison result

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        endpoint = f"{self._repo_path}/compare/{_ref_path(base)}...{_ref_path(head)}"
        # Only the counters are needed; keep the commit list in the response short
        data = await self._request("GET", endpoint, params={"per_page": 1})
        return self._parse(CompareResult, data)

    async def get_rate_limit(self) -> RateLimitStatus:
        """Get the core API quota.

        Calls to this endpoint are not counted against the quota.

        Returns:
            Core quota status

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        data = await self._request("GET", "/rate_limit")
        return self._parse(RateLimitResponse, data).resources.core

    async def delete_branch(self, branch_name: str) -> None:
        """Delete a branch by removing its ref.

        Args:
            branch_name: Branch to delete

        Raises:
            HostingAuthError: Authentication failed
            HostingAPIError: API request failed
        """
        await self._request("DELETE", f"{self._repo_path}/git/refs/heads/{_ref_path(branch_name)}")
