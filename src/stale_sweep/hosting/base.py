"""Abstract interface to a repository hosting service.

The sweep only needs a handful of remote capabilities. Concrete clients
(currently GitHub) implement them; the pipeline depends on this interface.
"""

from abc import ABC, abstractmethod

from stale_sweep.hosting.models import (
    Branch,
    Commit,
    CompareResult,
    PullRequest,
    RateLimitStatus,
    RepositoryInfo,
)


class RepositoryHost(ABC):
    """Remote operations on a single repository."""

    @abstractmethod
    async def get_repository(self) -> RepositoryInfo:
        """Get repository metadata.

        Returns:
            Repository information including the default branch

        Raises:
            HostingError: If the request fails
        """

    @abstractmethod
    async def list_branches(self) -> list[Branch]:
        """List all branches, following pagination.

        Returns:
            Branches in the order the service returns them

        Raises:
            HostingError: If any page request fails
        """

    @abstractmethod
    async def get_commit(self, sha: str) -> Commit:
        """Get a single commit.

        Args:
            sha: Commit SHA or ref

        Returns:
            Commit including its committer timestamp

        Raises:
            HostingError: If the request fails
        """

    @abstractmethod
    async def list_pull_requests(self, head_ref: str, state: str = "open") -> list[PullRequest]:
        """List pull requests whose head is the given branch.

        Args:
            head_ref: Branch name in this repository
            state: 'open', 'closed' or 'all'

        Returns:
            Matching pull requests

        Raises:
            HostingError: If the request fails
        """

    @abstractmethod
    async def compare_commits(self, base: str, head: str) -> CompareResult:
        """Compare two refs.

        Args:
            base: Base ref
            head: Head ref

        Returns:
            Comparison including the ahead-by count of head

        Raises:
            HostingError: If the request fails
        """

    @abstractmethod
    async def get_rate_limit(self) -> RateLimitStatus:
        """Get the remaining API quota without consuming it.

        Returns:
            Core quota status

        Raises:
            HostingError: If the request fails
        """

    @abstractmethod
    async def delete_branch(self, branch_name: str) -> None:
        """Delete a branch ref.

        Args:
            branch_name: Branch to delete

        Raises:
            HostingError: If the deletion fails
        """
