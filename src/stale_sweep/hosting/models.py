"""Models for repository hosting API responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class RepositoryInfo(BaseModel):
    """Repository metadata."""

    model_config = {"extra": "ignore"}

    full_name: str | None = Field(default=None, description="Repository name as 'owner/name'")
    default_branch: str = Field(description="Name of the default branch")
    private: bool = Field(default=False, description="Whether the repository is private")
    fork: bool = Field(default=False, description="Whether the repository is a fork")


class BranchCommit(BaseModel):
    """Commit reference attached to a branch listing entry."""

    model_config = {"extra": "ignore"}

    sha: str = Field(description="Head commit SHA")


class Branch(BaseModel):
    """A branch as returned by the branch listing."""

    model_config = {"extra": "ignore"}

    name: str = Field(description="Branch name")
    commit: BranchCommit = Field(description="Head commit reference")
    protected: bool = Field(default=False, description="Whether branch protection is enabled")

    @property
    def sha(self) -> str:
        """Head commit SHA."""
        return self.commit.sha

    def is_default(self, default_branch: str) -> bool:
        """Check if this is the repository's default branch.

        Args:
            default_branch: Name of the repository's default branch

        Returns:
            True if names are equal
        """
        return self.name == default_branch


class GitActor(BaseModel):
    """Author or committer of a commit."""

    model_config = {"extra": "ignore"}

    name: str | None = None
    email: str | None = None
    date: datetime


class CommitDetail(BaseModel):
    """Git-level commit data."""

    model_config = {"extra": "ignore"}

    message: str = ""
    committer: GitActor


class Commit(BaseModel):
    """A single commit."""

    model_config = {"extra": "ignore"}

    sha: str
    commit: CommitDetail

    @property
    def committed_at(self) -> datetime:
        """Committer timestamp of the commit."""
        return self.commit.committer.date


class PullRequest(BaseModel):
    """A pull request, reduced to the fields needed for merge decisions."""

    model_config = {"extra": "ignore"}

    number: int
    state: str = Field(description="'open' or 'closed'")
    merged_at: datetime | None = Field(default=None, description="Merge timestamp, None if never merged")

    @property
    def is_open(self) -> bool:
        """Check if the pull request is open."""
        return self.state == "open"

    @property
    def is_closed_unmerged(self) -> bool:
        """Check if the pull request was closed without being merged.

        Returns:
            True if closed and no merge timestamp is present
        """
        return self.state == "closed" and self.merged_at is None


class CompareResult(BaseModel):
    """Result of comparing a head ref against a base ref."""

    model_config = {"extra": "ignore"}

    status: str | None = None
    ahead_by: int = Field(description="Commits on head that are not on base")
    behind_by: int = Field(default=0, description="Commits on base that are not on head")


class RateLimitStatus(BaseModel):
    """Core API quota."""

    model_config = {"extra": "ignore"}

    limit: int
    remaining: int
    used: int = 0
    reset: int | None = Field(default=None, description="Epoch seconds when the quota resets")


class RateLimitResources(BaseModel):
    """Quota buckets of the rate limit endpoint."""

    model_config = {"extra": "ignore"}

    core: RateLimitStatus


class RateLimitResponse(BaseModel):
    """Response of the rate limit endpoint."""

    model_config = {"extra": "ignore"}

    resources: RateLimitResources
