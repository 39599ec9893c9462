"""Models for sweep decisions and results."""

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field


class DecisionKind(str, Enum):
    """Terminal outcome for one branch."""

    SKIP = "skip"
    DELETE = "delete"
    DRY_RUN_DELETE = "dry-run-delete"
    ERROR = "error"


class SkipReason(str, Enum):
    """Why a branch was kept."""

    DEFAULT_BRANCH = "default-branch"
    PROTECTED = "protected"
    EXCLUDED = "excluded"
    ACTIVE = "active"
    OPEN_PULL_REQUEST = "open-pull-request"
    UNMERGED_COMMITS = "unmerged-commits"
    UNMERGED_WITH_OPEN_PULL_REQUEST = "unmerged-with-open-pull-request"
    UNMERGED_NO_QUALIFYING_PULL_REQUEST = "unmerged-no-qualifying-pull-request"


class RunStatus(str, Enum):
    """Terminal status of a sweep."""

    COMPLETED = "completed"
    ABORTED_BY_RATE_LIMIT = "aborted-by-rate-limit"
    ABORTED_BY_ERROR = "aborted-by-error"


class MergeResolution(BaseModel):
    """Outcome of evaluating a stale branch's merge and pull request state."""

    deletable: bool
    reason: SkipReason | None = None
    ahead_by: int | None = None
    detail: str = ""

    @classmethod
    def allow(cls, detail: str = "", ahead_by: int | None = None) -> Self:
        """Create a deletable resolution."""
        return cls(deletable=True, ahead_by=ahead_by, detail=detail)

    @classmethod
    def block(cls, reason: SkipReason, detail: str, ahead_by: int | None = None) -> Self:
        """Create a not-deletable resolution."""
        return cls(deletable=False, reason=reason, ahead_by=ahead_by, detail=detail)


class BranchDecision(BaseModel):
    """Structured event describing what happened to one branch."""

    branch: str = Field(description="Branch name")
    kind: DecisionKind = Field(description="Terminal outcome")
    reason: SkipReason | None = Field(default=None, description="Skip reason, for SKIP decisions")
    detail: str = Field(default="", description="Human-readable explanation")
    days_since_commit: int | None = Field(default=None, description="Age of the head commit in days, when fetched")
    ahead_by: int | None = Field(default=None, description="Commits ahead of the default branch, when compared")

    @classmethod
    def skip(
        cls,
        branch: str,
        reason: SkipReason,
        detail: str = "",
        days_since_commit: int | None = None,
        ahead_by: int | None = None,
    ) -> Self:
        """Create a SKIP decision."""
        return cls(
            branch=branch,
            kind=DecisionKind.SKIP,
            reason=reason,
            detail=detail,
            days_since_commit=days_since_commit,
            ahead_by=ahead_by,
        )

    @classmethod
    def error(cls, branch: str, cause: Exception) -> Self:
        """Create an ERROR decision from the exception that ended processing."""
        return cls(branch=branch, kind=DecisionKind.ERROR, detail=str(cause))

    @property
    def is_candidate(self) -> bool:
        """Check if the branch counts toward the deletion cap.

        Dry-run decisions count as well as real deletions.

        Returns:
            True for DELETE and DRY_RUN_DELETE
        """
        return self.kind in (DecisionKind.DELETE, DecisionKind.DRY_RUN_DELETE)


class RunResult(BaseModel):
    """Accumulated result of a sweep.

    Returned in every case, including aborted runs, so partial progress is
    always reported.
    """

    deleted_branches: list[str] = Field(default_factory=list, description="Deleted branch names in processing order")
    deleted_count: int = Field(default=0, description="Number of branches actually deleted")
    candidates_processed: int = Field(default=0, description="Deletions plus dry-run deletions, used for the cap")
    decisions: list[BranchDecision] = Field(default_factory=list, description="Every branch decision, in order")
    status: RunStatus = Field(default=RunStatus.COMPLETED, description="Terminal status")
    stop_reason: str = Field(default="all branches processed", description="Why the run stopped")

    def record(self, decision: BranchDecision) -> None:
        """Add a branch decision and update counters.

        Args:
            decision: Decision for one branch
        """
        self.decisions.append(decision)
        if decision.kind == DecisionKind.DELETE:
            self.deleted_branches.append(decision.branch)
            self.deleted_count += 1
        if decision.is_candidate:
            self.candidates_processed += 1

    def abort(self, status: RunStatus, reason: str) -> Self:
        """Mark the run as stopped early.

        Args:
            status: Terminal status
            reason: Why the run stopped

        Returns:
            Self
        """
        self.status = status
        self.stop_reason = reason
        return self

    @property
    def succeeded(self) -> bool:
        """Check if the run finished without aborting."""
        return self.status == RunStatus.COMPLETED

    @property
    def would_delete(self) -> list[str]:
        """Branches selected for deletion during a dry run."""
        return [d.branch for d in self.decisions if d.kind == DecisionKind.DRY_RUN_DELETE]

    @property
    def failed_branches(self) -> list[str]:
        """Branches that failed and were skipped because errors are tolerated."""
        return [d.branch for d in self.decisions if d.kind == DecisionKind.ERROR]
