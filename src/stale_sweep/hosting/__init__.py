"""Repository hosting integration for stale-sweep."""

from stale_sweep.hosting.base import RepositoryHost
from stale_sweep.hosting.exceptions import (
    HostingAPIError,
    HostingAuthError,
    HostingError,
    HostingNotFoundError,
    HostingRateLimitError,
)
from stale_sweep.hosting.models import (
    Branch,
    Commit,
    CompareResult,
    PullRequest,
    RateLimitStatus,
    RepositoryInfo,
)

__all__ = [
    "Branch",
    "Commit",
    "CompareResult",
    "HostingAPIError",
    "HostingAuthError",
    "HostingError",
    "HostingNotFoundError",
    "HostingRateLimitError",
    "PullRequest",
    "RateLimitStatus",
    "RepositoryHost",
    "RepositoryInfo",
]
