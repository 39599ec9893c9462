"""GitHub REST API client."""

from stale_sweep.hosting.github.client import GitHubClient

__all__ = ["GitHubClient"]
