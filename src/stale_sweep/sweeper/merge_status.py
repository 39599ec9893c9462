"""Merge and pull request checks for stale branches."""

import logging

from stale_sweep.config import SweepConfig
from stale_sweep.hosting.base import RepositoryHost
from stale_sweep.sweeper.models import MergeResolution, SkipReason

logger = logging.getLogger(__name__)


class MergeStatusResolver:
    """Decides whether a stale branch may be deleted given its unmerged work.

    Checks, in order:
    1. Open pull requests (when ``skip_open_prs``)
    2. Commits ahead of the default branch (when ``skip_unmerged``)
    3. For unmerged branches, whether every pull request was closed without
       merging (when ``include_unmerged_and_closed_prs``)
    """

    def __init__(self, config: SweepConfig, host: RepositoryHost) -> None:
        """Initialize the resolver.

        Args:
            config: Sweep configuration
            host: Repository hosting client
        """
        self.config = config
        self.host = host

    async def resolve(self, branch_name: str, default_branch: str) -> MergeResolution:
        """Evaluate a stale branch.

        Args:
            branch_name: Branch being evaluated
            default_branch: Repository default branch

        Returns:
            Resolution saying whether the branch is deletable and why

        Raises:
            HostingError: If a pull request or compare request fails
        """
        if self.config.skip_open_prs:
            open_prs = await self.host.list_pull_requests(branch_name, state="open")
            if open_prs:
                return MergeResolution.block(
                    SkipReason.OPEN_PULL_REQUEST,
                    f"the branch has {len(open_prs)} open pull request(s)",
                )

        if not self.config.skip_unmerged:
            return MergeResolution.allow()

        compare = await self.host.compare_commits(default_branch, branch_name)
        ahead_by = compare.ahead_by
        logger.debug(f"{branch_name} is {ahead_by} commit(s) ahead of {default_branch}")

        if ahead_by <= 0:
            return MergeResolution.allow(ahead_by=ahead_by)

        unmerged = f"the branch has unmerged commits ({ahead_by} commits ahead of {default_branch})"

        if not self.config.include_unmerged_and_closed_prs:
            return MergeResolution.block(SkipReason.UNMERGED_COMMITS, unmerged, ahead_by=ahead_by)

        # Needed even when open PRs were checked above: that check may be disabled
        pull_requests = await self.host.list_pull_requests(branch_name, state="all")

        if any(pr.is_open for pr in pull_requests):
            return MergeResolution.block(
                SkipReason.UNMERGED_WITH_OPEN_PULL_REQUEST,
                f"{unmerged} and open PRs",
                ahead_by=ahead_by,
            )

        if any(pr.is_closed_unmerged for pr in pull_requests):
            return MergeResolution.allow(f"{unmerged} but only closed unmerged PRs", ahead_by=ahead_by)

        return MergeResolution.block(
            SkipReason.UNMERGED_NO_QUALIFYING_PULL_REQUEST,
            unmerged,
            ahead_by=ahead_by,
        )
