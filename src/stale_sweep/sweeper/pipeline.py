"""Stale branch deletion pipeline."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import cast

from stale_sweep.config import SweepConfig
from stale_sweep.hosting.base import RepositoryHost
from stale_sweep.hosting.exceptions import HostingError
from stale_sweep.hosting.models import Branch
from stale_sweep.sweeper.exceptions import BranchProcessingError
from stale_sweep.sweeper.exclusions import compile_rules, matches
from stale_sweep.sweeper.merge_status import MergeStatusResolver
from stale_sweep.sweeper.models import (
    BranchDecision,
    DecisionKind,
    RunResult,
    RunStatus,
    SkipReason,
)
from stale_sweep.sweeper.rate_limit import RateLimitGuard
from stale_sweep.sweeper.reporting import LoggingReporter, Reporter
from stale_sweep.sweeper.staleness import days_since, is_stale

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeletionPipeline:
    """Runs one sweep over all branches of a repository.

    Branches are processed one at a time, in the order the host lists them.
    For each branch:
    - Check the API quota (abort the run when below threshold)
    - Check the deletion cap (stop the run when reached)
    - Skip the default branch, protected branches and excluded branches
    - Fetch the head commit and skip active branches
    - Resolve open pull request and merge state
    - Delete the branch, or only record it on a dry run
    - Wait for the configured throttle
    """

    def __init__(
        self,
        config: SweepConfig,
        host: RepositoryHost,
        reporter: Reporter | None = None,
        clock: Callable[[], datetime] = _utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Sweep configuration
            host: Repository hosting client
            reporter: Receives one decision per processed branch (default: log them)
            clock: Returns the reference time of the run
            sleep: Coroutine used for throttling
        """
        self.config = config
        self.host = host
        self.reporter = reporter or LoggingReporter()
        self.rules = compile_rules(config.skip_branches)
        self.rate_limit_guard = RateLimitGuard(host, config.rate_limit_threshold)
        self.merge_status_resolver = MergeStatusResolver(config, host)
        self._clock = clock
        self._sleep = sleep

    async def run(self) -> RunResult:
        """Process every branch and delete the stale ones.

        Never raises for remote failures: aborted runs are reported through
        the status of the returned result, which keeps everything recorded
        before the abort.

        Returns:
            Accumulated run result
        """
        result = RunResult()

        if not self.config.is_supported_event:
            logger.info(f"Event '{self.config.github_event_name}' is not supported for stale branch cleanup")
            result.stop_reason = f"event '{self.config.github_event_name}' is not supported"
            return result

        try:
            repository = await self.host.get_repository()
            logger.info(
                f"Repository {self.config.github_repository}: default branch '{repository.default_branch}', "
                f"private={repository.private}, fork={repository.fork}"
            )
            branches = await self.host.list_branches()
        except HostingError as e:
            logger.error(f"Failed to load repository branches: {e}")
            return result.abort(RunStatus.ABORTED_BY_ERROR, f"failed to load repository branches: {e}")

        logger.info(f"Found {len(branches)} branches")
        now = self._clock()
        max_candidates = self.config.max_branches_to_delete

        for branch in branches:
            if not await self.rate_limit_guard.check():
                threshold = self.config.rate_limit_threshold
                logger.warning(f"API rate limit below threshold of {threshold}. Stopping further processing...")
                return result.abort(RunStatus.ABORTED_BY_RATE_LIMIT, f"API rate limit below threshold of {threshold}")

            if result.candidates_processed >= max_candidates:
                logger.warning(
                    f"Reached maximum branch deletion limit of {max_candidates}. Stopping further processing..."
                )
                result.stop_reason = f"reached maximum branch deletion limit of {max_candidates}"
                break

            try:
                decision = await self._process_branch(branch, repository.default_branch, now)
            except BranchProcessingError as e:
                decision = BranchDecision.error(branch.name, e.cause)
                result.record(decision)
                self.reporter.report(decision)
                if not self.config.continue_on_errors:
                    logger.warning(f"Error processing {branch.name}, stopping further processing")
                    return result.abort(RunStatus.ABORTED_BY_ERROR, str(e))
                logger.warning(f"Error processing {branch.name}, continuing due to configuration")
            else:
                result.record(decision)
                self.reporter.report(decision)

            await self._throttle()

        logger.info(f"Stale branch cleanup complete. Deleted {result.deleted_count} branches.")
        return result

    async def _process_branch(self, branch: Branch, default_branch: str, now: datetime) -> BranchDecision:
        """Decide and apply the outcome for one branch.

        Args:
            branch: Branch to process
            default_branch: Repository default branch
            now: Reference time of the run

        Returns:
            Terminal decision for the branch

        Raises:
            BranchProcessingError: If a remote call fails
        """
        # Never touched regardless of any other setting
        if branch.is_default(default_branch):
            return BranchDecision.skip(branch.name, SkipReason.DEFAULT_BRANCH)
        if branch.protected:
            return BranchDecision.skip(branch.name, SkipReason.PROTECTED)

        # Checked before any commit data is fetched
        if matches(branch.name, self.rules):
            return BranchDecision.skip(branch.name, SkipReason.EXCLUDED)

        try:
            return await self._evaluate_commit_history(branch, default_branch, now)
        except HostingError as e:
            raise BranchProcessingError(branch.name, e) from e

    async def _evaluate_commit_history(self, branch: Branch, default_branch: str, now: datetime) -> BranchDecision:
        commit = await self.host.get_commit(branch.sha)
        age = days_since(commit.committed_at, now)

        if not is_stale(commit.committed_at, now, self.config.stale_days):
            return BranchDecision.skip(branch.name, SkipReason.ACTIVE, days_since_commit=age)

        logger.debug(f"{branch.name} is stale, the last commit was {age} days ago")

        resolution = await self.merge_status_resolver.resolve(branch.name, default_branch)
        if not resolution.deletable:
            return BranchDecision.skip(
                branch.name,
                cast(SkipReason, resolution.reason),
                detail=resolution.detail,
                days_since_commit=age,
                ahead_by=resolution.ahead_by,
            )

        if self.config.dry_run:
            kind = DecisionKind.DRY_RUN_DELETE
        else:
            await self.host.delete_branch(branch.name)
            kind = DecisionKind.DELETE

        return BranchDecision(
            branch=branch.name,
            kind=kind,
            detail=resolution.detail,
            days_since_commit=age,
            ahead_by=resolution.ahead_by,
        )

    async def _throttle(self) -> None:
        delay_ms = self.config.process_throttle_ms
        if delay_ms > 0:
            logger.debug(f"Waiting for {delay_ms} ms before processing next branch...")
            await self._sleep(delay_ms / 1000)
