"""Stale branch sweep engine."""

from stale_sweep.sweeper.exceptions import BranchProcessingError, SweepError
from stale_sweep.sweeper.exclusions import RuleSet, compile_rules, matches
from stale_sweep.sweeper.merge_status import MergeStatusResolver
from stale_sweep.sweeper.models import (
    BranchDecision,
    DecisionKind,
    MergeResolution,
    RunResult,
    RunStatus,
    SkipReason,
)
from stale_sweep.sweeper.pipeline import DeletionPipeline
from stale_sweep.sweeper.rate_limit import RateLimitGuard
from stale_sweep.sweeper.reporting import ConsoleReporter, LoggingReporter, Reporter

__all__ = [
    "BranchDecision",
    "BranchProcessingError",
    "ConsoleReporter",
    "DecisionKind",
    "DeletionPipeline",
    "LoggingReporter",
    "MergeResolution",
    "MergeStatusResolver",
    "RateLimitGuard",
    "Reporter",
    "RuleSet",
    "RunResult",
    "RunStatus",
    "SkipReason",
    "SweepError",
    "compile_rules",
    "matches",
]
