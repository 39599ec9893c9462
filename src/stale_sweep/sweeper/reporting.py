"""Presentation of branch decisions."""

import logging
from abc import ABC, abstractmethod

from rich.console import Console
from rich.markup import escape

from stale_sweep.sweeper.models import BranchDecision, DecisionKind, SkipReason

logger = logging.getLogger(__name__)

_SKIP_MESSAGES = {
    SkipReason.DEFAULT_BRANCH: "default branch",
    SkipReason.PROTECTED: "protected branch",
    SkipReason.EXCLUDED: "excluded branch",
}


def _age(decision: BranchDecision) -> str:
    if decision.days_since_commit is None:
        return ""
    return f"the last commit was {decision.days_since_commit} days ago"


class Reporter(ABC):
    """Receives one structured event per processed branch."""

    @abstractmethod
    def report(self, decision: BranchDecision) -> None:
        """Present a branch decision.

        Args:
            decision: Decision for one branch
        """


class LoggingReporter(Reporter):
    """Writes decisions to the module logger."""

    def report(self, decision: BranchDecision) -> None:
        """Log a branch decision with its fields attached as ``extra``.

        Args:
            decision: Decision for one branch
        """
        level = logging.WARNING if decision.kind == DecisionKind.ERROR else logging.INFO
        reason = f" ({decision.reason.value})" if decision.reason else ""
        detail = f": {decision.detail}" if decision.detail else ""
        logger.log(
            level,
            f"{decision.branch}: {decision.kind.value}{reason}{detail}",
            extra={"decision": decision.model_dump(mode="json")},
        )


class ConsoleReporter(Reporter):
    """Prints coloured, human-readable decisions to a rich console."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize the reporter.

        Args:
            console: Console to print to (default: a new stdout console)
        """
        self.console = console or Console()

    def report(self, decision: BranchDecision) -> None:
        """Print a branch decision.

        Args:
            decision: Decision for one branch
        """
        self.console.print(escape(decision.branch))
        self.console.print(f"\t{self._describe(decision)}")

    def _describe(self, decision: BranchDecision) -> str:
        detail = escape(decision.detail)
        age = _age(decision)

        if decision.kind == DecisionKind.ERROR:
            return f"[red]Error processing this branch[/red]: {detail}"

        if decision.kind == DecisionKind.DRY_RUN_DELETE:
            message = "[blue]Dry run[/blue] - would delete this branch when dry-run is disabled"
            return f"{message} ({detail})" if detail else message

        if decision.kind == DecisionKind.DELETE:
            message = "[red]Deleted[/red] stale branch"
            if age:
                message = f"{message} - {age}"
            return f"{message} ({detail})" if detail else message

        if decision.reason == SkipReason.ACTIVE:
            return f"[green]Active branch[/green] - {age}"

        if decision.reason in _SKIP_MESSAGES:
            return f"[yellow]Skipping[/yellow] - {_SKIP_MESSAGES[decision.reason]}"

        # Stale but blocked by pull request or merge state
        stale = f" (stale, {age})" if age else ""
        return f"[yellow]Skipping[/yellow] - {detail}{stale}"
