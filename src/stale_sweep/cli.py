"""Command-line interface for stale-sweep."""

import asyncio
import logging
import sys
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from stale_sweep import __version__
from stale_sweep.config import ConfigurationError, SweepConfig
from stale_sweep.hosting.github import GitHubClient
from stale_sweep.outputs import write_outputs
from stale_sweep.sweeper import ConsoleReporter, DeletionPipeline, RunResult, RunStatus, compile_rules

app = typer.Typer(
    name="stale-sweep",
    help="Delete stale branches from a GitHub repository",
    add_completion=False,
)
console = Console()

# Help text constants
VERBOSE_OUTPUT_HELP = "Verbose output"
ENV_FILE_HELP = "Path to custom environment file (default: .env.stalesweep or .env)"


def setup_logging(verbose: bool) -> None:
    """Setup logging configuration.

    Args:
        verbose: If True, enable debug logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    # One INFO line per HTTP request drowns out the branch decisions
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def _mask(token: str | None) -> str:
    if not token:
        return "(not set)"
    return f"{token[:4]}{'*' * 8}"


def _display_sweep_header(config: SweepConfig) -> None:
    """Display sweep settings.

    Args:
        config: Sweep configuration
    """
    rules = compile_rules(config.skip_branches)
    console.print("\n[bold cyan]Stale Branch Cleanup[/bold cyan]")
    console.print(f"  Repository: {config.github_repository}")
    console.print(f"  Stale after: {config.stale_days} days")
    if not rules.is_empty:
        console.print(f"  Excluded names: {', '.join(sorted(rules.names)) or '-'}")
        console.print(f"  Excluded patterns: {', '.join(p.pattern for p in rules.patterns) or '-'}")
    console.print(f"  Max branches to delete: {config.max_branches_to_delete}")
    if config.dry_run:
        console.print("  [blue]Dry run: no branches will be deleted[/blue]")
    console.print()


def _display_sweep_results(result: RunResult, dry_run: bool) -> None:
    """Display sweep summary.

    Args:
        result: Run result
        dry_run: Whether deletions were only simulated

    Raises:
        SystemExit: If the run was aborted
    """
    console.print("\n[bold]Cleanup Summary:[/bold]")
    console.print(f"  Branches processed: {len(result.decisions)}")
    if dry_run:
        console.print(f"  [blue]Would delete: {len(result.would_delete)}[/blue]")
        for name in result.would_delete:
            console.print(f"    - {name}")
    console.print(f"  [red]Deleted {result.deleted_count} branches.[/red]")
    for name in result.deleted_branches:
        console.print(f"    - {name}")
    if result.failed_branches:
        console.print(f"  [yellow]Failed: {', '.join(result.failed_branches)}[/yellow]")
    console.print(f"  Stopped: {result.stop_reason}")

    if not result.succeeded:
        label = "rate limit" if result.status == RunStatus.ABORTED_BY_RATE_LIMIT else "error"
        console.print(f"\n[red]Cleanup aborted ({label}): {result.stop_reason}[/red]")
        sys.exit(1)

    console.print("\n[green]✨ Stale branch cleanup complete![/green]")


async def _run_sweep(config: SweepConfig) -> RunResult:
    """Run the sweep and write Actions outputs.

    Args:
        config: Sweep configuration

    Returns:
        Run result
    """
    async with GitHubClient(config) as client:
        pipeline = DeletionPipeline(config, client, reporter=ConsoleReporter(console))
        result = await pipeline.run()

    if config.github_output:
        await write_outputs(config.github_output, result)

    return result


@app.command()
def sweep(
    stale_days: int | None = typer.Option(
        None,
        "--stale-days",
        help="Days since the last commit after which a branch is stale",
    ),
    skip_branches: str | None = typer.Option(
        None,
        "--skip-branches",
        help="Comma-separated branch names or '*' patterns to keep",
    ),
    skip_unmerged: bool | None = typer.Option(
        None,
        "--skip-unmerged/--include-unmerged",
        help="Keep branches with commits not in the default branch",
    ),
    skip_open_prs: bool | None = typer.Option(
        None,
        "--skip-open-prs/--include-open-prs",
        help="Keep branches with open pull requests",
    ),
    include_unmerged_and_closed_prs: bool | None = typer.Option(
        None,
        "--include-closed-prs/--no-include-closed-prs",
        help="Delete unmerged branches whose pull requests were closed without merging",
    ),
    max_branches_to_delete: int | None = typer.Option(
        None,
        "--max-branches",
        "-n",
        help="Maximum number of branches to delete",
    ),
    process_throttle_ms: int | None = typer.Option(
        None,
        "--throttle-ms",
        help="Delay between branches in milliseconds",
    ),
    rate_limit_threshold: int | None = typer.Option(
        None,
        "--rate-limit-threshold",
        help="Stop when remaining API calls drop below this value",
    ),
    continue_on_errors: bool | None = typer.Option(
        None,
        "--continue-on-errors/--stop-on-errors",
        help="Keep going when a branch fails to process",
    ),
    dry_run: bool | None = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        help="Preview deletions without deleting",
    ),
    repository: str | None = typer.Option(
        None,
        "--repository",
        "-r",
        help="Repository as 'owner/name' (overrides GITHUB_REPOSITORY)",
    ),
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help=VERBOSE_OUTPUT_HELP,
    ),
) -> None:
    """Delete stale branches from the configured repository."""
    setup_logging(verbose)

    overrides: dict[str, Any] = {
        "stale_days": stale_days,
        "skip_branches": skip_branches,
        "skip_unmerged": skip_unmerged,
        "skip_open_prs": skip_open_prs,
        "include_unmerged_and_closed_prs": include_unmerged_and_closed_prs,
        "max_branches_to_delete": max_branches_to_delete,
        "process_throttle_ms": process_throttle_ms,
        "rate_limit_threshold": rate_limit_threshold,
        "continue_on_errors": continue_on_errors,
        "dry_run": dry_run,
        "github_repository": repository,
    }

    try:
        # Options left unset fall through to the environment
        config = SweepConfig(env_file=env_file, **{k: v for k, v in overrides.items() if v is not None})

        _display_sweep_header(config)

        result = asyncio.run(_run_sweep(config))

        _display_sweep_results(result, config.dry_run)

    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@app.command()
def config(
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        help=ENV_FILE_HELP,
    ),
) -> None:
    """Show current configuration."""
    try:
        cfg = SweepConfig(env_file=env_file)
        console.print("[bold]Current Configuration:[/bold]\n")
        console.print(f"  Repository: {cfg.github_repository}")
        console.print(f"  API URL: {cfg.github_api_url}")
        console.print(f"  Token: {_mask(cfg.github_token)}")
        env_path = SweepConfig.find_env_file()
        console.print(f"  Env file: {env_file or env_path or '(none)'}")
        console.print("\n[bold]Branch Selection:[/bold]")
        console.print(f"  Stale days: {cfg.stale_days}")
        console.print(f"  Skip branches: {cfg.skip_branches or '(none)'}")
        console.print(f"  Skip unmerged: {cfg.skip_unmerged}")
        console.print(f"  Skip open PRs: {cfg.skip_open_prs}")
        console.print(f"  Include unmerged with closed PRs: {cfg.include_unmerged_and_closed_prs}")
        console.print("\n[bold]Run Limits:[/bold]")
        console.print(f"  Max branches to delete: {cfg.max_branches_to_delete}")
        console.print(f"  Throttle: {cfg.process_throttle_ms} ms")
        console.print(f"  Rate limit threshold: {cfg.rate_limit_threshold}")
        console.print(f"  Continue on errors: {cfg.continue_on_errors}")
        console.print(f"  Dry run: {cfg.dry_run}")
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"stale-sweep version {__version__}")


if __name__ == "__main__":
    app()
