"""Staleness classification by last commit time."""

from datetime import datetime, timedelta


def stale_threshold(now: datetime, stale_days: int) -> datetime:
    """Get the cut-off time before which commits are stale.

    Args:
        now: Reference time of the run
        stale_days: Age in days

    Returns:
        ``now`` minus ``stale_days`` days
    """
    return now - timedelta(days=stale_days)


def is_stale(last_commit: datetime, now: datetime, stale_days: int) -> bool:
    """Check if a branch is stale.

    With ``stale_days == 0`` any commit strictly older than ``now`` is stale.

    Args:
        last_commit: Timestamp of the branch head commit
        now: Reference time of the run
        stale_days: Age in days

    Returns:
        True if the last commit is older than the threshold
    """
    return last_commit < stale_threshold(now, stale_days)


def days_since(last_commit: datetime, now: datetime) -> int:
    """Whole days elapsed since the last commit, rounded down.

    Args:
        last_commit: Timestamp of the branch head commit
        now: Reference time of the run

    Returns:
        Number of days (negative if the commit is in the future)
    """
    return (now - last_commit) // timedelta(days=1)
