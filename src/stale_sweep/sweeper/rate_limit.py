"""API quota guard."""

import logging

from stale_sweep.hosting.base import RepositoryHost
from stale_sweep.hosting.exceptions import HostingError

logger = logging.getLogger(__name__)


class RateLimitGuard:
    """Checks remaining API quota before each branch is processed.

    A failed quota query does not block the run: when the quota cannot be
    measured the guard lets processing continue and logs a warning.
    """

    def __init__(self, host: RepositoryHost, threshold: int) -> None:
        """Initialize the guard.

        Args:
            host: Repository hosting client
            threshold: Minimum remaining calls required to continue
        """
        self.host = host
        self.threshold = threshold

    async def check(self) -> bool:
        """Query the quota and compare it to the threshold.

        Returns:
            False if the remaining quota is below the threshold, True otherwise
        """
        try:
            status = await self.host.get_rate_limit()
        except HostingError as e:
            logger.warning(f"Failed to check API rate limit: {e}")
            return True

        logger.debug(f"API rate limit: {status.remaining}/{status.limit} remaining")

        if status.remaining < self.threshold:
            logger.warning(f"API rate limit is running low! Only {status.remaining} calls remaining.")
            return False
        return True
