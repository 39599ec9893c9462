"""Tests for RateLimitGuard."""

from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from stale_sweep.config import SweepConfig
from stale_sweep.hosting import HostingAPIError, HostingAuthError, RateLimitStatus, RepositoryHost
from stale_sweep.hosting.github import GitHubClient
from stale_sweep.sweeper.rate_limit import RateLimitGuard


@pytest.fixture
def host() -> AsyncMock:
    """Create a mock repository host."""
    return AsyncMock(spec=RepositoryHost)


class TestRateLimitGuard:
    """Tests for RateLimitGuard.check."""

    @pytest.mark.asyncio
    async def test_enough_quota(self, host: AsyncMock) -> None:
        """Test proceeding with quota above the threshold."""
        host.get_rate_limit.return_value = RateLimitStatus(limit=5000, remaining=4000)

        assert await RateLimitGuard(host, threshold=100).check() is True
        host.get_rate_limit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_exactly_at_threshold(self, host: AsyncMock) -> None:
        """Test remaining equal to the threshold is still enough."""
        host.get_rate_limit.return_value = RateLimitStatus(limit=5000, remaining=100)

        assert await RateLimitGuard(host, threshold=100).check() is True

    @pytest.mark.asyncio
    async def test_below_threshold(self, host: AsyncMock, caplog: pytest.LogCaptureFixture) -> None:
        """Test stopping below the threshold."""
        host.get_rate_limit.return_value = RateLimitStatus(limit=5000, remaining=99)

        assert await RateLimitGuard(host, threshold=100).check() is False
        assert "Only 99 calls remaining" in caplog.text

    @pytest.mark.asyncio
    async def test_zero_threshold(self, host: AsyncMock) -> None:
        """Test a zero threshold never stops the run."""
        host.get_rate_limit.return_value = RateLimitStatus(limit=5000, remaining=0)

        assert await RateLimitGuard(host, threshold=0).check() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [HostingAPIError("HTTP error: timeout"), HostingAuthError("bad token")])
    async def test_probe_failure_fails_open(
        self,
        host: AsyncMock,
        error: Exception,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test an unmeasurable quota lets processing continue with a warning."""
        host.get_rate_limit.side_effect = error

        assert await RateLimitGuard(host, threshold=100).check() is True
        assert "Failed to check API rate limit" in caplog.text
        assert any(record.levelname == "WARNING" for record in caplog.records)
        host.get_rate_limit.assert_awaited_once()

    @pytest.mark.asyncio
    @respx.mock
    async def test_undecodable_quota_response_fails_open(
        self,
        make_config: Callable[..., SweepConfig],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a garbled quota body from the real client lets processing continue."""
        respx.get("https://api.github.com/rate_limit").mock(
            return_value=httpx.Response(200, text="<html>proxy</html>")
        )

        async with GitHubClient(make_config()) as client:
            assert await RateLimitGuard(client, threshold=100).check() is True

        assert "Failed to check API rate limit" in caplog.text
