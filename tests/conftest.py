"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from stale_sweep.config import SweepConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings that a CI runner or developer shell may export."""
    for field_name in SweepConfig.model_fields:
        monkeypatch.delenv(field_name.upper(), raising=False)


@pytest.fixture
def make_config() -> Callable[..., SweepConfig]:
    """Create a config factory with test defaults.

    Returns:
        Function building a SweepConfig from keyword overrides
    """

    def _make(**overrides: Any) -> SweepConfig:
        values: dict[str, Any] = {
            "github_token": "test-token",
            "github_repository": "octo/widgets",
            "stale_days": 30,
            "process_throttle_ms": 0,
            "rate_limit_threshold": 100,
        }
        values.update(overrides)
        return SweepConfig(**values)

    return _make
