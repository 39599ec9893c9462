"""Configuration management for stale-sweep."""

from stale_sweep.config.exceptions import (
    ConfigurationError,
    InvalidConfigurationError,
    MissingConfigurationError,
)
from stale_sweep.config.models import SweepConfig

__all__ = [
    "ConfigurationError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
    "SweepConfig",
]
