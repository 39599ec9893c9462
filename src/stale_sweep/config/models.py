"""Configuration models."""

import re
from pathlib import Path
from typing import Any, Self

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stale_sweep.config.exceptions import InvalidConfigurationError, MissingConfigurationError

DEFAULT_API_URL = "https://api.github.com"

# Events that are allowed to trigger a sweep when running inside GitHub Actions
SUPPORTED_EVENTS = ("workflow_dispatch", "schedule")

_REPOSITORY_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")


def _option_name(field_name: str | None) -> str:
    return (field_name or "value").replace("_", "-")


def _parse_int(value: Any, field_name: str | None) -> int:
    """Parse an integer setting, rejecting anything that is not a whole number.

    Args:
        value: Raw value (int or string from environment)
        field_name: Name of the field being parsed

    Returns:
        Parsed integer

    Raises:
        InvalidConfigurationError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"Invalid input: {_option_name(field_name)} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid input: {_option_name(field_name)} must be an integer") from e


class SweepConfig(BaseSettings):
    """Configuration for a stale branch sweep.

    Validated once when constructed and immutable afterwards.
    """

    # GitHub connection settings
    github_token: str | None = Field(
        default=None,
        description="GitHub token with permission to delete branches",
    )
    github_repository: str | None = Field(
        default=None,
        description="Repository to sweep, as 'owner/name'",
    )
    github_api_url: str = Field(
        default=DEFAULT_API_URL,
        description="GitHub REST API base URL",
    )
    github_event_name: str | None = Field(
        default=None,
        description="Event that triggered the run (set by GitHub Actions)",
    )
    github_output: Path | None = Field(
        default=None,
        description="GitHub Actions output file to write results to",
    )

    # Branch selection
    stale_days: int = Field(
        default=90,
        description="Branches whose last commit is older than this many days are stale",
    )
    skip_branches: str = Field(
        default="",
        description="Comma-separated branch names or '*' patterns never to delete",
    )
    skip_unmerged: bool = Field(
        default=True,
        description="Skip branches with commits not in the default branch",
    )
    skip_open_prs: bool = Field(
        default=True,
        description="Skip branches with open pull requests",
    )
    include_unmerged_and_closed_prs: bool = Field(
        default=True,
        description="Delete unmerged branches whose pull requests were all closed without merging",
    )

    # Run limits
    max_branches_to_delete: int = Field(
        default=100,
        description="Maximum number of deletion candidates per run",
    )
    process_throttle_ms: int = Field(
        default=1000,
        description="Delay between processed branches in milliseconds",
    )
    rate_limit_threshold: int = Field(
        default=100,
        description="Stop when remaining API calls drop below this value",
    )
    continue_on_errors: bool = Field(
        default=False,
        description="Keep going when a single branch fails to process",
    )
    dry_run: bool = Field(
        default=False,
        description="Report what would be deleted without deleting anything",
    )

    model_config = SettingsConfigDict(
        env_file=[".env.stalesweep", ".env"],
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    def __init__(self, env_file: str | Path | None = None, **values: Any) -> None:
        """Load configuration.

        Args:
            env_file: Env file to read instead of .env.stalesweep/.env
            **values: Explicit settings, taking priority over every other source

        Raises:
            InvalidConfigurationError: If env_file is given but is not a file
        """
        if env_file is None:
            super().__init__(**values)
            return

        env_path = Path(env_file)
        if not env_path.is_file():
            raise InvalidConfigurationError(f"Environment file not found: {env_file}")
        super().__init__(_env_file=env_path, **values)

    @field_validator("github_event_name", "github_output", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat variables exported as empty strings as unset.

        Args:
            v: Raw value

        Returns:
            None for blank strings, the value otherwise
        """
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("stale_days", "process_throttle_ms", "rate_limit_threshold", mode="before")
    @classmethod
    def validate_non_negative(cls, v: Any, info: ValidationInfo) -> int:
        """Ensure a numeric setting is a non-negative integer.

        Args:
            v: Raw value
            info: Validation context (field name)

        Returns:
            Parsed integer

        Raises:
            InvalidConfigurationError: If the value is negative or not an integer
        """
        value = _parse_int(v, info.field_name)
        if value < 0:
            raise InvalidConfigurationError(
                f"Invalid input: {_option_name(info.field_name)} must be a non-negative integer"
            )
        return value

    @field_validator("max_branches_to_delete", mode="before")
    @classmethod
    def validate_positive(cls, v: Any, info: ValidationInfo) -> int:
        """Ensure the deletion cap is a positive integer.

        Args:
            v: Raw value
            info: Validation context (field name)

        Returns:
            Parsed integer

        Raises:
            InvalidConfigurationError: If the value is zero, negative or not an integer
        """
        value = _parse_int(v, info.field_name)
        if value <= 0:
            raise InvalidConfigurationError(
                f"Invalid input: {_option_name(info.field_name)} must be a positive integer"
            )
        return value

    @field_validator("github_api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure URL doesn't have trailing slash.

        Args:
            v: URL value

        Returns:
            Normalized URL without trailing slash
        """
        return v.rstrip("/")

    @field_validator("github_repository")
    @classmethod
    def validate_repository(cls, v: str | None) -> str | None:
        """Ensure the repository is given as 'owner/name'.

        Args:
            v: Repository value

        Returns:
            Repository value with surrounding whitespace removed

        Raises:
            InvalidConfigurationError: If the value is not of the form 'owner/name'
        """
        if v is None:
            return None
        v = v.strip()
        if not _REPOSITORY_PATTERN.match(v):
            raise InvalidConfigurationError(f"Invalid repository: {v!r}. Expected 'owner/name'")
        return v

    @model_validator(mode="after")
    def validate_connection(self) -> Self:
        """Ensure the token and repository are provided.

        Returns:
            Self

        Raises:
            MissingConfigurationError: If the token or repository is missing
        """
        if not self.github_token:
            raise MissingConfigurationError("Must provide GITHUB_TOKEN")
        if not self.github_repository:
            raise MissingConfigurationError("Must provide GITHUB_REPOSITORY as 'owner/name'")
        return self

    @property
    def repository_owner(self) -> str:
        """Owner part of the repository."""
        return (self.github_repository or "").split("/", 1)[0]

    @property
    def repository_name(self) -> str:
        """Name part of the repository."""
        return (self.github_repository or "").split("/", 1)[-1]

    @property
    def is_supported_event(self) -> bool:
        """Check if the triggering event allows a sweep.

        Runs started outside GitHub Actions have no event name and are always allowed.

        Returns:
            True if branches should be processed
        """
        return self.github_event_name is None or self.github_event_name in SUPPORTED_EVENTS

    @staticmethod
    def find_env_file() -> Path | None:
        """Find the environment file being used.

        Checks for .env.stalesweep and .env in current directory in that order.

        Returns:
            Path to the env file if found, None otherwise
        """
        for env_file in [".env.stalesweep", ".env"]:
            path = Path(env_file)
            if path.exists():
                return path.absolute()
        return None
