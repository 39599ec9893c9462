"""Exceptions raised by repository hosting clients."""


class HostingError(Exception):
    """Base exception for repository hosting errors."""


class HostingAuthError(HostingError):
    """Authentication failed."""


class HostingAPIError(HostingError):
    """API request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code if available
        """
        super().__init__(message)
        self.status_code = status_code


class HostingNotFoundError(HostingAPIError):
    """Requested resource does not exist."""


class HostingRateLimitError(HostingAPIError):
    """API quota is exhausted."""
