"""Sweep-specific exceptions."""


class SweepError(Exception):
    """Base exception for sweep errors."""


class BranchProcessingError(SweepError):
    """A remote call failed while evaluating or deleting a single branch."""

    def __init__(self, branch: str, cause: Exception) -> None:
        """Initialize branch processing error.

        Args:
            branch: Branch being processed
            cause: Underlying hosting error
        """
        super().__init__(f"Error processing branch {branch!r}: {cause}")
        self.branch = branch
        self.cause = cause
