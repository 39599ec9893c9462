"""Rate-limit-aware cleanup of stale branches on GitHub."""

__version__ = "0.1.0"
