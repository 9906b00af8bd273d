"""Error types for cache and update failures.

Two kinds of failure are distinguished:

1. CacheError - the cache directory cannot be located, is invalid, or
   cannot be cleared. Fatal for the operation in progress.
2. UpdateError - fetching or extracting the page archive failed. Fatal for
   an update only; whatever is left on disk stays queryable.
"""

from __future__ import annotations


class TealdeerError(Exception):
    """Base class for all tealdeer-tools errors.

    Attributes:
        message: Human readable description of the failure
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class CacheError(TealdeerError):
    """Raised when the cache directory is missing, invalid, or not removable."""


class UpdateError(TealdeerError):
    """Raised when downloading or unpacking the page archive fails."""
