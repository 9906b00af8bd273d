"""Core functionality for tealdeer_tools.

This module provides the page cache and everything it is built from:
- Configuration management
- Type definitions and errors
- Cache location, archive download and extraction
- Page resolution and listing
"""

from tealdeer_tools.core.cache import PageCache
from tealdeer_tools.core.errors import CacheError, TealdeerError, UpdateError
from tealdeer_tools.core.types import InstallStrategy, PageLookupResult, Platform

__all__ = [
    # Cache
    "PageCache",
    # Errors
    "TealdeerError",
    "CacheError",
    "UpdateError",
    # Types
    "InstallStrategy",
    "PageLookupResult",
    "Platform",
]
