"""Tealdeer Tools - tldr pages in your terminal.

This package keeps a local cache of the community maintained tldr pages,
resolves a command name to the pages that describe it, and renders them
as styled terminal text.

Key modules:
- core: Cache lifecycle, page resolution, config, types
- render: Markdown line classification and styled output
- commands: CLI command implementations
"""

__version__ = "0.1.0"
__author__ = "Tealdeer Tools Team"

# Re-export commonly used types and functions
from tealdeer_tools.core.cache import PageCache
from tealdeer_tools.core.errors import CacheError, TealdeerError, UpdateError
from tealdeer_tools.core.types import PageLookupResult, Platform

__all__ = [
    "__version__",
    "__author__",
    "PageCache",
    "PageLookupResult",
    "Platform",
    "TealdeerError",
    "CacheError",
    "UpdateError",
]
