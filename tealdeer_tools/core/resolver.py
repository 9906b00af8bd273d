"""Resolution of a command name to the page files that answer it.

Precedence for a page name:

- a platform page replaces the common page of the same name
- a custom page is always appended after whichever of the two was found
- nothing found in any of the three places means the page is not found
"""

from __future__ import annotations

from pathlib import Path

import structlog

from tealdeer_tools.core.config import CacheConfig
from tealdeer_tools.core.errors import CacheError
from tealdeer_tools.core.locator import custom_pages_dir, page_tree, resolve_cache_root
from tealdeer_tools.core.types import COMMON_DIR, PAGE_EXTENSION, PageLookupResult, Platform

logger = structlog.get_logger()


def _existing_file(path: Path) -> Path | None:
    return path if path.is_file() else None


class PageResolver:
    """Finds the page files for a command on one platform."""

    def __init__(self, config: CacheConfig, platform: Platform):
        """Initialize resolver.

        Args:
            config: Cache configuration
            platform: Platform whose directory overrides ``common``
        """
        self.config = config
        self.platform = platform

    def find_pages(self, name: str) -> PageLookupResult | None:
        """Look up the pages for a command.

        Args:
            name: Command name, e.g. ``tar`` or ``git-commit``

        Returns:
            Ordered page files, or None when no page exists. A cache root
            that cannot be resolved is logged and also reported as None.
        """
        page_filename = f"{name}{PAGE_EXTENSION}"

        try:
            cache_root = resolve_cache_root(self.config)
        except CacheError as e:
            logger.error("cache_dir_unavailable", error=e.message)
            return None

        pages = page_tree(cache_root)

        platform_path = None
        platform_dir = self.platform.directory_name
        if platform_dir is not None:
            platform_path = _existing_file(pages / platform_dir / page_filename)

        common_path = _existing_file(pages / COMMON_DIR / page_filename)
        custom_path = _existing_file(custom_pages_dir(cache_root, self.config) / page_filename)

        found: list[Path] = []
        primary = platform_path or common_path
        if primary is not None:
            found.append(primary)
        if custom_path is not None:
            found.append(custom_path)

        if not found:
            logger.debug("page_not_found", name=name, platform=self.platform.value)
            return None

        logger.debug("page_found", name=name, paths=[str(p) for p in found])
        return PageLookupResult(paths=found)
