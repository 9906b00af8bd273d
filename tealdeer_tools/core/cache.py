"""Page cache lifecycle: update, age, clear, and lookups.

Cache layout:
{cache_root}/
└── tldr-master/
    ├── pages/
    │   ├── common/{command}.md
    │   ├── linux/{command}.md
    │   ├── osx/{command}.md
    │   ├── sunos/{command}.md
    │   └── windows/{command}.md
    └── pages.custom/{command}.md   # default custom pages location

The cache root is only ever replaced as a whole. Nothing guards against
two processes updating it at the same time.
"""

from __future__ import annotations

import time
from datetime import timedelta

import structlog

from tealdeer_tools.core.catalog import PageCatalog
from tealdeer_tools.core.config import AppConfig
from tealdeer_tools.core.errors import CacheError
from tealdeer_tools.core.fetcher import ArchiveFetcher
from tealdeer_tools.core.installer import ArchiveInstaller, clear_directory
from tealdeer_tools.core.locator import resolve_cache_root
from tealdeer_tools.core.resolver import PageResolver
from tealdeer_tools.core.types import ARCHIVE_ROOT, PageLookupResult, Platform

logger = structlog.get_logger()


class PageCache:
    """Entry point for everything that touches the page cache."""

    def __init__(self, config: AppConfig | None = None, platform: Platform | None = None):
        """Initialize page cache.

        Args:
            config: Application configuration
            platform: Platform for lookups, detected if None
        """
        self.config = config or AppConfig()
        self.platform = platform or Platform.current()

    @property
    def resolver(self) -> PageResolver:
        return PageResolver(self.config.cache, self.platform)

    @property
    def catalog(self) -> PageCatalog:
        return PageCatalog(self.config.cache, self.platform)

    def update(self, url: str | None = None) -> None:
        """Download the page archive and replace the cache with it.

        Args:
            url: Archive URL, defaults to the configured one

        Raises:
            UpdateError: If downloading or extracting fails
            CacheError: If the cache root cannot be resolved or cleared
        """
        cache_root = resolve_cache_root(self.config.cache)

        with ArchiveFetcher(self.config.fetch) as fetcher:
            data = fetcher.fetch(url)

        ArchiveInstaller(self.config.cache.install_strategy).install(data, cache_root)
        logger.info("cache_updated", path=str(cache_root), size=len(data))

    def last_update_age(self) -> timedelta | None:
        """Return the time since the archive was last extracted.

        Returns:
            Age of the extracted archive, None if there is no cache yet
        """
        try:
            cache_root = resolve_cache_root(self.config.cache)
            mtime = (cache_root / ARCHIVE_ROOT).stat().st_mtime
        except (CacheError, OSError) as e:
            logger.debug("cache_age_unavailable", error=str(e))
            return None

        age = time.time() - mtime
        if age < 0:
            # mtime in the future, clock skew
            return None
        return timedelta(seconds=age)

    def is_stale(self) -> bool:
        """Return True if the cache is missing or older than the configured max age."""
        age = self.last_update_age()
        return age is None or age > timedelta(hours=self.config.cache.max_age_hours)

    def clear(self) -> None:
        """Delete the cache root.

        Raises:
            CacheError: If the root cannot be resolved, does not exist, is
                not a directory, or cannot be removed
        """
        cache_root = resolve_cache_root(self.config.cache)
        clear_directory(cache_root)
        logger.info("cache_cleared", path=str(cache_root))

    def find_pages(self, name: str) -> PageLookupResult | None:
        """Look up the pages for a command, see PageResolver.find_pages."""
        return self.resolver.find_pages(name)

    def list_pages(self) -> list[str]:
        """List available page names, see PageCatalog.list_pages."""
        return self.catalog.list_pages()
