"""Listing of the pages available for a platform."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import structlog

from tealdeer_tools.core.config import CacheConfig
from tealdeer_tools.core.locator import page_tree, resolve_cache_root
from tealdeer_tools.core.types import COMMON_DIR, PAGE_EXTENSION, Platform

logger = structlog.get_logger()


def descend_policy(platform: Platform) -> Callable[[str], bool]:
    """Return the traversal policy for a platform.

    The policy receives a directory name and answers whether the walk may
    enter it. Only ``common`` and the platform directory are allowed.
    """
    allowed = {COMMON_DIR}
    if platform.directory_name is not None:
        allowed.add(platform.directory_name)

    def should_descend(name: str) -> bool:
        return name in allowed

    return should_descend


def walk_pages(root: Path, should_descend: Callable[[str], bool]) -> Iterator[Path]:
    """Yield page files below root, pruning directories before entering them.

    Symlinks are neither followed nor reported. Directories that cannot be
    read are skipped.
    """
    try:
        with os.scandir(root) as entries:
            children = sorted(entries, key=lambda e: e.name)
    except OSError as e:
        logger.warning("page_dir_unreadable", path=str(root), error=str(e))
        return

    for entry in children:
        if entry.is_dir(follow_symlinks=False):
            if should_descend(entry.name):
                yield from walk_pages(Path(entry.path), should_descend)
        elif entry.is_file(follow_symlinks=False) and entry.name.endswith(PAGE_EXTENSION):
            yield Path(entry.path)


class PageCatalog:
    """Enumerates page names from the common and platform directories."""

    def __init__(self, config: CacheConfig, platform: Platform):
        self.config = config
        self.platform = platform

    def list_pages(self) -> list[str]:
        """Return sorted, de-duplicated page names.

        Returns:
            Page names, empty if the page tree does not exist yet

        Raises:
            CacheError: If the cache root cannot be resolved
        """
        pages_dir = page_tree(resolve_cache_root(self.config))

        if not pages_dir.is_dir():
            logger.error("page_tree_missing", path=str(pages_dir))
            return []

        should_descend = descend_policy(self.platform)
        names = {
            path.stem
            for path in walk_pages(pages_dir, should_descend)
            if path.suffix == PAGE_EXTENSION
        }
        logger.debug("pages_listed", count=len(names), platform=self.platform.value)
        return sorted(names)
