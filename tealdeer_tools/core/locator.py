"""Cache directory location.

Every operation resolves the cache root again, so changing the override
takes effect on the next call.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from platformdirs import user_cache_dir

from tealdeer_tools.core.config import CacheConfig
from tealdeer_tools.core.errors import CacheError
from tealdeer_tools.core.types import ARCHIVE_ROOT, PAGES_DIR

logger = structlog.get_logger()

APP_NAME = "tealdeer"


def resolve_cache_root(config: CacheConfig) -> Path:
    """Return the directory holding the unpacked page archive.

    Args:
        config: Cache configuration, ``cache_dir`` is the override

    Returns:
        Absolute cache root path

    Raises:
        CacheError: If the override is not an existing directory or no
            user cache directory can be determined
    """
    if config.cache_dir is not None:
        path = config.cache_dir
        if path.is_dir():
            return path.absolute()
        raise CacheError(
            f"Path specified by cache override ({path}) does not exist or is not a directory."
        )

    try:
        cache_dir = user_cache_dir(APP_NAME, appauthor=False)
    except Exception as e:
        logger.debug("user_cache_dir_failed", error=str(e))
        raise CacheError("Could not determine user cache directory.") from e

    if not cache_dir:
        raise CacheError("Could not determine user cache directory.")
    return Path(cache_dir).absolute()


def page_tree(cache_root: Path) -> Path:
    """Return the ``pages`` directory inside the extracted archive."""
    return cache_root / ARCHIVE_ROOT / PAGES_DIR


def custom_pages_dir(cache_root: Path, config: CacheConfig) -> Path:
    """Return the custom pages directory.

    Relative values are taken relative to the page tree, absolute values
    are used as they are.
    """
    return page_tree(cache_root) / config.custom_pages_dir
