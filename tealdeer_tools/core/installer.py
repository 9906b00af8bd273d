"""Extraction of the downloaded page archive into the cache directory.

The default in-place strategy clears the cache directory and then extracts
into it. Between those two steps the cache is empty or partially populated,
and a crash leaves it that way. The swap strategy extracts into a sibling
staging directory first and renames it into place, which only works when
the staging directory and the cache root share a filesystem.
"""

from __future__ import annotations

import io
import os
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path

import structlog

from tealdeer_tools.core.errors import CacheError, UpdateError
from tealdeer_tools.core.types import ARCHIVE_ROOT, InstallStrategy

logger = structlog.get_logger()

_ARCHIVE_ERRORS = (tarfile.TarError, OSError, EOFError, zlib.error)


def clear_directory(path: Path) -> None:
    """Remove a directory and everything below it.

    Args:
        path: Directory to remove

    Raises:
        CacheError: If the path does not exist, is not a directory, or
            cannot be removed
    """
    if path.is_dir():
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise CacheError(f"Could not remove cache directory ({path}).") from e
        logger.debug("cache_dir_removed", path=str(path))
    elif path.exists():
        raise CacheError(f"Cache path ({path}) is not a directory.")
    else:
        raise CacheError(f"Cache path ({path}) does not exist.")


def mark_updated(into: Path) -> None:
    """Set the mtime of the extracted archive root to now.

    tarfile restores directory times from the archive, and the cache age is
    read from this directory.
    """
    archive_root = into / ARCHIVE_ROOT
    if not archive_root.is_dir():
        logger.warning("archive_root_missing", path=str(archive_root))
        return
    try:
        os.utime(archive_root)
    except OSError as e:
        raise UpdateError(f"Could not update cache timestamp: {e}") from e


def open_archive(data: bytes) -> tarfile.TarFile:
    """Open gzip compressed tar data as a stream.

    Members are decompressed while they are extracted, not up front.
    """
    return tarfile.open(fileobj=io.BytesIO(data), mode="r|gz")


class ArchiveInstaller:
    """Unpacks a gzip compressed tar archive into the cache root."""

    def __init__(self, strategy: InstallStrategy = InstallStrategy.IN_PLACE):
        """Initialize installer.

        Args:
            strategy: How the archive replaces the existing cache
        """
        self.strategy = strategy

    def install(self, data: bytes, into: Path) -> None:
        """Replace the contents of ``into`` with the archive contents.

        Args:
            data: Gzip compressed tar archive
            into: Cache root directory

        Raises:
            UpdateError: If the directory cannot be created or the archive
                cannot be extracted
            CacheError: If the existing cache cannot be cleared
        """
        if self.strategy is InstallStrategy.SWAP:
            self._install_swap(data, into)
        else:
            self._install_in_place(data, into)
        mark_updated(into)
        logger.info("archive_installed", path=str(into), strategy=self.strategy.value)

    def _install_in_place(self, data: bytes, into: Path) -> None:
        logger.debug("ensure_cache_dir", path=str(into))
        try:
            into.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise UpdateError(f"Could not create cache directory: {e}") from e

        try:
            archive = open_archive(data)
        except _ARCHIVE_ERRORS as e:
            raise UpdateError(f"Could not unpack compressed data: {e}") from e

        with archive:
            clear_directory(into)
            try:
                into.mkdir(parents=True, exist_ok=True)
                archive.extractall(into, filter="data")
            except _ARCHIVE_ERRORS as e:
                logger.error("archive_extract_failed", path=str(into), error=str(e))
                raise UpdateError(f"Could not unpack compressed data: {e}") from e

    def _install_swap(self, data: bytes, into: Path) -> None:
        parent = into.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{into.name}-staging-", dir=parent))
        except OSError as e:
            raise UpdateError(f"Could not create cache directory: {e}") from e

        try:
            with open_archive(data) as archive:
                archive.extractall(staging, filter="data")
        except _ARCHIVE_ERRORS as e:
            shutil.rmtree(staging, ignore_errors=True)
            logger.error("archive_extract_failed", path=str(staging), error=str(e))
            raise UpdateError(f"Could not unpack compressed data: {e}") from e

        backup: Path | None = None
        try:
            if into.exists():
                backup = staging.with_name(f"{staging.name}.old")
                into.rename(backup)
            staging.rename(into)
        except OSError as e:
            if backup is not None and backup.exists() and not into.exists():
                backup.rename(into)
            shutil.rmtree(staging, ignore_errors=True)
            raise UpdateError(f"Could not swap in new cache directory: {e}") from e

        if backup is not None:
            clear_directory(backup)
