"""Tests for cache.py module."""

import os
import time
from datetime import timedelta
from unittest.mock import Mock, patch

import httpx
import pytest

from tealdeer_tools.core.cache import PageCache
from tealdeer_tools.core.config import AppConfig, CacheConfig
from tealdeer_tools.core.errors import CacheError, UpdateError
from tealdeer_tools.core.types import InstallStrategy, Platform


def _archive_response(data: bytes) -> Mock:
    response = Mock()
    response.content = data
    response.raise_for_status.return_value = None
    return response


class TestPageCache:
    """Test PageCache class."""

    def test_init_defaults(self):
        with patch("tealdeer_tools.core.cache.Platform.current", return_value=Platform.WINDOWS):
            cache = PageCache()

        assert isinstance(cache.config, AppConfig)
        assert cache.platform is Platform.WINDOWS

    def test_init_explicit_platform(self, app_config):
        cache = PageCache(app_config, Platform.SUNOS)

        assert cache.resolver.platform is Platform.SUNOS
        assert cache.catalog.platform is Platform.SUNOS
        assert cache.resolver.config is app_config.cache


class TestUpdate:
    """Test downloading and installing the archive."""

    @patch("httpx.Client.get")
    def test_update_installs_archive(self, mock_get, app_config, cache_root, sample_archive):
        mock_get.return_value = _archive_response(sample_archive)
        cache = PageCache(app_config, Platform.LINUX)

        cache.update()

        mock_get.assert_called_once_with(app_config.fetch.archive_url)
        assert (cache_root / "tldr-master" / "pages" / "common" / "tar.md").is_file()

    @patch("httpx.Client.get")
    def test_update_custom_url(self, mock_get, app_config, sample_archive):
        mock_get.return_value = _archive_response(sample_archive)

        PageCache(app_config, Platform.LINUX).update("https://mirror.local/pages.tar.gz")

        mock_get.assert_called_once_with("https://mirror.local/pages.tar.gz")

    @patch("httpx.Client.get")
    def test_update_replaces_cache(self, mock_get, app_config, cache_root, write_page, make_archive):
        """Test pages missing from the new archive are gone after an update."""
        write_page("common", "removed-upstream")
        mock_get.return_value = _archive_response(
            make_archive({"tldr-master/pages/common/ls.md": "# ls\n"})
        )
        cache = PageCache(app_config, Platform.LINUX)

        cache.update()

        assert cache.list_pages() == ["ls"]
        assert cache.find_pages("removed-upstream") is None

    @patch("httpx.Client.get")
    def test_update_swap_strategy(self, mock_get, cache_root, tmp_path, sample_archive):
        mock_get.return_value = _archive_response(sample_archive)
        config = AppConfig(
            config_dir=tmp_path / "config",
            cache=CacheConfig(cache_dir=cache_root, install_strategy=InstallStrategy.SWAP),
        )

        PageCache(config, Platform.LINUX).update()

        assert (cache_root / "tldr-master" / "pages" / "linux" / "apt.md").is_file()

    @patch("httpx.Client.get")
    def test_update_download_failure_keeps_cache(self, mock_get, app_config, write_page):
        """Test a failed download leaves the existing cache untouched."""
        existing = write_page("common", "tar")
        mock_get.side_effect = httpx.ConnectError("unreachable")

        with pytest.raises(UpdateError):
            PageCache(app_config, Platform.LINUX).update()

        assert existing.exists()

    @patch("httpx.Client.get")
    def test_update_missing_override(self, mock_get, tmp_path, sample_archive):
        """Test the cache root override must exist before updating."""
        mock_get.return_value = _archive_response(sample_archive)
        config = AppConfig(
            config_dir=tmp_path / "config",
            cache=CacheConfig(cache_dir=tmp_path / "missing"),
        )

        with pytest.raises(CacheError):
            PageCache(config, Platform.LINUX).update()

        assert not (tmp_path / "missing").exists()
        mock_get.assert_not_called()


class TestAge:
    """Test cache age and staleness."""

    def test_no_age_before_update(self, app_config):
        assert PageCache(app_config, Platform.LINUX).last_update_age() is None

    def test_no_age_without_cache_root(self, tmp_path):
        config = AppConfig(cache=CacheConfig(cache_dir=tmp_path / "missing"))

        assert PageCache(config, Platform.LINUX).last_update_age() is None

    @patch("httpx.Client.get")
    def test_age_after_update(self, mock_get, app_config, sample_archive):
        mock_get.return_value = _archive_response(sample_archive)
        cache = PageCache(app_config, Platform.LINUX)

        cache.update()
        age = cache.last_update_age()

        assert age is not None
        assert age < timedelta(minutes=5)
        assert cache.is_stale() is False

    @patch("httpx.Client.get")
    def test_age_ignores_archive_timestamps(self, mock_get, app_config, cache_root, make_archive):
        """Test the age counts from the update, not from the directory times in the archive."""
        mock_get.return_value = _archive_response(
            make_archive({"tldr-master/pages/common/ls.md": "# ls\n"})
        )
        cache = PageCache(app_config, Platform.LINUX)

        cache.update()

        assert (cache_root / "tldr-master" / "pages").stat().st_mtime < time.time() - 30 * 24 * 3600
        age = cache.last_update_age()
        assert age is not None
        assert age < timedelta(minutes=5)

    def test_old_cache_is_stale(self, app_config, cache_root, write_page):
        write_page("common", "tar")
        archive_root = cache_root / "tldr-master"
        old = time.time() - 31 * 24 * 3600
        os.utime(archive_root, (old, old))
        cache = PageCache(app_config, Platform.LINUX)

        age = cache.last_update_age()

        assert age is not None
        assert age > timedelta(days=30)
        assert cache.is_stale() is True

    def test_missing_cache_is_stale(self, app_config):
        assert PageCache(app_config, Platform.LINUX).is_stale() is True

    def test_max_age_configurable(self, cache_root, write_page):
        write_page("common", "tar")
        archive_root = cache_root / "tldr-master"
        old = time.time() - 2 * 3600
        os.utime(archive_root, (old, old))

        config = AppConfig(cache=CacheConfig(cache_dir=cache_root, max_age_hours=1))

        assert PageCache(config, Platform.LINUX).is_stale() is True

    def test_future_mtime(self, app_config, cache_root, write_page):
        """Test an mtime in the future yields no age."""
        write_page("common", "tar")
        future = time.time() + 3600
        os.utime(cache_root / "tldr-master", (future, future))

        assert PageCache(app_config, Platform.LINUX).last_update_age() is None


class TestClear:
    """Test deleting the cache."""

    def test_clear_removes_root(self, app_config, cache_root, write_page):
        write_page("common", "tar")

        PageCache(app_config, Platform.LINUX).clear()

        assert not cache_root.exists()

    def test_clear_twice_fails(self, app_config, cache_root):
        """Test the second clear reports the missing cache root."""
        cache = PageCache(app_config, Platform.LINUX)
        cache.clear()

        with pytest.raises(CacheError):
            cache.clear()


class TestLookups:
    """Test delegation to resolver and catalog."""

    def test_find_and_list(self, app_config, write_page):
        tar = write_page("common", "tar")
        write_page("linux", "apt")
        cache = PageCache(app_config, Platform.LINUX)

        result = cache.find_pages("tar")

        assert result is not None
        assert result.paths == [tar]
        assert cache.list_pages() == ["apt", "tar"]

    @patch("httpx.Client.get")
    def test_update_then_lookup(self, mock_get, app_config, cache_root, sample_archive, tmp_path):
        """Update from an archive, then add platform and custom pages for tar."""
        mock_get.return_value = _archive_response(sample_archive)
        cache = PageCache(app_config, Platform.LINUX)
        cache.update()
        pages = cache_root / "tldr-master" / "pages"

        result = cache.find_pages("tar")
        assert result is not None
        assert result.paths == [pages / "common" / "tar.md"]
        assert list(result.iter_lines()) == ["# tar", "", "> Archiving utility."]

        linux_tar = pages / "linux" / "tar.md"
        linux_tar.write_text("# tar\n\n> Linux tar.\n")
        result = cache.find_pages("tar")
        assert result is not None
        assert result.paths == [linux_tar]

        custom_dir = tmp_path / "custom"
        custom_dir.mkdir()
        (custom_dir / "tar.md").write_text("# tar\n")
        config = app_config.model_copy(
            update={"cache": app_config.cache.model_copy(update={"custom_pages_dir": custom_dir})}
        )
        result = PageCache(config, Platform.LINUX).find_pages("tar")
        assert result is not None
        assert result.paths == [linux_tar, custom_dir / "tar.md"]

        assert cache.find_pages("brew") is None
        assert cache.list_pages() == ["apt", "tar"]
