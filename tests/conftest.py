"""Pytest configuration and shared fixtures for tealdeer_tools tests."""

import io
import tarfile
import tempfile
import time
from collections.abc import Callable, Generator
from pathlib import Path, PurePosixPath
from unittest.mock import Mock

import pytest

from tealdeer_tools.__main__ import configure_structlog
from tealdeer_tools.core.config import AppConfig, CacheConfig


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Existing directory used as the cache root override."""
    root = tmp_path / "cache"
    root.mkdir()
    return root


@pytest.fixture
def cache_config(cache_root: Path) -> CacheConfig:
    """Cache configuration pointing at the temporary cache root."""
    return CacheConfig(cache_dir=cache_root)


@pytest.fixture
def app_config(cache_root: Path, tmp_path: Path) -> AppConfig:
    """Application configuration pointing at the temporary cache root."""
    return AppConfig(
        config_dir=tmp_path / "config",
        cache=CacheConfig(cache_dir=cache_root),
    )


@pytest.fixture
def write_page(cache_root: Path) -> Callable[..., Path]:
    """Write a page below ``tldr-master/pages`` of the cache root.

    Usage: ``write_page("common", "tar")`` creates ``pages/common/tar.md``.
    """

    def _write(directory: str, name: str, content: str | None = None) -> Path:
        path = cache_root / "tldr-master" / "pages" / directory / f"{name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content or f"# {name}\n\n> {directory} page for {name}.\n", encoding="utf-8")
        return path

    return _write


ARCHIVE_MTIME = int(time.time()) - 60 * 24 * 3600


def _build_archive(files: dict[str, str]) -> bytes:
    """Build a gzip compressed tar archive from a mapping of path to text.

    Directory entries are written like upstream tarballs do, with an mtime
    60 days in the past.
    """
    buffer = io.BytesIO()
    written_dirs: set[str] = set()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            parents = [p for p in reversed(PurePosixPath(name).parents) if str(p) != "."]
            for parent in parents:
                if ".." in parent.parts or str(parent) in written_dirs:
                    continue
                dir_info = tarfile.TarInfo(str(parent))
                dir_info.type = tarfile.DIRTYPE
                dir_info.mode = 0o755
                dir_info.mtime = ARCHIVE_MTIME
                tar.addfile(dir_info)
                written_dirs.add(str(parent))

            data = content.encode("utf-8")
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o644
            info.mtime = ARCHIVE_MTIME
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture
def make_archive() -> Callable[[dict[str, str]], bytes]:
    """Factory for gzip compressed tar archives."""
    return _build_archive


@pytest.fixture
def sample_archive() -> bytes:
    """Small page archive with the upstream layout."""
    return _build_archive({
        "tldr-master/pages/common/tar.md": "# tar\n\n> Archiving utility.\n",
        "tldr-master/pages/linux/apt.md": "# apt\n\n> Package manager.\n",
        "tldr-master/pages/osx/brew.md": "# brew\n\n> Package manager.\n",
    })


# Pytest configuration
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest settings."""
    configure_structlog()
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list) -> None:
    """Modify test collection to add markers automatically."""
    for item in items:
        # Add unit marker to all tests by default
        if not any(marker.name in ['integration', 'slow'] for marker in item.iter_markers()):
            item.add_marker(pytest.mark.unit)


# CLI Testing Fixtures


@pytest.fixture
def mock_console() -> Mock:
    """Create standardized mock Rich console for CLI testing.

    This fixture provides a consistent console mock that:
    - Properly mocks the status context manager
    - Tracks printed output in printed_lines list for assertions
    """
    import re
    import sys

    console = Mock()

    # Mock the status context manager
    status_cm = Mock()
    status_cm.__enter__ = Mock(return_value=status_cm)
    status_cm.__exit__ = Mock(return_value=None)
    console.status.return_value = status_cm

    # Track printed output for testing
    console.printed_lines = []

    def track_print(text="", **kwargs):
        # Remove Rich markup for simpler testing
        clean_text = re.sub(r'\[/?[^\]]*\]', '', str(text))
        console.printed_lines.append(clean_text)
        # Also print to actual stdout so Click can capture it
        print(clean_text, file=sys.stdout)

    console.print.side_effect = track_print
    return console


@pytest.fixture
def mock_cli_context(app_config: AppConfig, mock_console: Mock) -> Mock:
    """Create standardized mock Click context for CLI testing."""
    ctx = Mock()
    ctx.obj = {
        "config": app_config,
        "console": mock_console,
        "verbose": False,
        "debug": False
    }
    return ctx
