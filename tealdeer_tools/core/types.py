"""Core type definitions for tealdeer_tools."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Layout of the extracted archive
ARCHIVE_ROOT = "tldr-master"
PAGES_DIR = "pages"
COMMON_DIR = "common"
PAGE_EXTENSION = ".md"


class Platform(StrEnum):
    """Platforms that may have their own page directory."""
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    SUNOS = "sunos"
    OTHER = "other"

    @classmethod
    def current(cls) -> Platform:
        """Detect the platform of the running interpreter."""
        if sys.platform.startswith("linux"):
            return cls.LINUX
        if sys.platform == "darwin":
            return cls.MACOS
        if sys.platform in ("win32", "cygwin"):
            return cls.WINDOWS
        if sys.platform.startswith("sunos"):
            return cls.SUNOS
        return cls.OTHER

    @property
    def directory_name(self) -> str | None:
        """Page directory for this platform, None if it has no directory."""
        return _PLATFORM_DIRECTORIES[self]


_PLATFORM_DIRECTORIES: dict[Platform, str | None] = {
    Platform.LINUX: "linux",
    Platform.MACOS: "osx",
    Platform.WINDOWS: "windows",
    Platform.SUNOS: "sunos",
    Platform.OTHER: None,
}


class InstallStrategy(StrEnum):
    """How a downloaded archive replaces the existing cache."""
    IN_PLACE = "in_place"
    SWAP = "swap"


class PageLookupResult(BaseModel):
    """Ordered page files that together answer one lookup.

    Earlier paths are rendered first. The sequence is never empty.
    """

    paths: list[Path] = Field(..., description="Page files in render order")

    model_config = ConfigDict(frozen=True)

    @field_validator("paths")
    @classmethod
    def validate_paths(cls, v: list[Path]) -> list[Path]:
        """Reject empty lookups."""
        if not v:
            raise ValueError("A page lookup result needs at least one path")
        return v

    def __iter__(self) -> Iterator[Path]:  # type: ignore[override]
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def iter_lines(self) -> Iterator[str]:
        """Yield the lines of every page in order, without line endings.

        Each file is closed before the next one is opened.
        """
        for path in self.paths:
            with open(path, encoding="utf-8") as f:
                for line in f:
                    yield line.rstrip("\r\n")
