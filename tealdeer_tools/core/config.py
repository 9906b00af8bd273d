"""Configuration management for tealdeer-tools.

The environment is read in exactly one place, ``AppConfig.apply_env``,
and everything below the CLI receives an explicit configuration object.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

import structlog
from pydantic import BaseModel, Field, field_validator
from rich.errors import StyleSyntaxError
from rich.style import Style

from tealdeer_tools.core.types import InstallStrategy

logger = structlog.get_logger()

DEFAULT_ARCHIVE_URL = "https://github.com/tldr-pages/tldr/archive/master.tar.gz"

ENV_CACHE_DIR = "TEALDEER_CACHE_DIR"
ENV_CUSTOM_PAGES_DIR = "TEALDEER_CUSTOM_PAGES_DIR"
ENV_CONFIG_DIR = "TEALDEER_CONFIG_DIR"


class CacheConfig(BaseModel):
    """Cache configuration."""

    cache_dir: Path | None = Field(
        default=None,
        description="Cache root override, must be an existing directory"
    )
    custom_pages_dir: Path = Field(
        default=Path("../pages.custom"),
        description="Custom pages directory, relative paths are joined onto the page tree"
    )
    max_age_hours: int = Field(
        default=720,  # 30 days
        description="Age after which the cache counts as stale"
    )
    auto_update: bool = Field(
        default=False,
        description="Update a stale or missing cache before showing a page"
    )
    install_strategy: InstallStrategy = Field(
        default=InstallStrategy.IN_PLACE,
        description="How a new archive replaces the old cache"
    )

    @field_validator("max_age_hours")
    @classmethod
    def validate_max_age_hours(cls, v: int) -> int:
        """Validate max age value."""
        if v <= 0:
            raise ValueError("Max age must be positive")
        return v


class FetchConfig(BaseModel):
    """Archive download configuration."""

    archive_url: str = Field(
        default=DEFAULT_ARCHIVE_URL,
        description="URL of the gzip compressed page archive"
    )
    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    http_proxy: str | None = Field(default=None, description="Proxy for http:// requests")
    https_proxy: str | None = Field(default=None, description="Proxy for https:// requests")

    @field_validator("archive_url")
    @classmethod
    def validate_archive_url(cls, v: str) -> str:
        """Validate archive URL scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Archive URL must be http or https: {v}")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class StyleConfig(BaseModel):
    """Rich styles applied to page snippets."""

    description: str = Field(default="none", description="Style of the page description")
    command_name: str = Field(default="cyan", description="Style of the command name in examples")
    example_text: str = Field(default="green", description="Style of example descriptions")
    example_code: str = Field(default="cyan", description="Style of example code")
    example_variable: str = Field(default="underline cyan", description="Style of {{placeholders}}")

    @field_validator(
        "description", "command_name", "example_text", "example_code", "example_variable"
    )
    @classmethod
    def validate_style(cls, v: str) -> str:
        """Validate that the value is a parseable rich style."""
        try:
            Style.parse(v)
        except StyleSyntaxError as e:
            raise ValueError(f"Invalid style: {v} ({e})") from e
        return v


class DisplayConfig(BaseModel):
    """Page display configuration."""

    compact: bool = Field(default=False, description="Drop empty lines from pages")
    use_pager: bool = Field(default=False, description="Always page output")


class AppConfig(BaseModel):
    """Application configuration."""

    config_dir: Path = Field(
        default=Path.home() / ".config" / "tealdeer-tools",
        description="Configuration directory"
    )

    cache: CacheConfig = Field(default_factory=CacheConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    # Output settings
    output_format: str = Field(
        default="rich",
        description="Output format (rich, json, plain)"
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    @classmethod
    def load(
        cls,
        config_file: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Load configuration from file and apply environment overrides.

        Args:
            config_file: Path to config file, uses default if None
            environ: Environment mapping, uses os.environ if None

        Returns:
            Application configuration
        """
        env = os.environ if environ is None else environ

        if config_file is None:
            config_dir = Path(env[ENV_CONFIG_DIR]) if env.get(ENV_CONFIG_DIR) else None
            config_file = (config_dir or cls().config_dir) / "config.json"

        if config_file.exists():
            with open(config_file, encoding="utf-8") as f:
                data = json.load(f)
            config = cls(**data)
            logger.debug("config_loaded", path=str(config_file))
        else:
            config = cls()

        return config.apply_env(env)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build a default configuration with environment overrides applied."""
        return cls().apply_env(os.environ if environ is None else environ)

    def apply_env(self, environ: Mapping[str, str]) -> AppConfig:
        """Return a copy with overrides taken from the environment.

        Args:
            environ: Environment mapping

        Returns:
            New configuration, self is left unchanged
        """
        cache_updates: dict[str, object] = {}
        if environ.get(ENV_CACHE_DIR):
            cache_updates["cache_dir"] = Path(environ[ENV_CACHE_DIR])
        if environ.get(ENV_CUSTOM_PAGES_DIR):
            cache_updates["custom_pages_dir"] = Path(environ[ENV_CUSTOM_PAGES_DIR])

        fetch_updates: dict[str, object] = {}
        http_proxy = environ.get("HTTP_PROXY") or environ.get("http_proxy")
        https_proxy = environ.get("HTTPS_PROXY") or environ.get("https_proxy")
        if http_proxy:
            fetch_updates["http_proxy"] = http_proxy
        if https_proxy:
            fetch_updates["https_proxy"] = https_proxy

        updates: dict[str, object] = {
            "cache": self.cache.model_copy(update=cache_updates),
            "fetch": self.fetch.model_copy(update=fetch_updates),
        }
        if environ.get(ENV_CONFIG_DIR):
            updates["config_dir"] = Path(environ[ENV_CONFIG_DIR])

        return self.model_copy(update=updates)

    def save(self, config_file: Path | None = None) -> None:
        """Save configuration to file.

        Args:
            config_file: Path to config file, uses default if None
        """
        if config_file is None:
            config_file = self.config_dir / "config.json"

        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

        logger.info("config_saved", path=str(config_file))

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        valid_formats = {"rich", "json", "plain"}
        if v not in valid_formats:
            raise ValueError(f"Invalid output format: {v}. Valid formats: {valid_formats}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {valid_levels}")
        return v
