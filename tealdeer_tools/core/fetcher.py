"""HTTP download of the compressed page archive."""

from __future__ import annotations

import httpx
import structlog

from tealdeer_tools.core.config import FetchConfig
from tealdeer_tools.core.errors import UpdateError

logger = structlog.get_logger()


def parse_proxy(url: str | None) -> httpx.Proxy | None:
    """Parse a proxy URL, returning None for missing or invalid values.

    Args:
        url: Proxy URL such as ``http://proxy.local:3128``

    Returns:
        Parsed proxy or None
    """
    if not url:
        return None
    try:
        return httpx.Proxy(url)
    except (ValueError, httpx.InvalidURL) as e:
        logger.warning("proxy_ignored", proxy=url, error=str(e))
        return None


def build_proxy_mounts(config: FetchConfig) -> dict[str, httpx.HTTPTransport]:
    """Build per-scheme transports for the configured proxies.

    Args:
        config: Fetch configuration

    Returns:
        Mapping of URL pattern to transport, empty when no proxy applies
    """
    mounts: dict[str, httpx.HTTPTransport] = {}
    for pattern, value in (("http://", config.http_proxy), ("https://", config.https_proxy)):
        proxy = parse_proxy(value)
        if proxy is None:
            continue
        try:
            mounts[pattern] = httpx.HTTPTransport(proxy=proxy, verify=config.verify_ssl)
        except ImportError as e:
            # socks proxies need the optional socksio package
            logger.warning("proxy_ignored", proxy=value, error=str(e))
            continue
        logger.debug("proxy_configured", scheme=pattern.rstrip(":/"), proxy=str(proxy.url))
    return mounts


class ArchiveFetcher:
    """Downloads the page archive in a single request.

    No retries are performed, callers decide whether to try again.
    """

    def __init__(self, config: FetchConfig | None = None):
        """Initialize fetcher.

        Args:
            config: Optional fetch configuration
        """
        self.config = config or FetchConfig()
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                follow_redirects=True,
                trust_env=False,
                mounts=build_proxy_mounts(self.config),
                headers={"User-Agent": "tealdeer-tools/0.1.0"},
            )
        return self._client

    def fetch(self, url: str | None = None) -> bytes:
        """Download the archive into memory.

        Args:
            url: Archive URL, defaults to the configured one

        Returns:
            Response body

        Raises:
            UpdateError: On transport, TLS, or HTTP status errors
        """
        url = url or self.config.archive_url
        logger.debug("archive_download_start", url=url)

        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("archive_download_failed", url=url, error=str(e))
            raise UpdateError(f"Could not download page archive from {url}: {e}") from e

        data = response.content
        logger.debug("archive_downloaded", url=url, size=len(data))
        return data

    def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> ArchiveFetcher:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
