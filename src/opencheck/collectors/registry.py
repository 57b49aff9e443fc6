"""
npm registry client for fetching package metadata.

Uses the registry document endpoint for the latest version, its publish
time and deprecation flag, and the downloads API for weekly download
counts. Every failure degrades to a default value instead of raising.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import aiohttp

from opencheck.collectors.base import Collector
from opencheck.core.exceptions import NetworkError, OpenCheckError
from opencheck.core.models import (
    SOURCE_DOWNLOADS,
    SOURCE_REGISTRY,
    Outcome,
    RegistryInfo,
)
from opencheck.core.validation import encode_package_name_for_url

logger = logging.getLogger(__name__)


class RegistryClient(Collector):
    """Async client for the npm registry and downloads APIs."""

    BASE_URL = "https://registry.npmjs.org"
    DOWNLOADS_URL = "https://api.npmjs.org"

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = 30,
        base_url: Optional[str] = None,
        downloads_url: Optional[str] = None,
    ):
        """Initialize the registry client.

        Args:
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
            base_url: Override for the registry metadata endpoint.
            downloads_url: Override for the downloads endpoint.
        """
        super().__init__(session, timeout)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.downloads_url = (downloads_url or self.DOWNLOADS_URL).rstrip("/")

    async def fetch(self, name: str, version: str) -> Outcome[RegistryInfo]:
        return await self.fetch_registry_info(name, version)

    async def fetch_registry_info(
        self,
        name: str,
        current_version: str,
    ) -> Outcome[RegistryInfo]:
        """Fetch latest-version and popularity metadata for a package.

        The metadata and downloads lookups run concurrently and fail
        independently: a failed lookup leaves only its own fields at
        their defaults.

        Args:
            name: Package name.
            current_version: Normalized declared version, used for the
                outdated comparison.

        Returns:
            ``Outcome.ok`` when both lookups succeeded, otherwise
            ``Outcome.unavailable`` carrying the partially defaulted info.
        """
        metadata, downloads = await asyncio.gather(
            self._fetch_metadata(name, current_version),
            self._fetch_downloads(name),
        )

        latest_version, days_since_update, is_deprecated = metadata.value
        info = RegistryInfo(
            latest_version=latest_version,
            is_outdated=current_version != latest_version,
            days_since_update=days_since_update,
            weekly_downloads=downloads.value,
            is_deprecated=is_deprecated,
            unavailable=tuple(
                source
                for source, outcome in (
                    (SOURCE_REGISTRY, metadata),
                    (SOURCE_DOWNLOADS, downloads),
                )
                if not outcome.available
            ),
        )

        if info.unavailable:
            reasons = "; ".join(
                o.reason for o in (metadata, downloads) if o.reason
            )
            return Outcome.unavailable(reasons, info)
        return Outcome.ok(info)

    async def _fetch_metadata(
        self,
        name: str,
        current_version: str,
    ) -> Outcome[tuple[str, int, bool]]:
        """Fetch (latest_version, days_since_update, is_deprecated)."""
        url = f"{self.base_url}/{encode_package_name_for_url(name)}"
        fallback = (current_version, 0, False)

        try:
            data = await self._request_json("GET", url, name)
            return Outcome.ok(self._parse_metadata(data, url))
        except OpenCheckError as e:
            logger.warning("Registry metadata unavailable for %s: %s", name, e)
            return Outcome.unavailable(str(e), fallback)

    def _parse_metadata(self, data: Any, url: str) -> tuple[str, int, bool]:
        """Extract the fields we need from a registry document.

        Raises:
            NetworkError: If the document has no usable latest tag.
        """
        if not isinstance(data, dict):
            raise NetworkError(url, details="Registry document is not an object")

        latest = _field(data, "dist-tags").get("latest")
        if not isinstance(latest, str) or not latest:
            raise NetworkError(url, details="Registry document has no dist-tags.latest")

        published = self._parse_publish_time(_field(data, "time").get(latest))
        days_since_update = self._days_since(published)

        version_meta = _field(data, "versions").get(latest)
        is_deprecated = isinstance(version_meta, dict) and bool(version_meta.get("deprecated"))

        return latest, days_since_update, is_deprecated

    async def _fetch_downloads(self, name: str) -> Outcome[int]:
        """Fetch the download count for the last week."""
        url = (
            f"{self.downloads_url}/downloads/point/last-week/"
            f"{encode_package_name_for_url(name, keep_scope_slash=True)}"
        )

        try:
            data = await self._request_json("GET", url, name)
        except OpenCheckError as e:
            logger.warning("Download stats unavailable for %s: %s", name, e)
            return Outcome.unavailable(str(e), 0)

        downloads = data.get("downloads") if isinstance(data, dict) else None
        if isinstance(downloads, bool) or not isinstance(downloads, int) or downloads < 0:
            logger.warning("Download stats for %s have no usable count", name)
            return Outcome.unavailable(f"No download count in response from {url}", 0)

        return Outcome.ok(downloads)

    def _parse_publish_time(self, value: Any) -> Optional[datetime]:
        """Parse an ISO-8601 publish timestamp, or return None."""
        if not isinstance(value, str):
            return None
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt

    def _days_since(self, published: Optional[datetime]) -> int:
        """Whole days between now and a timestamp; 0 if unknown."""
        if published is None:
            return 0
        return max(0, (datetime.now(timezone.utc) - published).days)


def _field(document: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a nested object of a registry document, or {} if it is not one."""
    value = document.get(key)
    return value if isinstance(value, dict) else {}
