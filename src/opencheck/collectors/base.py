"""
Abstract base class for data collectors.

Defines the interface that all collectors implement and the shared
request helpers that turn transport problems into NetworkError.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from opencheck import __version__
from opencheck.core.exceptions import NetworkError, PackageNotFoundError, ValidationError
from opencheck.core.validation import MAX_RESPONSE_SIZE, validate_response_size

logger = logging.getLogger(__name__)


class Collector(ABC):
    """Abstract base class for data collectors.

    All collectors share session management and error handling. Specific
    collectors implement ``fetch`` for their data source and convert
    failures into fallback outcomes so callers never see an exception.
    """

    # Maximum response size (10 MB) - can be overridden by subclasses
    MAX_RESPONSE_SIZE = MAX_RESPONSE_SIZE

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: int = 30,
    ):
        """Initialize the collector.

        Args:
            session: Optional aiohttp session. If not provided, one will
                     be created when needed.
            timeout: Request timeout in seconds.
        """
        self._session = session
        self._owns_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "Collector":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @abstractmethod
    async def fetch(self, name: str, version: str) -> Any:
        """Fetch data for one package.

        Args:
            name: The package name.
            version: The normalized declared version.

        Returns:
            An Outcome specific to each collector type. Never raises.
        """
        pass

    def _build_headers(self) -> dict[str, str]:
        """Build common request headers."""
        return {
            "User-Agent": f"OpenCheck/{__version__}",
            "Accept": "application/json",
        }

    def _check_response_size(self, response: aiohttp.ClientResponse, url: str) -> None:
        """Reject responses whose declared size is too large.

        Raises:
            NetworkError: If the Content-Length exceeds MAX_RESPONSE_SIZE.
        """
        content_length = response.headers.get("Content-Length")
        if content_length is None:
            return
        try:
            size = int(content_length)
        except ValueError:
            return  # Invalid Content-Length header, proceed with caution
        try:
            validate_response_size(size, self.MAX_RESPONSE_SIZE)
        except ValidationError as e:
            raise NetworkError(url, response.status, details=e.details)

    async def _request_json(
        self,
        method: str,
        url: str,
        package_name: str,
        **kwargs: Any,
    ) -> Any:
        """Issue one request and decode its JSON body.

        Raises:
            PackageNotFoundError: On a 404 response.
            NetworkError: On transport errors, other non-2xx responses,
                oversized bodies, or undecodable JSON.
        """
        logger.debug("%s %s", method, url)
        try:
            async with self.session.request(
                method,
                url,
                headers=self._build_headers(),
                **kwargs,
            ) as resp:
                if resp.status == 404:
                    raise PackageNotFoundError(package_name)
                if not 200 <= resp.status < 300:
                    raise NetworkError(url, resp.status)
                self._check_response_size(resp, url)
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(url, details=str(e) or type(e).__name__)
        except ValueError as e:
            raise NetworkError(url, details=f"Invalid JSON: {e}")
