"""
Pytest fixtures and configuration for OpenCheck tests.

Provides mock API responses, a fake aiohttp session and test data for
unit testing.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from opencheck.core.models import (
    DependencyRecord,
    Report,
    Severity,
    Status,
    Vulnerability,
)

REGISTRY = "https://registry.npmjs.org"
DOWNLOADS = "https://api.npmjs.org/downloads/point/last-week"
OSV_QUERY = "https://api.osv.dev/v1/query"


def npm_timestamp(days_ago: float) -> str:
    """Registry-style timestamp for a moment ``days_ago`` days in the past."""
    moment = datetime.now(timezone.utc) - timedelta(days=days_ago)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.000Z")


# =============================================================================
# Fake HTTP layer
# =============================================================================


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ):
        self.status = status
        self._payload = payload
        self.headers = headers or {}

    async def json(self, content_type: str | None = "application/json") -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc: Any) -> bool:
        return False


class FakeSession:
    """Routes ``request(method, url)`` to canned responses.

    Unknown routes answer 404. A route mapped to an exception raises it.
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None):
        self.routes = routes or {}
        self.calls: list[tuple[str, str, dict]] = []
        self.closed = False

    def add(self, method: str, url: str, response: Any) -> None:
        self.routes[(method, url)] = response

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        response = self.routes.get((method, url))
        if response is None:
            return FakeResponse(status=404)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    """An empty fake session (every request answers 404)."""
    return FakeSession()


@pytest.fixture
def make_response() -> type[FakeResponse]:
    """Factory for canned responses: make_response(status, payload)."""
    return FakeResponse


# =============================================================================
# Mock API Response Fixtures
# =============================================================================


@pytest.fixture
def mock_registry_document() -> dict[str, Any]:
    """A trimmed npm registry document for left-pad."""
    return {
        "name": "left-pad",
        "dist-tags": {"latest": "1.3.0"},
        "time": {
            "created": npm_timestamp(3000),
            "1.2.0": npm_timestamp(2800),
            "1.3.0": npm_timestamp(10),
        },
        "versions": {
            "1.2.0": {"name": "left-pad", "version": "1.2.0"},
            "1.3.0": {
                "name": "left-pad",
                "version": "1.3.0",
                "deprecated": "use String.prototype.padStart()",
            },
        },
    }


@pytest.fixture
def mock_downloads_response() -> dict[str, Any]:
    """A downloads API response."""
    return {
        "downloads": 2_500_000,
        "start": "2024-01-01",
        "end": "2024-01-07",
        "package": "left-pad",
    }


@pytest.fixture
def mock_osv_response() -> dict[str, Any]:
    """An OSV query response with advisories of mixed severity."""
    return {
        "vulns": [
            {
                "id": "GHSA-aaaa-bbbb-cccc",
                "summary": "Prototype pollution in evil-lib",
                "severity": [{"type": "CVSS_V3", "score": 9.8}],
            },
            {
                "id": "GHSA-dddd-eeee-ffff",
                "database_specific": {"cvss": {"score": 5.3}},
            },
        ]
    }


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
def critical_vulnerability() -> Vulnerability:
    return Vulnerability(
        id="GHSA-crit-0001",
        severity=Severity.CRITICAL,
        summary="Remote code execution",
        url="https://osv.dev/vulnerability/GHSA-crit-0001",
        score=9.8,
    )


@pytest.fixture
def low_vulnerability() -> Vulnerability:
    return Vulnerability(
        id="GHSA-low-0001",
        severity=Severity.LOW,
        summary="Information disclosure in debug output",
        url="https://osv.dev/vulnerability/GHSA-low-0001",
        score=2.1,
    )


@pytest.fixture
def ok_record() -> DependencyRecord:
    return DependencyRecord(
        name="express",
        current_version="4.18.2",
        latest_version="4.19.2",
        is_outdated=True,
        days_since_update=40,
        weekly_downloads=30_000_000,
        status=Status.OK,
    )


@pytest.fixture
def warning_record() -> DependencyRecord:
    return DependencyRecord(
        name="left-pad",
        current_version="1.3.0",
        latest_version="1.3.0",
        days_since_update=2500,
        weekly_downloads=900,
        is_deprecated=True,
        status=Status.WARNING,
    )


@pytest.fixture
def critical_record(critical_vulnerability: Vulnerability) -> DependencyRecord:
    return DependencyRecord(
        name="evil-lib",
        current_version="1.0.0",
        latest_version="1.0.1",
        is_outdated=True,
        days_since_update=3,
        weekly_downloads=12_000,
        vulnerabilities=(critical_vulnerability,),
        status=Status.CRITICAL,
    )


@pytest.fixture
def sample_report(
    ok_record: DependencyRecord,
    warning_record: DependencyRecord,
    critical_record: DependencyRecord,
) -> Report:
    return Report.from_records(
        [ok_record, warning_record, critical_record],
        checked_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def tmp_package_json(tmp_path: Path) -> Path:
    """Create a temporary package.json."""
    content = """{
  "name": "test-project",
  "version": "1.0.0",
  "dependencies": {
    "express": "^4.18.2",
    "left-pad": "~1.3.0",
    "@types/node": ">=20.0.0 <21"
  },
  "devDependencies": {
    "jest": "^29.7.0",
    "express": "4.19.2"
  }
}
"""
    file_path = tmp_path / "package.json"
    file_path.write_text(content)
    return file_path
