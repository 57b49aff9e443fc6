"""
OSV vulnerability database client.

Queries the OSV API for advisories affecting a package version in the
npm ecosystem and maps them to Vulnerability records.
"""

import logging
from typing import Any, Optional

import aiohttp

from opencheck.collectors.base import Collector
from opencheck.core.classifier import StatusClassifier
from opencheck.core.exceptions import OpenCheckError
from opencheck.core.models import Outcome, Vulnerability

logger = logging.getLogger(__name__)


class VulnerabilityClient(Collector):
    """Async client for the OSV query API."""

    BASE_URL = "https://api.osv.dev"
    ADVISORY_URL = "https://osv.dev/vulnerability"
    ECOSYSTEM = "npm"
    NO_SUMMARY = "No description"
    UNKNOWN_ID = "UNKNOWN"

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: int = 30,
        base_url: Optional[str] = None,
        classifier: Optional[StatusClassifier] = None,
    ):
        """Initialize the OSV client.

        Args:
            session: Optional aiohttp session.
            timeout: Request timeout in seconds.
            base_url: Override for the OSV API root.
            classifier: Supplies the score to severity mapping.
        """
        super().__init__(session, timeout)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.classifier = classifier or StatusClassifier()

    async def fetch(self, name: str, version: str) -> Outcome[list[Vulnerability]]:
        return await self.fetch_vulnerabilities(name, version)

    async def fetch_vulnerabilities(
        self,
        name: str,
        version: str,
    ) -> Outcome[list[Vulnerability]]:
        """Fetch known advisories for a package version.

        Advisories keep the order OSV returned them in. An advisory without
        an id is still reported, under ``UNKNOWN_ID``.

        Args:
            name: Package name.
            version: Normalized declared version.

        Returns:
            ``Outcome.ok`` with the advisories (possibly empty), or
            ``Outcome.unavailable`` with an empty list on any failure.
        """
        url = f"{self.base_url}/v1/query"
        payload = {
            "version": version,
            "package": {"name": name, "ecosystem": self.ECOSYSTEM},
        }

        try:
            data = await self._request_json("POST", url, name, json=payload)
        except OpenCheckError as e:
            logger.warning("Vulnerability data unavailable for %s: %s", name, e)
            return Outcome.unavailable(str(e), [])

        entries = (data.get("vulns") or []) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning("Unexpected OSV response for %s", name)
            return Outcome.unavailable(f"Unexpected response from {url}", [])

        vulns = [self._parse_vulnerability(v) for v in entries if isinstance(v, dict)]
        if len(vulns) < len(entries):
            logger.warning(
                "Ignored %d malformed advisory entry(ies) for %s", len(entries) - len(vulns), name
            )
        if vulns:
            logger.debug("%s@%s has %d advisory(ies)", name, version, len(vulns))
        return Outcome.ok(vulns)

    def _parse_vulnerability(self, vuln: dict[str, Any]) -> Vulnerability:
        """Map one OSV advisory to a Vulnerability."""
        raw_id = vuln.get("id")
        vuln_id = str(raw_id) if raw_id not in (None, "") else self.UNKNOWN_ID
        summary = vuln.get("summary")
        score = self._extract_score(vuln)
        return Vulnerability(
            id=vuln_id,
            severity=self.classifier.score_to_severity(score),
            summary=summary if isinstance(summary, str) and summary else self.NO_SUMMARY,
            url=f"{self.ADVISORY_URL}/{vuln_id}" if vuln_id != self.UNKNOWN_ID else self.ADVISORY_URL,
            score=score,
        )

    def _extract_score(self, vuln: dict[str, Any]) -> float:
        """Read the advisory score.

        Prefers ``severity[0].score``, then ``database_specific.cvss.score``.
        Values that are not numbers (such as CVSS vector strings) are
        skipped. Defaults to 0.
        """
        candidates = []

        severity = vuln.get("severity")
        if isinstance(severity, list) and severity and isinstance(severity[0], dict):
            candidates.append(severity[0].get("score"))

        db_specific = vuln.get("database_specific")
        if isinstance(db_specific, dict):
            cvss = db_specific.get("cvss")
            if isinstance(cvss, dict):
                candidates.append(cvss.get("score"))

        for candidate in candidates:
            score = _to_float(candidate)
            if score is not None:
                return score
        return 0.0


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
