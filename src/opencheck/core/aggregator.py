"""
Aggregators that enrich and classify declared dependencies.

An aggregator takes the ``name -> declared range`` mapping read from a
manifest, queries the registry and vulnerability clients for every
package under a fixed concurrency bound, classifies each merged record
and partitions the results into a Report. Output is always in
declaration order.
"""

import asyncio
import logging
from collections.abc import Iterator, Mapping
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import aiohttp

from opencheck.collectors.osv import VulnerabilityClient
from opencheck.collectors.registry import RegistryClient
from opencheck.core.classifier import StatusClassifier
from opencheck.core.exceptions import ValidationError
from opencheck.core.models import (
    SOURCE_VULNERABILITIES,
    DependencyRecord,
    Report,
)
from opencheck.core.validation import normalize_version_range

logger = logging.getLogger(__name__)


def iter_batches(
    packages: list[tuple[str, str]],
    size: int,
) -> Iterator[list[tuple[str, str]]]:
    """Yield consecutive fixed-size groups, preserving order."""
    for start in range(0, len(packages), size):
        yield packages[start:start + size]


class BatchedAggregator:
    """Enrich packages in sequential groups of concurrent lookups.

    Packages are split into groups of ``concurrency`` (5 by default).
    Group k+1 starts only after every lookup in group k has finished;
    within a group all packages are enriched concurrently, and each
    package's registry and vulnerability lookups run concurrently too.
    """

    DEFAULT_CONCURRENCY = 5

    def __init__(
        self,
        registry_client: Optional[RegistryClient] = None,
        vulnerability_client: Optional[VulnerabilityClient] = None,
        classifier: Optional[StatusClassifier] = None,
        concurrency: Optional[int] = None,
        timeout: int = 30,
        registry_url: Optional[str] = None,
        downloads_url: Optional[str] = None,
        osv_url: Optional[str] = None,
    ):
        """Initialize the aggregator.

        Args:
            registry_client: Client to use instead of creating one per run.
            vulnerability_client: Client to use instead of creating one per run.
            classifier: Status classifier; defaults to the standard thresholds.
            concurrency: Maximum packages enriched at once.
            timeout: Request timeout in seconds for clients created per run.
            registry_url: Registry endpoint for clients created per run.
            downloads_url: Downloads endpoint for clients created per run.
            osv_url: OSV endpoint for clients created per run.
        """
        self.registry_client = registry_client
        self.vulnerability_client = vulnerability_client
        self.classifier = classifier or StatusClassifier()
        self.concurrency = self.DEFAULT_CONCURRENCY if concurrency is None else concurrency
        if self.concurrency < 1:
            raise ValidationError("concurrency", str(concurrency), "Must be at least 1")
        self.timeout = timeout
        self.registry_url = registry_url
        self.downloads_url = downloads_url
        self.osv_url = osv_url

    async def check(self, declared: Mapping[str, str]) -> Report:
        """Enrich, classify and partition every declared dependency.

        Args:
            declared: Package name to declared version range, already
                merged across dependency categories.

        Returns:
            A Report covering every input name exactly once.

        Raises:
            ValidationError: If ``declared`` is not a mapping of strings.
        """
        packages = self._normalize(declared)
        logger.info(
            "Checking %d package(s) with %s (concurrency %d)",
            len(packages),
            type(self).__name__,
            self.concurrency,
        )

        if self.registry_client and self.vulnerability_client:
            records = await self._enrich_all(
                packages, self.registry_client, self.vulnerability_client
            )
        else:
            client_timeout = aiohttp.ClientTimeout(total=self.timeout)
            async with aiohttp.ClientSession(timeout=client_timeout) as session:
                registry = self.registry_client or RegistryClient(
                    session,
                    timeout=self.timeout,
                    base_url=self.registry_url,
                    downloads_url=self.downloads_url,
                )
                vulnerabilities = self.vulnerability_client or VulnerabilityClient(
                    session,
                    timeout=self.timeout,
                    base_url=self.osv_url,
                    classifier=self.classifier,
                )
                records = await self._enrich_all(packages, registry, vulnerabilities)

        report = Report.from_records(records, checked_at=datetime.now(timezone.utc))
        logger.info("%s", report)
        if report.unavailable:
            logger.warning(
                "%d package(s) checked with incomplete data", len(report.unavailable)
            )
        return report

    def _normalize(self, declared: Mapping[str, str]) -> list[tuple[str, str]]:
        """Validate input and normalize every declared range."""
        if not isinstance(declared, Mapping):
            raise ValidationError(
                "declared_dependencies",
                type(declared).__name__,
                "Expected a mapping of package name to version range",
            )

        packages = []
        for name, declared_range in declared.items():
            if not isinstance(name, str) or not name:
                raise ValidationError("package_name", repr(name), "Must be a non-empty string")
            if not isinstance(declared_range, str):
                raise ValidationError(
                    f"version range of {name}", repr(declared_range), "Must be a string"
                )
            packages.append((name, normalize_version_range(declared_range)))
        return packages

    async def _enrich_all(
        self,
        packages: list[tuple[str, str]],
        registry: RegistryClient,
        vulnerabilities: VulnerabilityClient,
    ) -> list[DependencyRecord]:
        """Enrich packages batch by batch."""
        results: list[DependencyRecord] = []
        for index, batch in enumerate(iter_batches(packages, self.concurrency)):
            logger.debug("Batch %d: %s", index + 1, ", ".join(name for name, _ in batch))
            records = await asyncio.gather(
                *(
                    self._enrich(name, version, registry, vulnerabilities)
                    for name, version in batch
                )
            )
            results.extend(records)
        return results

    async def _enrich(
        self,
        name: str,
        current_version: str,
        registry: RegistryClient,
        vulnerabilities: VulnerabilityClient,
    ) -> DependencyRecord:
        """Build and classify the record for one package."""
        registry_outcome, vuln_outcome = await asyncio.gather(
            registry.fetch_registry_info(name, current_version),
            vulnerabilities.fetch_vulnerabilities(name, current_version),
        )

        info = registry_outcome.value
        unavailable = info.unavailable
        if not vuln_outcome.available:
            unavailable += (SOURCE_VULNERABILITIES,)

        record = DependencyRecord(
            name=name,
            current_version=current_version,
            latest_version=info.latest_version,
            is_outdated=info.is_outdated,
            days_since_update=info.days_since_update,
            weekly_downloads=info.weekly_downloads,
            is_deprecated=info.is_deprecated,
            vulnerabilities=tuple(vuln_outcome.value),
            unavailable=unavailable,
        )
        return replace(record, status=self.classifier.classify(record))


class PooledAggregator(BatchedAggregator):
    """Enrich packages through a semaphore-bounded worker pool.

    At most ``concurrency`` packages are in flight at any time, but a
    slow package no longer holds back the start of unrelated ones.
    Results are still returned in declaration order.
    """

    async def _enrich_all(
        self,
        packages: list[tuple[str, str]],
        registry: RegistryClient,
        vulnerabilities: VulnerabilityClient,
    ) -> list[DependencyRecord]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(name: str, version: str) -> DependencyRecord:
            async with semaphore:
                return await self._enrich(name, version, registry, vulnerabilities)

        records = await asyncio.gather(
            *(bounded(name, version) for name, version in packages)
        )
        return list(records)


AGGREGATORS: dict[str, type[BatchedAggregator]] = {
    "batch": BatchedAggregator,
    "pool": PooledAggregator,
}


def create_aggregator(strategy: str = "batch", **kwargs) -> BatchedAggregator:
    """Build an aggregator by strategy name ('batch' or 'pool').

    Raises:
        ValidationError: If the strategy is unknown.
    """
    try:
        aggregator_cls = AGGREGATORS[strategy]
    except KeyError:
        raise ValidationError(
            "strategy", strategy, f"Expected one of {', '.join(AGGREGATORS)}"
        )
    return aggregator_cls(**kwargs)
