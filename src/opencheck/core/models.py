"""
Core data models for OpenCheck.

This module defines the data structures used throughout OpenCheck for
representing advisories, enriched dependency records, client outcomes,
and the aggregate report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class Severity(Enum):
    """Advisory severity buckets derived from a numeric score."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value

    @property
    def sort_order(self) -> int:
        """Return sort order (lower = more severe)."""
        order = {
            Severity.CRITICAL: 0,
            Severity.HIGH: 1,
            Severity.MEDIUM: 2,
            Severity.LOW: 3,
        }
        return order[self]

    @property
    def is_severe(self) -> bool:
        """Return True for severities that make a package critical."""
        return self in (Severity.CRITICAL, Severity.HIGH)


class Status(Enum):
    """Health tier of a dependency."""

    CRITICAL = "critical"
    WARNING = "warning"
    OK = "ok"

    def __str__(self) -> str:
        return self.value


# Names used in DependencyRecord.unavailable
SOURCE_REGISTRY = "registry"
SOURCE_DOWNLOADS = "downloads"
SOURCE_VULNERABILITIES = "vulnerabilities"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a fail-soft client call.

    Either ``ok`` (the value came from the remote service) or
    ``unavailable`` (the value is a fallback and ``reason`` says why).
    The value is usable in both cases.
    """

    value: T
    reason: str | None = None

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def unavailable(cls, reason: str, fallback: T) -> "Outcome[T]":
        return cls(value=fallback, reason=reason)

    @property
    def available(self) -> bool:
        return self.reason is None

    def __str__(self) -> str:
        if self.available:
            return "ok"
        return f"unavailable ({self.reason})"


@dataclass(frozen=True)
class Vulnerability:
    """A single security advisory affecting a package version."""

    id: str  # GHSA-XXXX or CVE-XXXX
    severity: Severity
    summary: str
    url: str
    score: float = 0.0

    def __str__(self) -> str:
        return f"{self.id} ({self.severity}): {self.summary}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "summary": self.summary,
            "url": self.url,
            "score": self.score,
        }


@dataclass(frozen=True)
class RegistryInfo:
    """Registry-derived fields for one package.

    Fields whose lookup failed hold their fallback value and the
    failed source is listed in ``unavailable``.
    """

    latest_version: str
    is_outdated: bool = False
    days_since_update: int = 0
    weekly_downloads: int = 0
    is_deprecated: bool = False
    unavailable: tuple[str, ...] = ()

    @classmethod
    def fallback(cls, current_version: str) -> "RegistryInfo":
        """Registry info used when nothing could be fetched."""
        return cls(
            latest_version=current_version,
            unavailable=(SOURCE_REGISTRY, SOURCE_DOWNLOADS),
        )


@dataclass(frozen=True)
class DependencyRecord:
    """One package's merged view of registry and advisory data."""

    name: str
    current_version: str
    latest_version: str
    is_outdated: bool = False
    days_since_update: int = 0
    weekly_downloads: int = 0
    is_deprecated: bool = False
    vulnerabilities: tuple[Vulnerability, ...] = ()
    unavailable: tuple[str, ...] = ()
    status: Status | None = None

    def __str__(self) -> str:
        return f"{self.name}@{self.current_version}: {self.status or 'unclassified'}"

    @property
    def is_complete(self) -> bool:
        """Return True if every data source answered for this package."""
        return not self.unavailable

    @property
    def severe_vulnerabilities(self) -> list[Vulnerability]:
        """Return CRITICAL and HIGH advisories."""
        return [v for v in self.vulnerabilities if v.severity.is_severe]

    @property
    def has_vulnerabilities(self) -> bool:
        return len(self.vulnerabilities) > 0

    @property
    def needs_attention(self) -> bool:
        return self.status in (Status.CRITICAL, Status.WARNING)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "current_version": self.current_version,
            "latest_version": self.latest_version,
            "is_outdated": self.is_outdated,
            "days_since_update": self.days_since_update,
            "weekly_downloads": self.weekly_downloads,
            "is_deprecated": self.is_deprecated,
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "unavailable": list(self.unavailable),
            "status": self.status.value if self.status else None,
        }


@dataclass(frozen=True)
class Report:
    """Aggregate result of one dependency check."""

    records: tuple[DependencyRecord, ...]
    critical: tuple[DependencyRecord, ...] = ()
    warnings: tuple[DependencyRecord, ...] = ()
    ok: tuple[DependencyRecord, ...] = ()
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_records(
        cls,
        records: list[DependencyRecord],
        checked_at: datetime | None = None,
    ) -> "Report":
        """Partition classified records by status, keeping their order."""
        records = tuple(records)
        return cls(
            records=records,
            critical=tuple(r for r in records if r.status == Status.CRITICAL),
            warnings=tuple(r for r in records if r.status == Status.WARNING),
            ok=tuple(r for r in records if r.status == Status.OK),
            checked_at=checked_at or datetime.now(timezone.utc),
        )

    def __str__(self) -> str:
        return (
            f"{self.total_packages} packages: {len(self.critical)} critical, "
            f"{len(self.warnings)} warning, {len(self.ok)} ok"
        )

    @property
    def total_packages(self) -> int:
        return len(self.records)

    @property
    def has_critical(self) -> bool:
        return len(self.critical) > 0

    @property
    def issues(self) -> list[DependencyRecord]:
        """Critical records followed by warnings."""
        return [*self.critical, *self.warnings]

    @property
    def unavailable(self) -> list[DependencyRecord]:
        """Records for which at least one data source failed."""
        return [r for r in self.records if not r.is_complete]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_packages": self.total_packages,
            "critical": [r.to_dict() for r in self.critical],
            "warnings": [r.to_dict() for r in self.warnings],
            "ok": [r.to_dict() for r in self.ok],
            "checked_at": self.checked_at.isoformat(),
        }
