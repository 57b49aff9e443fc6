"""
OpenCheck

A dependency security & health checker for Node projects. Cross-references
the packages declared in package.json with the npm registry and the OSV
vulnerability database, and sorts each one into critical, warning or ok.

Quick Start:
    >>> import asyncio
    >>> from opencheck import check
    >>> report = asyncio.run(check({"left-pad": "^1.3.0"}))
    >>> print(report)
    1 packages: 0 critical, 1 warning, 0 ok

    # Or check a project directory synchronously:
    >>> from opencheck import scan_sync
    >>> report = scan_sync(".")
    >>> if report.has_critical:
    ...     print("Update needed!")
"""

__version__ = "0.1.0"

# High-level API (recommended for most users)
from opencheck.api import (
    check,
    scan,
    scan_sync,
)

# Core components (for advanced usage)
from opencheck.core.aggregator import BatchedAggregator, PooledAggregator
from opencheck.core.classifier import StatusClassifier

# Exceptions
from opencheck.core.exceptions import (
    ManifestError,
    NetworkError,
    OpenCheckError,
    PackageNotFoundError,
    ValidationError,
)

# Data models
from opencheck.core.models import (
    DependencyRecord,
    Outcome,
    Report,
    Severity,
    Status,
    Vulnerability,
)
from opencheck.core.resolver import ManifestReader

__all__ = [
    # Version
    "__version__",
    # High-level API
    "check",
    "scan",
    "scan_sync",
    # Models
    "DependencyRecord",
    "Outcome",
    "Report",
    "Severity",
    "Status",
    "Vulnerability",
    # Core
    "BatchedAggregator",
    "PooledAggregator",
    "StatusClassifier",
    "ManifestReader",
    # Exceptions
    "OpenCheckError",
    "ManifestError",
    "NetworkError",
    "PackageNotFoundError",
    "ValidationError",
]
