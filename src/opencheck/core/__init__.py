"""
Core module for OpenCheck.

Contains data models, the status classifier, the aggregators, the
manifest reader, and exceptions.
"""

from opencheck.core.aggregator import BatchedAggregator, PooledAggregator, create_aggregator
from opencheck.core.classifier import StatusClassifier, classify, score_to_severity
from opencheck.core.exceptions import (
    ManifestError,
    NetworkError,
    OpenCheckError,
    PackageNotFoundError,
    ValidationError,
)
from opencheck.core.models import (
    DependencyRecord,
    Outcome,
    RegistryInfo,
    Report,
    Severity,
    Status,
    Vulnerability,
)
from opencheck.core.resolver import ManifestReader
from opencheck.core.validation import normalize_version_range

__all__ = [
    # Models
    "DependencyRecord",
    "Outcome",
    "RegistryInfo",
    "Report",
    "Severity",
    "Status",
    "Vulnerability",
    # Core
    "BatchedAggregator",
    "PooledAggregator",
    "create_aggregator",
    "StatusClassifier",
    "classify",
    "score_to_severity",
    "ManifestReader",
    "normalize_version_range",
    # Exceptions
    "OpenCheckError",
    "ManifestError",
    "NetworkError",
    "PackageNotFoundError",
    "ValidationError",
]
