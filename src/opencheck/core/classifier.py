"""
Status classifier for enriched dependency records.

Maps a DependencyRecord to a health tier and a numeric advisory score to
a severity bucket. Both mappings are pure and total.
"""

from typing import Optional

from opencheck.core.models import DependencyRecord, Severity, Status


class StatusClassifier:
    """Classify dependency records into critical, warning or ok.

    Precedence, first match wins:

    1. Any CRITICAL or HIGH advisory -> critical.
    2. Deprecated, any advisory at all, or no release for more than
       ``stale_after_days`` days -> warning.
    3. Otherwise -> ok.
    """

    # A package whose latest release is older than this is stale
    STALE_AFTER_DAYS = 365

    # Minimum score for each bucket, checked from most to least severe
    SEVERITY_THRESHOLDS = {
        Severity.CRITICAL: 9.0,
        Severity.HIGH: 7.0,
        Severity.MEDIUM: 4.0,
    }

    def __init__(
        self,
        stale_after_days: Optional[int] = None,
        severity_thresholds: Optional[dict[Severity, float]] = None,
    ):
        """Initialize the classifier with optional threshold overrides.

        Args:
            stale_after_days: Days without a release before a package is stale.
            severity_thresholds: Overrides for the CRITICAL/HIGH/MEDIUM minimums.
        """
        self.stale_after_days = (
            self.STALE_AFTER_DAYS if stale_after_days is None else stale_after_days
        )
        self.severity_thresholds = {**self.SEVERITY_THRESHOLDS}
        if severity_thresholds:
            self.severity_thresholds.update(severity_thresholds)

    def classify(self, record: DependencyRecord) -> Status:
        """Return the health tier for a record."""
        if any(v.severity.is_severe for v in record.vulnerabilities):
            return Status.CRITICAL

        if (
            record.is_deprecated
            or record.vulnerabilities
            or record.days_since_update > self.stale_after_days
        ):
            return Status.WARNING

        return Status.OK

    def score_to_severity(self, score: float) -> Severity:
        """Convert a numeric advisory score to a severity bucket."""
        for severity in (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM):
            if score >= self.severity_thresholds[severity]:
                return severity
        return Severity.LOW

    def reasons(self, record: DependencyRecord) -> list[str]:
        """List the human-readable reasons behind a record's tier."""
        reasons = []

        severe = record.severe_vulnerabilities
        if severe:
            reasons.append(f"{len(severe)} critical/high vulnerability(ies)")
        elif record.vulnerabilities:
            reasons.append(f"{len(record.vulnerabilities)} medium/low vulnerability(ies)")

        if record.is_deprecated:
            reasons.append("Package is deprecated")

        if record.days_since_update > self.stale_after_days:
            reasons.append(f"No release in {record.days_since_update // 365} year(s)")

        return reasons


_default = StatusClassifier()


def classify(record: DependencyRecord) -> Status:
    """Classify a record with the default thresholds."""
    return _default.classify(record)


def score_to_severity(score: float) -> Severity:
    """Map a score to a severity with the default thresholds."""
    return _default.score_to_severity(score)
