"""
Report generator for orchestrating a dependency check.

Provides the ReportGenerator class that reads a project's manifest,
runs the aggregator and formats the resulting Report.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from opencheck.core.aggregator import BatchedAggregator, create_aggregator
from opencheck.core.classifier import StatusClassifier
from opencheck.core.models import Report
from opencheck.core.resolver import ManifestReader
from opencheck.reports.formatters import (
    Formatter,
    HTMLFormatter,
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
)

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generate health reports for a Node project's dependencies."""

    def __init__(
        self,
        strategy: str = "batch",
        concurrency: Optional[int] = None,
        timeout: int = 30,
        stale_after_days: Optional[int] = None,
        registry_url: Optional[str] = None,
        downloads_url: Optional[str] = None,
        osv_url: Optional[str] = None,
        aggregator: Optional[BatchedAggregator] = None,
    ):
        """Initialize the report generator.

        Args:
            strategy: 'batch' (sequential groups) or 'pool' (bounded worker pool).
            concurrency: Packages enriched at once.
            timeout: Request timeout in seconds.
            stale_after_days: Days without a release before a package is stale.
            registry_url: Override for the npm registry endpoint.
            downloads_url: Override for the npm downloads endpoint.
            osv_url: Override for the OSV API root.
            aggregator: Use this aggregator instead of building one.
        """
        self.reader = ManifestReader()
        self.classifier = StatusClassifier(stale_after_days=stale_after_days)
        self.aggregator = aggregator or create_aggregator(
            strategy,
            classifier=self.classifier,
            concurrency=concurrency,
            timeout=timeout,
            registry_url=registry_url,
            downloads_url=downloads_url,
            osv_url=osv_url,
        )

        self.formatters: dict[str, Formatter] = {
            "json": JSONFormatter(),
            "markdown": MarkdownFormatter(self.classifier),
            "html": HTMLFormatter(self.classifier),
            "table": TableFormatter(),
        }

    async def generate(
        self,
        project_path: Path,
        output_format: str = "table",
        output_path: Optional[Path] = None,
        only_issues: bool = False,
    ) -> tuple[Report, str]:
        """Check a project and format the result.

        Args:
            project_path: Project directory or path to package.json.
            output_format: 'table', 'json', 'markdown' or 'html'.
            output_path: Optional path to write the formatted output to.
            only_issues: Leave ok packages out of the formatted output.

        Returns:
            Tuple of (Report, formatted output string).

        Raises:
            ManifestError: If the manifest cannot be read.
            ValueError: If output_format is not recognized.
        """
        formatter = self._get_formatter(output_format)
        declared = self.reader.read(project_path)
        report = await self.check(declared)

        formatted = formatter.format(report, only_issues=only_issues)
        if output_path:
            output_path.write_text(formatted, encoding="utf-8")
            logger.info("Report written to %s", output_path)

        return report, formatted

    async def check(self, declared: Mapping[str, str]) -> Report:
        """Run the aggregator over an already-read dependency mapping."""
        return await self.aggregator.check(declared)

    def format_report(
        self,
        report: Report,
        format_name: str = "table",
        only_issues: bool = False,
    ) -> str:
        """Format a report using the named formatter.

        Raises:
            ValueError: If format_name is not recognized.
        """
        return self._get_formatter(format_name).format(report, only_issues=only_issues)

    def add_formatter(self, name: str, formatter: Formatter) -> None:
        """Register a custom formatter."""
        self.formatters[name] = formatter

    def _get_formatter(self, format_name: str) -> Formatter:
        formatter = self.formatters.get(format_name)
        if not formatter:
            raise ValueError(
                f"Unknown format: {format_name}. "
                f"Available formats: {list(self.formatters.keys())}"
            )
        return formatter
