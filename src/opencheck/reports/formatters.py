"""
Report formatters.

Each formatter turns a Report into a string: a rich table rendered to
plain text, JSON, Markdown, or a self-contained HTML page.
"""

import html
import io
import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from opencheck.core.classifier import StatusClassifier
from opencheck.core.models import DependencyRecord, Report, Severity, Status, Vulnerability

STATUS_LABELS = {
    Status.CRITICAL: "CRITICAL",
    Status.WARNING: "WARNING",
    Status.OK: "OK",
}

STATUS_STYLES = {
    Status.CRITICAL: "bold red",
    Status.WARNING: "yellow",
    Status.OK: "green",
}


def format_updated(days: int) -> str:
    """Render days since the latest release ('3y ago', '40d ago')."""
    if days > 365:
        return f"{days // 365}y ago"
    return f"{days}d ago"


def format_downloads(downloads: int) -> str:
    """Render a weekly download count compactly (1.2M, 35K, 120)."""
    if downloads > 1_000_000:
        return f"{downloads / 1_000_000:.1f}M"
    if downloads > 1_000:
        return f"{downloads / 1_000:.0f}K"
    return str(downloads)


def select_records(report: Report, only_issues: bool = False) -> list[DependencyRecord]:
    """Records to display: critical, then warnings, then ok unless only_issues."""
    records = [*report.critical, *report.warnings, *report.ok]
    if only_issues:
        return [r for r in records if r.needs_attention]
    return records


def by_severity(vulnerabilities: Iterable[Vulnerability]) -> list[Vulnerability]:
    """Most severe first; ties keep their original order."""
    return sorted(vulnerabilities, key=lambda v: v.severity.sort_order)


def escape_markdown(text: str) -> str:
    """Make text safe inside a Markdown table cell."""
    return text.replace("\\", "\\\\").replace("|", "\\|").replace("\n", " ")


def build_report_table(report: Report, only_issues: bool = False) -> Table:
    """Build the rich summary table for a report."""
    table = Table(
        title="OpenCheck Report",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Current", style="dim")
    table.add_column("Latest")
    table.add_column("Updated", justify="right")
    table.add_column("Downloads/wk", justify="right")
    table.add_column("Vulnerabilities")
    table.add_column("Status")

    for record in select_records(report, only_issues):
        name = Text(record.name)
        if record.is_deprecated:
            name.append(" (deprecated)", style="red")
        if not record.is_complete:
            name.append(" ?", style="dim")

        latest = Text(record.latest_version, style="yellow" if record.is_outdated else "green")

        if record.days_since_update > 365:
            updated_style = "red"
        elif record.days_since_update > 90:
            updated_style = "yellow"
        else:
            updated_style = "dim"
        updated = Text(format_updated(record.days_since_update), style=updated_style)

        if record.weekly_downloads > 1_000_000:
            downloads_style = "green"
        elif record.weekly_downloads > 1_000:
            downloads_style = ""
        else:
            downloads_style = "red"
        downloads = Text(format_downloads(record.weekly_downloads), style=downloads_style)

        if record.has_vulnerabilities:
            vulns = Text()
            for i, vuln in enumerate(record.vulnerabilities):
                if i > 0:
                    vulns.append(", ")
                vulns.append(vuln.severity.value, style="red" if vuln.severity.is_severe else "yellow")
        else:
            vulns = Text("none", style="dim")

        status = Text(STATUS_LABELS[record.status], style=STATUS_STYLES[record.status])

        table.add_row(
            name,
            record.current_version or "-",
            latest,
            updated,
            downloads,
            vulns,
            status,
        )

    return table


class Formatter(ABC):
    """Abstract base class for report formatters."""

    @abstractmethod
    def format(self, report: Report, only_issues: bool = False) -> str:
        """Render a report to a string."""
        pass


class TableFormatter(Formatter):
    """Plain-text rendering of the rich summary table."""

    def __init__(self, width: int = 120):
        self.width = width

    def format(self, report: Report, only_issues: bool = False) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=self.width, force_terminal=False, color_system=None)
        console.print(build_report_table(report, only_issues))
        console.print(
            f"Critical: {len(report.critical)}  Warning: {len(report.warnings)}  OK: {len(report.ok)}"
        )
        return buffer.getvalue()


class JSONFormatter(Formatter):
    """JSON rendering of the full report."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, report: Report, only_issues: bool = False) -> str:
        data = report.to_dict()
        if only_issues:
            data["ok"] = []
        return json.dumps(data, indent=self.indent)


class MarkdownFormatter(Formatter):
    """Markdown rendering, suitable for PR comments or job summaries."""

    def __init__(self, classifier: Optional[StatusClassifier] = None):
        self.classifier = classifier or StatusClassifier()

    def format(self, report: Report, only_issues: bool = False) -> str:
        lines = [
            "# OpenCheck Report",
            "",
            f"Checked at: {report.checked_at.isoformat()}",
            "",
            f"**{report.total_packages}** packages: "
            f"{len(report.critical)} critical, {len(report.warnings)} warning, {len(report.ok)} ok",
            "",
        ]

        records = select_records(report, only_issues)
        if not records:
            lines.append("All dependencies look healthy.")
            return "\n".join(lines) + "\n"

        lines.extend([
            "| Package | Current | Latest | Updated | Downloads/wk | Vulnerabilities | Status | Notes |",
            "|---|---|---|---|---|---|---|---|",
        ])
        for r in records:
            vulns = ", ".join(v.severity.value for v in r.vulnerabilities) or "none"
            name = f"{r.name} (deprecated)" if r.is_deprecated else r.name
            notes = "; ".join(self.classifier.reasons(r)) or "-"
            lines.append(
                f"| {escape_markdown(name)} | {escape_markdown(r.current_version)} "
                f"| {escape_markdown(r.latest_version)} "
                f"| {format_updated(r.days_since_update)} | {format_downloads(r.weekly_downloads)} "
                f"| {vulns} | {STATUS_LABELS[r.status]} | {notes} |"
            )

        vulnerable = [r for r in records if r.has_vulnerabilities]
        if vulnerable:
            lines.extend(["", "## Vulnerability Details", ""])
            for r in vulnerable:
                for v in by_severity(r.vulnerabilities):
                    lines.append(
                        f"- **{escape_markdown(r.name)}** {v.severity.value} "
                        f"[{escape_markdown(v.id)}]({v.url}): {escape_markdown(v.summary)}"
                    )

        return "\n".join(lines) + "\n"


class HTMLFormatter(Formatter):
    """Self-contained static HTML page."""

    STYLE = """
    body { font-family: -apple-system, Segoe UI, Helvetica, Arial, sans-serif; margin: 2rem; color: #222; }
    h1 { margin-bottom: 0.2rem; }
    .meta { color: #666; margin-bottom: 1.5rem; }
    .summary span { display: inline-block; margin-right: 1rem; padding: 0.3rem 0.8rem; border-radius: 4px; }
    .critical { background: #fde2e1; color: #a61b1b; }
    .warning { background: #fff4d6; color: #8a5a00; }
    .ok { background: #e3f6e5; color: #1d6b2a; }
    table { border-collapse: collapse; width: 100%; margin-top: 1.5rem; }
    th, td { text-align: left; padding: 0.45rem 0.7rem; border-bottom: 1px solid #e5e5e5; }
    th { background: #f6f8fa; }
    .sev-CRITICAL, .sev-HIGH { color: #a61b1b; font-weight: 600; }
    .sev-MEDIUM, .sev-LOW { color: #8a5a00; }
    .gap { color: #999; font-size: 0.85em; }
    """

    def __init__(self, classifier: Optional[StatusClassifier] = None):
        self.classifier = classifier or StatusClassifier()

    def format(self, report: Report, only_issues: bool = False) -> str:
        esc = html.escape
        rows = []
        for r in select_records(report, only_issues):
            vulns = ", ".join(
                f'<a class="sev-{v.severity.value}" href="{esc(v.url)}" title="{esc(v.summary)}">'
                f"{esc(v.severity.value)}</a>"
                for v in by_severity(r.vulnerabilities)
            ) or "none"
            name = esc(r.name)
            if r.is_deprecated:
                name += " <em>(deprecated)</em>"
            if r.unavailable:
                name += f' <span class="gap">data unavailable: {esc(", ".join(r.unavailable))}</span>'
            rows.append(
                "<tr>"
                f"<td>{name}</td>"
                f"<td>{esc(r.current_version)}</td>"
                f"<td>{esc(r.latest_version)}</td>"
                f"<td>{format_updated(r.days_since_update)}</td>"
                f"<td>{format_downloads(r.weekly_downloads)}</td>"
                f"<td>{vulns}</td>"
                f'<td class="{r.status.value}">{STATUS_LABELS[r.status]}</td>'
                f"<td>{esc('; '.join(self.classifier.reasons(r)) or '-')}</td>"
                "</tr>"
            )

        body = "\n".join(rows) if rows else (
            '<tr><td colspan="8">All dependencies look healthy.</td></tr>'
        )

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>OpenCheck Report</title>
<style>{self.STYLE}</style>
</head>
<body>
<h1>OpenCheck Report</h1>
<div class="meta">Checked at {esc(report.checked_at.isoformat())} &middot; {report.total_packages} packages</div>
<div class="summary">
<span class="critical">Critical: {len(report.critical)}</span>
<span class="warning">Warning: {len(report.warnings)}</span>
<span class="ok">OK: {len(report.ok)}</span>
</div>
<table>
<thead><tr><th>Package</th><th>Current</th><th>Latest</th><th>Updated</th><th>Downloads/wk</th><th>Vulnerabilities</th><th>Status</th><th>Notes</th></tr></thead>
<tbody>
{body}
</tbody>
</table>
</body>
</html>
"""


def severity_counts(report: Report) -> dict[Severity, int]:
    """Count advisories per severity across the whole report."""
    counts = {severity: 0 for severity in Severity}
    for record in report.records:
        for vuln in record.vulnerabilities:
            counts[vuln.severity] += 1
    return counts
