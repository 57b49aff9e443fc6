"""
Rich terminal output helpers for CLI.

Provides functions for printing the report table, vulnerability details
and messages using the Rich library.
"""

from rich.console import Console
from rich.markup import escape

from opencheck.core.models import Report, Severity
from opencheck.reports.formatters import (
    build_report_table,
    by_severity,
    select_records,
    severity_counts,
)

# Console instance for all output
console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
}


def print_report(report: Report, only_issues: bool = False) -> None:
    """Print the summary header, table and vulnerability details."""
    console.print()
    console.print("[bold cyan]OpenCheck Report[/]")
    console.print(f"[dim]Checked at: {report.checked_at.astimezone():%Y-%m-%d %H:%M:%S}[/]")
    console.print(f"[dim]Total packages: {report.total_packages}[/]")
    console.print()
    console.print(
        f"  [red]Critical: {len(report.critical)}[/]"
        f"  [yellow]Warning: {len(report.warnings)}[/]"
        f"  [green]OK: {len(report.ok)}[/]"
    )

    if not select_records(report, only_issues):
        console.print()
        console.print("[bold green]All dependencies look healthy![/]")
        return

    console.print()
    console.print(build_report_table(report, only_issues))

    print_vulnerability_details(report, only_issues)

    if report.unavailable:
        console.print()
        console.print(
            f"[dim]? Data unavailable for {len(report.unavailable)} package(s); "
            "their status may be incomplete.[/]"
        )


def print_vulnerability_details(report: Report, only_issues: bool = False) -> None:
    """Print every advisory of the displayed packages."""
    vulnerable = [r for r in select_records(report, only_issues) if r.has_vulnerabilities]
    if not vulnerable:
        return

    counts = severity_counts(report)
    breakdown = ", ".join(
        f"[{SEVERITY_STYLES[s]}]{counts[s]} {s.value.lower()}[/]" for s in Severity if counts[s]
    )

    console.print()
    console.print(f"[bold red]Vulnerability Details[/] ({breakdown})")
    for record in vulnerable:
        for vuln in by_severity(record.vulnerabilities):
            style = SEVERITY_STYLES[vuln.severity]
            console.print(f"  [bold]{record.name}[/] -> [{style}]{vuln.severity.value}[/] [dim]{escape(vuln.id)}[/]")
            console.print(f"    {escape(vuln.summary)}")
            console.print(f"    [cyan]{vuln.url}[/]")


def print_fix_commands(commands: list[str]) -> None:
    """Print upgrade commands for fixable packages."""
    console.print()
    if not commands:
        print_info("No upgrades available for the flagged packages.")
        return

    console.print("[bold cyan]Suggested fixes[/]")
    for command in commands:
        console.print(f"  [green]$[/] {command}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[cyan]Info:[/] {message}")
