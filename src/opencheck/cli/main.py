"""
Main CLI entry point for OpenCheck.

Provides commands for checking a project's dependencies, generating
a CI workflow that runs the check, and an interactive menu over both.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from opencheck import __version__
from opencheck.cli.output import (
    console,
    print_error,
    print_fix_commands,
    print_info,
    print_report,
    print_success,
    print_warning,
)
from opencheck.core.aggregator import AGGREGATORS
from opencheck.core.exceptions import OpenCheckError
from opencheck.reports.fixes import PACKAGE_MANAGERS, fix_commands
from opencheck.reports.workflow import DEFAULT_WORKFLOW_PATH, generate_workflow, write_workflow


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.version_option(version=__version__, prog_name="opencheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """OpenCheck - dependency security & health checker.

    Cross-references a project's package.json with the npm registry and
    the OSV vulnerability database, and sorts every dependency into
    critical, warning or ok.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


@cli.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["table", "json", "markdown", "html"]),
    default="table",
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    help="Write output to file.",
)
@click.option("--only-issues", is_flag=True, help="Show only warning and critical packages.")
@click.option("--fix", is_flag=True, help="Print upgrade commands for flagged packages.")
@click.option("--no-fail", is_flag=True, help="Exit 0 even when critical packages are found.")
@click.option(
    "--package-manager",
    type=click.Choice(PACKAGE_MANAGERS),
    default="npm",
    envvar="OPENCHECK_PACKAGE_MANAGER",
    show_default=True,
    help="Package manager used in --fix commands.",
)
@click.option(
    "--strategy",
    type=click.Choice(sorted(AGGREGATORS)),
    default="batch",
    envvar="OPENCHECK_STRATEGY",
    show_default=True,
    help="Scheduling: sequential batches or a bounded worker pool.",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=5,
    envvar="OPENCHECK_CONCURRENCY",
    show_default=True,
    help="Packages checked at once.",
)
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=30,
    envvar="OPENCHECK_TIMEOUT",
    show_default=True,
    help="HTTP request timeout in seconds.",
)
@click.option(
    "--stale-days",
    type=click.IntRange(min=0),
    default=365,
    envvar="OPENCHECK_STALE_DAYS",
    show_default=True,
    help="Days without a release before a package is flagged.",
)
@click.option("--registry-url", envvar="OPENCHECK_REGISTRY_URL", help="npm registry URL.")
@click.option("--osv-url", envvar="OPENCHECK_OSV_URL", help="OSV API URL.")
def check(
    path: str,
    output_format: str,
    output: Optional[str],
    only_issues: bool,
    fix: bool,
    no_fail: bool,
    package_manager: str,
    strategy: str,
    concurrency: int,
    timeout: int,
    stale_days: int,
    registry_url: Optional[str],
    osv_url: Optional[str],
) -> None:
    """Check the dependencies declared in PATH/package.json.

    Exits with status 1 when any dependency is critical, so the command
    can gate a CI pipeline.

    \b
    Examples:
        opencheck check                      # Check current directory
        opencheck check ../app --only-issues
        opencheck check -f html -o report.html
        opencheck check --fix                # Suggest upgrade commands
        opencheck check --fix --package-manager pnpm
    """
    from opencheck.reports.generator import ReportGenerator

    generator = ReportGenerator(
        strategy=strategy,
        concurrency=concurrency,
        timeout=timeout,
        stale_after_days=stale_days,
        registry_url=registry_url,
        osv_url=osv_url,
    )

    try:
        with console.status("Analyzing dependencies..."):
            report, formatted = asyncio.run(
                generator.generate(
                    Path(path),
                    output_format=output_format,
                    output_path=Path(output) if output else None,
                    only_issues=only_issues,
                )
            )
    except OpenCheckError as e:
        print_error(f"Check failed: {e}")
        sys.exit(1)

    if output_format == "table":
        print_report(report, only_issues=only_issues)
    elif not output:
        click.echo(formatted)

    if output:
        print_success(f"Report written to {output}")

    if fix:
        print_fix_commands(fix_commands(report, package_manager))

    if report.has_critical and not no_fail:
        if output_format == "table":
            print_error(f"{len(report.critical)} critical dependency(ies) found.")
        sys.exit(1)


@cli.command()
@click.option("--branch", default="main", show_default=True, help="Branch to run on.")
@click.option("--cron", default="0 6 * * 1", show_default=True, help="Schedule for periodic runs.")
@click.option("--python-version", default="3.12", show_default=True, help="Python used in CI.")
@click.option("--path", "project_path", default=".", show_default=True, help="Project directory in the repo.")
@click.option("--only-issues", is_flag=True, help="Leave healthy packages out of the CI report.")
@click.option("--write", "write_to", type=click.Path(file_okay=False), help="Write the workflow under this repository root.")
@click.option("--force", is_flag=True, help="Overwrite an existing workflow file.")
def workflow(
    branch: str,
    cron: str,
    python_version: str,
    project_path: str,
    only_issues: bool,
    write_to: Optional[str],
    force: bool,
) -> None:
    """Generate a GitHub Actions workflow that runs OpenCheck.

    \b
    Examples:
        opencheck workflow                   # Print the YAML
        opencheck workflow --write .         # Write .github/workflows/opencheck.yml
    """
    content = generate_workflow(
        branch=branch,
        cron=cron,
        python_version=python_version,
        project_path=project_path,
        only_issues=only_issues,
    )

    if not write_to:
        click.echo(content, nl=False)
        return

    try:
        target = write_workflow(Path(write_to), content, overwrite=force)
    except FileExistsError:
        print_warning(
            f"{Path(write_to) / DEFAULT_WORKFLOW_PATH} already exists. Use --force to overwrite."
        )
        sys.exit(1)

    print_success(f"Workflow written to {target}")


MENU_ACTIONS = {
    "scan": "Scan the project",
    "html": "Export HTML report",
    "fix": "Show fix commands",
    "json": "JSON output",
    "gha": "Generate GitHub Actions workflow",
    "exit": "Exit",
}

HTML_REPORT_NAME = "opencheck-report.html"


@cli.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.pass_context
def menu(ctx: click.Context, path: str) -> None:
    """Pick an action from a menu and run it on PATH.

    Each action runs the matching `check` or `workflow` command. Critical
    findings do not change the exit status here.
    """
    console.print()
    console.print(f"[bold cyan]OpenCheck[/] [dim]v{__version__}[/]")
    console.print()
    for key, label in MENU_ACTIONS.items():
        console.print(f"  [cyan]{key:<5}[/] {label}")
    console.print()

    action = click.prompt(
        "Select an action",
        type=click.Choice(list(MENU_ACTIONS)),
        default="scan",
    )
    if action == "exit":
        print_info("Goodbye!")
        return

    project_dir = Path(path) if Path(path).is_dir() else Path(path).parent
    if action == "gha":
        ctx.invoke(workflow, write_to=str(project_dir))
        return

    only_issues = click.confirm("Show only issues?", default=False)
    options = {"path": path, "only_issues": only_issues, "no_fail": True}
    if action == "html":
        options.update(output_format="html", output=str(project_dir / HTML_REPORT_NAME))
    elif action == "json":
        options.update(output_format="json")
    elif action == "fix":
        options.update(fix=True)
    ctx.invoke(check, **options)


if __name__ == "__main__":
    cli()
