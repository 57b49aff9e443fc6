"""
High-level programmatic API for OpenCheck.

This module provides simple, async-friendly functions for common operations.
For more control, use the underlying classes directly.

Example:
    import asyncio
    from opencheck import check, scan

    async def main():
        # Check an explicit set of dependencies
        report = await check({"left-pad": "^1.3.0", "express": "^4.18.0"})
        for record in report.critical:
            print(f"CRITICAL: {record.name}")

        # Check a project directory
        report = await scan("/path/to/project")
        print(report)

    asyncio.run(main())
"""

import asyncio
from collections.abc import Mapping
from pathlib import Path

from opencheck.core.models import Report
from opencheck.reports.generator import ReportGenerator


async def check(
    declared: Mapping[str, str],
    *,
    strategy: str = "batch",
    concurrency: int | None = None,
    timeout: int = 30,
) -> Report:
    """Check an explicit mapping of package name to declared version range.

    Args:
        declared: e.g. ``{"left-pad": "^1.3.0"}``.
        strategy: 'batch' or 'pool'.
        concurrency: Packages checked at once (default 5).
        timeout: HTTP request timeout in seconds.

    Returns:
        Report partitioning every package into critical, warnings and ok.

    Example:
        >>> import asyncio
        >>> from opencheck import check
        >>> report = asyncio.run(check({"left-pad": "^1.3.0"}))
        >>> [r.status.value for r in report.records]
        ['warning']
    """
    generator = ReportGenerator(strategy=strategy, concurrency=concurrency, timeout=timeout)
    return await generator.check(declared)


async def scan(
    path: str | None = None,
    *,
    strategy: str = "batch",
    concurrency: int | None = None,
    timeout: int = 30,
) -> Report:
    """Check the dependencies declared in a project's package.json.

    Args:
        path: Project directory or package.json path. Defaults to the
            current directory.
        strategy: 'batch' or 'pool'.
        concurrency: Packages checked at once (default 5).
        timeout: HTTP request timeout in seconds.

    Returns:
        Report for the project.

    Raises:
        ManifestError: If package.json is missing or invalid.
    """
    generator = ReportGenerator(strategy=strategy, concurrency=concurrency, timeout=timeout)
    project_path = Path(path) if path else Path.cwd()
    return await generator.check(generator.reader.read(project_path))


def scan_sync(
    path: str | None = None,
    *,
    strategy: str = "batch",
    concurrency: int | None = None,
    timeout: int = 30,
) -> Report:
    """Synchronous wrapper for scan().

    For use in non-async contexts. Runs a new event loop.

    Example:
        >>> from opencheck import scan_sync
        >>> report = scan_sync(".")
        >>> print(f"Checked {report.total_packages} packages")
    """
    return asyncio.run(
        scan(path, strategy=strategy, concurrency=concurrency, timeout=timeout)
    )
