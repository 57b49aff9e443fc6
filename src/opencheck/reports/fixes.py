"""
Upgrade suggestions derived from a report.
"""

from opencheck.core.models import DependencyRecord, Report

PACKAGE_MANAGERS = ("npm", "yarn", "pnpm")


def fixable_records(report: Report) -> list[DependencyRecord]:
    """Records that need attention and have a newer version to move to."""
    return [r for r in report.issues if r.is_outdated]


def fix_commands(report: Report, package_manager: str = "npm") -> list[str]:
    """Build one install command per fixable package, most severe first.

    Deprecated or vulnerable packages that are already on the latest
    version have no upgrade path and are left out.

    Args:
        report: The checked report.
        package_manager: One of PACKAGE_MANAGERS; yarn and pnpm use ``add``.
    """
    verb = "add" if package_manager in ("yarn", "pnpm") else "install"
    return [
        f"{package_manager} {verb} {r.name}@{r.latest_version}"
        for r in fixable_records(report)
    ]
