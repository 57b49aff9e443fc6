"""
Report generation module.

Provides the report generator, formatters for table, JSON, Markdown and
HTML output, upgrade suggestions, and the CI workflow generator.
"""

from opencheck.reports.fixes import fix_commands
from opencheck.reports.formatters import (
    Formatter,
    HTMLFormatter,
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
)
from opencheck.reports.generator import ReportGenerator
from opencheck.reports.workflow import generate_workflow

__all__ = [
    "ReportGenerator",
    "Formatter",
    "HTMLFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "TableFormatter",
    "fix_commands",
    "generate_workflow",
]
