"""
Command-line interface for OpenCheck.

Provides Click-based CLI commands for checking dependencies and
generating CI workflows.
"""

from opencheck.cli.main import cli

__all__ = ["cli"]
