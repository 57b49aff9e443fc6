"""
CLI entry point for running opencheck as a module.

Usage: python -m opencheck [OPTIONS] COMMAND [ARGS]...
"""

from opencheck.cli.main import cli

if __name__ == "__main__":
    cli()
