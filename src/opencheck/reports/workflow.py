"""
GitHub Actions workflow generator.

Produces a workflow that runs ``opencheck check`` on pushes, pull
requests and a weekly schedule, publishes the Markdown report as the job
summary, and fails the job when a critical dependency is found.
"""

from pathlib import Path

DEFAULT_WORKFLOW_PATH = Path(".github") / "workflows" / "opencheck.yml"

_TEMPLATE = """\
name: OpenCheck

on:
  push:
    branches: [{branch}]
  pull_request:
    branches: [{branch}]
  schedule:
    - cron: "{cron}"

jobs:
  dependency-health:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4

      - uses: actions/setup-python@v5
        with:
          python-version: "{python_version}"

      - name: Install OpenCheck
        run: pip install opencheck

      - name: Check dependencies
        run: opencheck check {project_path} --format markdown --output opencheck-report.md{only_issues}

      - name: Publish report
        if: always()
        run: cat opencheck-report.md >> "$GITHUB_STEP_SUMMARY"
"""


def generate_workflow(
    branch: str = "main",
    cron: str = "0 6 * * 1",
    python_version: str = "3.12",
    project_path: str = ".",
    only_issues: bool = False,
) -> str:
    """Render the workflow YAML.

    Args:
        branch: Branch that triggers the workflow on push and pull request.
        cron: Schedule for the periodic run (default: Mondays 06:00 UTC).
        python_version: Python used to run OpenCheck.
        project_path: Directory holding package.json, relative to the repo root.
        only_issues: Leave healthy packages out of the report.

    Returns:
        The workflow file contents.
    """
    return _TEMPLATE.format(
        branch=branch,
        cron=cron,
        python_version=python_version,
        project_path=project_path,
        only_issues=" --only-issues" if only_issues else "",
    )


def write_workflow(root: Path, content: str, overwrite: bool = False) -> Path:
    """Write the workflow under ``root/.github/workflows``.

    Raises:
        FileExistsError: If the file exists and ``overwrite`` is False.
    """
    target = root / DEFAULT_WORKFLOW_PATH
    if target.exists() and not overwrite:
        raise FileExistsError(str(target))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target
