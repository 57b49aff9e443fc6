"""
Tests for the command-line interface.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from opencheck.cli.main import cli
from opencheck.core.exceptions import ManifestError
from opencheck.core.models import Report
from opencheck.reports.formatters import JSONFormatter
from opencheck.reports.generator import ReportGenerator


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project_dir(tmp_package_json):
    return str(tmp_package_json.parent)


def patch_generate(report, formatted=""):
    return patch.object(
        ReportGenerator, "generate", AsyncMock(return_value=(report, formatted))
    )


class TestCheckCommand:
    """Tests for `opencheck check`."""

    def test_critical_exits_nonzero(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(cli, ["check", project_dir])

        assert result.exit_code == 1
        assert "OpenCheck Report" in result.output
        assert "evil-lib" in result.output
        assert "critical dependency(ies) found" in result.output

    def test_no_fail(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(cli, ["check", project_dir, "--no-fail"])

        assert result.exit_code == 0

    def test_healthy_project(self, runner, project_dir, ok_record):
        report = Report.from_records([ok_record])

        with patch_generate(report):
            result = runner.invoke(cli, ["check", project_dir, "--only-issues"])

        assert result.exit_code == 0
        assert "All dependencies look healthy!" in result.output

    def test_json_is_echoed(self, runner, project_dir, ok_record):
        report = Report.from_records([ok_record])
        formatted = JSONFormatter().format(report)

        with patch_generate(report, formatted) as generate:
            result = runner.invoke(cli, ["check", project_dir, "--format", "json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["total_packages"] == 1
        assert generate.await_args.kwargs["output_format"] == "json"

    def test_output_file(self, runner, project_dir, ok_record, tmp_path):
        report = Report.from_records([ok_record])
        output = tmp_path / "report.md"

        with patch_generate(report, "# OpenCheck Report\n"):
            result = runner.invoke(
                cli, ["check", project_dir, "-f", "markdown", "-o", str(output)]
            )

        assert result.exit_code == 0
        assert "# OpenCheck Report" not in result.output
        assert "Report written to" in result.output

    def test_fix_suggestions(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(cli, ["check", project_dir, "--fix", "--no-fail"])

        assert "Suggested fixes" in result.output
        assert "npm install evil-lib@1.0.1" in result.output

    def test_fix_with_package_manager(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(
                cli,
                ["check", project_dir, "--fix", "--no-fail", "--package-manager", "pnpm"],
            )

        assert result.exit_code == 0
        assert "pnpm add evil-lib@1.0.1" in result.output
        assert "npm install" not in result.output

    def test_package_manager_from_environment(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(
                cli,
                ["check", project_dir, "--fix", "--no-fail"],
                env={"OPENCHECK_PACKAGE_MANAGER": "yarn"},
            )

        assert "yarn add evil-lib@1.0.1" in result.output

    def test_unknown_package_manager(self, runner, project_dir):
        result = runner.invoke(cli, ["check", project_dir, "--package-manager", "bun"])

        assert result.exit_code == 2

    def test_manifest_error(self, runner, project_dir):
        error = ManifestError("package.json", "Invalid JSON")

        with patch.object(ReportGenerator, "generate", AsyncMock(side_effect=error)):
            result = runner.invoke(cli, ["check", project_dir])

        assert result.exit_code == 1
        assert "Check failed" in result.output

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(cli, ["check", str(tmp_path / "nope")])

        assert result.exit_code == 2

    def test_configuration_from_environment(self, runner, project_dir, ok_record):
        report = Report.from_records([ok_record])

        with patch("opencheck.reports.generator.ReportGenerator") as generator_cls:
            generator_cls.return_value.generate = AsyncMock(return_value=(report, ""))
            result = runner.invoke(
                cli,
                ["check", project_dir],
                env={
                    "OPENCHECK_STRATEGY": "pool",
                    "OPENCHECK_CONCURRENCY": "3",
                    "OPENCHECK_STALE_DAYS": "90",
                },
            )

        assert result.exit_code == 0
        kwargs = generator_cls.call_args.kwargs
        assert kwargs["strategy"] == "pool"
        assert kwargs["concurrency"] == 3
        assert kwargs["stale_after_days"] == 90

    def test_rejects_zero_concurrency(self, runner, project_dir):
        result = runner.invoke(cli, ["check", project_dir, "--concurrency", "0"])

        assert result.exit_code == 2


class TestWorkflowCommand:
    """Tests for `opencheck workflow`."""

    def test_prints_yaml(self, runner):
        result = runner.invoke(cli, ["workflow", "--branch", "develop"])

        assert result.exit_code == 0
        assert result.output.startswith("name: OpenCheck")
        assert "branches: [develop]" in result.output

    def test_write(self, runner, tmp_path):
        result = runner.invoke(cli, ["workflow", "--write", str(tmp_path)])

        assert result.exit_code == 0
        target = tmp_path / ".github" / "workflows" / "opencheck.yml"
        assert target.exists()
        assert "opencheck check ." in target.read_text()

    def test_existing_file_needs_force(self, runner, tmp_path):
        runner.invoke(cli, ["workflow", "--write", str(tmp_path)])

        result = runner.invoke(cli, ["workflow", "--write", str(tmp_path)])
        assert result.exit_code == 1
        assert "--force" in result.output

        result = runner.invoke(cli, ["workflow", "--write", str(tmp_path), "--force"])
        assert result.exit_code == 0


class TestMenuCommand:
    """Tests for `opencheck menu`."""

    def test_exit(self, runner, project_dir):
        with patch_generate(Report.from_records([])) as generate:
            result = runner.invoke(cli, ["menu", project_dir], input="exit\n")

        assert result.exit_code == 0
        assert "Goodbye!" in result.output
        generate.assert_not_awaited()

    def test_scan_does_not_fail_on_critical(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(cli, ["menu", project_dir], input="scan\nn\n")

        assert result.exit_code == 0
        assert "OpenCheck Report" in result.output
        assert "evil-lib" in result.output

    def test_default_action_is_scan(self, runner, project_dir, ok_record):
        with patch_generate(Report.from_records([ok_record])) as generate:
            result = runner.invoke(cli, ["menu", project_dir], input="\n\n")

        assert result.exit_code == 0
        assert generate.await_args.kwargs["output_format"] == "table"

    def test_json_only_issues(self, runner, project_dir, sample_report):
        formatted = JSONFormatter().format(sample_report, only_issues=True)

        with patch_generate(sample_report, formatted) as generate:
            result = runner.invoke(cli, ["menu", project_dir], input="json\ny\n")

        assert result.exit_code == 0
        assert generate.await_args.kwargs["output_format"] == "json"
        assert generate.await_args.kwargs["only_issues"] is True
        assert '"total_packages": 3' in result.output

    def test_html_is_written_beside_manifest(self, runner, project_dir, sample_report):
        with patch_generate(sample_report, "<!DOCTYPE html>") as generate:
            result = runner.invoke(cli, ["menu", project_dir], input="html\nn\n")

        assert result.exit_code == 0
        kwargs = generate.await_args.kwargs
        assert kwargs["output_format"] == "html"
        assert kwargs["output_path"] == Path(project_dir) / "opencheck-report.html"
        assert "Report written to" in result.output

    def test_fix(self, runner, project_dir, sample_report):
        with patch_generate(sample_report):
            result = runner.invoke(cli, ["menu", project_dir], input="fix\nn\n")

        assert result.exit_code == 0
        assert "npm install evil-lib@1.0.1" in result.output

    def test_gha_writes_workflow(self, runner, project_dir):
        result = runner.invoke(cli, ["menu", project_dir], input="gha\n")

        assert result.exit_code == 0
        assert (Path(project_dir) / ".github" / "workflows" / "opencheck.yml").exists()

    def test_rejects_unknown_action(self, runner, project_dir):
        result = runner.invoke(cli, ["menu", project_dir], input="delete\nexit\n")

        assert result.exit_code == 0
        assert "Goodbye!" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output
