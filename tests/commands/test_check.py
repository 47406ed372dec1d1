"""Tests for the check CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pubctl.cli import cli
from tests.conftest import write_article


@pytest.mark.usefixtures("_isolated_site")
class TestCheckCommand:
    def test_clean_tree(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "a.md")
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "1 documents, no issues found." in result.output
        assert not (site_root / "public").exists()

    def test_empty_tree(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_missing_date(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "undated.md", date=None)
        result = cli_runner.invoke(cli, ["--json", "check"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["error"]["code"] == "MISSING_FIELD"
        assert data["data"]["state"] == "failed"

    def test_malformed_front_matter(self, cli_runner: CliRunner, site_root: Path) -> None:
        (site_root / "content" / "bad.md").write_text("# No front matter\n", encoding="utf-8")
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 1
        assert "Front matter must start with '---'" in result.output

    def test_strict_assets(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "a.md", featured_image="/images/missing.png")
        assert cli_runner.invoke(cli, ["check"]).exit_code == 0
        assert cli_runner.invoke(cli, ["check", "--strict-assets"]).exit_code == 1

    def test_quiet(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "a.md")
        result = cli_runner.invoke(cli, ["-q", "check"])
        assert result.exit_code == 0
        assert result.output.strip() == "OK: check"
