"""Tests for the build CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pubctl.cli import cli
from tests.conftest import write_article


@pytest.mark.usefixtures("_isolated_site")
class TestBuildCommand:
    def test_build_writes_manifest(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "outbox-pattern.md", title="Outbox Pattern")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0, result.output
        assert "OK" in result.output
        assert "published: 1" in result.output
        assert (site_root / "public" / "manifest.json").is_file()

    def test_build_json(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "b.md", date="2020-01-01")
        write_article(site_root, "a.md", date="2022-01-01")
        result = cli_runner.invoke(cli, ["--json", "build"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "build"
        assert data["data"]["identifiers"] == ["a", "b"]

    def test_output_override(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "a.md")
        result = cli_runner.invoke(cli, ["build", "--output", "dist"])
        assert result.exit_code == 0
        assert (site_root / "dist" / "manifest.json").is_file()

    def test_workers_flag(self, cli_runner: CliRunner, site_root: Path) -> None:
        for i in range(5):
            write_article(site_root, f"p{i}.md")
        result = cli_runner.invoke(cli, ["--json", "build", "--workers", "3"])
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["published"] == 5

    def test_workers_must_be_positive(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["build", "--workers", "0"])
        assert result.exit_code == 2

    def test_broken_link_warns(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "intro.md", body="[repo](/design-patterns/repository-pattern)\n")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0
        assert "WARNING: intro: broken link to 'design-patterns/repository-pattern'" in (
            result.output
        )

    def test_broken_link_strict_fails(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "intro.md", body="[repo](/design-patterns/repository-pattern)\n")
        result = cli_runner.invoke(cli, ["--json", "build", "--strict-links"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["ok"] is False
        assert data["error"]["code"] == "BROKEN_LINK"
        assert not (site_root / "public").exists()

    def test_duplicate_fails(self, cli_runner: CliRunner, site_root: Path) -> None:
        write_article(site_root, "outbox-pattern.md")
        write_article(site_root, "outbox-pattern/index.md")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "ERROR" in result.output
        assert "Duplicate identifier 'outbox-pattern'" in result.output

    def test_config_file_respected(self, cli_runner: CliRunner, site_root: Path) -> None:
        (site_root / "pubctl.toml").write_text('[publish]\noutput_dir = "site-out"\n')
        write_article(site_root, "a.md")
        result = cli_runner.invoke(cli, ["build"])
        assert result.exit_code == 0
        assert (site_root / "site-out" / "manifest.json").is_file()
