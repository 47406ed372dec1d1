"""Parametrized help and --examples tests for all CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from pubctl.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["build", "check", "list", "show", "--json", "--config"]),
    (["build", "--help"], ["--strict-links", "--strict-assets", "--output", "--workers"]),
    (["check", "--help"], ["--strict-links", "--strict-assets", "--workers"]),
    (["list", "--help"], ["newest first"]),
    (["show", "--help"], ["IDENTIFIER"]),
]

EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--examples"], ["pubctl check", "pubctl build --strict-links"]),
    (["build", "--examples"], ["--workers 4"]),
    (["check", "--examples"], ["pubctl -q check"]),
    (["list", "--examples"], ["pubctl --json list"]),
    (["show", "--examples"], ["pubctl show outbox-pattern"]),
]


@pytest.mark.parametrize(("args", "keywords"), HELP_COMMANDS)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output
