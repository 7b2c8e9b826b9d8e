"""Tests for the describe CLI command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from envbind.cli import cli


@pytest.mark.usefixtures("clean_env")
class TestDescribeCommand:
    def test_table_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["describe", "tests.records:AppConfig"])
        assert result.exit_code == 0
        assert "AppConfig.database.port" in result.output
        assert "DB_PORT" in result.output
        assert "uint16" in result.output

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "describe", "tests.records:ConfigWithInner"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["op"] == "describe"
        assert [f["env"] for f in data["data"]["fields"]] == ["LEVEL", "HOST", "PORT"]
        assert all(f["required"] for f in data["data"]["fields"])

    def test_ignores_environment(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "describe", "tests.records:ServerConfig"], env={"PORT": "abc"}
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["fields"][0]["default"] == "8080"

    def test_schema_error_exits_1(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["describe", "tests.records:BadTypeConfig"])
        assert result.exit_code == 1
        assert "field tags" in result.output

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["describe", "--examples"])
        assert result.exit_code == 0
        assert "Examples for" in result.output
