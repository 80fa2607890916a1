"""Tests for the CLI commands: argument parsing, output, errors."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from mixpanel_mcp.cli.app import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVICE_ACCOUNT_USER_NAME", "svc")
    monkeypatch.setenv("SERVICE_ACCOUNT_PASSWORD", "secret")
    monkeypatch.setenv("DEFAULT_PROJECT_ID", "12345")


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("mixpanel_mcp.cli.app.configure_logging"):
        yield


# ── CLI group ────────────────────────────────────────────────────


class TestCliGroup:
    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli)
        assert result.exit_code == 0
        assert "Mixpanel analytics tools" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "mixpanel-mcp" in result.output
        assert "0.1.0" in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "serve" in result.output
        assert "tools" in result.output
        assert "call" in result.output

    def test_missing_config_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--config", "/nonexistent.toml", "tools"])
        assert result.exit_code != 0


# ── serve ────────────────────────────────────────────────────────


class TestServeCommand:
    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["serve", "--help"])
        assert result.exit_code == 0
        assert "SERVICE_ACCOUNT_USER_NAME" in result.output

    def test_missing_credentials(self, runner: CliRunner) -> None:
        with patch("mixpanel_mcp.mcp.server.run_server", new=AsyncMock()) as run:
            result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "SERVICE_ACCOUNT_PASSWORD" in result.output
        run.assert_not_called()

    def test_unknown_log_level(self, runner: CliRunner, credentials: None, tmp_path) -> None:
        path = tmp_path / "loud.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n')
        with patch("mixpanel_mcp.mcp.server.run_server", new=AsyncMock()) as run:
            result = runner.invoke(cli, ["--config", str(path), "serve"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Unknown log level" in result.output
        run.assert_not_called()

    def test_too_many_arguments(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["serve", "a", "b", "c", "d", "e"])
        assert result.exit_code == 1
        assert "at most 4 arguments" in result.output

    def test_positional_credentials(self, runner: CliRunner) -> None:
        with patch("mixpanel_mcp.mcp.server.run_server", new=AsyncMock()) as run:
            result = runner.invoke(cli, ["serve", "svc", "secret", "777", "eu"])
        assert result.exit_code == 0, result.output
        config = run.call_args.args[0]
        assert config.mixpanel.username == "svc"
        assert config.mixpanel.project_id == "777"
        assert config.mixpanel.region == "eu"

    def test_env_credentials(self, runner: CliRunner, credentials: None) -> None:
        with patch("mixpanel_mcp.mcp.server.run_server", new=AsyncMock()) as run:
            result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 0, result.output
        assert run.call_args.args[0].mixpanel.project_id == "12345"


# ── tools ────────────────────────────────────────────────────────


class TestToolsCommand:
    def test_lists_tools(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools"], env={"COLUMNS": "240"})
        assert result.exit_code == 0
        assert "Mixpanel tools" in result.output
        assert "get_top_events" in result.output
        assert "POST /jql" in result.output

    def test_needs_no_credentials(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools"], env={"COLUMNS": "240"})
        assert "Error:" not in result.output


# ── call ─────────────────────────────────────────────────────────


class TestCallCommand:
    def test_invalid_json(self, runner: CliRunner, credentials: None) -> None:
        result = runner.invoke(cli, ["call", "get_top_events", "--args", "{nope"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_args_not_object(self, runner: CliRunner, credentials: None) -> None:
        result = runner.invoke(cli, ["call", "get_top_events", "--args", "[1]"])
        assert result.exit_code == 1
        assert "must be a JSON object" in result.output

    def test_missing_credentials(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "get_top_events"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_raw_output(self, runner: CliRunner, credentials: None) -> None:
        send = AsyncMock(return_value=[{"funnel_id": 1, "name": "Signup"}])
        with patch("mixpanel_mcp.tools.registry.send", new=send):
            result = runner.invoke(cli, ["call", "list_saved_funnels", "--raw"])
        assert result.exit_code == 0, result.output
        assert "# Saved funnels" in result.output
        assert "| 1 | Signup |" in result.output
        spec = send.call_args.args[0]
        assert spec.query["project_id"] == "12345"

    def test_arguments_forwarded(self, runner: CliRunner, credentials: None) -> None:
        send = AsyncMock(return_value=["Login"])
        with patch("mixpanel_mcp.tools.registry.send", new=send):
            result = runner.invoke(
                cli, ["call", "get_top_events", "--args", '{"limit": 3}', "--raw"]
            )
        assert result.exit_code == 0, result.output
        assert send.call_args.args[0].query["limit"] == "3"

    def test_rendered_output(self, runner: CliRunner, credentials: None) -> None:
        send = AsyncMock(return_value=["Login", "Sign Up"])
        with patch("mixpanel_mcp.tools.registry.send", new=send):
            result = runner.invoke(cli, ["call", "get_top_events"], env={"COLUMNS": "120"})
        assert result.exit_code == 0, result.output
        assert "Login" in result.output
        assert "Sign Up" in result.output

    def test_error_result_exits_nonzero(self, runner: CliRunner, credentials: None) -> None:
        result = runner.invoke(cli, ["call", "nope", "--raw"])
        assert result.exit_code == 1
        assert "Unknown tool: nope" in result.output
