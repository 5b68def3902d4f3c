"""Tests for the command line entry point."""

from typer.testing import CliRunner

from formbuilder import cli as cli_module

runner = CliRunner()


def test_cli_runs_server_with_overrides(monkeypatch):
    calls = []
    monkeypatch.setattr(cli_module, "run_server", lambda host, port: calls.append((host, port)))

    result = runner.invoke(cli_module.cli, ["--host", "127.0.0.1", "--port", "9000"])

    assert result.exit_code == 0
    assert calls == [("127.0.0.1", 9000)]


def test_run_command_inherits_callback_options(monkeypatch):
    calls = []
    monkeypatch.setattr(cli_module, "run_server", lambda host, port: calls.append((host, port)))

    result = runner.invoke(cli_module.cli, ["--port", "8080", "run"])

    assert result.exit_code == 0
    assert calls == [(None, 8080)]
