from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from nim_cli.shared import paths
from nim_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from nim_cli.shared.exceptions import ConfigurationError, NimAgentError, TransactionSourceError


@pytest.fixture
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setenv(paths.CONFIG_FILE_ENV, str(tmp_path / "config.yaml"))
    return CliRunner()


def test_common_cli_options_builds_context(runner: CliRunner) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"verbose={cli_ctx.verbose} days={cli_ctx.config.analysis.spending_days}")

    result = runner.invoke(sample, ["--verbose"])

    assert result.exit_code == 0, result.output
    assert "verbose=True days=30" in result.output


def test_common_cli_options_loads_explicit_config(runner: CliRunner, tmp_path: Path) -> None:
    cfg_file = tmp_path / "custom.yaml"
    cfg_file.write_text("analysis:\n  timeframe_months: 3\n", encoding="utf-8")

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"months={cli_ctx.config.analysis.timeframe_months}")

    result = runner.invoke(sample, ["--config", str(cfg_file)])

    assert result.exit_code == 0, result.output
    assert "months=3" in result.output


def test_common_cli_options_reports_bad_config(runner: CliRunner, tmp_path: Path) -> None:
    cfg_file = tmp_path / "custom.yaml"
    cfg_file.write_text("analysis:\n  spending_days: -1\n", encoding="utf-8")

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo("unreachable")

    result = runner.invoke(sample, ["--config", str(cfg_file)])

    assert result.exit_code == 1
    assert "must be positive" in result.output


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise NimAgentError("boom")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "boom"


def test_handle_cli_errors_wraps_transaction_source_errors() -> None:
    @handle_cli_errors
    def unreadable() -> None:
        raise TransactionSourceError("bad export")

    with pytest.raises(click.ClickException) as excinfo:
        unreadable()
    assert str(excinfo.value) == "Invalid transaction input: bad export"


def test_handle_cli_errors_formats_configuration_errors() -> None:
    @handle_cli_errors
    def misconfigured() -> None:
        raise ConfigurationError("missing value")

    with pytest.raises(click.ClickException) as excinfo:
        misconfigured()
    assert "Configuration error" in str(excinfo.value)


def test_handle_cli_errors_wraps_unexpected_exceptions() -> None:
    @handle_cli_errors
    def explode() -> None:
        raise RuntimeError("kapow")

    with pytest.raises(click.ClickException) as excinfo:
        explode()
    assert "Unexpected error: kapow" == str(excinfo.value)


def test_common_cli_options_seed_overrides_config(runner: CliRunner) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"seed={cli_ctx.config.mock.seed}")

    result = runner.invoke(sample, ["--seed", "42"])

    assert result.exit_code == 0, result.output
    assert "seed=42" in result.output
