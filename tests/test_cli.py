"""Tests for the command line interface."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from runsible import __version__
from runsible.cli import build_parser, main
from runsible.errors import AlertBackendError, RunAborted
from runsible.services.session import ConnectError


@pytest.fixture
def policy_file(tmp_path: Path) -> Path:
    path = tmp_path / "deploy.yml"
    path.write_text("""
settings:
  host: build01
  user: deploy
  port: 2222
  retries: 1
  alerts:
    backend: email
    to: ops@example.com
runlist:
  - command: uptime
""")
    return path


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep tests from installing handlers on the runsible logger."""
    with patch("runsible.cli.configure_logging"):
        yield


@pytest.fixture
def mock_run():
    with patch("runsible.cli.ssh_runlist", new_callable=AsyncMock) as mock:
        yield mock


def test_success_exits_zero(policy_file: Path, mock_run: AsyncMock) -> None:
    """Yaml settings are used when no options are given."""
    assert main([str(policy_file)]) == 0

    settings, policy = mock_run.call_args.args
    assert settings.host == "build01"
    assert settings.user == "deploy"
    assert settings.port == 2222
    assert settings.retries == 1
    assert settings.alerts["backend"] == "email"
    assert [s.command for s in policy.default_runlist] == ["uptime"]


def test_options_override_yaml(policy_file: Path, mock_run: AsyncMock) -> None:
    main(["-H", "build02", "-u", "root", "-p", "22", "-r", "0", str(policy_file)])

    settings, _ = mock_run.call_args.args
    assert settings.host == "build02"
    assert settings.user == "root"
    assert settings.port == 22
    assert settings.retries == 0


def test_silent_suppresses_alerts(policy_file: Path, mock_run: AsyncMock) -> None:
    main(["--silent", str(policy_file)])

    settings, _ = mock_run.call_args.args
    assert dict(settings.alerts) == {}


def test_aborted_run_exits_one(policy_file: Path, mock_run: AsyncMock) -> None:
    mock_run.side_effect = RunAborted("exiting after `uptime` ultimately failed")

    assert main([str(policy_file)]) == 1


def test_connection_failure_exits_one(policy_file: Path, mock_run: AsyncMock) -> None:
    mock_run.side_effect = ConnectError("build01", OSError("refused"))

    assert main([str(policy_file)]) == 1


def test_missing_yaml_file_argument(mock_run: AsyncMock, capsys) -> None:
    assert main([]) == 1

    assert "yaml_file is required" in capsys.readouterr().out
    mock_run.assert_not_called()


def test_unloadable_yaml_file(tmp_path: Path, mock_run: AsyncMock, capsys) -> None:
    assert main([str(tmp_path / "missing.yml")]) == 1

    out = capsys.readouterr().out
    assert "could not load yaml_file" in out
    assert "FileNotFoundError" in out
    mock_run.assert_not_called()


def test_malformed_policy(tmp_path: Path, mock_run: AsyncMock, capsys) -> None:
    path = tmp_path / "bad.yml"
    path.write_text("runlist:\n  - retries: 1\n")

    assert main([str(path)]) == 1

    assert "PolicyError" in capsys.readouterr().out


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_negative_retries_rejected(capsys) -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-r", "-1", "x.yml"])


def test_alert_backend_error_exits_one(policy_file: Path, mock_run: AsyncMock) -> None:
    """A bad alert backend is reported and mapped to exit status 1."""
    mock_run.side_effect = AlertBackendError("unsupported backend: 'slack'")

    with patch("runsible.cli.logger") as mock_logger:
        assert main([str(policy_file)]) == 1

    mock_logger.error.assert_called_once()
    assert "slack" in str(mock_logger.error.call_args)
