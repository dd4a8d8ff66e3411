"""Tests for the library entry points."""

import io
from contextlib import asynccontextmanager
from pathlib import Path
from unittest.mock import patch

import pytest

from runsible.config import PolicyDocument, RuntimeOptions, Settings
from runsible.context import RunContext
from runsible.errors import RunAborted
from runsible.runner import run_yaml, ssh_runlist
from runsible.services.alerts import AlertDispatcher
from runsible.services.output import OutputSinks


@pytest.fixture
def options() -> RuntimeOptions:
    return RuntimeOptions(retry_delay=0, known_hosts=None)


def _fake_open_session(session, seen: list):
    @asynccontextmanager
    async def fake_open_session(settings, options):
        seen.append(settings)
        yield session

    return fake_open_session


@pytest.mark.asyncio
async def test_ssh_runlist_runs_default_runlist(make_session, sinks, options) -> None:
    session = make_session()
    seen: list = []
    policy = PolicyDocument.from_mapping(
        {"runlist": [{"command": "uptime"}], "other": [{"command": "never"}]}
    )

    with patch("runsible.runner.open_session", _fake_open_session(session, seen)):
        result = await ssh_runlist(Settings(host="build01"), policy, options, sinks)

    assert result.ok
    assert session.calls == ["uptime"]
    assert seen[0].host == "build01"
    assert "uptime" in sinks.stdout.getvalue()


@pytest.mark.asyncio
async def test_run_yaml_uses_file_settings(
    make_session, options, tmp_path: Path, capsys
) -> None:
    """run_yaml aborts with the fatal alert written locally."""
    path = tmp_path / "deploy.yml"
    path.write_text("""
settings:
  host: build01
runlist:
  - command: "false"
""")
    session = make_session({"false": [1]})
    seen: list = []

    with patch("runsible.runner.open_session", _fake_open_session(session, seen)):
        with pytest.raises(RunAborted):
            await run_yaml(path, options=options)

    assert seen[0].host == "build01"
    out = capsys.readouterr().out
    assert "(DISABLED) ALERT: [exec failure]" in out
    assert "(DISABLED) ALERT: [runsible:fatal:" in out


def test_run_context_create(make_session) -> None:
    options = RuntimeOptions(retry_delay=0.25, smtp_host="mail", smtp_port=2525)
    sinks = OutputSinks(io.StringIO(), io.StringIO())
    settings = Settings.from_mapping({"alerts": {"backend": "email", "to": "x@y"}})

    ctx = RunContext.create(make_session(), settings, options=options, sinks=sinks)

    assert ctx.retry_delay == 0.25
    assert ctx.sinks is sinks
    assert isinstance(ctx.alerts, AlertDispatcher)
    assert ctx.alerts.backend == "email"
    assert ctx.alerts.smtp_host == "mail"
    assert ctx.alerts.smtp_port == 2525
