"""Shared fixtures for Runsible tests."""

import io
from collections.abc import Iterable
from typing import TextIO
from unittest.mock import MagicMock

import pytest

from runsible.config import Settings
from runsible.context import RunContext
from runsible.services.output import OutputSinks


class FakeSession:
    """Session that replays scripted exit codes per command.

    ``script`` maps a command to the exit codes (or exceptions) returned
    on successive attempts; the last entry repeats. Unscripted commands
    exit 0.
    """

    def __init__(self, script: dict[str, Iterable[int | Exception]] | None = None):
        self.script = {cmd: list(codes) for cmd, codes in (script or {}).items()}
        self.calls: list[str] = []

    async def execute(self, command: str, stdout: TextIO, stderr: TextIO) -> int:
        self.calls.append(command)
        codes = self.script.get(command, [0])
        attempt = self.calls.count(command) - 1
        result = codes[min(attempt, len(codes) - 1)]
        if isinstance(result, Exception):
            raise result
        stdout.write(f"out:{command}\n")
        if result:
            stderr.write(f"err:{command}\n")
        return result

    def attempts(self, command: str) -> int:
        return self.calls.count(command)


@pytest.fixture
def sinks() -> OutputSinks:
    """Output sinks backed by StringIO."""
    return OutputSinks(stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def alerts() -> MagicMock:
    """Mock alert sender."""
    return MagicMock()


@pytest.fixture
def settings() -> Settings:
    return Settings(user="deploy", host="build01", port=22, retries=0)


@pytest.fixture
def make_ctx(sinks: OutputSinks, alerts: MagicMock, settings: Settings):
    """Build a RunContext around a FakeSession."""

    def _make(session: FakeSession, **overrides) -> RunContext:
        return RunContext(
            session=session,
            settings=overrides.pop("settings", settings),
            alerts=alerts,
            sinks=sinks,
            retry_delay=0,
        )

    return _make


@pytest.fixture
def make_session():
    """Factory for FakeSession instances."""
    return FakeSession
