"""Command execution outcome models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Success:
    """The command exited 0."""

    command: str
    attempts: int


@dataclass(frozen=True)
class CommandFailure:
    """The command exited nonzero on its final permitted attempt."""

    command: str
    retries: int
    exit_code: int

    @property
    def cause(self) -> str:
        return f"exit status {self.exit_code}"


@dataclass(frozen=True)
class TransportFailure:
    """The remote side could not start the command."""

    command: str
    retries: int
    error: Exception

    @property
    def cause(self) -> str:
        return str(self.error)


ExecutionOutcome = Success | CommandFailure | TransportFailure
