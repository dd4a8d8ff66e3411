"""Exception types for Runsible.

Command failures are reported as ExecutionOutcome values, not exceptions.
The exceptions below cover the conditions that leave the engine.
"""


class RunsibleError(RuntimeError):
    """Base class for Runsible errors."""


class TransportError(RunsibleError):
    """The remote side could not start a command."""

    def __init__(self, command: str, original_error: Exception | None = None):
        """Initialize transport error.

        Args:
            command: Command that could not be started
            original_error: Underlying SSH/socket error, if any
        """
        self.command = command
        self.original_error = original_error
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"{command} could not exec{detail}")


class PolicyError(RunsibleError):
    """The policy document is malformed."""


class AlertBackendError(RunsibleError):
    """The alert configuration names an unsupported or unknown backend."""


class RunAborted(RunsibleError):
    """A runlist was aborted after a command ultimately failed."""

    def __init__(self, message: str, command: str | None = None):
        self.command = command
        super().__init__(message)


def describe(exc: BaseException) -> str:
    """Return 'ExceptionClass: message' for log and usage output."""
    return f"{type(exc).__name__}: {exc}"
