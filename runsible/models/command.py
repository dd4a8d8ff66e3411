"""Runlist entry data models."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Exit:
    """Abort the run when the command is exhausted."""

    def __str__(self) -> str:
        return "exit"


@dataclass(frozen=True)
class Continue:
    """Move on to the next command when the command is exhausted."""

    def __str__(self) -> str:
        return "continue"


@dataclass(frozen=True)
class EscalateTo:
    """Run the named runlist, then abort."""

    name: str

    def __str__(self) -> str:
        return self.name


FailurePolicy = Exit | Continue | EscalateTo


def parse_failure_policy(value: str | None) -> FailurePolicy:
    """Map an on_failure string to its policy variant.

    Args:
        value: Raw on_failure value; None means the default ("exit")

    Returns:
        Exit, Continue, or EscalateTo(value)
    """
    if value is None or value == "exit":
        return Exit()
    if value == "continue":
        return Continue()
    return EscalateTo(value)


@dataclass(frozen=True)
class CommandSpec:
    """One runlist entry."""

    command: str
    retries: int | None = None
    on_failure: FailurePolicy = field(default_factory=Exit)

    def effective_retries(self, default: int) -> int:
        """Return this entry's retry count, falling back to default."""
        return default if self.retries is None else self.retries
